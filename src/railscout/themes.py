"""Built-in rendering themes."""

from railscout.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="none",
    edge_color="#3388ff",
    coppered_color="#28a745",
    uncoppered_color="#dc3545",
    station_fill="#ffffff",
    station_stroke="#333333",
    junction_fill="#333333",
    waypoint_fill="#999999",
    label_color="#333333",
    title_color="#111111",
)

DARK_THEME = Theme(
    name="dark",
    background_color="#1d2127",
    edge_color="#5b9bff",
    coppered_color="#3fcf6a",
    uncoppered_color="#ff5c6c",
    station_fill="#1d2127",
    station_stroke="#f0f0f0",
    junction_fill="#f0f0f0",
    waypoint_fill="#7a7f87",
    label_color="#e6e6e6",
    title_color="#ffffff",
)

THEMES: dict[str, Theme] = {t.name: t for t in (LIGHT_THEME, DARK_THEME)}
