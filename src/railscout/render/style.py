"""Theme definition for SVG rendering."""

from __future__ import annotations

__all__ = ["Theme"]

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Colours and type settings used by render_svg()."""

    name: str
    background_color: str
    edge_color: str  # edges without condition segments
    coppered_color: str
    uncoppered_color: str
    station_fill: str
    station_stroke: str
    junction_fill: str
    waypoint_fill: str
    label_color: str
    title_color: str
    font_family: str = "Helvetica, Arial, sans-serif"
    node_stroke_width: float = 1.5
