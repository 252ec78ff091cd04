"""Static SVG rendering of a rail network.

World X/Z coordinates are mapped onto the SVG plane (north up). Edges with
condition segments are drawn piecewise in the coppered/uncoppered colours;
edges without segments use the theme's plain edge colour.
"""

from __future__ import annotations

__all__ = ["render_svg"]

from dataclasses import dataclass

import drawsvg as draw

from railscout.constants import (
    EDGE_STROKE_WIDTH,
    JUNCTION_RADIUS,
    LABEL_FONT_SIZE,
    LABEL_OFFSET,
    LEGEND_SWATCH,
    NODE_RADIUS,
    RENDER_MAX_SIZE,
    RENDER_PADDING,
    TITLE_FONT_SIZE,
)
from railscout.geometry import Vec3, polyline_length_2d, slice_polyline
from railscout.parser.model import Edge, NodeType, RailGraph, SegmentType
from railscout.render.style import Theme


@dataclass(frozen=True)
class _Viewport:
    min_x: float
    min_z: float
    scale: float
    top: float

    def map(self, p: Vec3) -> tuple[float, float]:
        return (
            RENDER_PADDING + (p[0] - self.min_x) * self.scale,
            self.top + (p[2] - self.min_z) * self.scale,
        )


def _node_positions(graph: RailGraph) -> dict[str, Vec3]:
    """World position per node: its coords, else an edge geometry endpoint."""
    pos: dict[str, Vec3] = {
        nid: n.coords for nid, n in graph.nodes.items() if n.coords is not None
    }
    for edge in graph.edges:
        if not edge.geometry:
            continue
        pos.setdefault(edge.source, edge.geometry[0])
        pos.setdefault(edge.target, edge.geometry[-1])
    return pos


def _viewport(graph: RailGraph, positions: dict[str, Vec3], top: float) -> _Viewport:
    points = list(positions.values())
    for edge in graph.edges:
        points.extend(edge.geometry or [])
    if not points:
        return _Viewport(0.0, 0.0, 1.0, top)

    xs = [p[0] for p in points]
    zs = [p[2] for p in points]
    span = max(max(xs) - min(xs), max(zs) - min(zs))
    scale = (RENDER_MAX_SIZE - 2 * RENDER_PADDING) / span if span > 0 else 1.0
    return _Viewport(min(xs), min(zs), scale, top)


def _flatten(vp: _Viewport, pts: list[Vec3]) -> list[float]:
    coords: list[float] = []
    for p in pts:
        coords.extend(vp.map(p))
    return coords


def _draw_edge(d: draw.Drawing, edge: Edge, vp: _Viewport, theme: Theme) -> None:
    label = edge.id or f"{edge.source}->{edge.target}"
    if not edge.segments:
        line = draw.Lines(
            *_flatten(vp, edge.geometry),
            close=False,
            fill="none",
            stroke=theme.edge_color,
            stroke_width=EDGE_STROKE_WIDTH,
            stroke_linecap="round",
        )
        line.append_title(label)
        d.append(line)
        return

    # Offsets are in edge distance; stretch them onto the drawn polyline.
    geom_len = polyline_length_2d(edge.geometry)
    factor = geom_len / edge.length if edge.length > 0 else 1.0
    for seg in edge.segments:
        pts = slice_polyline(edge.geometry, seg.start_offset * factor, seg.end_offset * factor)
        if len(pts) < 2:
            continue
        color = (
            theme.coppered_color
            if seg.type == SegmentType.COPPERED
            else theme.uncoppered_color
        )
        line = draw.Lines(
            *_flatten(vp, pts),
            close=False,
            fill="none",
            stroke=color,
            stroke_width=EDGE_STROKE_WIDTH,
            stroke_linecap="round",
        )
        line.append_title(
            f"{label}: {seg.type.value} "
            f"({round(seg.start_offset)}-{round(seg.end_offset)})"
        )
        d.append(line)


def _draw_legend(d: draw.Drawing, theme: Theme, x: float, y: float) -> None:
    entries = (
        ("Coppered", theme.coppered_color),
        ("Uncoppered", theme.uncoppered_color),
        ("Unsurveyed", theme.edge_color),
    )
    for i, (text, color) in enumerate(entries):
        row_y = y + i * (LEGEND_SWATCH + 4)
        d.append(draw.Rectangle(x, row_y, LEGEND_SWATCH, LEGEND_SWATCH, fill=color))
        d.append(
            draw.Text(
                text,
                LABEL_FONT_SIZE,
                x + LEGEND_SWATCH + 6,
                row_y + LEGEND_SWATCH - 3,
                fill=theme.label_color,
                font_family=theme.font_family,
            )
        )


def render_svg(
    graph: RailGraph,
    theme: Theme,
    title: str | None = None,
    show_labels: bool = True,
    show_legend: bool = True,
) -> str:
    """Render ``graph`` and return the SVG document as a string.

    Nodes with no coordinates are placed at the end of an attached edge's
    geometry; nodes with neither are left out. ``title`` defaults to the
    graph metadata's ``title``.
    """
    title = title if title is not None else graph.metadata.get("title")
    top = RENDER_PADDING + (TITLE_FONT_SIZE * 2 if title else 0)

    positions = _node_positions(graph)
    vp = _viewport(graph, positions, top)

    max_x = max((vp.map(p)[0] for p in positions.values()), default=RENDER_PADDING)
    max_y = max((vp.map(p)[1] for p in positions.values()), default=top)
    for edge in graph.edges:
        for p in edge.geometry or []:
            x, y = vp.map(p)
            max_x, max_y = max(max_x, x), max(max_y, y)

    legend_h = 3 * (LEGEND_SWATCH + 4) if show_legend else 0
    width = max_x + RENDER_PADDING
    height = max_y + RENDER_PADDING + legend_h

    d = draw.Drawing(width, height)
    if theme.background_color != "none":
        d.append(draw.Rectangle(0, 0, width, height, fill=theme.background_color))

    if title:
        d.append(
            draw.Text(
                title,
                TITLE_FONT_SIZE,
                RENDER_PADDING,
                RENDER_PADDING + TITLE_FONT_SIZE,
                fill=theme.title_color,
                font_family=theme.font_family,
                font_weight="bold",
            )
        )

    for edge in graph.edges:
        if edge.has_geometry:
            _draw_edge(d, edge, vp, theme)

    for nid, node in graph.nodes.items():
        if nid not in positions:
            continue
        cx, cy = vp.map(positions[nid])
        if node.type == NodeType.JUNCTION:
            circle = draw.Circle(cx, cy, JUNCTION_RADIUS, fill=theme.junction_fill)
        elif node.type == NodeType.STATION:
            circle = draw.Circle(
                cx,
                cy,
                NODE_RADIUS,
                fill=theme.station_fill,
                stroke=theme.station_stroke,
                stroke_width=theme.node_stroke_width,
            )
        else:
            circle = draw.Circle(cx, cy, JUNCTION_RADIUS / 2, fill=theme.waypoint_fill)
        circle.append_title(node.name or nid)
        d.append(circle)

        if show_labels and node.type == NodeType.STATION:
            d.append(
                draw.Text(
                    node.name or nid,
                    LABEL_FONT_SIZE,
                    cx,
                    cy - NODE_RADIUS - LABEL_OFFSET,
                    fill=theme.label_color,
                    font_family=theme.font_family,
                    text_anchor="middle",
                )
            )

    if show_legend:
        _draw_legend(d, theme, RENDER_PADDING, max_y + RENDER_PADDING / 2)

    return d.as_svg()
