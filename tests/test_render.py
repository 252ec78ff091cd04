"""Tests for SVG rendering."""

import xml.etree.ElementTree as ET

from railscout.parser.model import Edge, Node, RailGraph, Segment, SegmentType
from railscout.render import render_svg
from railscout.themes import DARK_THEME, LIGHT_THEME, THEMES


def _texts(svg: str) -> list[str]:
    root = ET.fromstring(svg)
    return [el.text for el in root.iter() if el.tag.endswith("text")]


def test_render_produces_valid_svg(junction_graph):
    svg = render_svg(junction_graph, LIGHT_THEME)
    root = ET.fromstring(svg)
    assert root.tag.endswith("svg")


def test_render_contains_title(junction_graph):
    svg = render_svg(junction_graph, LIGHT_THEME)
    assert "Test Network" in _texts(svg)


def test_render_title_override(junction_graph):
    svg = render_svg(junction_graph, LIGHT_THEME, title="Overworld")
    texts = _texts(svg)
    assert "Overworld" in texts
    assert "Test Network" not in texts


def test_render_contains_station_labels(junction_graph):
    texts = _texts(render_svg(junction_graph, LIGHT_THEME))
    assert "Spawn" in texts
    assert "Icenia" in texts


def test_render_without_labels_or_legend(junction_graph):
    svg = render_svg(junction_graph, LIGHT_THEME, title="", show_labels=False, show_legend=False)
    assert _texts(svg) == []


def test_render_segment_colours(junction_graph):
    svg = render_svg(junction_graph, LIGHT_THEME)
    # s-h is fully coppered, h-i has no condition record
    assert LIGHT_THEME.coppered_color in svg
    assert LIGHT_THEME.edge_color in svg
    assert "s-h: coppered (0-100)" in svg


def test_render_partial_survey():
    g = RailGraph()
    g.add_node(Node(id="a", coords=(0, 64, 0)))
    g.add_node(Node(id="b", coords=(100, 64, 0)))
    g.add_edge(
        Edge(
            source="a",
            target="b",
            id="ab",
            distance=100,
            geometry=[(0, 64, 0), (100, 64, 0)],
            segments=[
                Segment(0, 30, SegmentType.UNCOPPERED),
                Segment(30, 100, SegmentType.COPPERED, 14),
            ],
        )
    )
    svg = render_svg(g, LIGHT_THEME)
    assert LIGHT_THEME.coppered_color in svg
    assert LIGHT_THEME.uncoppered_color in svg
    assert "ab: uncoppered (0-30)" in svg


def test_render_dark_theme_background(junction_graph):
    svg = render_svg(junction_graph, DARK_THEME)
    assert DARK_THEME.background_color in svg


def test_render_light_theme(junction_graph):
    svg = render_svg(junction_graph, LIGHT_THEME)
    # Light theme uses transparent background (no background rectangle)
    assert LIGHT_THEME.background_color == "none"
    assert "#333333" in svg


def test_render_legend(junction_graph):
    texts = _texts(render_svg(junction_graph, LIGHT_THEME))
    assert {"Coppered", "Uncoppered", "Unsurveyed"} <= set(texts)


def test_nodes_without_coords_use_edge_geometry():
    g = RailGraph()
    g.add_node(Node(id="x"))
    g.add_node(Node(id="y", name="Far Station", type=None))
    g.add_edge(Edge(source="x", target="y", distance=10, geometry=[(0, 0, 0), (10, 0, 0)]))
    svg = render_svg(g, LIGHT_THEME)
    assert "Far Station" in svg


def test_render_empty_graph():
    svg = render_svg(RailGraph(), LIGHT_THEME)
    assert "svg" in svg


def test_themes_registry():
    assert THEMES["light"] is LIGHT_THEME
    assert THEMES["dark"] is DARK_THEME
