"""Shared test fixtures and helpers for the railscout test suite."""

from __future__ import annotations

import json

import pytest

from railscout.parser.model import Edge, Node, NodeType, RailGraph
from railscout.parser.network import parse_network

# --- Network document constants ---

TRIANGLE_DOC = {
    "nodes": [{"id": "A"}, {"id": "B"}, {"id": "C"}],
    "edges": [
        {"id": "e1", "from": "A", "to": "B", "distance": 5},
        {"id": "e2", "from": "B", "to": "C", "distance": 3},
        {"id": "e3", "from": "A", "to": "C", "distance": 10},
    ],
}

STRAIGHT_EDGE_DOC = {
    "nodes": [{"id": "n1", "type": "station"}, {"id": "n2", "type": "station"}],
    "edges": [
        {
            "id": "edge1",
            "from": "n1",
            "to": "n2",
            "distance": 100,
            "geometry": [[0, 64, 0], [100, 64, 0]],
        }
    ],
}

JUNCTION_DOC = {
    "nodes": {
        "spawn": {"type": "station", "name": "Spawn", "coords": [0, 64, 0], "color": "#ff0000"},
        "hub": {
            "type": "junction",
            "coords": [100, 70, 0],
            "exits": [
                {"direction": "north", "onedest_args": ["icenia"]},
                {"direction": "east", "onedest_args": ["icenia-city", "barn"]},
            ],
        },
        "icenia": {"type": "station", "name": "Icenia", "coords": [100, 64, -100]},
    },
    "edges": [
        {
            "id": "s-h",
            "from": "spawn",
            "to": "hub",
            "distance": 100,
            "geometry": [[0, 64, 0], [100, 70, 0]],
            "segments": [{"start_offset": 0, "end_offset": 100, "type": "coppered", "avg_speed": 14}],
            "total_copper_coverage": 1.0,
        },
        {
            "id": "h-i",
            "from": "hub",
            "to": "icenia",
            "distance": 100,
            "geometry": [[100, 70, 0], [100, 64, -100]],
        },
    ],
    "metadata": {"title": "Test Network"},
}


# --- Pytest fixtures ---


@pytest.fixture
def triangle_graph() -> RailGraph:
    """A->B (5), B->C (3), A->C (10)."""
    return parse_network(TRIANGLE_DOC)


@pytest.fixture
def straight_graph() -> RailGraph:
    """One 100-block edge along the x axis."""
    return parse_network(STRAIGHT_EDGE_DOC)


@pytest.fixture
def junction_graph() -> RailGraph:
    """Station -> junction -> station, with a conflicting router at the junction."""
    return parse_network(JUNCTION_DOC)


@pytest.fixture
def two_track_graph() -> RailGraph:
    """Two parallel id-less 50-block edges, 10 blocks apart along the z axis."""
    g = RailGraph()
    for nid in ("a", "b", "c", "d"):
        g.add_node(Node(id=nid, type=NodeType.STATION))
    g.add_edge(
        Edge(
            source="a",
            target="b",
            distance=50,
            geometry=[(0.0, 64.0, 0.0), (50.0, 64.0, 0.0)],
        )
    )
    g.add_edge(
        Edge(
            source="c",
            target="d",
            distance=50,
            geometry=[(0.0, 64.0, 10.0), (50.0, 64.0, 10.0)],
        )
    )
    return g


def _write(path, doc) -> str:
    path.write_text(json.dumps(doc))
    return str(path)


@pytest.fixture
def triangle_file(tmp_path) -> str:
    return _write(tmp_path / "triangle.json", TRIANGLE_DOC)


@pytest.fixture
def junction_file(tmp_path) -> str:
    return _write(tmp_path / "network.json", JUNCTION_DOC)


@pytest.fixture
def straight_file(tmp_path) -> str:
    return _write(tmp_path / "straight.json", STRAIGHT_EDGE_DOC)
