"""Tests for Dijkstra shortest paths."""

import math

import pytest

from railscout.errors import UnknownNodeError
from railscout.parser.model import Edge, Node, RailGraph
from railscout.routing import build_adjacency, shortest_path
from railscout.routing.pathfinder import _reconstruct


def _graph(nodes, edges) -> RailGraph:
    g = RailGraph()
    for nid in nodes:
        g.add_node(Node(id=nid))
    for e in edges:
        g.add_edge(e)
    return g


def test_prefers_cheaper_two_hop_route(triangle_graph):
    result = shortest_path(triangle_graph, "A", "C")
    assert result.reachable
    assert result.distance == 8
    assert result.path.nodes == ["A", "B", "C"]
    assert result.path.edges == ["e1", "e2"]


def test_source_equals_target(triangle_graph):
    result = shortest_path(triangle_graph, "B", "B")
    assert result.distance == 0
    assert result.path.nodes == ["B"]
    assert result.path.edges == []


def test_unreachable_is_not_an_error(triangle_graph):
    result = shortest_path(triangle_graph, "C", "A")
    assert result.path is None
    assert not result.reachable
    assert result.distance == math.inf


def test_edges_are_directed():
    g = _graph("AB", [Edge("A", "B", distance=1)])
    assert shortest_path(g, "A", "B").distance == 1
    assert shortest_path(g, "B", "A").path is None


@pytest.mark.parametrize("source,target,role", [("X", "A", "source"), ("A", "X", "target")])
def test_unknown_endpoint_raises(triangle_graph, source, target, role):
    with pytest.raises(UnknownNodeError, match=f"{role.capitalize()} node 'X' not found") as exc:
        shortest_path(triangle_graph, source, target)
    assert exc.value.node_id == "X"
    assert exc.value.role == role
    assert isinstance(exc.value, LookupError)


def test_routing_weight_overrides_distance():
    g = _graph(
        "ABC",
        [
            Edge("A", "B", distance=1, routing_weight=50, id="ab"),
            Edge("B", "C", distance=1, id="bc"),
            Edge("A", "C", distance=10, id="ac"),
        ],
    )
    result = shortest_path(g, "A", "C")
    assert result.path.nodes == ["A", "C"]
    assert result.distance == 10


def test_missing_distance_weighs_zero():
    g = _graph("ABC", [Edge("A", "B", id="ab"), Edge("B", "C", distance=2, id="bc")])
    result = shortest_path(g, "A", "C")
    assert result.distance == 2
    assert result.path.edges == ["ab", "bc"]


def test_parallel_edges_use_cheapest():
    g = _graph(
        "AB",
        [Edge("A", "B", distance=7, id="slow"), Edge("A", "B", distance=4, id="fast")],
    )
    result = shortest_path(g, "A", "B")
    assert result.distance == 4
    assert result.path.edges == ["fast"]


def test_ties_follow_node_declaration_order():
    # A->B->D and A->C->D both cost 2; B is declared before C
    edges = [
        Edge("A", "C", distance=1),
        Edge("A", "B", distance=1),
        Edge("C", "D", distance=1),
        Edge("B", "D", distance=1),
    ]
    result = shortest_path(_graph("ABCD", edges), "A", "D")
    assert result.distance == 2
    assert result.path.nodes == ["A", "B", "D"]

    result = shortest_path(_graph("ACBD", edges), "A", "D")
    assert result.path.nodes == ["A", "C", "D"]


def test_path_cost_matches_edge_weights(junction_graph):
    result = shortest_path(junction_graph, "spawn", "icenia")
    total = sum(junction_graph.edge_by_id(eid).weight for eid in result.path.edges)
    assert total == result.distance == 200


class TestBuildAdjacency:
    """Tests for the networkx adjacency view."""

    def test_arcs_carry_weight_and_id(self, triangle_graph):
        G = build_adjacency(triangle_graph)
        assert list(G.nodes) == ["A", "B", "C"]
        assert G.nodes["C"]["index"] == 2
        arcs = G.get_edge_data("A", "B")
        assert [d["weight"] for d in arcs.values()] == [5]
        assert [d["edge_id"] for d in arcs.values()] == ["e1"]

    def test_dangling_edge_is_skipped_with_warning(self):
        g = _graph("AB", [Edge("A", "B", distance=1), Edge("A", "Z", distance=1, id="bad")])
        with pytest.warns(UserWarning, match="bad references unknown node"):
            G = build_adjacency(g)
        assert G.number_of_edges() == 1
        assert "Z" not in G


def test_predecessor_cycle_is_detected():
    prev = {"C": ("B", "bc"), "B": ("X", "xb"), "X": ("B", "bx")}
    with pytest.raises(RuntimeError, match="Predecessor cycle"):
        _reconstruct(prev, "A", "C")


def test_reconstruct_walks_back_to_source():
    prev = {"C": ("B", "bc"), "B": ("A", "ab")}
    path = _reconstruct(prev, "A", "C")
    assert path.nodes == ["A", "B", "C"]
    assert path.edges == ["ab", "bc"]
