"""Shortest paths over the directed rail graph (Dijkstra).

Each edge contributes one arc ``source -> target`` weighted by its
``routing_weight``, falling back to ``distance`` and then to zero. The
frontier is a binary heap keyed on ``(distance, declaration index)`` so that
among equally distant candidates the node declared first in the graph is
settled first.
"""

from __future__ import annotations

__all__ = ["RoutePath", "ShortestPath", "build_adjacency", "shortest_path"]

import heapq
import math
import warnings
from dataclasses import dataclass

import networkx as nx

from railscout.errors import UnknownNodeError
from railscout.parser.model import RailGraph


@dataclass(frozen=True)
class RoutePath:
    """Node ids from source to target and the ids of the edges between them."""

    nodes: list[str]
    edges: list[str | None]


@dataclass(frozen=True)
class ShortestPath:
    """Result of a shortest-path query.

    ``path`` is None (and ``distance`` infinite) when the target cannot be
    reached; that is an ordinary answer, not an error.
    """

    path: RoutePath | None
    distance: float

    @property
    def reachable(self) -> bool:
        return self.path is not None


def build_adjacency(graph: RailGraph) -> nx.MultiDiGraph:
    """Directed multigraph view of ``graph`` with a ``weight`` per arc.

    Nodes are added in declaration order. Edges whose endpoints are not
    nodes of the graph are skipped with a warning.
    """
    G = nx.MultiDiGraph()
    for index, node_id in enumerate(graph.nodes):
        G.add_node(node_id, index=index)
    for edge in graph.edges:
        missing = [n for n in (edge.source, edge.target) if n not in graph.nodes]
        if missing:
            warnings.warn(
                f"Edge {edge.id or f'{edge.source}->{edge.target}'} references "
                f"unknown node(s) {', '.join(missing)}; ignored for routing",
                stacklevel=2,
            )
            continue
        G.add_edge(edge.source, edge.target, weight=edge.weight, edge_id=edge.id)
    return G


def shortest_path(graph: RailGraph, source: str, target: str) -> ShortestPath:
    """Find the cheapest directed path from ``source`` to ``target``.

    Raises UnknownNodeError if either endpoint is not in the graph.
    """
    if source not in graph.nodes:
        raise UnknownNodeError(source, "source")
    if target not in graph.nodes:
        raise UnknownNodeError(target, "target")

    G = build_adjacency(graph)
    order = nx.get_node_attributes(G, "index")

    dist: dict[str, float] = {source: 0.0}
    prev: dict[str, tuple[str, str | None]] = {}
    settled: set[str] = set()
    frontier: list[tuple[float, int, str]] = [(0.0, order[source], source)]

    while frontier:
        d, _, u = heapq.heappop(frontier)
        if u in settled or d > dist.get(u, math.inf):
            continue
        settled.add(u)
        if u == target:
            break
        for v, arcs in G.adj[u].items():
            if v in settled:
                continue
            for data in arcs.values():
                alt = d + data["weight"]
                if alt < dist.get(v, math.inf):
                    dist[v] = alt
                    prev[v] = (u, data["edge_id"])
                    heapq.heappush(frontier, (alt, order[v], v))

    if target not in settled:
        return ShortestPath(path=None, distance=math.inf)
    return ShortestPath(path=_reconstruct(prev, source, target), distance=dist[target])


def _reconstruct(
    prev: dict[str, tuple[str, str | None]], source: str, target: str
) -> RoutePath:
    """Walk predecessor links back from ``target``."""
    nodes = [target]
    edges: list[str | None] = []
    seen = {target}
    cur = target
    while cur != source:
        cur, edge_id = prev[cur]
        if cur in seen:
            raise RuntimeError(f"Predecessor cycle through node '{cur}'")
        seen.add(cur)
        nodes.append(cur)
        edges.append(edge_id)
    nodes.reverse()
    edges.reverse()
    return RoutePath(nodes=nodes, edges=edges)
