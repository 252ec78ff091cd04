"""Data model for rail networks: nodes, directed edges, condition segments."""

from __future__ import annotations

__all__ = [
    "Edge",
    "Exit",
    "Node",
    "NodeType",
    "RailGraph",
    "Segment",
    "SegmentType",
    "SurveyReport",
    "SurveySample",
    "Vec3",
]

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from railscout.geometry import Vec3, polyline_length_2d


class NodeType(str, Enum):
    STATION = "station"
    JUNCTION = "junction"
    OTHER = "other"


class SegmentType(str, Enum):
    COPPERED = "coppered"
    UNCOPPERED = "uncoppered"


@dataclass(frozen=True)
class Segment:
    """A condition interval ``[start_offset, end_offset)`` along an edge."""

    start_offset: float
    end_offset: float
    type: SegmentType
    avg_speed: float | None = None

    @property
    def length(self) -> float:
        return self.end_offset - self.start_offset


@dataclass(frozen=True)
class Exit:
    """One physical switch path out of a junction.

    ``onedest_args`` lists the destination strings this path satisfies.
    """

    direction: str
    onedest_args: tuple[str, ...] = ()
    target_node: str | None = None


@dataclass
class Node:
    id: str
    type: NodeType | None = None
    exits: list[Exit] = field(default_factory=list)
    name: str | None = None
    coords: Vec3 | None = None
    external: bool = False


@dataclass
class Edge:
    """A directed edge from ``source`` to ``target``.

    ``geometry`` traces the physical track from source to target and is
    needed for survey snapping. ``segments`` cover ``[0, distance]``.
    ``extras`` holds document fields the core does not understand (names,
    colours, editor keys); they are written back unchanged.
    """

    source: str
    target: str
    distance: float | None = None
    id: str | None = None
    routing_weight: float | None = None
    segments: list[Segment] | None = None
    geometry: list[Vec3] | None = None
    total_copper_coverage: float | None = None
    external: bool = False
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def weight(self) -> float:
        """Weight used for path finding."""
        if self.routing_weight is not None:
            return self.routing_weight
        if self.distance is not None:
            return self.distance
        return 0.0

    @property
    def length(self) -> float:
        """Edge length in blocks, falling back to the geometry length."""
        if self.distance:
            return self.distance
        if self.geometry:
            return polyline_length_2d(self.geometry)
        return 0.0

    @property
    def has_geometry(self) -> bool:
        return self.geometry is not None and len(self.geometry) >= 2


@dataclass
class RailGraph:
    """A rail network: nodes keyed by id plus an ordered list of edges.

    ``node_extras`` holds per-node fields the core does not understand
    (UI metadata and the like) so they survive a load/save round trip.
    ``extras`` does the same for unknown top-level document keys.
    """

    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    node_extras: dict[str, dict[str, Any]] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    extras: dict[str, Any] = field(default_factory=dict)

    def add_node(self, node: Node) -> Node:
        self.nodes[node.id] = node
        return node

    def add_edge(self, edge: Edge) -> Edge:
        self.edges.append(edge)
        return edge

    @property
    def junctions(self) -> list[Node]:
        return [n for n in self.nodes.values() if n.type == NodeType.JUNCTION]

    def outgoing(self, node_id: str) -> list[Edge]:
        return [e for e in self.edges if e.source == node_id]

    def incoming(self, node_id: str) -> list[Edge]:
        return [e for e in self.edges if e.target == node_id]

    def edge_by_id(self, edge_id: str) -> Edge | None:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None


@dataclass(frozen=True)
class SurveySample:
    coords: Vec3
    speed: float
    tick: int | None = None


@dataclass
class SurveyReport:
    """Chronological field samples from one survey run."""

    samples: list[SurveySample] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
