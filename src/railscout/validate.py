"""Network sanity checks.

Each check returns a list of Violation records rather than raising, so a
caller can show every problem with a network at once. ERROR means the
network breaks an invariant the core relies on; WARNING means it is legal
but almost certainly a mistake (a free zero-weight edge, a router that
needs an ordered layout).
"""

from __future__ import annotations

__all__ = [
    "Severity",
    "Violation",
    "check_dangling_edges",
    "check_edge_weights",
    "check_router_layouts",
    "check_segment_coverage",
    "validate_network",
]

from dataclasses import dataclass
from enum import Enum

from railscout.constants import COVER_TOLERANCE
from railscout.parser.model import Edge, RailGraph
from railscout.routing.router_layout import ConflictDetected, validate_router_layout


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Violation:
    check: str
    severity: Severity
    message: str


def _label(edge: Edge, idx: int) -> str:
    return edge.id or f"edges[{idx}] ({edge.source}->{edge.target})"


def check_edge_weights(graph: RailGraph) -> list[Violation]:
    """Negative distances/weights break Dijkstra; zero weights route for free."""
    out = []
    for idx, edge in enumerate(graph.edges):
        label = _label(edge, idx)
        for name, value in (("distance", edge.distance), ("routing_weight", edge.routing_weight)):
            if value is not None and value < 0:
                out.append(
                    Violation(
                        "edge_weights",
                        Severity.ERROR,
                        f"Edge {label} has negative {name} {value}",
                    )
                )
        if edge.weight == 0:
            out.append(
                Violation(
                    "edge_weights",
                    Severity.WARNING,
                    f"Edge {label} has zero routing weight and is traversed for free",
                )
            )
    return out


def check_dangling_edges(graph: RailGraph) -> list[Violation]:
    out = []
    for idx, edge in enumerate(graph.edges):
        for end, node_id in (("from", edge.source), ("to", edge.target)):
            if node_id not in graph.nodes:
                out.append(
                    Violation(
                        "dangling_edges",
                        Severity.ERROR,
                        f"Edge {_label(edge, idx)} '{end}' references unknown node '{node_id}'",
                    )
                )
    return out


def check_segment_coverage(graph: RailGraph) -> list[Violation]:
    """Segments must be ordered, contiguous, coalesced and span the edge."""
    out = []

    def err(msg: str) -> None:
        out.append(Violation("segment_coverage", Severity.ERROR, msg))

    for idx, edge in enumerate(graph.edges):
        label = _label(edge, idx)
        if edge.total_copper_coverage is not None and not (
            0.0 <= edge.total_copper_coverage <= 1.0
        ):
            err(f"Edge {label} copper coverage {edge.total_copper_coverage} outside [0, 1]")
        if not edge.segments:
            continue

        segs = edge.segments
        for k, seg in enumerate(segs):
            if seg.end_offset <= seg.start_offset:
                err(
                    f"Edge {label} segment {k} is empty or reversed "
                    f"({seg.start_offset}..{seg.end_offset})"
                )
        if abs(segs[0].start_offset) > COVER_TOLERANCE:
            err(f"Edge {label} segments start at {segs[0].start_offset}, not 0")
        if abs(segs[-1].end_offset - edge.length) > COVER_TOLERANCE:
            err(
                f"Edge {label} segments end at {segs[-1].end_offset}, "
                f"not at distance {edge.length}"
            )
        for k in range(1, len(segs)):
            prev, cur = segs[k - 1], segs[k]
            gap = cur.start_offset - prev.end_offset
            if gap > COVER_TOLERANCE:
                err(f"Edge {label} has a gap between segments {k - 1} and {k}")
            elif gap < -COVER_TOLERANCE:
                err(f"Edge {label} segments {k - 1} and {k} overlap")
            elif prev.type == cur.type:
                err(
                    f"Edge {label} segments {k - 1} and {k} are both "
                    f"{cur.type.value} and should be one segment"
                )
    return out


def check_router_layouts(graph: RailGraph) -> list[Violation]:
    out = []
    for node in graph.nodes.values():
        if not node.exits:
            continue
        result = validate_router_layout(node.exits)
        if isinstance(result, ConflictDetected):
            out.append(
                Violation(
                    "router_layouts",
                    Severity.WARNING,
                    f"Router '{node.id}': {result.reason}",
                )
            )
    return out


def validate_network(graph: RailGraph) -> list[Violation]:
    """Run every check and return all violations found."""
    return [
        *check_dangling_edges(graph),
        *check_edge_weights(graph),
        *check_segment_coverage(graph),
        *check_router_layouts(graph),
    ]
