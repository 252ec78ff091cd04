"""Survey reconciliation: fold field samples into per-edge condition records.

Each sample is snapped to the nearest edge geometry within a threshold,
located by its offset along that edge and classified by speed. Samples on
the same edge are collapsed into runs which are then merged over the
edge's existing segments, fresh data taking precedence.
"""

from __future__ import annotations

__all__ = ["EdgeDiff", "Reconciliation", "apply_reconciliation", "reconcile_survey"]

import math
from collections import defaultdict
from dataclasses import dataclass, replace

from railscout.constants import COPPER_SPEED_THRESHOLD, DEFAULT_SNAP_THRESHOLD
from railscout.geometry import project_point_onto_polyline
from railscout.parser.model import Edge, RailGraph, Segment, SurveyReport
from railscout.survey.segments import (
    OffsetSample,
    build_runs,
    classify_speed,
    copper_coverage,
    merge_edge_segments,
)


@dataclass(frozen=True)
class EdgeDiff:
    """Before/after condition record of one edge touched by a survey."""

    edge_id: str
    old_segments: list[Segment] | None
    new_segments: list[Segment]
    old_coverage: float | None
    new_coverage: float


@dataclass(frozen=True)
class Reconciliation:
    """Every edge of the surveyed graph (touched ones replaced) plus diffs."""

    updated_edges: list[Edge]
    diffs: list[EdgeDiff]

    @property
    def changed_edge_ids(self) -> list[str]:
        return [d.edge_id for d in self.diffs]


def _with_ids(edges: list[Edge]) -> list[Edge]:
    return [
        e if e.id is not None else replace(e, id=f"{e.source}_{e.target}_{idx}")
        for idx, e in enumerate(edges)
    ]


def _locate(
    edges: list[Edge], coords, threshold: float
) -> tuple[int, float] | None:
    """Index of the closest edge within ``threshold`` and the offset on it."""
    best: tuple[int, float] | None = None
    best_dist = math.inf
    for idx, edge in enumerate(edges):
        if not edge.has_geometry:
            continue
        proj = project_point_onto_polyline(edge.geometry, coords)
        if proj is None or proj.distance > threshold:
            continue
        if proj.distance < best_dist:
            best_dist = proj.distance
            best = (idx, proj.offset)
    return best


def reconcile_survey(
    graph: RailGraph,
    report: SurveyReport,
    threshold_blocks: float = DEFAULT_SNAP_THRESHOLD,
    copper_speed: float = COPPER_SPEED_THRESHOLD,
) -> Reconciliation:
    """Merge ``report`` into the condition segments of ``graph``'s edges.

    Samples farther than ``threshold_blocks`` from every edge geometry are
    ignored, as are edges without geometry. ``graph`` is left untouched;
    the result holds new Edge values and one diff per changed edge, in the
    order the survey first reached each edge. Id-less edges are given the
    id ``"{from}_{to}_{index}"``.
    """
    edges = _with_ids(graph.edges)

    by_edge: dict[int, list[OffsetSample]] = defaultdict(list)
    for sample in report.samples:
        hit = _locate(edges, sample.coords, threshold_blocks)
        if hit is None:
            continue
        idx, offset = hit
        length = edges[idx].length
        by_edge[idx].append(
            OffsetSample(
                offset=max(0.0, min(offset, length)),
                state=classify_speed(sample.speed, copper_speed),
                speed=sample.speed,
            )
        )

    diffs: list[EdgeDiff] = []
    for idx, samples in by_edge.items():
        edge = edges[idx]
        length = edge.length
        runs = build_runs(sorted(samples, key=lambda s: s.offset), length)
        merged = merge_edge_segments(length, edge.segments or [], runs)
        coverage = copper_coverage(length, merged)
        edges[idx] = replace(
            edge,
            segments=merged,
            total_copper_coverage=coverage,
            extras=dict(edge.extras),
        )
        diffs.append(
            EdgeDiff(
                edge_id=edge.id,
                old_segments=None if edge.segments is None else list(edge.segments),
                new_segments=list(merged),
                old_coverage=edge.total_copper_coverage,
                new_coverage=coverage,
            )
        )

    return Reconciliation(updated_edges=edges, diffs=diffs)


def apply_reconciliation(graph: RailGraph, result: Reconciliation) -> RailGraph:
    """A new graph with ``graph``'s nodes and the reconciled edges.

    Document-level extras and per-node side-table fields are carried over.
    """
    return RailGraph(
        nodes=dict(graph.nodes),
        edges=list(result.updated_edges),
        node_extras=dict(graph.node_extras),
        metadata=dict(graph.metadata),
        extras=dict(graph.extras),
    )
