"""Condition-segment arithmetic: sample runs, merging, coverage.

All functions return new Segment lists; inputs are never modified.
"""

from __future__ import annotations

__all__ = [
    "OffsetSample",
    "build_runs",
    "classify_speed",
    "coalesce_segments",
    "copper_coverage",
    "merge_edge_segments",
]

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from railscout.constants import COPPER_SPEED_THRESHOLD, COVER_TOLERANCE, MIN_RUN_LENGTH
from railscout.parser.model import Segment, SegmentType


@dataclass(frozen=True)
class OffsetSample:
    """A survey sample located on an edge, ``offset`` blocks from its start."""

    offset: float
    state: SegmentType
    speed: float


def classify_speed(speed: float, threshold: float = COPPER_SPEED_THRESHOLD) -> SegmentType:
    """Carts only exceed the threshold speed on coppered rail."""
    return SegmentType.COPPERED if speed > threshold else SegmentType.UNCOPPERED


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def build_runs(
    samples: Sequence[OffsetSample],
    length: float,
    min_run: float = MIN_RUN_LENGTH,
) -> list[Segment]:
    """Collapse offset-sorted samples into contiguous same-state runs.

    A run boundary sits halfway between the last sample of one run and the
    first sample of the next. The first run starts at the first sample and
    the last run ends at the last sample, so the runs only claim the span
    the survey actually saw. A run that would be empty (a lone sample) is
    widened to ``min_run`` blocks, kept inside ``[0, length]``.
    """
    if not samples:
        return []

    runs: list[tuple[float, float, SegmentType, list[float]]] = []
    state = samples[0].state
    start = samples[0].offset
    speeds = [samples[0].speed]
    for prev, cur in zip(samples, samples[1:]):
        if cur.state == state:
            speeds.append(cur.speed)
            continue
        boundary = (prev.offset + cur.offset) / 2
        runs.append((start, boundary, state, speeds))
        state, start, speeds = cur.state, boundary, [cur.speed]
    runs.append((start, samples[-1].offset, state, speeds))

    out = []
    for run_start, run_end, run_state, run_speeds in runs:
        s = _clamp(run_start, 0.0, length)
        e = _clamp(run_end, 0.0, length)
        if e <= s:
            e = min(s + min_run, length)
            s = max(0.0, e - min_run)
        out.append(Segment(s, e, run_state, sum(run_speeds) / len(run_speeds)))
    return out


def _covering(segments: Iterable[Segment], a: float, b: float) -> Segment | None:
    for seg in segments:
        if seg.start_offset <= a + COVER_TOLERANCE and seg.end_offset >= b - COVER_TOLERANCE:
            return seg
    return None


def coalesce_segments(segments: Sequence[Segment]) -> list[Segment]:
    """Join abutting segments of the same type.

    The joined ``avg_speed`` is the length-weighted mean over the parts that
    carry a speed; parts without one do not dilute it.
    """
    # Unknown speed is not read as 0: a speedless part never drags the mean
    # down, and a run with no known speed stays None.
    # [start, end, type, speed * length, length with speed]
    acc: list[list] = []
    for seg in segments:
        known = seg.avg_speed is not None
        weighted = seg.avg_speed * seg.length if known else 0.0
        known_len = seg.length if known else 0.0
        last = acc[-1] if acc else None
        if (
            last is not None
            and last[2] == seg.type
            and abs(last[1] - seg.start_offset) <= COVER_TOLERANCE
        ):
            last[1] = seg.end_offset
            last[3] += weighted
            last[4] += known_len
            continue
        acc.append([seg.start_offset, seg.end_offset, seg.type, weighted, known_len])

    out = []
    for start, end, stype, weighted, known_len in acc:
        speed = weighted / known_len if known_len > 0 else None
        out.append(Segment(start, end, stype, speed))
    return out


def merge_edge_segments(
    total_distance: float,
    existing: Sequence[Segment],
    incoming: Sequence[Segment],
) -> list[Segment]:
    """Merge fresh survey runs into an edge's condition record.

    The edge is cut at every boundary of either list. Each piece takes its
    condition from an incoming segment covering it, otherwise from an
    existing one, otherwise it is uncoppered with unknown speed. The result
    is coalesced and spans exactly ``[0, total_distance]``.
    """
    bounds = {0.0, total_distance}
    for seg in (*existing, *incoming):
        bounds.add(_clamp(seg.start_offset, 0.0, total_distance))
        bounds.add(_clamp(seg.end_offset, 0.0, total_distance))
    cuts = sorted(bounds)

    pieces: list[Segment] = []
    for a, b in zip(cuts, cuts[1:]):
        if b <= a:
            continue
        source = _covering(incoming, a, b) or _covering(existing, a, b)
        if source is not None:
            pieces.append(Segment(a, b, source.type, source.avg_speed))
        else:
            pieces.append(Segment(a, b, SegmentType.UNCOPPERED))

    merged = coalesce_segments(pieces)
    if merged:
        merged[0] = replace(merged[0], start_offset=0.0)
        merged[-1] = replace(merged[-1], end_offset=total_distance)
    return merged


def copper_coverage(total_distance: float, segments: Sequence[Segment]) -> float:
    """Fraction of the edge that is coppered, in ``[0, 1]``."""
    if total_distance <= 0 or not segments:
        return 0.0
    copper = sum(
        max(0.0, min(total_distance, s.end_offset) - max(0.0, s.start_offset))
        for s in segments
        if s.type == SegmentType.COPPERED
    )
    return _clamp(copper / total_distance, 0.0, 1.0)
