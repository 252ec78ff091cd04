"""Planar geometry helpers for track polylines.

Coordinates are world ``(x, y, z)`` triples with ``y`` vertical. Distances
are measured in the X/Z plane only: elevation does not change how far a
cart travels along the routing metric.
"""

from __future__ import annotations

__all__ = [
    "PolylineProjection",
    "SegmentProjection",
    "SnapResult",
    "Vec3",
    "distance_2d",
    "point_to_segment_distance_2d",
    "polyline_length_2d",
    "project_point_onto_polyline",
    "slice_polyline",
    "snap_to_ratio",
]

import math
from dataclasses import dataclass
from typing import Sequence

from railscout.constants import (
    POINT_TOLERANCE,
    RATIO_SNAP_MIN_DISTANCE,
    RATIO_SNAP_THRESHOLD,
    SNAPPING_RATIOS,
)

Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class SegmentProjection:
    """Closest point on a segment ``a -> b``; ``t`` runs 0..1 from ``a``."""

    distance: float
    t: float
    point: Vec3


@dataclass(frozen=True)
class PolylineProjection:
    """Closest point on a polyline.

    ``offset`` is the planar arc length from the first vertex to
    ``projected_point``.
    """

    distance: float
    segment_index: int
    t: float
    projected_point: Vec3
    offset: float


@dataclass(frozen=True)
class SnapResult:
    point: Vec3
    ratio: str
    distance: float


def distance_2d(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance in the X/Z plane."""
    return math.hypot(a[0] - b[0], a[2] - b[2])


def point_to_segment_distance_2d(
    p: Sequence[float], a: Sequence[float], b: Sequence[float]
) -> SegmentProjection:
    """Project ``p`` onto segment ``a -> b`` in the X/Z plane.

    The projection parameter is clamped to the segment, and the projected
    point's ``y`` is interpolated between ``a`` and ``b``. A zero-length
    segment projects everything onto ``a``.
    """
    ax, ay, az = a[0], a[1], a[2]
    vx, vy, vz = b[0] - ax, b[1] - ay, b[2] - az
    wx, wz = p[0] - ax, p[2] - az
    vlen2 = vx * vx + vz * vz
    if vlen2 == 0:
        return SegmentProjection(math.hypot(wx, wz), 0.0, (ax, ay, az))

    t = max(0.0, min(1.0, (wx * vx + wz * vz) / vlen2))
    px, pz = ax + t * vx, az + t * vz
    return SegmentProjection(
        math.hypot(p[0] - px, p[2] - pz),
        t,
        (px, ay + t * vy, pz),
    )


def polyline_length_2d(poly: Sequence[Sequence[float]]) -> float:
    """Sum of planar segment lengths."""
    return sum(distance_2d(poly[i - 1], poly[i]) for i in range(1, len(poly)))


def project_point_onto_polyline(
    poly: Sequence[Sequence[float]], p: Sequence[float]
) -> PolylineProjection | None:
    """Find the closest point on ``poly`` to ``p``.

    Returns None for an empty polyline. Ties keep the lowest segment index.
    """
    if not poly:
        return None

    first = poly[0]
    best = PolylineProjection(
        distance_2d(first, p), 0, 0.0, (first[0], first[1], first[2]), 0.0
    )
    if len(poly) == 1:
        return best

    best_dist = math.inf
    offset_acc = 0.0
    for i in range(1, len(poly)):
        a, b = poly[i - 1], poly[i]
        seg_len = distance_2d(a, b)
        proj = point_to_segment_distance_2d(p, a, b)
        if proj.distance < best_dist:
            best_dist = proj.distance
            best = PolylineProjection(
                proj.distance, i - 1, proj.t, proj.point, offset_acc + proj.t * seg_len
            )
        offset_acc += seg_len
    return best


def _lerp(a: Sequence[float], b: Sequence[float], t: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def _same_point(a: Sequence[float], b: Sequence[float]) -> bool:
    return abs(a[0] - b[0]) <= POINT_TOLERANCE and abs(a[2] - b[2]) <= POINT_TOLERANCE


def slice_polyline(
    poly: Sequence[Sequence[float]], start: float, end: float
) -> list[Vec3]:
    """Return the part of ``poly`` between two arc-length offsets.

    Offsets are clamped to the polyline length. An empty list means the
    requested range is empty; a degenerate (zero-length) polyline yields
    just its first point.
    """
    if not poly:
        return []
    seg_lens = [distance_2d(poly[i - 1], poly[i]) for i in range(1, len(poly))]
    total = sum(seg_lens)
    if total == 0:
        p = poly[0]
        return [(p[0], p[1], p[2])]

    s = max(0.0, min(start, total))
    e = max(0.0, min(end, total))
    if e <= s:
        return []

    out: list[Vec3] = []
    acc = 0.0
    for i, seg_len in enumerate(seg_lens):
        seg_start, seg_end = acc, acc + seg_len
        acc = seg_end
        if seg_len == 0 or seg_end < s:
            continue
        if seg_start > e:
            break
        t0 = (s - seg_start) / seg_len if seg_start <= s else 0.0
        t1 = (e - seg_start) / seg_len if e <= seg_end else 1.0
        for q in (_lerp(poly[i], poly[i + 1], t0), _lerp(poly[i], poly[i + 1], t1)):
            if not out or not _same_point(out[-1], q):
                out.append(q)
    return out


def snap_to_ratio(
    start: Sequence[float],
    target: Sequence[float],
    threshold: float = RATIO_SNAP_THRESHOLD,
) -> SnapResult | None:
    """Snap ``target`` onto the nearest allowed-slope line through ``start``.

    Track can only be laid at the slopes in SNAPPING_RATIOS. Each ratio
    defines two lines through ``start`` (rising and falling); the closest
    one within ``threshold`` wins. The target's ``y`` is kept.
    """
    dx = target[0] - start[0]
    dz = target[2] - start[2]
    if math.hypot(dx, dz) < RATIO_SNAP_MIN_DISTANCE:
        return None

    best: SnapResult | None = None
    best_dist = math.inf
    for rdy, rdx, name in SNAPPING_RATIOS:
        if rdx == 0:
            off = abs(dx)
            if off < threshold and off < best_dist:
                best_dist = off
                best = SnapResult((start[0], target[1], target[2]), name, off)
            continue

        for sx, sz in ((rdx, rdy), (rdx, -rdy)):
            length = math.hypot(sx, sz)
            ux, uz = sx / length, sz / length
            dot = dx * ux + dz * uz
            px, pz = dot * ux, dot * uz
            off = math.hypot(dx - px, dz - pz)
            if off < threshold and off < best_dist:
                best_dist = off
                best = SnapResult(
                    (start[0] + px, target[1], start[2] + pz), name, off
                )
    return best
