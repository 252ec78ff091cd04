"""Tests for planar geometry helpers."""

import math

import pytest

from railscout.geometry import (
    distance_2d,
    point_to_segment_distance_2d,
    polyline_length_2d,
    project_point_onto_polyline,
    slice_polyline,
    snap_to_ratio,
)


def test_distance_ignores_vertical_axis():
    assert distance_2d((0, 0, 0), (3, 100, 4)) == 5.0


def test_segment_projection_interior():
    proj = point_to_segment_distance_2d((5, 0, 3), (0, 60, 0), (10, 70, 0))
    assert proj.distance == 3.0
    assert proj.t == 0.5
    # y interpolated between the endpoints
    assert proj.point == (5.0, 65.0, 0.0)


def test_segment_projection_clamps_past_end():
    proj = point_to_segment_distance_2d((14, 0, 3), (0, 0, 0), (10, 0, 0))
    assert proj.t == 1.0
    assert proj.distance == 5.0
    assert proj.point == (10.0, 0.0, 0.0)


def test_segment_projection_clamps_before_start():
    proj = point_to_segment_distance_2d((-3, 0, 4), (0, 0, 0), (10, 0, 0))
    assert proj.t == 0.0
    assert proj.distance == 5.0


def test_zero_length_segment():
    proj = point_to_segment_distance_2d((3, 0, 4), (0, 7, 0), (0, 9, 0))
    assert proj.distance == 5.0
    assert proj.t == 0.0
    assert proj.point == (0.0, 7.0, 0.0)


def test_polyline_length():
    poly = [(0, 0, 0), (3, 5, 4), (3, 0, 10)]
    assert polyline_length_2d(poly) == 11.0
    assert polyline_length_2d([(1, 1, 1)]) == 0.0


class TestProjectOntoPolyline:
    """Tests for project_point_onto_polyline."""

    def test_offset_accumulates_arc_length(self):
        poly = [(0, 0, 0), (10, 0, 0), (10, 0, 10)]
        proj = project_point_onto_polyline(poly, (12, 0, 4))
        assert proj.segment_index == 1
        assert proj.distance == 2.0
        assert proj.offset == pytest.approx(14.0)
        assert proj.projected_point == (10.0, 0.0, 4.0)

    def test_tie_keeps_lowest_segment(self):
        # (10, 0, 0) is the shared vertex of both segments
        poly = [(0, 0, 0), (10, 0, 0), (10, 0, 10)]
        proj = project_point_onto_polyline(poly, (12, 0, -2))
        assert proj.segment_index == 0
        assert proj.offset == pytest.approx(10.0)

    def test_empty_polyline(self):
        assert project_point_onto_polyline([], (0, 0, 0)) is None

    def test_single_point_polyline(self):
        proj = project_point_onto_polyline([(3, 0, 4)], (0, 0, 0))
        assert proj.distance == 5.0
        assert proj.offset == 0.0


class TestSlicePolyline:
    """Tests for slice_polyline."""

    def test_slice_inside_one_segment(self):
        pts = slice_polyline([(0, 60, 0), (100, 70, 0)], 10, 30)
        assert len(pts) == 2
        assert pts[0] == pytest.approx((10.0, 61.0, 0.0))
        assert pts[1] == pytest.approx((30.0, 63.0, 0.0))

    def test_slice_across_vertex(self):
        pts = slice_polyline([(0, 0, 0), (10, 0, 0), (10, 0, 10)], 5, 15)
        assert pts == [(5.0, 0.0, 0.0), (10.0, 0.0, 0.0), (10.0, 0.0, 5.0)]

    def test_offsets_are_clamped(self):
        pts = slice_polyline([(0, 0, 0), (10, 0, 0)], -5, 50)
        assert pts == [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0)]

    def test_empty_range(self):
        assert slice_polyline([(0, 0, 0), (10, 0, 0)], 6, 6) == []
        assert slice_polyline([(0, 0, 0), (10, 0, 0)], 8, 2) == []

    def test_degenerate_polyline(self):
        assert slice_polyline([(1, 2, 3), (1, 5, 3)], 0, 1) == [(1, 2, 3)]


class TestSnapToRatio:
    """Tests for snap_to_ratio."""

    def test_snaps_to_horizontal(self):
        snap = snap_to_ratio((0, 64, 0), (50, 70, 2))
        assert snap.ratio == "Horizontal"
        assert snap.distance == pytest.approx(2.0)
        assert snap.point[0] == pytest.approx(50.0)
        assert snap.point[2] == pytest.approx(0.0)
        # target elevation is kept
        assert snap.point[1] == 70

    def test_snaps_to_vertical(self):
        snap = snap_to_ratio((0, 64, 0), (1, 64, 40))
        assert snap.ratio == "Vertical"
        assert snap.point == (0, 64, 40)

    def test_snaps_to_diagonal(self):
        snap = snap_to_ratio((0, 0, 0), (20, 0, -21))
        assert snap.ratio == "1:1"
        assert snap.point[0] == pytest.approx(20.5)
        assert snap.point[2] == pytest.approx(-20.5)
        assert snap.distance == pytest.approx(math.sqrt(0.5))

    def test_too_close_to_start(self):
        assert snap_to_ratio((0, 0, 0), (0.001, 0, 0)) is None

    def test_nothing_within_threshold(self):
        assert snap_to_ratio((0, 0, 0), (100, 0, 37), threshold=0.5) is None
