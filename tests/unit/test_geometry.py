"""Unit tests for geometry and resampling utilities.

Tests the pure functions in gesture_lib.utils.geometry:
    - as_points: Input validation
    - path_length / bounding_box / path_scale / signed_area
    - estimate_normal / project_to_plane: Plane fitting and projection
    - resample_by_distance: Greedy distance downsampling
    - resample_to_count: Fixed-count arc-length resampling
    - normalize: Scale and translation invariance
    - chaikin_smooth / canonical_sequence
"""

import math
import unittest

import numpy as np
import pytest

from gesture_lib.domain.geometry import RawStroke
from gesture_lib.utils.geometry import (
    as_points,
    bounding_box,
    canonical_sequence,
    chaikin_smooth,
    estimate_normal,
    normalize,
    path_length,
    path_scale,
    project_to_plane,
    resample_by_distance,
    resample_to_count,
    signed_area,
)

from conftest import circle, densify, to_3d, SQUARE_CORNERS


class TestAsPoints(unittest.TestCase):
    """Tests for as_points."""

    def test_accepts_lists(self):
        arr = as_points([[0, 0, 0], [1, 2, 3]])
        self.assertEqual(arr.shape, (2, 3))
        self.assertEqual(arr.dtype, np.float64)

    def test_empty_input(self):
        self.assertEqual(as_points([]).shape, (0, 2))
        self.assertEqual(as_points([], dims=(3,)).shape, (0, 3))
        self.assertEqual(as_points(np.zeros((0, 3))).shape, (0, 3))

    def test_rejects_wrong_width(self):
        with self.assertRaises(ValueError):
            as_points([[1, 2, 3, 4]])

    def test_rejects_flat_input(self):
        with self.assertRaises(ValueError):
            as_points([1.0, 2.0, 3.0])

    def test_restricted_dims(self):
        with self.assertRaises(ValueError):
            as_points([[0, 0, 0]], dims=(2,))

    def test_reads_raw_stroke(self):
        stroke = RawStroke()
        stroke.append((1.0, 2.0, 3.0))
        stroke.append((4.0, 5.0, 6.0))
        np.testing.assert_array_equal(as_points(stroke), [[1, 2, 3], [4, 5, 6]])


class TestMeasures(unittest.TestCase):
    """Tests for path_length, bounding_box, path_scale and signed_area."""

    def test_path_length(self):
        self.assertAlmostEqual(path_length([(0, 0), (3, 4), (3, 10)]), 11.0)

    def test_path_length_single_point(self):
        self.assertEqual(path_length([(1, 1)]), 0.0)

    def test_bounding_box(self):
        box = bounding_box([(1, 2), (4, -1), (2, 3)])
        self.assertEqual(box.to_tuple(), (1.0, -1.0, 4.0, 3.0))
        self.assertEqual(box.extent, 4.0)

    def test_path_scale_floor(self):
        self.assertEqual(path_scale([(1, 1), (1, 1)], floor=0.5), 0.5)

    def test_path_scale_empty(self):
        self.assertEqual(path_scale([]), 0.01)

    def test_signed_area_ccw_positive(self):
        self.assertAlmostEqual(signed_area([(0, 0), (1, 0), (1, 1), (0, 1)]), 1.0)

    def test_signed_area_cw_negative(self):
        self.assertAlmostEqual(signed_area([(0, 0), (0, 1), (1, 1), (1, 0)]), -1.0)

    def test_signed_area_too_few_points(self):
        self.assertEqual(signed_area([(0, 0), (1, 1)]), 0.0)


class TestEstimateNormal(unittest.TestCase):
    """Tests for estimate_normal."""

    def test_xy_plane_ccw(self):
        pts = to_3d(circle(32))
        np.testing.assert_allclose(estimate_normal(pts), [0, 0, 1], atol=1e-9)

    def test_direction_follows_turning(self):
        pts = to_3d(circle(32, clockwise=True))
        np.testing.assert_allclose(estimate_normal(pts), [0, 0, -1], atol=1e-9)

    def test_collinear_is_none(self):
        pts = np.column_stack((np.arange(5.0), np.arange(5.0), np.zeros(5)))
        self.assertIsNone(estimate_normal(pts))

    def test_too_few_points(self):
        self.assertIsNone(estimate_normal([(0, 0, 0), (1, 0, 0)]))


class TestProjectToPlane:
    """Tests for project_to_plane."""

    def test_planar_input_copied(self):
        pts = np.array([[0.0, 0.0], [1.0, 1.0]])
        out = project_to_plane(pts)
        np.testing.assert_array_equal(out, pts)
        assert out is not pts

    def test_origin_is_first_point(self):
        pts = to_3d(circle(32), origin=(5.0, -2.0, 1.0))
        out = project_to_plane(pts)
        np.testing.assert_allclose(out[0], [0.0, 0.0], atol=1e-12)

    def test_preserves_distances_in_tilted_plane(self, tilted_circle):
        out = project_to_plane(tilted_circle)
        assert out.shape == (64, 2)
        d3 = np.linalg.norm(np.diff(tilted_circle, axis=0), axis=1)
        d2 = np.linalg.norm(np.diff(out, axis=0), axis=1)
        np.testing.assert_allclose(d2, d3, atol=1e-9)

    def test_collinear_stroke_falls_back(self):
        pts = np.column_stack((np.linspace(0, 1, 10), np.zeros(10), np.zeros(10)))
        out = project_to_plane(pts)
        assert np.all(np.isfinite(out))
        assert path_length(out) == pytest.approx(1.0)

    def test_view_normal_flips_orientation(self):
        pts = to_3d(circle(64, clockwise=True))
        own = project_to_plane(pts)
        viewed = project_to_plane(pts, view_normal=(0.0, 0.0, 1.0))
        assert signed_area(own) > 0
        assert signed_area(viewed) < 0

    def test_empty(self):
        assert project_to_plane(np.zeros((0, 3))).shape == (0, 2)


class TestResampleByDistance(unittest.TestCase):
    """Tests for resample_by_distance."""

    def test_drops_close_points(self):
        pts = [(0, 0), (0.001, 0), (0.01, 0), (0.011, 0), (0.02, 0)]
        out = resample_by_distance(pts, 0.005, 100)
        np.testing.assert_allclose(out, [(0, 0), (0.01, 0), (0.02, 0)])

    def test_keeps_final_point(self):
        pts = [(0, 0), (1, 0), (1.001, 0)]
        out = resample_by_distance(pts, 0.5, 100)
        np.testing.assert_allclose(out[-1], (1.001, 0))

    def test_cap(self):
        pts = np.column_stack((np.arange(50.0), np.zeros(50)))
        out = resample_by_distance(pts, 0.5, 10)
        self.assertEqual(len(out), 10)
        np.testing.assert_allclose(out[-1], pts[-1])

    def test_invalid_cap(self):
        with self.assertRaises(ValueError):
            resample_by_distance([(0, 0)], 0.1, 0)


class TestResampleToCount:
    """Tests for resample_to_count."""

    @pytest.mark.parametrize("n", [2, 3, 7, 32, 64, 200])
    @pytest.mark.parametrize("shape", ["line", "square", "circle", "zigzag"])
    def test_exact_count(self, n, shape):
        polylines = {
            'line': [(0, 0), (2, 1)],
            'square': SQUARE_CORNERS,
            'circle': circle(17),
            'zigzag': [(0, 0), (1, 1), (1.2, 0), (3, 2), (3.1, 0.1), (5, 0)],
        }
        out = resample_to_count(polylines[shape], n)
        assert out.shape == (n, 2)

    def test_endpoints(self):
        pts = [(0, 0), (1, 0), (1, 1), (3, 1)]
        out = resample_to_count(pts, 20)
        np.testing.assert_allclose(out[0], (0, 0))
        np.testing.assert_allclose(out[-1], (3, 1), atol=1e-9)

    def test_even_spacing_on_sparse_input(self):
        out = resample_to_count(SQUARE_CORNERS, 33)
        spacing = np.linalg.norm(np.diff(out, axis=0), axis=1)
        np.testing.assert_allclose(spacing, 4 / 32, atol=1e-9)

    def test_does_not_modify_input(self):
        pts = np.array([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])
        before = pts.copy()
        resample_to_count(pts, 10)
        np.testing.assert_array_equal(pts, before)

    def test_zero_length(self):
        out = resample_to_count([(2, 3), (2, 3), (2, 3)], 5)
        np.testing.assert_array_equal(out, np.tile([2, 3], (5, 1)))

    def test_empty(self):
        assert resample_to_count(np.zeros((0, 3)), 4).shape == (4, 3)

    def test_invalid_n(self):
        with pytest.raises(ValueError):
            resample_to_count([(0, 0), (1, 1)], 1)


class TestNormalize:
    """Tests for normalize."""

    @pytest.mark.parametrize("factor", [0.01, 0.5, 3.0, 250.0])
    @pytest.mark.parametrize("center", ["centroid", "bbox"])
    def test_scale_invariance(self, factor, center):
        pts = densify([(0, 0), (2, 0), (2, 1), (0.5, 1.5)], per_edge=5)
        np.testing.assert_allclose(normalize(pts * factor, center), normalize(pts, center), atol=1e-9)

    @pytest.mark.parametrize("offset", [(5, -3), (-100, 0.25)])
    def test_translation_invariance(self, offset):
        pts = circle(20)
        np.testing.assert_allclose(normalize(pts + offset), normalize(pts), atol=1e-9)

    def test_unit_extent(self):
        out = normalize([(0, 0), (4, 0), (4, 2)])
        assert np.ptp(out, axis=0).max() == pytest.approx(1.0)

    def test_bbox_center(self):
        out = normalize([(0, 0), (4, 0), (4, 2), (3, 2)], center='bbox')
        np.testing.assert_allclose((out.min(axis=0) + out.max(axis=0)) / 2, (0, 0), atol=1e-12)

    def test_degenerate_maps_to_zero(self):
        out = normalize([(1, 1), (1, 1), (1, 1)])
        np.testing.assert_array_equal(out, np.zeros((3, 2)))

    def test_unknown_center(self):
        with pytest.raises(ValueError):
            normalize([(0, 0), (1, 1)], center='median')


class TestChaikinSmooth(unittest.TestCase):
    """Tests for chaikin_smooth."""

    def test_point_count(self):
        out = chaikin_smooth([(0, 0), (1, 0), (1, 1)], iterations=1)
        self.assertEqual(len(out), 2 * 2 + 2)

    def test_keeps_endpoints(self):
        pts = [(0, 0), (1, 0), (1, 1), (0, 1)]
        out = chaikin_smooth(pts, iterations=2)
        np.testing.assert_allclose(out[0], pts[0])
        np.testing.assert_allclose(out[-1], pts[-1])

    def test_cuts_corner(self):
        out = chaikin_smooth([(0, 0), (1, 0), (1, 1)])
        np.testing.assert_allclose(out[1:5], [(0.25, 0), (0.75, 0), (1, 0.25), (1, 0.75)])

    def test_zero_iterations(self):
        pts = [(0, 0), (1, 0), (1, 1)]
        np.testing.assert_array_equal(chaikin_smooth(pts, iterations=0), pts)


class TestCanonicalSequence:
    """Tests for the canonical matching pipeline."""

    def test_shape(self, tilted_circle):
        out = canonical_sequence(tilted_circle, n=64, min_distance=0.004, max_count=1024)
        assert out.shape == (64, 2)

    def test_centered_and_unit(self, tilted_circle):
        out = canonical_sequence(tilted_circle, n=64, min_distance=0.004, max_count=1024)
        np.testing.assert_allclose(out.mean(axis=0), (0, 0), atol=1e-9)
        assert np.ptp(out, axis=0).max() == pytest.approx(1.0)

    @pytest.mark.parametrize("offset", [(1.0, 2.0, 3.0), (-40.0, 0.5, 12.0)])
    def test_translation_invariance(self, make_stroke, offset):
        base = canonical_sequence(make_stroke('triangle'), 64, 0.004, 1024)
        moved = canonical_sequence(make_stroke('triangle', offset=offset), 64, 0.004, 1024)
        np.testing.assert_allclose(moved, base, atol=1e-9)

    def test_scale_invariance(self, make_stroke):
        base = canonical_sequence(make_stroke('circle'), 64, 0.004, 1024)
        scaled = canonical_sequence(make_stroke('circle', scale=3.0), 64, 0.004, 1024)
        np.testing.assert_allclose(scaled, base, atol=1e-9)


def test_circle_fixture_revolution_length(circle_points):
    """Sanity check on the shared fixture used across the suite."""
    assert path_length(circle_points) == pytest.approx(2 * math.pi, rel=1e-3)
