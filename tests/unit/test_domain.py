"""Unit tests for domain value objects: BBox, RawStroke and result types."""

import math
import unittest

import numpy as np
import pytest

from gesture_lib.domain import (
    NO_TEMPLATES,
    TOO_SHORT,
    UNKNOWN,
    BBox,
    ClassificationResult,
    CloudMatchResult,
    MatchResult,
    RawStroke,
    ShapeKind,
    ShapeResult,
)


class TestBBox(unittest.TestCase):
    """Tests for BBox."""

    def test_dimensions(self):
        box = BBox(0.0, 1.0, 4.0, 3.0)
        self.assertEqual(box.width, 4.0)
        self.assertEqual(box.height, 2.0)
        self.assertEqual(box.center, (2.0, 2.0))
        self.assertEqual(box.extent, 4.0)

    def test_aspect_ratio_floor(self):
        flat = BBox(0.0, 0.0, 1.0, 0.0)
        self.assertTrue(math.isfinite(flat.aspect_ratio()))

    def test_from_points_uses_xy(self):
        box = BBox.from_points(np.array([(1, 2, 9), (3, -1, -9)], dtype=float))
        self.assertEqual(box.to_tuple(), (1.0, -1.0, 3.0, 2.0))

    def test_frozen(self):
        box = BBox(0.0, 0.0, 1.0, 1.0)
        with self.assertRaises(AttributeError):
            box.x_min = 5.0


class TestRawStroke:
    """Tests for the RawStroke capture buffer."""

    def test_append(self):
        stroke = RawStroke()
        assert stroke.append((1, 2, 3))
        assert len(stroke) == 1
        assert list(stroke) == [(1.0, 2.0, 3.0)]

    def test_min_spacing_drops_close_samples(self):
        stroke = RawStroke(min_spacing=0.01)
        assert stroke.append((0, 0, 0))
        assert not stroke.append((0.005, 0, 0))
        assert stroke.append((0.02, 0, 0))
        assert len(stroke) == 2

    def test_cap(self):
        stroke = RawStroke(max_points=3)
        results = [stroke.append((i, 0, 0)) for i in range(5)]
        assert results == [True, True, True, False, False]
        assert len(stroke) == 3

    def test_frozen_rejects_append(self):
        stroke = RawStroke()
        stroke.append((0, 0, 0))
        assert stroke.freeze() is stroke
        assert stroke.frozen
        with pytest.raises(RuntimeError):
            stroke.append((1, 1, 1))

    def test_rejects_2d_point(self):
        with pytest.raises(ValueError):
            RawStroke().append((1, 2))

    def test_as_array(self):
        stroke = RawStroke()
        assert stroke.as_array().shape == (0, 3)
        stroke.append((1, 2, 3))
        stroke.append((4, 5, 6))
        np.testing.assert_array_equal(stroke.as_array(), [[1, 2, 3], [4, 5, 6]])


class TestResults:
    """Tests for result objects and their conversion."""

    def test_shape_kind_values(self):
        assert ShapeKind.TOO_SHORT.value == TOO_SHORT
        assert ShapeKind.UNKNOWN.value == UNKNOWN
        assert ShapeKind('Circle') is ShapeKind.CIRCLE

    def test_shape_result_conversion(self):
        result = ShapeResult(kind=ShapeKind.SQUARE, corners=4, confidence=0.9)
        converted = result.to_classification()
        assert converted.label == 'Square'
        assert converted.score == 0.9
        assert converted.higher_is_better
        assert converted.corners == 4
        assert converted.accepted

    def test_match_result_conversion(self):
        result = MatchResult('A', 0.3, 0.2, [('A', 0.3)])
        converted = result.to_classification()
        assert (converted.label, converted.score, converted.margin) == ('A', 0.3, 0.2)
        assert not converted.higher_is_better

    def test_cloud_result_conversion(self):
        converted = CloudMatchResult('Circle', 0.4, clockwise=True).to_classification()
        assert converted.clockwise is True
        assert converted.strategy == 'cloud'

    @pytest.mark.parametrize("label", [TOO_SHORT, NO_TEMPLATES, UNKNOWN])
    def test_distinguished_labels_not_accepted(self, label):
        assert not ClassificationResult(label=label, score=0.0).accepted

    def test_to_dict_maps_infinity_to_none(self):
        data = MatchResult(NO_TEMPLATES).to_classification().to_dict()
        assert data['score'] is None
        assert data['label'] == NO_TEMPLATES
        assert data['margin'] == 0.0
