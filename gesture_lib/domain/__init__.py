"""Domain objects for stroke recognition.

This module provides the value objects shared by every classifier: the
bounding box used for normalization, the raw stroke capture buffer, and the
result types returned by the classifiers.

Geometry classes:
    BBox: Immutable bounding box.
    RawStroke: Append-only buffer of 3D samples, frozen before classification.

Result classes:
    ShapeKind: Shapes reported by the geometric classifier.
    ShapeResult, MatchResult, CloudMatchResult: Native classifier results.
    ClassificationResult: Strategy-neutral result.

Example usage:
    Capturing a stroke::

        from gesture_lib.domain import RawStroke

        stroke = RawStroke(min_spacing=0.01, max_points=300)
        for sample in tip_positions:
            stroke.append(sample)
        points = stroke.freeze().as_array()
"""

from .geometry import BBox, RawStroke
from .results import (
    NO_TEMPLATES,
    TOO_SHORT,
    UNKNOWN,
    ClassificationResult,
    CloudMatchResult,
    MatchResult,
    ShapeKind,
    ShapeResult,
)

__all__ = [
    'BBox', 'RawStroke',
    'ShapeKind', 'ShapeResult', 'MatchResult', 'CloudMatchResult',
    'ClassificationResult',
    'TOO_SHORT', 'NO_TEMPLATES', 'UNKNOWN',
]
