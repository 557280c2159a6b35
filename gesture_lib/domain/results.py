"""Classification result objects.

This module provides the value objects returned by the three stroke
classifiers. Each classifier has its own native result type carrying the
attributes it can actually measure, and every native result converts to the
common ClassificationResult so callers can compare strategies side by side.

The module provides the following classes:
    ShapeKind: Enumeration of shapes the geometric classifier can report.
    ShapeResult: Output of the geometric heuristic classifier.
    MatchResult: Output of the DTW/k-NN classifier.
    CloudMatchResult: Output of the elastic cloud matcher.
    ClassificationResult: Strategy-neutral result with label, score and
        margin plus optional shape attributes.

Distinguished labels:
    TOO_SHORT: The stroke had fewer points than the classifier minimum.
    NO_TEMPLATES: The DTW template store was empty.
    UNKNOWN: The stroke was classified but matched nothing well enough.

None of these are errors; they are ordinary outcomes.

Example usage:
    Inspecting a shape result::

        from gesture_lib.analysis import ShapeAnalyzer

        result = ShapeAnalyzer().analyze(points)
        if result.kind is ShapeKind.CIRCLE:
            print(f"{result.revolutions:.2f} turns, clockwise={result.clockwise}")
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

TOO_SHORT = 'TooShort'
NO_TEMPLATES = 'NoTemplates'
UNKNOWN = 'Unknown'


class ShapeKind(Enum):
    """Shapes reported by the geometric heuristic classifier.

    LINE is part of the result vocabulary but the built-in decision tree
    never emits it; open strokes without circular structure are UNKNOWN.

    Example:
        >>> ShapeKind.SQUARE.value
        'Square'
    """
    UNKNOWN = UNKNOWN
    CIRCLE = 'Circle'
    TRIANGLE = 'Triangle'
    SQUARE = 'Square'
    QUAD = 'Quad'
    LINE = 'Line'
    SPIRAL = 'Spiral'
    TOO_SHORT = TOO_SHORT


@dataclass
class ClassificationResult:
    """Strategy-neutral classification result.

    Attributes:
        label: Recognized label, or one of the distinguished labels.
        score: Distance-like score where lower is better, except for the
            geometric strategy where it carries the 0..1 confidence
            (higher is better). ``higher_is_better`` says which.
        margin: Separation from the runner-up (DTW/k-NN only, else 0).
        strategy: Name of the strategy that produced the result.
        higher_is_better: Direction of ``score``.
        corners: Corner count for polygons.
        revolutions: Angular travel in full turns for circles/spirals.
        radius: Mean radius for circles.
        clockwise: Traversal direction, when known.
    """
    label: str
    score: float
    margin: float = 0.0
    strategy: str = ''
    higher_is_better: bool = False
    corners: int = 0
    revolutions: float = 0.0
    radius: float = 0.0
    clockwise: bool | None = None

    @property
    def accepted(self) -> bool:
        """True unless the label is one of the distinguished non-matches."""
        return self.label not in (UNKNOWN, TOO_SHORT, NO_TEMPLATES)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            'label': self.label,
            'score': _finite_or_none(self.score),
            'margin': _finite_or_none(self.margin),
            'strategy': self.strategy,
            'higher_is_better': self.higher_is_better,
            'corners': self.corners,
            'revolutions': self.revolutions,
            'radius': self.radius,
            'clockwise': self.clockwise,
        }


@dataclass
class ShapeResult:
    """Result of the geometric heuristic classifier.

    Attributes:
        kind: Detected ShapeKind.
        clockwise: Traversal direction in the projected plane.
        revolutions: Angular travel around the centroid in full turns
            (circles and spirals).
        radius: Mean radius around the centroid (circles).
        corners: Number of corners found (polygons).
        confidence: Heuristic confidence in [0, 1].
    """
    kind: ShapeKind = ShapeKind.UNKNOWN
    clockwise: bool = False
    revolutions: float = 0.0
    radius: float = 0.0
    corners: int = 0
    confidence: float = 0.0

    def to_classification(self) -> ClassificationResult:
        return ClassificationResult(
            label=self.kind.value,
            score=self.confidence,
            strategy='heuristic',
            higher_is_better=True,
            corners=self.corners,
            revolutions=self.revolutions,
            radius=self.radius,
            clockwise=self.clockwise,
        )


@dataclass
class MatchResult:
    """Result of the DTW/k-NN classifier.

    Attributes:
        label: Winning template name, UNKNOWN, TOO_SHORT or NO_TEMPLATES.
        score: Mean DTW distance of the winning group inside the top k.
        margin: Runner-up group mean minus ``score``; positive means the
            winner is clearly ahead. Infinite when only one name voted.
        distances: (template name, distance) pairs sorted ascending.
    """
    label: str
    score: float = math.inf
    margin: float = 0.0
    distances: list[tuple[str, float]] = field(default_factory=list)

    def to_classification(self) -> ClassificationResult:
        return ClassificationResult(
            label=self.label,
            score=self.score,
            margin=self.margin,
            strategy='dtw',
        )


@dataclass
class CloudMatchResult:
    """Result of the elastic cloud matcher.

    Attributes:
        label: Best template name, UNKNOWN or TOO_SHORT.
        distance: Best greedy cloud distance (lower is better).
        clockwise: Sign of the projected signed area, negative meaning
            clockwise.
        scores: Template name to distance for every template tried.
    """
    label: str
    distance: float = math.inf
    clockwise: bool = False
    scores: dict[str, float] = field(default_factory=dict)

    def to_classification(self) -> ClassificationResult:
        return ClassificationResult(
            label=self.label,
            score=self.distance,
            strategy='cloud',
            clockwise=self.clockwise,
        )


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None
