"""Stroke classification strategy implementations.

The library has three independent ways to classify a stroke. Each one is
wrapped here as a strategy with the same interface, so callers can pick
one, run several side by side, or plug in their own.

The module provides the following classes:
    StrokeClassifier: Protocol defining the strategy interface.
    GeometricHeuristicStrategy: Template-free shape analysis.
    CloudMatchStrategy: Elastic matching against fixed point clouds.
    DtwKnnStrategy: DTW/k-NN voting over learned templates.

Example usage:
    Using individual strategies::

        from gesture_lib.recognition.strategies import GeometricHeuristicStrategy

        strategy = GeometricHeuristicStrategy()
        result = strategy.classify(points)
        print(f"{result.label}: {result.score:.2f}")

    Comparing strategies::

        for strategy in (GeometricHeuristicStrategy(), CloudMatchStrategy()):
            result = strategy.classify(points)
            print(strategy.name, result.label, result.accepted)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..analysis.shapes import ShapeAnalyzer
from ..domain.results import ClassificationResult
from .cloud import CloudMatcher
from .dtw import DtwKnnRecognizer


class StrokeClassifier(Protocol):
    """Protocol for stroke classification strategies.

    A strategy takes a stroke as (n, 3) samples or (n, 2) planar points in
    drawing order and returns a ClassificationResult. Strategies must not
    raise for short, degenerate or unrecognized strokes; those come back as
    the distinguished labels TooShort, NoTemplates and Unknown.

    Example implementation::

        class AlwaysCircle:
            name = 'always-circle'

            def classify(self, points) -> ClassificationResult:
                return ClassificationResult(label='Circle', score=0.0,
                                            strategy=self.name)
    """

    name: str

    def classify(self, points) -> ClassificationResult:
        """Classify one stroke.

        Args:
            points: (n, 3) or (n, 2) point sequence.

        Returns:
            ClassificationResult tagged with the strategy name.
        """
        ...


@dataclass
class GeometricHeuristicStrategy:
    """Strategy wrapping ShapeAnalyzer.

    The result score is the analyzer's confidence, so higher is better.

    Attributes:
        analyzer: The ShapeAnalyzer to run.
    """
    analyzer: ShapeAnalyzer = field(default_factory=ShapeAnalyzer)
    name: str = 'heuristic'

    def classify(self, points) -> ClassificationResult:
        result = self.analyzer.analyze(points).to_classification()
        result.strategy = self.name
        return result


@dataclass
class CloudMatchStrategy:
    """Strategy wrapping CloudMatcher.

    Attributes:
        matcher: The CloudMatcher to run.
    """
    matcher: CloudMatcher = field(default_factory=CloudMatcher)
    name: str = 'cloud'

    def classify(self, points) -> ClassificationResult:
        result = self.matcher.match(points).to_classification()
        result.strategy = self.name
        return result


@dataclass
class DtwKnnStrategy:
    """Strategy wrapping DtwKnnRecognizer.

    The strategy shares the recognizer's template store, so templates added
    through the recognizer are seen on the next call.

    Attributes:
        recognizer: The DtwKnnRecognizer to run.
    """
    recognizer: DtwKnnRecognizer = field(default_factory=DtwKnnRecognizer)
    name: str = 'dtw'

    def classify(self, points) -> ClassificationResult:
        result = self.recognizer.recognize(points).to_classification()
        result.strategy = self.name
        return result
