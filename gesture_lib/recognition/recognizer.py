"""Gesture recognizer running classification strategies side by side.

This module provides the GestureRecognizer class, which holds an ordered
set of StrokeClassifier strategies and runs one, several or all of them on
a stroke. The strategies are independent: none feeds another, and the
caller decides how to use or combine their results.

Example usage:
    Using the default recognizer::

        from gesture_lib.recognition.recognizer import create_default_recognizer

        recognizer = create_default_recognizer()
        results = recognizer.classify_all(points)
        for name, result in results.items():
            print(name, result.label)

    Picking one answer::

        best = recognizer.best(points)
        print(best.strategy, best.label)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import numpy as np

from ..config import RecognizerConfig
from ..domain.geometry import RawStroke
from ..domain.results import ClassificationResult
from ..templates.repository import TemplateRepository
from .strategies import StrokeClassifier

logger = logging.getLogger(__name__)


def _freeze(points):
    if isinstance(points, RawStroke):
        points.freeze()
    return points


@dataclass
class GestureRecognizer:
    """Runs stroke classification strategies by name.

    A RawStroke passed to any classify method is frozen first, so it cannot
    change while strategies read it.

    Attributes:
        strategies: StrokeClassifier instances, in preference order.

    Example::

        from gesture_lib.recognition.strategies import GeometricHeuristicStrategy

        recognizer = GestureRecognizer()
        recognizer.add_strategy(GeometricHeuristicStrategy())
        label = recognizer.classify(points, 'heuristic').label
    """
    strategies: list[StrokeClassifier] = field(default_factory=list)

    def add_strategy(self, strategy: StrokeClassifier) -> GestureRecognizer:
        """Add a strategy (fluent interface).

        Raises:
            ValueError: If a strategy with the same name is already present.
        """
        if strategy.name in self.strategy_names():
            raise ValueError(f"duplicate strategy name {strategy.name!r}")
        self.strategies.append(strategy)
        return self

    def strategy_names(self) -> list[str]:
        return [s.name for s in self.strategies]

    def get_strategy(self, name: str) -> StrokeClassifier:
        """Look up a strategy by name.

        Raises:
            KeyError: If no strategy has that name.
        """
        for strategy in self.strategies:
            if strategy.name == name:
                return strategy
        raise KeyError(f"unknown strategy {name!r}; available: {self.strategy_names()}")

    def classify(self, points, strategy: str) -> ClassificationResult:
        """Classify with a single named strategy."""
        return self.get_strategy(strategy).classify(_freeze(points))

    def classify_all(
        self,
        points,
        names: Iterable[str] | None = None,
    ) -> dict[str, ClassificationResult]:
        """Classify with several strategies.

        Args:
            points: Stroke samples.
            names: Strategy names to run, or None for all of them.

        Returns:
            Strategy name to result, in the order the strategies ran.
        """
        points = _freeze(points)
        selected = self.strategies if names is None else [self.get_strategy(n) for n in names]
        results = {}
        for strategy in selected:
            result = strategy.classify(points)
            logger.debug("%s -> %s (score=%s)", strategy.name, result.label, result.score)
            results[strategy.name] = result
        return results

    def best(self, points) -> ClassificationResult | None:
        """First accepted result in strategy order.

        Falls back to the first strategy's result when nothing is accepted,
        and returns None when there are no strategies.
        """
        results = self.classify_all(points)
        for result in results.values():
            if result.accepted:
                return result
        return next(iter(results.values()), None)


def create_default_recognizer(
    config: RecognizerConfig | None = None,
    repository: TemplateRepository | None = None,
    projector: Callable[[np.ndarray], np.ndarray] | None = None,
) -> GestureRecognizer:
    """Create a recognizer with all three built-in strategies.

    Strategies are added in the order dtw, heuristic, cloud so that learned
    templates take precedence in ``best`` once any are recorded.

    Args:
        config: Classifier configuration; defaults when None.
        repository: Template store for the DTW strategy. A new empty store
            is created when None.
        projector: Optional 3D-to-2D projection shared by the heuristic and
            cloud strategies.

    Returns:
        Configured GestureRecognizer.
    """
    from ..analysis.shapes import ShapeAnalyzer
    from .cloud import CloudMatcher
    from .dtw import DtwKnnRecognizer
    from .strategies import CloudMatchStrategy, DtwKnnStrategy, GeometricHeuristicStrategy

    config = config or RecognizerConfig()
    return GestureRecognizer(
        strategies=[
            DtwKnnStrategy(DtwKnnRecognizer(config.dtw, repository)),
            GeometricHeuristicStrategy(ShapeAnalyzer(config.shape, projector)),
            CloudMatchStrategy(CloudMatcher(config.cloud, projector=projector)),
        ],
    )
