"""Elastic point-cloud matching against a small fixed template library.

Strokes are compared to templates as unordered point clouds: each point of
one cloud is greedily paired with the nearest still unpaired point of the
other, and the paired distances are summed. Trying several start offsets
and both matching directions makes the distance insensitive to where the
stroke starts and which way it is drawn.

Both clouds must have the same number of points. Templates and queries are
resampled to ``CloudConfig.resample_length`` points and normalized around
their bounding box center before matching.

Example usage:
    Matching with the built-in circle, square and triangle::

        from gesture_lib.recognition.cloud import CloudMatcher

        matcher = CloudMatcher()
        result = matcher.match(points)
        print(result.label, result.distance, result.clockwise)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable

import numpy as np
from scipy.spatial.distance import cdist

from ..config import CloudConfig
from ..domain.results import TOO_SHORT, UNKNOWN, CloudMatchResult
from ..templates.builtin import builtin_templates
from ..templates.repository import Template
from ..utils.geometry import as_points, normalize, project_to_plane, resample_to_count, signed_area

logger = logging.getLogger(__name__)


def cloud_normalize(points, n: int) -> np.ndarray:
    """Resample to ``n`` points and normalize around the bounding box center."""
    return normalize(resample_to_count(points, n), center='bbox')


def _greedy_pass(distances: np.ndarray, start: int) -> float:
    """Sum of greedy nearest-unmatched distances from row ``start`` onward."""
    n_rows, n_cols = distances.shape
    matched = np.zeros(n_cols, dtype=bool)
    total = 0.0
    for k in range(n_rows):
        row = np.where(matched, np.inf, distances[(start + k) % n_rows])
        j = int(np.argmin(row))
        if matched[j]:
            break
        matched[j] = True
        total += float(row[j])
    return total


def greedy_cloud_distance(a, b) -> float:
    """Symmetric greedy correspondence distance between two clouds.

    Start offsets are spaced ``floor(sqrt(n))`` apart. For every offset both
    directions (a to b and b to a) are tried and the overall minimum kept.

    Args:
        a: (n, 2) cloud.
        b: (n, 2) cloud of the same length.

    Returns:
        The minimum summed distance; infinite if the lengths differ or a
        cloud is empty.
    """
    a = as_points(a, dims=(2,))
    b = as_points(b, dims=(2,))
    n = len(a)
    if n == 0 or len(b) != n:
        return math.inf

    forward = cdist(a, b)
    backward = forward.T
    step = max(1, math.floor(math.sqrt(n)))
    best = math.inf
    for start in range(0, n, step):
        best = min(best, _greedy_pass(forward, start), _greedy_pass(backward, start))
    return best


class CloudMatcher:
    """Matches strokes against fixed point-cloud templates.

    Attributes:
        config: CloudConfig.
        projector: Optional callable mapping (n, 3) samples to (n, 2)
            planar points. When None 3D strokes are projected onto their
            best-fit plane. 2D input is used as is.
        templates: (name, normalized cloud) pairs, built once.

    Example:
        >>> from gesture_lib.templates.builtin import circle_points
        >>> CloudMatcher().match(circle_points(32)).label
        'Circle'
    """

    def __init__(
        self,
        config: CloudConfig | None = None,
        templates: Iterable[Template] | None = None,
        projector: Callable[[np.ndarray], np.ndarray] | None = None,
    ):
        self.config = config or CloudConfig()
        self.projector = projector
        n = self.config.resample_length
        source = builtin_templates(n) if templates is None else list(templates)
        self.templates = [(t.name, cloud_normalize(t.points, n)) for t in source]

    def _project(self, points: np.ndarray) -> np.ndarray:
        if points.shape[1] == 2:
            return points
        if self.projector is not None:
            return as_points(self.projector(points), dims=(2,))
        return project_to_plane(points)

    def match(self, points) -> CloudMatchResult:
        """Find the closest template.

        Returns:
            CloudMatchResult. TOO_SHORT for strokes under ``min_points``
            samples; UNKNOWN (distance kept) when the best distance exceeds
            ``reject_threshold`` or there are no templates.
        """
        cfg = self.config
        pts = as_points(points)
        if len(pts) < cfg.min_points:
            return CloudMatchResult(TOO_SHORT)

        planar = self._project(pts)
        clockwise = signed_area(planar) < 0.0
        query = cloud_normalize(planar, cfg.resample_length)

        scores: dict[str, float] = {}
        for name, cloud in self.templates:
            d = greedy_cloud_distance(query, cloud)
            scores[name] = min(d, scores.get(name, math.inf))

        label, distance = UNKNOWN, math.inf
        for name, d in scores.items():
            if d < distance:
                label, distance = name, d
        if distance > cfg.reject_threshold:
            label = UNKNOWN

        logger.debug("cloud: %s distance=%.4f clockwise=%s", label, distance, clockwise)
        return CloudMatchResult(label, distance, clockwise, scores)
