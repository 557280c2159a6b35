"""Banded DTW distance and the template-based k-NN recognizer.

This module provides dtw_distance, a dynamic time warping distance between
two 2D point sequences restricted to a Sakoe-Chiba band, and the
DtwKnnRecognizer that classifies strokes by voting among the k templates
nearest under that distance.

Every stroke, template or query, goes through the same canonical pipeline:
plane projection, distance downsampling, fixed-count resampling and
centroid normalization (see ``gesture_lib.utils.geometry.canonical_sequence``).

Voting rule:
    The k nearest templates are grouped by name. The group with the most
    members wins; among groups of equal size the one with the lowest mean
    distance wins. The winner's score is its members' mean distance and the
    margin is the runner-up group's mean distance minus that score. With a
    single group in the top k the margin is infinite.

Example usage:
    Training and recognizing::

        from gesture_lib.recognition.dtw import DtwKnnRecognizer

        recognizer = DtwKnnRecognizer()
        recognizer.add_template('circle', circle_stroke)
        recognizer.add_template('zigzag', zigzag_stroke)
        result = recognizer.recognize(query_stroke)
        print(result.label, result.score, result.margin)

    Persisting the store::

        recognizer.save_templates('gestures.json')
        recognizer.load_templates('gestures.json')
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from scipy.spatial.distance import cdist

from ..config import DtwConfig
from ..domain.results import NO_TEMPLATES, TOO_SHORT, UNKNOWN, MatchResult
from ..templates.persistence import load_templates, save_templates
from ..templates.repository import Template, TemplateRepository
from ..utils.geometry import as_points, canonical_sequence

logger = logging.getLogger(__name__)


def dtw_distance(a, b, window: int | None = None) -> float:
    """Dynamic time warping distance between two 2D sequences.

    Fills the (n+1) x (m+1) accumulated cost grid with
    ``D[i, j] = |a[i-1] - b[j-1]| + min(D[i-1, j], D[i, j-1], D[i-1, j-1])``
    starting from ``D[0, 0] = 0``, visiting only cells with
    ``|i - j| <= window``. The band is widened to ``|n - m|`` when the
    lengths differ so the end cell stays reachable.

    Args:
        a: (n, 2) sequence.
        b: (m, 2) sequence.
        window: Sakoe-Chiba half-width in timesteps, or None for no band.

    Returns:
        ``D[n, m] / max(n, m)``; infinite if either sequence is empty.
    """
    a = as_points(a, dims=(2,))
    b = as_points(b, dims=(2,))
    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return math.inf

    band = max(n, m) if window is None else max(int(window), abs(n - m))
    cost = cdist(a, b)

    acc = np.full((n + 1, m + 1), np.inf)
    acc[0, 0] = 0.0
    for i in range(1, n + 1):
        lo = max(1, i - band)
        hi = min(m, i + band)
        prev = acc[i - 1]
        row = acc[i]
        for j in range(lo, hi + 1):
            best = min(prev[j], row[j - 1], prev[j - 1])
            row[j] = cost[i - 1, j - 1] + best
    return float(acc[n, m]) / max(n, m)


def vote(neighbors: Sequence[tuple[str, float]]) -> tuple[str, float, float]:
    """Majority vote among the nearest templates.

    Args:
        neighbors: (name, distance) pairs, usually the k nearest.

    Returns:
        (label, score, margin) as described in the module docstring.
    """
    groups: dict[str, list[float]] = {}
    for name, distance in neighbors:
        groups.setdefault(name, []).append(distance)

    ranked = sorted(
        ((name, len(ds), sum(ds) / len(ds)) for name, ds in groups.items()),
        key=lambda g: (-g[1], g[2]),
    )
    label, _, score = ranked[0]
    margin = ranked[1][2] - score if len(ranked) > 1 else math.inf
    return label, score, margin


class DtwKnnRecognizer:
    """Template store plus DTW/k-NN classification.

    The recognizer works on a TemplateRepository owned by the caller; when
    none is given it creates its own empty one. Adding, clearing and
    loading templates mutate that repository in place.

    Attributes:
        config: DtwConfig with the pipeline and voting options.
        templates: The TemplateRepository being matched against.
    """

    def __init__(self, config: DtwConfig | None = None,
                 repository: TemplateRepository | None = None):
        self.config = config or DtwConfig()
        self.templates = repository if repository is not None else TemplateRepository()

    def preprocess(self, points) -> np.ndarray:
        """Canonical (N, 2) sequence for a raw stroke."""
        cfg = self.config
        return canonical_sequence(
            points,
            n=cfg.resample_length,
            min_distance=cfg.min_sample_distance,
            max_count=cfg.max_sample_count,
            view_normal=cfg.view_normal,
        )

    def add_template(self, name: str, points) -> Template:
        """Preprocess a stroke and store it under ``name``.

        Raises:
            ValueError: If the name is empty or the stroke has fewer than
                ``config.min_points`` samples.
        """
        pts = as_points(points)
        if len(pts) < self.config.min_points:
            raise ValueError(
                f"template {name!r} needs at least {self.config.min_points} points, got {len(pts)}"
            )
        template = self.templates.register(name, self.preprocess(pts))
        logger.debug("Added template %r (%d exemplars)", name, len(self.templates.by_name(name)))
        return template

    def recognize(self, points) -> MatchResult:
        """Classify a stroke against the stored templates.

        Returns:
            MatchResult. TOO_SHORT for strokes under ``min_points`` samples,
            NO_TEMPLATES for an empty store, UNKNOWN (with score and margin
            kept) when the winning score exceeds ``accept_threshold`` or
            is not finite.
        """
        cfg = self.config
        pts = as_points(points)
        if len(pts) < cfg.min_points:
            return MatchResult(TOO_SHORT)
        if len(self.templates) == 0:
            return MatchResult(NO_TEMPLATES)

        query = self.preprocess(pts)
        window = cfg.window
        distances = [(t.name, dtw_distance(query, t.points, window)) for t in self.templates]
        distances.sort(key=lambda nd: nd[1])
        for name, distance in distances:
            logger.debug("  dtw %-16s %.4f", name, distance)

        label, score, margin = vote(distances[:cfg.k])
        if not math.isfinite(score) or score > cfg.accept_threshold:
            label = UNKNOWN
        logger.debug("dtw: %s score=%.4f margin=%.4f", label, score, margin)
        return MatchResult(label, score, margin, distances)

    def clear_templates(self) -> None:
        self.templates.clear()

    def template_names(self) -> list[str]:
        """Distinct template names in first-seen order."""
        return self.templates.names()

    def save_templates(self, path: str | Path) -> Path:
        """Write the store to a JSON template file."""
        return save_templates(self.templates, path)

    def load_templates(self, path: str | Path) -> int:
        """Replace the store with the contents of a template file.

        A missing file empties the store and logs a warning. A malformed
        file raises and leaves the store as it was.

        Returns:
            Number of templates now in the store.

        Raises:
            TemplateFileError: If the file cannot be parsed or validated.
        """
        loaded = load_templates(path)
        self.templates.replace(loaded)
        return len(self.templates)
