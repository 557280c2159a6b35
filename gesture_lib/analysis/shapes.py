"""Geometric heuristic shape classification.

This module provides the ShapeAnalyzer class, which recognizes circles,
triangles, squares, quads and spirals from a stroke's geometry alone, with
no learned templates. The stroke is downsampled, smoothed and projected to
its best-fit plane, then run through a fixed decision list where the first
matching test wins:

    1. Closed strokes are simplified with RDP and their corners counted:
       3 corners is a triangle, 4 is a square or a quad depending on the
       bounding box aspect ratio.
    2. Circle test on angular statistics around the centroid.
    3. Spiral test: enough turns with radius correlated to angle.
    4. Looser polygon test with a finer simplification.
    5. Unknown.

All distance thresholds are relative to the path scale, so the analyzer
does not care how large the stroke was drawn.

Example usage:
    Classifying a stroke::

        from gesture_lib.analysis import ShapeAnalyzer

        analyzer = ShapeAnalyzer()
        result = analyzer.analyze(points)
        print(result.kind.value, result.confidence)

    Measuring circularity directly::

        from gesture_lib.analysis.shapes import angular_statistics

        stats = angular_statistics(planar_points)
        print(stats.revolutions, stats.circ_score)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from ..config import ShapeConfig
from ..domain.geometry import BBox
from ..domain.results import ShapeKind, ShapeResult
from ..utils.geometry import (
    as_points,
    chaikin_smooth,
    path_scale,
    project_to_plane,
    resample_by_distance,
    signed_area,
)
from ..utils.simplify import corner_points, rdp, scaled_tolerance

logger = logging.getLogger(__name__)

# Unwrapping a closed loop can land a rounding error short of a full turn
_REVOLUTION_EPS = 1e-6


@dataclass(frozen=True)
class AngularStats:
    """Angle and radius statistics of a planar stroke around its centroid.

    Attributes:
        centroid: Mean point of the stroke.
        mean_radius: Mean distance from the centroid.
        circ_score: Radius standard deviation over mean radius; 0 for a
            perfect circle, 1 when the mean radius vanishes.
        signed_delta: Total unwrapped angular travel in radians, positive
            counter-clockwise.
        revolutions: ``abs(signed_delta)`` in full turns.
        monotonicity: Share of angular steps going the dominant way.
        spiral_correlation: Pearson correlation between unwrapped angle and
            radius; 0 when either is constant.
    """
    centroid: tuple[float, float]
    mean_radius: float
    circ_score: float
    signed_delta: float
    revolutions: float
    monotonicity: float
    spiral_correlation: float


def angular_statistics(points) -> AngularStats:
    """Compute AngularStats for an (n, 2) point sequence.

    Angles are unwrapped by adding or subtracting 2*pi wherever consecutive
    samples jump by more than pi, so a stroke going around twice reports
    two revolutions.
    """
    pts = as_points(points, dims=(2,))
    if len(pts) == 0:
        return AngularStats((0.0, 0.0), 0.0, 1.0, 0.0, 0.0, 0.0, 0.0)

    centroid = pts.mean(axis=0)
    offsets = pts - centroid
    radius = np.linalg.norm(offsets, axis=1)
    angle = np.unwrap(np.arctan2(offsets[:, 1], offsets[:, 0]))

    steps = np.diff(angle)
    pos = int(np.count_nonzero(steps > 0))
    neg = int(np.count_nonzero(steps < 0))
    monotonicity = max(pos, neg) / max(1, pos + neg)

    signed_delta = float(angle[-1] - angle[0])
    mean_radius = float(radius.mean())
    circ_score = float(radius.std()) / mean_radius if mean_radius > 1e-6 else 1.0

    da = angle - angle.mean()
    dr = radius - mean_radius
    var_a = float(da @ da)
    var_r = float(dr @ dr)
    if var_a > 0.0 and var_r > 1e-18:
        correlation = float(da @ dr) / math.sqrt(var_a * var_r)
    else:
        correlation = 0.0

    return AngularStats(
        centroid=(float(centroid[0]), float(centroid[1])),
        mean_radius=mean_radius,
        circ_score=circ_score,
        signed_delta=signed_delta,
        revolutions=abs(signed_delta) / (2 * math.pi),
        monotonicity=monotonicity,
        spiral_correlation=correlation,
    )


class ShapeAnalyzer:
    """Classifies strokes by geometric heuristics.

    The analyzer is stateless apart from its configuration; ``analyze`` is
    a pure function of its input.

    Attributes:
        config: ShapeConfig with every threshold used.
        projector: Optional callable mapping (n, 3) samples to (n, 2)
            planar points, such as a camera's world-to-screen transform.
            When None the stroke is projected onto its best-fit plane.

    Example:
        >>> analyzer = ShapeAnalyzer()
        >>> analyzer.analyze([(0, 0, 0)] * 3).kind
        <ShapeKind.TOO_SHORT: 'TooShort'>
    """

    def __init__(
        self,
        config: ShapeConfig | None = None,
        projector: Callable[[np.ndarray], np.ndarray] | None = None,
    ):
        self.config = config or ShapeConfig()
        self.projector = projector

    def analyze(self, points) -> ShapeResult:
        """Classify a stroke.

        Args:
            points: (n, 3) scene-space samples or (n, 2) planar points in
                drawing order.

        Returns:
            ShapeResult. Strokes with fewer than ``min_points`` samples give
            TOO_SHORT with confidence 0; strokes that collapse below that
            during downsampling give UNKNOWN with confidence 0.
        """
        cfg = self.config
        pts = as_points(points)
        if len(pts) < cfg.min_points:
            return ShapeResult(kind=ShapeKind.TOO_SHORT, confidence=0.0)

        sampled = resample_by_distance(pts, cfg.min_step, cfg.max_points)
        if len(sampled) < cfg.min_points:
            return ShapeResult(kind=ShapeKind.UNKNOWN, confidence=0.0)
        sampled = chaikin_smooth(sampled, cfg.smoothing_iterations)
        planar = self._project(sampled)

        result = self._classify(planar)
        logger.debug(
            "shape: %s confidence=%.2f corners=%d revolutions=%.2f clockwise=%s",
            result.kind.value, result.confidence, result.corners,
            result.revolutions, result.clockwise,
        )
        return result

    def _project(self, points: np.ndarray) -> np.ndarray:
        if points.shape[1] == 3 and self.projector is not None:
            return as_points(self.projector(points), dims=(2,))
        return project_to_plane(points, view_normal=self.config.view_normal)

    def _classify(self, pts: np.ndarray) -> ShapeResult:
        cfg = self.config
        scale = path_scale(pts)
        result = ShapeResult(clockwise=signed_area(pts) < 0.0)

        gap = float(np.linalg.norm(pts[0] - pts[-1]))
        closed = gap <= max(cfg.closed_factor * scale, cfg.closed_floor)

        if closed and self._match_polygon(pts, scale, result):
            return result
        if self._match_circle(pts, gap, result):
            return result
        if self._match_spiral(pts, result):
            return result
        if closed and self._match_loose_polygon(pts, scale, result):
            return result

        result.kind = ShapeKind.UNKNOWN
        result.confidence = cfg.unknown_confidence
        return result

    def _match_polygon(self, pts: np.ndarray, scale: float, result: ShapeResult) -> bool:
        """Strict corner count on a closed stroke: triangle, square or quad."""
        cfg = self.config
        eps = scaled_tolerance(scale, cfg.rdp_factor, cfg.rdp_min, cfg.rdp_max)
        simplified = rdp(pts, eps)
        separation = max(cfg.corner_separation_factor * scale, cfg.corner_separation_floor)
        corners = corner_points(simplified, cfg.corner_angle, separation, closed=True)
        result.corners = len(corners)

        if len(corners) == 3:
            result.kind = ShapeKind.TRIANGLE
            result.confidence = cfg.triangle_confidence
            return True

        if len(corners) == 4 and len(simplified) >= 3:
            poly = simplified
            if len(poly) > 1 and np.linalg.norm(poly[0] - poly[-1]) < 1e-5:
                poly = poly[:-1]
            aspect = BBox.from_points(poly).aspect_ratio()
            if cfg.square_aspect_min <= aspect <= cfg.square_aspect_max:
                result.kind = ShapeKind.SQUARE
            else:
                result.kind = ShapeKind.QUAD
            result.confidence = cfg.quad_confidence
            return True
        return False

    def _match_circle(self, pts: np.ndarray, gap: float, result: ShapeResult) -> bool:
        cfg = self.config
        if len(pts) < cfg.circle_min_points:
            return False

        stats = angular_statistics(pts)
        likely_spiral = (abs(stats.spiral_correlation) > cfg.spiral_reject_correlation
                         and stats.revolutions > cfg.spiral_reject_revolutions)
        closed_enough = gap <= max(cfg.circle_gap_floor, stats.mean_radius * cfg.circle_gap_radius_factor)

        if (closed_enough
                and stats.revolutions + _REVOLUTION_EPS >= cfg.min_revolutions
                and stats.circ_score <= cfg.max_circ_score
                and stats.monotonicity >= cfg.min_monotonicity
                and not likely_spiral):
            result.kind = ShapeKind.CIRCLE
            result.corners = 0
            result.clockwise = stats.signed_delta < 0.0
            result.revolutions = stats.revolutions
            result.radius = stats.mean_radius
            result.confidence = min(1.0, max(0.0, 1.0 - stats.circ_score))
            return True
        return False

    def _match_spiral(self, pts: np.ndarray, result: ShapeResult) -> bool:
        cfg = self.config
        if len(pts) < cfg.min_points:
            return False

        stats = angular_statistics(pts)
        if (stats.revolutions >= cfg.spiral_min_revolutions
                and abs(stats.spiral_correlation) > cfg.spiral_min_correlation):
            result.kind = ShapeKind.SPIRAL
            result.corners = 0
            result.revolutions = stats.revolutions
            result.clockwise = stats.signed_delta < 0.0
            result.confidence = cfg.spiral_confidence
            return True
        return False

    def _match_loose_polygon(self, pts: np.ndarray, scale: float, result: ShapeResult) -> bool:
        cfg = self.config
        eps = scaled_tolerance(scale, cfg.loose_rdp_factor, cfg.rdp_min, cfg.rdp_max)
        corners = corner_points(rdp(pts, eps), cfg.loose_corner_angle, closed=True)
        count = len(corners)
        if cfg.loose_min_corners <= count <= cfg.loose_max_corners:
            result.kind = ShapeKind.TRIANGLE if count == 3 else ShapeKind.QUAD
            result.corners = count
            result.confidence = cfg.loose_confidence
            return True
        return False
