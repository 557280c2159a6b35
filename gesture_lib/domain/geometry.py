"""Geometric value objects for stroke recognition."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Sequence

import numpy as np


@dataclass(frozen=True)
class BBox:
    """Immutable axis-aligned bounding box."""
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> tuple[float, float]:
        return (
            (self.x_min + self.x_max) / 2,
            (self.y_min + self.y_max) / 2,
        )

    @property
    def extent(self) -> float:
        """Larger of width and height."""
        return max(self.width, self.height)

    def aspect_ratio(self, floor: float = 1e-6) -> float:
        """Width over height, with the height floor-clamped."""
        return self.width / max(floor, self.height)

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to tuple for compatibility."""
        return (self.x_min, self.y_min, self.x_max, self.y_max)

    @classmethod
    def from_points(cls, points: np.ndarray) -> BBox:
        """Create bounding box containing all points of an (n, 2) array."""
        pts = np.asarray(points, dtype=float)
        if pts.size == 0:
            return cls(0.0, 0.0, 0.0, 0.0)
        lo = pts[:, :2].min(axis=0)
        hi = pts[:, :2].max(axis=0)
        return cls(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))


@dataclass
class RawStroke:
    """Time-ordered 3D samples captured while the control button is held.

    The buffer is append-only while capturing and is frozen before it is
    handed to a classifier. Samples closer than ``min_spacing`` to the last
    recorded sample are dropped, and recording stops silently once
    ``max_points`` samples are held.

    Attributes:
        points: Recorded samples as (x, y, z) tuples.
        min_spacing: Minimum distance between consecutive recorded samples.
            0 records every sample.
        max_points: Sample cap, or None for no cap.

    Example:
        >>> stroke = RawStroke(min_spacing=0.01, max_points=300)
        >>> stroke.append((0.0, 0.0, 0.0))
        True
        >>> stroke.append((0.001, 0.0, 0.0))
        False
        >>> stroke.freeze().as_array().shape
        (1, 3)
    """
    points: list[tuple[float, float, float]] = field(default_factory=list)
    min_spacing: float = 0.0
    max_points: int | None = None
    _frozen: bool = field(default=False, init=False, repr=False)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[tuple[float, float, float]]:
        return iter(self.points)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def append(self, point: Sequence[float]) -> bool:
        """Record a sample.

        Args:
            point: (x, y, z) position of the stroke tip.

        Returns:
            True if the sample was recorded, False if it was dropped by the
            spacing filter or the sample cap.

        Raises:
            RuntimeError: If the stroke has been frozen.
            ValueError: If the point does not have three coordinates.
        """
        if self._frozen:
            raise RuntimeError("cannot append to a frozen stroke")
        if len(point) != 3:
            raise ValueError(f"expected a 3D point, got {len(point)} coordinates")
        if self.max_points is not None and len(self.points) >= self.max_points:
            return False

        p = (float(point[0]), float(point[1]), float(point[2]))
        if self.points and self.min_spacing > 0:
            if math.dist(self.points[-1], p) < self.min_spacing:
                return False
        self.points.append(p)
        return True

    def freeze(self) -> RawStroke:
        """Mark the stroke immutable and return it."""
        self._frozen = True
        return self

    def as_array(self) -> np.ndarray:
        """Samples as an (n, 3) float array."""
        if not self.points:
            return np.zeros((0, 3))
        return np.array(self.points, dtype=float)
