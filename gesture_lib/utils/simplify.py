"""Polyline simplification and corner extraction.

Ramer-Douglas-Peucker simplification reduces a noisy stroke to the few
vertices that carry its shape; the corners of a drawn polygon are the
simplified vertices where the path turns sharply.

Example usage:
    Counting the corners of a closed stroke::

        from gesture_lib.utils.simplify import (
            corner_points, rdp, scaled_tolerance)

        eps = scaled_tolerance(scale, 0.12, 0.007, 0.2)
        corners = corner_points(rdp(points, eps), min_turn=30.0,
                                min_separation=0.05, closed=True)
"""

from __future__ import annotations

import math

import numpy as np

from .geometry import as_points

# Closing vertices closer than this are treated as the same point
_JOINT_EPS = 1e-5


def segment_distance(p: np.ndarray, a: np.ndarray, b: np.ndarray) -> float:
    """Distance from ``p`` to the segment ``a``-``b``.

    A degenerate segment (a == b, as for the chord of a closed stroke)
    reduces to the distance from ``p`` to ``a``.
    """
    ab = b - a
    denom = float(ab @ ab)
    if denom < 1e-18:
        return float(np.linalg.norm(p - a))
    t = min(1.0, max(0.0, float((p - a) @ ab) / denom))
    return float(np.linalg.norm(p - (a + t * ab)))


def rdp(points, epsilon: float) -> np.ndarray:
    """Ramer-Douglas-Peucker simplification.

    Finds the interior point farthest from the chord joining the first and
    last point. If it is farther than ``epsilon`` both halves are simplified
    recursively and joined at that point; otherwise the span collapses to
    its two endpoints.

    Args:
        points: (n, 2) polyline.
        epsilon: Absolute tolerance in the units of ``points``.

    Returns:
        Simplified (m, 2) polyline, m <= n. Inputs with fewer than three
        points are returned unchanged (as a copy).
    """
    pts = as_points(points, dims=(2,))
    if len(pts) < 3:
        return pts.copy()

    first, last = pts[0], pts[-1]
    index = -1
    dmax = 0.0
    for i in range(1, len(pts) - 1):
        d = segment_distance(pts[i], first, last)
        if d > dmax:
            index, dmax = i, d

    if dmax > epsilon:
        head = rdp(pts[:index + 1], epsilon)
        tail = rdp(pts[index:], epsilon)
        return np.vstack([head[:-1], tail])
    return np.vstack([first, last])


def scaled_tolerance(scale: float, factor: float, lo: float, hi: float) -> float:
    """RDP tolerance proportional to the path scale, clamped to [lo, hi]."""
    return min(hi, max(lo, scale * factor))


def turn_angle(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    """Direction change at ``b`` walking a -> b -> c, in degrees.

    0 means the path continues straight, 180 means it doubles back. Zero
    length edges give 0.
    """
    d1 = b - a
    d2 = c - b
    n1 = float(np.linalg.norm(d1))
    n2 = float(np.linalg.norm(d2))
    if n1 == 0.0 or n2 == 0.0:
        return 0.0
    cos = float(d1 @ d2) / (n1 * n2)
    return math.degrees(math.acos(max(-1.0, min(1.0, cos))))


def _open_ring(vertices: np.ndarray, joint_eps: float) -> np.ndarray:
    """Drop a trailing vertex that duplicates the first one."""
    if len(vertices) > 2 and np.linalg.norm(vertices[0] - vertices[-1]) <= joint_eps:
        return vertices[:-1]
    return vertices


def corner_points(
    vertices,
    min_turn: float,
    min_separation: float = 0.0,
    closed: bool = False,
) -> np.ndarray:
    """Simplified vertices where the path turns by more than ``min_turn``.

    For open paths only interior vertices are candidates. Closed paths are
    treated as rings: a trailing vertex within ``min_separation`` of the
    first is dropped and every vertex, including the start/end joint, is a
    candidate. A candidate closer than ``min_separation`` to the previously
    accepted corner is merged into it; on rings the last corner is also
    merged into the first.

    Args:
        vertices: (m, 2) simplified polyline.
        min_turn: Turn angle threshold in degrees.
        min_separation: Corners closer than this are merged.
        closed: Treat the polyline as a ring.

    Returns:
        (k, 2) array of corner positions in path order.
    """
    pts = as_points(vertices, dims=(2,))
    if closed:
        pts = _open_ring(pts, max(min_separation, _JOINT_EPS))
        if len(pts) < 3:
            return np.zeros((0, 2))
        indices = range(len(pts))
    else:
        if len(pts) < 3:
            return np.zeros((0, 2))
        indices = range(1, len(pts) - 1)

    n = len(pts)
    corners: list[np.ndarray] = []
    for i in indices:
        a, b, c = pts[(i - 1) % n], pts[i], pts[(i + 1) % n]
        if turn_angle(a, b, c) <= min_turn:
            continue
        if corners and np.linalg.norm(corners[-1] - b) < min_separation:
            continue
        corners.append(b)

    if closed and len(corners) > 1 and np.linalg.norm(corners[-1] - corners[0]) < min_separation:
        corners.pop()
    if not corners:
        return np.zeros((0, 2))
    return np.array(corners)
