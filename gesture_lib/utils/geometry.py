"""Geometry and resampling utilities.

This module turns raw stroke samples into comparable point sequences. All
functions take and return numpy arrays of shape (n, 2) or (n, 3) and never
modify their input.

The module provides the following functions:
    as_points: Validate and convert input to an (n, 2) or (n, 3) float array.
    path_length: Total polyline length.
    bounding_box: 2D bounding box of a point sequence.
    path_scale: Larger bounding box dimension, floor-clamped.
    signed_area: Shoelace area of the implicitly closed polygon.
    estimate_normal: Plane normal from summed segment cross products.
    project_to_plane: Project 3D samples onto their best-fit plane.
    resample_by_distance: Greedy distance-based downsampling.
    resample_to_count: Fixed-count arc-length resampling.
    normalize: Center and scale a sequence to unit size.
    chaikin_smooth: Corner-cutting smoothing.
    canonical_sequence: The full project/downsample/resample/normalize
        pipeline used by the template matchers.

Example usage:
    Building a canonical sequence::

        from gesture_lib.utils.geometry import canonical_sequence

        seq = canonical_sequence(stroke_xyz, n=64, min_distance=0.004,
                                 max_count=1024)
        seq.shape  # (64, 2)
"""

from __future__ import annotations

import numpy as np

from ..domain.geometry import BBox, RawStroke

DEFAULT_UP = np.array([0.0, 1.0, 0.0])

# Relative tolerances for degenerate geometry
_NORMAL_EPS = 1e-6
_DIRECTION_EPS = 1e-3
_SCALE_EPS = 1e-6


def as_points(points, dims: tuple[int, ...] = (2, 3)) -> np.ndarray:
    """Convert input to a float point array.

    Args:
        points: Sequence of points or an array of shape (n, d). A RawStroke
            is read through its ``as_array`` view.
        dims: Accepted values of d.

    Returns:
        Float array of shape (n, d). An empty input keeps its width when it
        has an accepted one and gets shape (0, dims[0]) otherwise.

    Raises:
        ValueError: If the input is not a 2D array with an accepted width.
    """
    if isinstance(points, RawStroke):
        points = points.as_array()
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        width = arr.shape[1] if arr.ndim == 2 and arr.shape[1] in dims else dims[0]
        return np.zeros((0, width))
    if arr.ndim != 2 or arr.shape[1] not in dims:
        raise ValueError(
            f"expected points of shape (n, d) with d in {dims}, got {arr.shape}"
        )
    return arr


def path_length(points) -> float:
    """Total length of the polyline through the points."""
    pts = as_points(points)
    if len(pts) < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())


def bounding_box(points) -> BBox:
    """2D bounding box of the points (x and y columns)."""
    return BBox.from_points(as_points(points))


def path_scale(points, floor: float = _SCALE_EPS) -> float:
    """Larger bounding box dimension, never below ``floor``.

    An empty sequence reports 0.01 so downstream thresholds stay finite.
    """
    pts = as_points(points)
    if len(pts) == 0:
        return 0.01
    return max(floor, bounding_box(pts).extent)


def signed_area(points) -> float:
    """Signed shoelace area of the polygon closed from last to first point.

    Negative means clockwise when the y axis points up. Fewer than three
    points have zero area.
    """
    pts = as_points(points, dims=(2,))
    if len(pts) < 3:
        return 0.0
    x, y = pts[:, 0], pts[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def estimate_normal(points) -> np.ndarray | None:
    """Estimate the plane normal of a 3D stroke.

    Sums the cross products of consecutive segment pairs and normalizes the
    sum. The normal follows the stroke's dominant turning direction.

    Returns:
        Unit normal, or None when fewer than three points are given or the
        cross products cancel out (collinear or self-cancelling strokes).
    """
    pts = as_points(points, dims=(3,))
    if len(pts) < 3:
        return None

    ab = pts[1:-1] - pts[:-2]
    bc = pts[2:] - pts[1:-1]
    normal = np.cross(ab, bc).sum(axis=0)
    magnitude = float(np.linalg.norm(normal))
    total = float(np.sum(np.linalg.norm(ab, axis=1) * np.linalg.norm(bc, axis=1)))
    if total <= 0.0 or magnitude <= _NORMAL_EPS * total:
        return None
    return normal / magnitude


def _perpendicular_axis(normal: np.ndarray) -> np.ndarray:
    """Unit vector perpendicular to ``normal``, preferring normal x up."""
    for ref in (DEFAULT_UP, np.array([1.0, 0.0, 0.0]), np.array([0.0, 0.0, 1.0])):
        axis = np.cross(normal, ref)
        length = np.linalg.norm(axis)
        if length > _NORMAL_EPS:
            return axis / length
    # Unreachable for a unit normal; the three references span R^3
    raise ValueError("normal has zero length")


def project_to_plane(points, view_normal=None) -> np.ndarray:
    """Project 3D stroke samples onto the stroke's best-fit plane.

    The plane normal comes from ``estimate_normal`` and falls back to the
    default up vector for degenerate strokes. The in-plane basis is
    ``u`` = the stroke's start-to-end direction projected into the plane
    (``normal x up`` when that direction vanishes, as for closed strokes)
    and ``v = normal x u``. Coordinates are relative to the first sample.

    Args:
        points: (n, 3) samples. (n, 2) input is already planar and is
            returned as a copy.
        view_normal: Optional 3-vector. When given, the normal is flipped to
            point into the same hemisphere so traversal direction is
            measured as seen by the viewer.

    Returns:
        (n, 2) array of planar coordinates.
    """
    pts = as_points(points)
    if len(pts) == 0:
        return np.zeros((0, 2))
    if pts.shape[1] == 2:
        return pts.copy()

    normal = estimate_normal(pts)
    if normal is None:
        normal = DEFAULT_UP.copy()
    if view_normal is not None and float(np.dot(normal, view_normal)) < 0.0:
        normal = -normal

    extent = float(np.ptp(pts, axis=0).max())
    u = pts[-1] - pts[0]
    u = u - np.dot(u, normal) * normal
    u_len = float(np.linalg.norm(u))
    if u_len <= _DIRECTION_EPS * extent or u_len == 0.0:
        u = _perpendicular_axis(normal)
    else:
        u = u / u_len
    v = np.cross(normal, u)
    v = v / np.linalg.norm(v)

    offsets = pts - pts[0]
    return np.column_stack((offsets @ u, offsets @ v))


def resample_by_distance(points, min_dist: float, max_count: int) -> np.ndarray:
    """Greedy distance-based downsampling.

    Keeps the first point, then every point at least ``min_dist`` from the
    last kept point. The final input point is always kept so the endpoint
    stays exact. At most ``max_count`` points are returned; when the cap is
    hit the final point replaces the last kept one.

    Args:
        points: (n, d) point sequence.
        min_dist: Minimum spacing between kept points.
        max_count: Maximum number of output points (at least 1).

    Returns:
        (m, d) array with m <= max_count.
    """
    if max_count < 1:
        raise ValueError(f"max_count must be at least 1, got {max_count}")
    pts = as_points(points)
    if len(pts) == 0:
        return pts.copy()

    keep = [0]
    last = pts[0]
    min_sq = min_dist * min_dist
    for i in range(1, len(pts)):
        if len(keep) >= max_count:
            break
        delta = pts[i] - last
        if float(delta @ delta) >= min_sq:
            keep.append(i)
            last = pts[i]

    final = len(pts) - 1
    if keep[-1] != final:
        if len(keep) >= max_count:
            keep[-1] = final
        else:
            keep.append(final)
    return pts[keep].copy()


def resample_to_count(points, n: int) -> np.ndarray:
    """Resample a polyline to exactly ``n`` points spaced by arc length.

    Walks the polyline accumulating distance and emits an interpolated point
    every ``path_length / (n - 1)``. Each emitted point replaces the previous
    vertex in a local copy of the input, so the walk continues along the rest
    of the same segment; sparse inputs (a 4-corner square resampled to 32)
    come out evenly spaced. The output is padded with the last input point or
    truncated so its length is exactly ``n``.

    Args:
        points: (m, d) point sequence.
        n: Output length, at least 2.

    Returns:
        (n, d) array. Empty input yields zeros; a zero-length path yields
        ``n`` copies of its first point.
    """
    if n < 2:
        raise ValueError(f"n must be at least 2, got {n}")
    pts = as_points(points)
    if len(pts) == 0:
        return np.zeros((n, pts.shape[1]))

    total = path_length(pts)
    if total <= 0.0:
        return np.tile(pts[0], (n, 1))

    walk = pts.copy()
    interval = total / (n - 1)
    tolerance = interval * 1e-9
    accumulated = 0.0
    out = [walk[0].copy()]
    i = 1
    while i < len(walk) and len(out) < n:
        seg = float(np.linalg.norm(walk[i] - walk[i - 1]))
        if seg > 0.0 and accumulated + seg >= interval - tolerance:
            t = min(1.0, (interval - accumulated) / seg)
            q = walk[i - 1] + t * (walk[i] - walk[i - 1])
            out.append(q)
            walk[i - 1] = q
            accumulated = 0.0
        else:
            accumulated += seg
            i += 1

    while len(out) < n:
        out.append(walk[-1].copy())
    return np.array(out[:n])


def normalize(points, center: str = 'centroid') -> np.ndarray:
    """Translate to the origin and scale to unit size.

    Args:
        points: (n, d) point sequence.
        center: 'centroid' to subtract the mean point, 'bbox' to subtract the
            bounding box center.

    Returns:
        (n, d) array whose larger bounding box dimension is 1. Extents below
        1e-6 are treated as 1, so degenerate input maps to all zeros.
    """
    pts = as_points(points)
    if len(pts) == 0:
        return pts.copy()
    if center == 'centroid':
        origin = pts.mean(axis=0)
    elif center == 'bbox':
        origin = (pts.min(axis=0) + pts.max(axis=0)) / 2
    else:
        raise ValueError(f"center must be 'centroid' or 'bbox', got {center!r}")

    scale = float(np.ptp(pts, axis=0).max())
    if scale < _SCALE_EPS:
        scale = 1.0
    return (pts - origin) / scale


def chaikin_smooth(points, iterations: int = 1) -> np.ndarray:
    """Corner-cutting smoothing.

    Each pass replaces every edge by two points at 1/4 and 3/4 along it. The
    first and last points are kept so open strokes keep their endpoints.
    """
    cur = as_points(points)
    if len(cur) < 2:
        return cur.copy()
    for _ in range(iterations):
        p0, p1 = cur[:-1], cur[1:]
        cut = np.empty((2 * len(p0), cur.shape[1]))
        cut[0::2] = 0.75 * p0 + 0.25 * p1
        cut[1::2] = 0.25 * p0 + 0.75 * p1
        cur = np.vstack([cur[:1], cut, cur[-1:]])
    return cur


def canonical_sequence(
    points,
    n: int,
    min_distance: float,
    max_count: int,
    view_normal=None,
) -> np.ndarray:
    """Turn raw samples into the canonical sequence used for matching.

    Plane-projects, distance-downsamples, resamples to ``n`` points and
    normalizes around the centroid by the bounding box extent.

    Returns:
        (n, 2) array.
    """
    planar = project_to_plane(points, view_normal=view_normal)
    sampled = resample_by_distance(planar, min_distance, max_count)
    resampled = resample_to_count(sampled, n)
    return normalize(resampled, center='centroid')
