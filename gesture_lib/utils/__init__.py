"""Geometry, resampling and simplification helpers."""

from .geometry import (
    as_points,
    bounding_box,
    canonical_sequence,
    chaikin_smooth,
    estimate_normal,
    normalize,
    path_length,
    path_scale,
    project_to_plane,
    resample_by_distance,
    resample_to_count,
    signed_area,
)
from .simplify import corner_points, rdp, scaled_tolerance, segment_distance, turn_angle

__all__ = [
    'as_points',
    'bounding_box',
    'canonical_sequence',
    'chaikin_smooth',
    'corner_points',
    'estimate_normal',
    'normalize',
    'path_length',
    'path_scale',
    'project_to_plane',
    'rdp',
    'resample_by_distance',
    'resample_to_count',
    'scaled_tolerance',
    'segment_distance',
    'signed_area',
    'turn_angle',
]
