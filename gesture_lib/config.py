"""Configuration for the stroke classifiers.

Every tunable constant of the three classifiers lives in a dataclass with
the tuned value as its default, so a caller can override a single threshold
without restating the rest.

The module provides:
    DtwConfig: Template store pipeline and DTW/k-NN voting options.
    CloudConfig: Elastic cloud matcher options.
    ShapeConfig: Geometric heuristic thresholds.
    RecognizerConfig: Bundle of the three.
    load_config: Read a RecognizerConfig from a JSON file.

A configuration file holds any subset of the sections and keys::

    {
        "dtw": {"resample_length": 48, "k": 5},
        "shape": {"min_revolutions": 0.9}
    }

Example usage:
    >>> cfg = RecognizerConfig.from_dict({'dtw': {'k': 5}})
    >>> cfg.dtw.k, cfg.dtw.resample_length
    (5, 64)
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

# Shared minimum stroke length for every classifier
MIN_STROKE_POINTS = 6


def _check_positive(name: str, value: float, allow_zero: bool = False) -> None:
    if value < 0 or (value == 0 and not allow_zero):
        bound = 'non-negative' if allow_zero else 'positive'
        raise ValueError(f"{name} must be {bound}, got {value}")


def _check_view_normal(value) -> tuple[float, float, float] | None:
    if value is None:
        return None
    if len(value) != 3:
        raise ValueError(f"view_normal must have 3 components, got {value!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


@dataclass
class DtwConfig:
    """Options for the template store pipeline and DTW/k-NN voting.

    Attributes:
        resample_length: N, points per canonical sequence. Trades
            classification fidelity for cost.
        min_sample_distance: Downsampling step applied to projected samples.
        max_sample_count: Cap on points kept by downsampling.
        sakoe_ratio: Sakoe-Chiba band width as a fraction of N.
        k: Number of nearest templates that vote.
        accept_threshold: Winning scores above this are reported as Unknown.
        min_points: Shorter strokes classify as TooShort.
        view_normal: Optional viewer direction used to orient the plane.
    """
    resample_length: int = 64
    min_sample_distance: float = 0.004
    max_sample_count: int = 1024
    sakoe_ratio: float = 0.2
    k: int = 3
    accept_threshold: float = 2.5
    min_points: int = MIN_STROKE_POINTS
    view_normal: tuple[float, float, float] | None = None

    def __post_init__(self):
        if self.resample_length < 2:
            raise ValueError(f"resample_length must be at least 2, got {self.resample_length}")
        if self.max_sample_count < 2:
            raise ValueError(f"max_sample_count must be at least 2, got {self.max_sample_count}")
        if self.k < 1:
            raise ValueError(f"k must be at least 1, got {self.k}")
        if self.min_points < 1:
            raise ValueError(f"min_points must be at least 1, got {self.min_points}")
        _check_positive('min_sample_distance', self.min_sample_distance, allow_zero=True)
        _check_positive('sakoe_ratio', self.sakoe_ratio, allow_zero=True)
        _check_positive('accept_threshold', self.accept_threshold, allow_zero=True)
        self.view_normal = _check_view_normal(self.view_normal)

    @property
    def window(self) -> int:
        """Sakoe-Chiba band half-width in timesteps (at least 1).

        ``resample_length * sakoe_ratio`` rounded half up, so N=10 with a
        ratio of 0.25 gives 3.
        """
        return max(1, math.floor(self.resample_length * self.sakoe_ratio + 0.5))


@dataclass
class CloudConfig:
    """Options for the elastic cloud matcher.

    Attributes:
        resample_length: Points per normalized sequence.
        reject_threshold: Best distances above this are reported as Unknown.
        min_points: Shorter strokes classify as TooShort.
    """
    resample_length: int = 32
    reject_threshold: float = 2.5
    min_points: int = MIN_STROKE_POINTS

    def __post_init__(self):
        if self.resample_length < 2:
            raise ValueError(f"resample_length must be at least 2, got {self.resample_length}")
        if self.min_points < 1:
            raise ValueError(f"min_points must be at least 1, got {self.min_points}")
        _check_positive('reject_threshold', self.reject_threshold, allow_zero=True)


@dataclass
class ShapeConfig:
    """Thresholds for the geometric heuristic classifier.

    Distances ending in ``_factor`` are multiplied by the path scale (the
    larger bounding box dimension of the projected stroke), so the same
    values work across stroke sizes. ``_floor`` values are absolute lower
    bounds in scene units.
    """
    min_points: int = MIN_STROKE_POINTS
    view_normal: tuple[float, float, float] | None = None

    # Preprocessing
    min_step: float = 0.004
    max_points: int = 256
    smoothing_iterations: int = 1

    # Closedness
    closed_factor: float = 0.18
    closed_floor: float = 0.03

    # Polygon path
    rdp_factor: float = 0.12
    rdp_min: float = 0.007
    rdp_max: float = 0.2
    corner_angle: float = 30.0
    corner_separation_factor: float = 0.08
    corner_separation_floor: float = 0.02
    square_aspect_min: float = 0.7
    square_aspect_max: float = 1.4
    triangle_confidence: float = 0.95
    quad_confidence: float = 0.9

    # Circle test
    circle_min_points: int = 8
    circle_gap_floor: float = 0.06
    circle_gap_radius_factor: float = 0.35
    min_revolutions: float = 1.0
    max_circ_score: float = 0.12
    min_monotonicity: float = 0.72
    spiral_reject_correlation: float = 0.2
    spiral_reject_revolutions: float = 0.3

    # Spiral fallback
    spiral_min_revolutions: float = 0.6
    spiral_min_correlation: float = 0.25
    spiral_confidence: float = 0.6

    # Loose polygon fallback
    loose_rdp_factor: float = 0.06
    loose_corner_angle: float = 20.0
    loose_min_corners: int = 3
    loose_max_corners: int = 6
    loose_confidence: float = 0.55

    unknown_confidence: float = 0.12

    def __post_init__(self):
        if self.min_points < 1:
            raise ValueError(f"min_points must be at least 1, got {self.min_points}")
        if self.max_points < 2:
            raise ValueError(f"max_points must be at least 2, got {self.max_points}")
        if self.smoothing_iterations < 0:
            raise ValueError(f"smoothing_iterations must be non-negative, got {self.smoothing_iterations}")
        if self.rdp_min > self.rdp_max:
            raise ValueError(f"rdp_min ({self.rdp_min}) exceeds rdp_max ({self.rdp_max})")
        if self.square_aspect_min > self.square_aspect_max:
            raise ValueError("square_aspect_min exceeds square_aspect_max")
        if self.loose_min_corners > self.loose_max_corners:
            raise ValueError("loose_min_corners exceeds loose_max_corners")
        for name in ('min_step', 'closed_factor', 'closed_floor', 'rdp_factor',
                     'loose_rdp_factor', 'corner_angle', 'loose_corner_angle'):
            _check_positive(name, getattr(self, name), allow_zero=True)
        self.view_normal = _check_view_normal(self.view_normal)


@dataclass
class RecognizerConfig:
    """Configuration for all three classifiers."""
    dtw: DtwConfig = field(default_factory=DtwConfig)
    cloud: CloudConfig = field(default_factory=CloudConfig)
    shape: ShapeConfig = field(default_factory=ShapeConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecognizerConfig:
        """Build a configuration from nested dictionaries.

        Missing sections and keys keep their defaults.

        Raises:
            ValueError: On unknown sections or keys, or invalid values.
        """
        sections = {'dtw': DtwConfig, 'cloud': CloudConfig, 'shape': ShapeConfig}
        unknown = set(data) - set(sections)
        if unknown:
            raise ValueError(f"unknown configuration sections: {sorted(unknown)}")

        kwargs = {}
        for name, section_cls in sections.items():
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ValueError(f"section {name!r} must be an object")
            allowed = {f.name for f in fields(section_cls)}
            bad = set(values) - allowed
            if bad:
                raise ValueError(f"unknown keys in section {name!r}: {sorted(bad)}")
            kwargs[name] = section_cls(**values)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Nested dictionary form, accepted by ``from_dict``."""
        return asdict(self)


def load_config(path: str | Path) -> RecognizerConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the configuration file.

    Returns:
        RecognizerConfig with the file's values applied over the defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or holds unknown or
            invalid settings.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Config file {config_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must hold a JSON object")
    return RecognizerConfig.from_dict(data)
