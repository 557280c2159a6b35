"""Built-in point clouds for the elastic cloud matcher.

Three fixed shapes ship with the library: a circle sampled at ``n`` evenly
spaced angles, a square given as its five closed corners and a triangle
given as its four closed corners. The polygons are resampled to the
matcher's length when the matcher is built, so their sparse form is fine.
"""

from __future__ import annotations

import math

import numpy as np

from .repository import Template

CIRCLE = 'Circle'
SQUARE = 'Square'
TRIANGLE = 'Triangle'


def circle_points(n: int = 32) -> np.ndarray:
    """Unit circle, counter-clockwise from angle 0, not closed."""
    angles = np.arange(n) * (2 * math.pi / n)
    return np.column_stack((np.cos(angles), np.sin(angles)))


def square_points() -> np.ndarray:
    """Unit square from (-1, -1), counter-clockwise, closed."""
    return np.array([(-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0), (-1.0, -1.0)])


def triangle_points() -> np.ndarray:
    """Upright triangle, counter-clockwise, closed."""
    return np.array([(0.0, 1.0), (-0.866, -0.5), (0.866, -0.5), (0.0, 1.0)])


def builtin_templates(n: int = 32) -> list[Template]:
    """The three built-in templates in their raw (unnormalized) form."""
    return [
        Template(CIRCLE, circle_points(n)),
        Template(SQUARE, square_points()),
        Template(TRIANGLE, triangle_points()),
    ]
