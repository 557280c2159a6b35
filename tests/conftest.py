"""Shared pytest fixtures for the gesture_lib test suite.

Fixtures:
    circle_points: 64 planar points on a unit circle, once counter-clockwise
    square_points: Closed unit square densified along its edges
    triangle_points: Closed triangle densified along its edges
    spiral_points: Planar spiral, two turns with growing radius
    line_points: Straight open stroke
    tilted_circle: The circle in 3D, lying in a tilted plane
    make_stroke: Factory for shapes in 3D with optional offset and scale

Helpers:
    densify: Insert evenly spaced points along every edge of a polyline
    to_3d: Lift (n, 2) points into a plane spanned by two 3D axes

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
    integration: Mark test as integration test
"""

import math

import numpy as np
import pytest


# -----------------------------------------------------------------------------
# Pytest Markers
# -----------------------------------------------------------------------------

def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow-running (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def densify(vertices, per_edge=16):
    """Insert ``per_edge`` evenly spaced points along each polyline edge.

    The last vertex is kept, so a closed polygon stays closed.
    """
    vertices = np.asarray(vertices, dtype=float)
    out = []
    for a, b in zip(vertices[:-1], vertices[1:]):
        for t in np.arange(per_edge) / per_edge:
            out.append(a + t * (b - a))
    out.append(vertices[-1])
    return np.array(out)


def to_3d(points, u=(1.0, 0.0, 0.0), v=(0.0, 1.0, 0.0), origin=(0.0, 0.0, 0.0)):
    """Place planar points into 3D on the plane spanned by ``u`` and ``v``."""
    points = np.asarray(points, dtype=float)
    u = np.asarray(u, dtype=float)
    v = np.asarray(v, dtype=float)
    return np.asarray(origin, dtype=float) + np.outer(points[:, 0], u) + np.outer(points[:, 1], v)


def circle(n=64, radius=1.0, turns=1.0, clockwise=False):
    """Circle sampled with first and last point coinciding."""
    t = np.linspace(0.0, 2 * math.pi * turns, n)
    if clockwise:
        t = -t
    return np.column_stack((radius * np.cos(t), radius * np.sin(t)))


def spiral(n=128, turns=2.0, r0=0.2, r1=1.0):
    """Archimedean spiral with radius growing linearly from r0 to r1."""
    t = np.linspace(0.0, 2 * math.pi * turns, n)
    r = np.linspace(r0, r1, n)
    return np.column_stack((r * np.cos(t), r * np.sin(t)))


SQUARE_CORNERS = [(0, 0), (0, 1), (1, 1), (1, 0), (0, 0)]
TRIANGLE_CORNERS = [(0.0, 0.0), (1.0, 0.0), (0.5, 0.866), (0.0, 0.0)]


# -----------------------------------------------------------------------------
# Stroke Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def circle_points():
    """Return 64 points on a unit circle traversed once counter-clockwise."""
    return circle()


@pytest.fixture
def square_points():
    """Return the closed unit square (0,0)->(0,1)->(1,1)->(1,0)->(0,0)."""
    return densify(SQUARE_CORNERS)


@pytest.fixture
def triangle_points():
    """Return a closed, roughly equilateral triangle."""
    return densify(TRIANGLE_CORNERS)


@pytest.fixture
def spiral_points():
    """Return a two-turn spiral growing outward."""
    return spiral()


@pytest.fixture
def line_points():
    """Return a straight open stroke of 20 points."""
    return np.column_stack((np.linspace(0.0, 1.0, 20), np.linspace(0.0, 0.5, 20)))


@pytest.fixture
def tilted_circle():
    """Return the unit circle in 3D, on a plane tilted 30 degrees about x."""
    angle = math.radians(30)
    return to_3d(circle(), u=(1.0, 0.0, 0.0), v=(0.0, math.cos(angle), math.sin(angle)),
                 origin=(0.5, 1.2, -0.3))


@pytest.fixture
def make_stroke():
    """Return a factory building 3D strokes from named shapes.

    Example:
        def test_big_circle(make_stroke):
            pts = make_stroke('circle', scale=3.0, offset=(1, 2, 3))
    """
    shapes = {
        'circle': circle,
        'spiral': spiral,
        'square': lambda: densify(SQUARE_CORNERS),
        'triangle': lambda: densify(TRIANGLE_CORNERS),
    }

    def factory(name, scale=1.0, offset=(0.0, 0.0, 0.0)):
        return to_3d(shapes[name]() * scale, origin=offset)

    return factory
