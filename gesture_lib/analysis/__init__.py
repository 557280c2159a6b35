"""Template-free stroke analysis."""

from .shapes import AngularStats, ShapeAnalyzer, angular_statistics

__all__ = ['AngularStats', 'ShapeAnalyzer', 'angular_statistics']
