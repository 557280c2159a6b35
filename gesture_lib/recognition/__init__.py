"""Template-based classifiers and the strategy layer over all classifiers."""

from .cloud import CloudMatcher, greedy_cloud_distance
from .dtw import DtwKnnRecognizer, dtw_distance, vote
from .recognizer import GestureRecognizer, create_default_recognizer
from .recorder import TemplateRecorder
from .strategies import (
    CloudMatchStrategy,
    DtwKnnStrategy,
    GeometricHeuristicStrategy,
    StrokeClassifier,
)

__all__ = [
    'CloudMatchStrategy',
    'CloudMatcher',
    'DtwKnnRecognizer',
    'DtwKnnStrategy',
    'GeometricHeuristicStrategy',
    'GestureRecognizer',
    'StrokeClassifier',
    'TemplateRecorder',
    'create_default_recognizer',
    'dtw_distance',
    'greedy_cloud_distance',
    'vote',
]
