"""Gesture stroke classification library.

Classifies 3D gesture strokes as shapes by three independent strategies:
geometric heuristics, elastic point-cloud matching against fixed templates,
and DTW/k-NN voting over learned templates.

Subpackages:
    domain: Value objects (BBox, RawStroke, result types).
    utils: Geometry, resampling and polyline simplification.
    analysis: Template-free shape analysis.
    templates: Template store, persistence and built-in templates.
    recognition: Cloud matcher, DTW recognizer, strategies and recorder.

Example usage::

    from gesture_lib import create_default_recognizer

    recognizer = create_default_recognizer()
    for name, result in recognizer.classify_all(points).items():
        print(name, result.label)
"""

from .analysis import ShapeAnalyzer
from .config import CloudConfig, DtwConfig, RecognizerConfig, ShapeConfig, load_config
from .domain import (
    NO_TEMPLATES,
    TOO_SHORT,
    UNKNOWN,
    BBox,
    ClassificationResult,
    CloudMatchResult,
    MatchResult,
    RawStroke,
    ShapeKind,
    ShapeResult,
)
from .recognition import (
    CloudMatcher,
    CloudMatchStrategy,
    DtwKnnRecognizer,
    DtwKnnStrategy,
    GeometricHeuristicStrategy,
    GestureRecognizer,
    StrokeClassifier,
    TemplateRecorder,
    create_default_recognizer,
)
from .templates import Template, TemplateFileError, TemplateRepository, load_templates, save_templates

__version__ = '0.1.0'

__all__ = [
    'BBox',
    'ClassificationResult',
    'CloudConfig',
    'CloudMatchResult',
    'CloudMatchStrategy',
    'CloudMatcher',
    'DtwConfig',
    'DtwKnnRecognizer',
    'DtwKnnStrategy',
    'GeometricHeuristicStrategy',
    'GestureRecognizer',
    'MatchResult',
    'NO_TEMPLATES',
    'RawStroke',
    'RecognizerConfig',
    'ShapeAnalyzer',
    'ShapeConfig',
    'ShapeKind',
    'ShapeResult',
    'StrokeClassifier',
    'TOO_SHORT',
    'Template',
    'TemplateFileError',
    'TemplateRecorder',
    'TemplateRepository',
    'UNKNOWN',
    'create_default_recognizer',
    'load_config',
    'load_templates',
    'save_templates',
]
