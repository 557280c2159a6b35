"""Command-line interface for gesture classification.

This module provides a small CLI around the library: classify a recorded
stroke with one or all strategies, add a stroke to a template file and list
the templates in a file.

A stroke file is JSON, either a bare list of points or an object with a
``points`` list::

    [[0.0, 0.0, 0.0], [0.01, 0.002, 0.0], ...]
    {"points": [[0.0, 0.0, 0.0], ...]}

Usage:
    gesture-lib classify stroke.json --templates gestures.json
    gesture-lib classify stroke.json --strategy heuristic
    gesture-lib add-template circle stroke.json --templates gestures.json
    gesture-lib list-templates --templates gestures.json

Or run via the package:
    python -m gesture_lib classify stroke.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from .config import RecognizerConfig, load_config
from .recognition.dtw import DtwKnnRecognizer
from .recognition.recognizer import create_default_recognizer
from .templates.persistence import TemplateFileError, load_templates
from .templates.repository import TemplateRepository
from .utils.geometry import as_points

logger = logging.getLogger(__name__)

STRATEGIES = ('heuristic', 'cloud', 'dtw')


class StrokeFileError(ValueError):
    """A stroke file could not be read or holds no usable points."""


class ConfigFileError(ValueError):
    """A configuration file is missing or holds invalid settings."""


def read_stroke(path: str | Path) -> np.ndarray:
    """Load a stroke file as an (n, 2) or (n, 3) array.

    Raises:
        StrokeFileError: If the file is missing, not JSON or has no valid
            point list.
    """
    stroke_path = Path(path)
    try:
        with open(stroke_path, encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise StrokeFileError(f"{stroke_path}: cannot be read: {e}") from e
    except json.JSONDecodeError as e:
        raise StrokeFileError(f"{stroke_path}: not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get('points')
    if not isinstance(data, list):
        raise StrokeFileError(f"{stroke_path}: expected a point list or an object with 'points'")
    try:
        return as_points(data)
    except (TypeError, ValueError) as e:
        raise StrokeFileError(f"{stroke_path}: {e}") from e


def _load_config(args) -> RecognizerConfig:
    if args.config:
        try:
            return load_config(args.config)
        except (FileNotFoundError, ValueError) as e:
            raise ConfigFileError(f"invalid configuration: {e}") from e
    return RecognizerConfig()


def _load_repository(args) -> TemplateRepository:
    if args.templates:
        return load_templates(args.templates)
    return TemplateRepository()


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog='gesture-lib',
        description='Classify 3D gesture strokes and manage gesture templates',
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    commands = parser.add_subparsers(dest='command', required=True)

    classify = commands.add_parser('classify', help='Classify a stroke file')
    classify.add_argument('stroke', type=str,
                          help='Stroke JSON file')
    classify.add_argument('--templates', '-t', type=str, default=None,
                          help='Template file for the dtw strategy')
    classify.add_argument('--strategy', '-s', choices=STRATEGIES + ('all',), default='all',
                          help='Strategy to run (default: all)')
    classify.add_argument('--config', '-c', type=str, default=None,
                          help='JSON configuration file')

    add = commands.add_parser('add-template', help='Add a stroke to a template file')
    add.add_argument('label', type=str,
                     help='Gesture name')
    add.add_argument('stroke', type=str,
                     help='Stroke JSON file')
    add.add_argument('--templates', '-t', type=str, required=True,
                     help='Template file to update (created if missing)')
    add.add_argument('--config', '-c', type=str, default=None,
                     help='JSON configuration file')

    listing = commands.add_parser('list-templates', help='List templates in a file')
    listing.add_argument('--templates', '-t', type=str, required=True,
                         help='Template file to read')
    return parser


def _classify_command(args) -> int:
    config = _load_config(args)
    points = read_stroke(args.stroke)
    recognizer = create_default_recognizer(config, _load_repository(args))

    names = None if args.strategy == 'all' else [args.strategy]
    for result in recognizer.classify_all(points, names).values():
        print(json.dumps(result.to_dict()))
    return 0


def _add_template_command(args) -> int:
    config = _load_config(args)
    points = read_stroke(args.stroke)
    recognizer = DtwKnnRecognizer(config.dtw, load_templates(args.templates))

    try:
        recognizer.add_template(args.label, points)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    recognizer.save_templates(args.templates)
    print(f"Added '{args.label}' ({len(recognizer.templates.by_name(args.label))} exemplars, "
          f"{len(recognizer.templates)} templates total)")
    return 0


def _list_templates_command(args) -> int:
    repo = load_templates(args.templates)
    for name, count in repo.counts().items():
        print(f"{name}\t{count}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point.

    Returns:
        Exit status: 0 on success, 1 when a stroke, template or
        configuration file cannot be used. Argument errors exit with 2.
    """
    parser = _create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    handlers = {
        'classify': _classify_command,
        'add-template': _add_template_command,
        'list-templates': _list_templates_command,
    }
    try:
        return handlers[args.command](args)
    except (StrokeFileError, TemplateFileError, ConfigFileError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
