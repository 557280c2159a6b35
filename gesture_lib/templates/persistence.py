"""JSON persistence for template repositories.

A template file holds one JSON object::

    {
      "templates": [
        {"name": "circle", "flattenedPoints": [x0, y0, x1, y1, ...], "N": 64},
        ...
      ]
    }

``N`` is the number of points, so each ``flattenedPoints`` list holds
``2 * N`` numbers. Files written by older tools that use the key
``flattenedPts`` are accepted on load; saving always writes
``flattenedPoints``.

Loading is all-or-nothing: a file that fails validation anywhere raises
TemplateFileError and produces no repository. A missing file is not an
error; it loads as an empty repository with a logged warning, so a first
run with a configured but not yet created file starts clean.

Example usage:
    Round trip::

        from gesture_lib.templates.persistence import load_templates, save_templates

        save_templates(repo, 'gestures.json')
        assert load_templates('gestures.json') == repo
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from .repository import Template, TemplateRepository

logger = logging.getLogger(__name__)

POINTS_KEY = 'flattenedPoints'
LEGACY_POINTS_KEY = 'flattenedPts'


class TemplateFileError(ValueError):
    """A template file could not be parsed or failed validation.

    Attributes:
        path: The offending file, or None for in-memory documents.
    """

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


def templates_to_document(repository: TemplateRepository) -> dict[str, Any]:
    """Serializable form of a repository."""
    return {
        'templates': [
            {'name': t.name, POINTS_KEY: t.flattened(), 'N': t.length}
            for t in repository
        ]
    }


def _parse_entry(index: int, entry: Any) -> Template:
    if not isinstance(entry, dict):
        raise ValueError(f"template #{index} is not an object")

    name = entry.get('name')
    if not isinstance(name, str) or not name:
        raise ValueError(f"template #{index} has no name")

    values = entry.get(POINTS_KEY, entry.get(LEGACY_POINTS_KEY))
    if not isinstance(values, list):
        raise ValueError(f"template #{index} ({name!r}) has no point list")
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        raise ValueError(f"template #{index} ({name!r}) has non-numeric coordinates")
    # json accepts NaN and Infinity literals
    if not all(isinstance(v, int) or math.isfinite(v) for v in values):
        raise ValueError(f"template #{index} ({name!r}) has non-finite coordinates")

    n = entry.get('N')
    if not isinstance(n, int) or isinstance(n, bool) or n < 2:
        raise ValueError(f"template #{index} ({name!r}) has invalid N {n!r}")

    return Template.from_flattened(name, values, n)


def templates_from_document(document: Any, path: str | Path | None = None) -> TemplateRepository:
    """Build a repository from a parsed template document.

    Raises:
        TemplateFileError: If the document or any entry is malformed.
    """
    if not isinstance(document, dict):
        raise TemplateFileError("expected a JSON object at the top level", path)

    entries = document.get('templates')
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise TemplateFileError("'templates' must be a list", path)

    repo = TemplateRepository()
    for index, entry in enumerate(entries):
        try:
            repo.add(_parse_entry(index, entry))
        except ValueError as e:
            raise TemplateFileError(str(e), path) from e
    return repo


def save_templates(repository: TemplateRepository, path: str | Path) -> Path:
    """Write a repository to a JSON file, creating parent directories.

    Returns:
        The path written.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, 'w', encoding='utf-8') as f:
        json.dump(templates_to_document(repository), f, indent=2)
    logger.info("Saved %d templates to %s", len(repository), out_path)
    return out_path


def load_templates(path: str | Path) -> TemplateRepository:
    """Read a repository from a JSON file.

    Returns:
        The loaded repository; empty if the file does not exist.

    Raises:
        TemplateFileError: If the file is unreadable, not valid JSON or
            fails validation.
    """
    in_path = Path(path)
    if not in_path.exists():
        logger.warning("Template file %s not found; starting with no templates", in_path)
        return TemplateRepository()

    try:
        with open(in_path, encoding='utf-8') as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise TemplateFileError(f"not valid JSON: {e}", in_path) from e
    except OSError as e:
        raise TemplateFileError(f"cannot be read: {e}", in_path) from e

    repo = templates_from_document(document, in_path)
    logger.info("Loaded %d templates from %s", len(repo), in_path)
    return repo
