"""Template store for learned gesture exemplars.

This module provides the Template value object and the TemplateRepository
that owns a collection of them. A template is a named canonical point
sequence recorded from one performance of a gesture; several templates may
share a name so that k-NN voting sees more than one exemplar per class.

The repository is an ordinary object owned by the caller and handed to the
classifier. Nothing here is process-wide state.

The repository provides:
    - Insertion-ordered storage of templates
    - Lookup of all exemplars for a name
    - Enumeration of distinct names and per-name counts
    - Whole-store replacement, used when a template file is loaded

Example usage:
    Basic repository operations::

        from gesture_lib.templates.repository import Template, TemplateRepository

        repo = TemplateRepository()
        repo.add(Template('circle', circle_points))
        repo.add(Template('circle', other_circle_points))
        repo.add(Template('square', square_points))

        repo.names()             # ['circle', 'square']
        len(repo.by_name('circle'))  # 2

    Building from sequences::

        repo = TemplateRepository.from_dict({
            'circle': [circle_points, other_circle_points],
            'square': [square_points],
        })
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

import numpy as np

from ..utils.geometry import as_points


class Template:
    """A named canonical point sequence.

    Templates are immutable: the point array is copied on construction and
    marked read-only.

    Attributes:
        name: Gesture label. Must be a non-empty string.
        points: Read-only (N, 2) float array.

    Example:
        >>> t = Template('line', [(0.0, 0.0), (1.0, 0.0)])
        >>> t.length, t.flattened()
        (2, [0.0, 0.0, 1.0, 0.0])
    """

    __slots__ = ('_name', '_points')

    def __init__(self, name: str, points):
        if not isinstance(name, str) or not name:
            raise ValueError(f"template name must be a non-empty string, got {name!r}")
        pts = as_points(points, dims=(2,)).copy()
        if len(pts) < 2:
            raise ValueError(f"template {name!r} needs at least 2 points, got {len(pts)}")
        if not np.isfinite(pts).all():
            raise ValueError(f"template {name!r} has non-finite coordinates")
        pts.setflags(write=False)
        self._name = name
        self._points = pts

    @property
    def name(self) -> str:
        return self._name

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def length(self) -> int:
        """N, the number of points."""
        return len(self._points)

    def flattened(self) -> list[float]:
        """Points as [x0, y0, x1, y1, ...]."""
        return [float(v) for v in self._points.reshape(-1)]

    @classmethod
    def from_flattened(cls, name: str, values: Iterable[float], n: int | None = None) -> Template:
        """Create from [x0, y0, x1, y1, ...].

        Raises:
            ValueError: If the value count is odd or differs from ``2 * n``.
        """
        flat = np.asarray(list(values), dtype=float)
        if flat.ndim != 1 or len(flat) % 2:
            raise ValueError(f"template {name!r}: expected an even number of values, got {flat.size}")
        if n is not None and len(flat) != 2 * n:
            raise ValueError(f"template {name!r}: expected {2 * n} values for N={n}, got {len(flat)}")
        return cls(name, flat.reshape(-1, 2))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return self._name == other._name and np.array_equal(self._points, other._points)

    def __hash__(self) -> int:
        return hash((self._name, self._points.tobytes()))

    def __repr__(self) -> str:
        return f"Template(name={self._name!r}, length={self.length})"


class TemplateRepository:
    """Insertion-ordered collection of templates.

    Templates are added one at a time and removed only by ``clear`` or by
    replacing the whole store. The repository does no locking; it assumes
    a single writer.

    Example:
        >>> repo = TemplateRepository()
        >>> repo.add(Template('a', [(0, 0), (1, 1)]))
        >>> repo.names()
        ['a']
    """

    def __init__(self, templates: Iterable[Template] | None = None):
        self._templates: list[Template] = []
        for template in templates or ():
            self.add(template)

    def add(self, template: Template) -> None:
        """Append a template."""
        if not isinstance(template, Template):
            raise TypeError(f"expected Template, got {type(template).__name__}")
        self._templates.append(template)

    def register(self, name: str, points) -> Template:
        """Create a template from an already canonical sequence and add it."""
        template = Template(name, points)
        self.add(template)
        return template

    def clear(self) -> None:
        """Remove all templates."""
        self._templates.clear()

    def replace(self, other: TemplateRepository) -> None:
        """Replace the whole contents with those of ``other``."""
        self._templates = list(other)

    def by_name(self, name: str) -> list[Template]:
        """All exemplars recorded under ``name``, in insertion order."""
        return [t for t in self._templates if t.name == name]

    def names(self) -> list[str]:
        """Distinct template names in first-seen order."""
        return list(dict.fromkeys(t.name for t in self._templates))

    def counts(self) -> dict[str, int]:
        """Number of exemplars per name."""
        return dict(Counter(t.name for t in self._templates))

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(list(self._templates))

    def __eq__(self, other) -> bool:
        if not isinstance(other, TemplateRepository):
            return NotImplemented
        return self._templates == other._templates

    def __repr__(self) -> str:
        return f"TemplateRepository({len(self._templates)} templates, names={self.names()})"

    @classmethod
    def from_dict(cls, sequences: dict[str, list]) -> TemplateRepository:
        """Create a repository from name -> list of canonical sequences."""
        repo = cls()
        for name, seqs in sequences.items():
            for seq in seqs:
                repo.register(name, seq)
        return repo
