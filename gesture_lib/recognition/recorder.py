"""Label-lock template recorder.

TemplateRecorder collects training strokes for the DTW recognizer. The
user locks a label once and then performs the gesture repeatedly; every
long enough stroke becomes another exemplar for that label and, with
auto-save on, the template file is rewritten after each one.

The recorder only tracks state and reports a one-line status; capturing
samples and showing the status are left to the caller.

Example usage:
    Recording three circles::

        recorder = TemplateRecorder(recognizer, templates_path='gestures.json')
        recorder.select('circle')
        for stroke in strokes:
            print(recorder.submit(stroke))
        recorder.stop()
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..utils.geometry import as_points
from .dtw import DtwKnnRecognizer

logger = logging.getLogger(__name__)

IDLE_STATUS = 'Idle'


class TemplateRecorder:
    """Adds strokes as templates for a locked label.

    Attributes:
        recognizer: DtwKnnRecognizer whose store receives the templates.
        templates_path: File rewritten after each added template when
            ``auto_save`` is on; None disables saving.
        auto_save: Save after every added template.
        label: Currently locked label, or None.
        status: Last status line.
        recorded: Templates added since the label was locked.
    """

    def __init__(self, recognizer: DtwKnnRecognizer,
                 templates_path: str | Path | None = None,
                 auto_save: bool = True):
        self.recognizer = recognizer
        self.templates_path = Path(templates_path) if templates_path is not None else None
        self.auto_save = auto_save
        self.label: str | None = None
        self.status = IDLE_STATUS
        self.recorded = 0

    @property
    def active(self) -> bool:
        return self.label is not None

    def select(self, label: str) -> str:
        """Lock ``label`` for the following strokes.

        Raises:
            ValueError: If the label is empty.
        """
        label = label.strip() if isinstance(label, str) else ''
        if not label:
            raise ValueError("label must be a non-empty string")
        self.label = label
        self.recorded = 0
        self.status = f"Recording '{label}'. Draw the gesture."
        return self.status

    def submit(self, points) -> str:
        """Offer a finished stroke as a template for the locked label.

        Returns:
            The new status line.
        """
        if self.label is None:
            self.status = "No label selected."
            return self.status

        pts = as_points(points)
        min_points = self.recognizer.config.min_points
        if len(pts) < min_points:
            self.status = f"Stroke too short ({len(pts)} < {min_points} points). Try again."
            return self.status

        template = self.recognizer.add_template(self.label, pts)
        self.recorded += 1
        total = len(self.recognizer.templates.by_name(self.label))
        self.status = f"Saved '{self.label}' (N={template.length}, {total} total)."

        if self.auto_save and self.templates_path is not None:
            self.recognizer.save_templates(self.templates_path)
        logger.info("Recorded template %r (%d this session)", self.label, self.recorded)
        return self.status

    def stop(self) -> str:
        """Release the label lock."""
        if self.label is not None:
            self.status = f"Stopped recording '{self.label}' ({self.recorded} added)."
        else:
            self.status = IDLE_STATUS
        self.label = None
        return self.status
