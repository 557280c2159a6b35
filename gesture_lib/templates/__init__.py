"""Template storage, persistence and the built-in cloud templates."""

from .builtin import builtin_templates
from .persistence import (
    TemplateFileError,
    load_templates,
    save_templates,
    templates_from_document,
    templates_to_document,
)
from .repository import Template, TemplateRepository

__all__ = [
    'Template',
    'TemplateFileError',
    'TemplateRepository',
    'builtin_templates',
    'load_templates',
    'save_templates',
    'templates_from_document',
    'templates_to_document',
]
