"""Excerpt extraction around mapped spans."""
from __future__ import annotations

from .excerpter import ProjectionExcerpter, compute_content_span
from .models import ClassifiedSpan, ExcerptMode, ExcerptResult

__all__ = [
    "ClassifiedSpan",
    "ExcerptMode",
    "ExcerptResult",
    "ProjectionExcerpter",
    "compute_content_span",
]
