"""Value types describing extracted excerpts."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from spanmap.documents.models import Document
from spanmap.text import TextSpan


class ExcerptMode(Enum):
    """Width of the context window around an excerpted span."""

    SINGLE_LINE = "single-line"
    TOOLTIP = "tooltip"


@dataclass(frozen=True)
class ClassifiedSpan:
    """A span of excerpt content tagged with a classification name."""

    span: TextSpan
    classification: str


@dataclass(frozen=True)
class ExcerptResult:
    """Excerpt text with the requested location re-anchored inside it."""

    content: str
    mapped_span: TextSpan
    classified_spans: tuple[ClassifiedSpan, ...]
    document: Document
    span: TextSpan

    def __post_init__(self) -> None:  # pragma: no cover - simple normalization
        object.__setattr__(self, "classified_spans", tuple(self.classified_spans))

    @property
    def highlighted_text(self) -> str:
        """Return the slice of ``content`` covered by ``mapped_span``."""

        return self.content[self.mapped_span.start : self.mapped_span.end]


__all__ = ["ClassifiedSpan", "ExcerptMode", "ExcerptResult"]
