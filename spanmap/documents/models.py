"""Documents, their optional capabilities, and document-anchored spans."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING, Iterable, Protocol

from spanmap.projection import ProjectionSource
from spanmap.text import BufferSnapshot, TextBuffer, TextSpan

if TYPE_CHECKING:  # pragma: no cover - typing only
    from spanmap.cancellation import CancellationToken
    from spanmap.excerpt.models import ExcerptMode, ExcerptResult
    from spanmap.mapping.models import MappedSpanResult


class SpanMappingService(Protocol):
    """Capability that translates generated spans into real document locations."""

    async def map_spans(
        self,
        document: Document,
        spans: Iterable[TextSpan],
        cancellation: CancellationToken | None = None,
    ) -> tuple[MappedSpanResult, ...]:
        ...


class ExcerptService(Protocol):
    """Capability that extracts display excerpts around a span."""

    async def try_excerpt(
        self,
        document: Document,
        span: TextSpan,
        mode: ExcerptMode,
        cancellation: CancellationToken | None = None,
    ) -> ExcerptResult | None:
        ...


@dataclass(frozen=True)
class DocumentServices:
    """Named, optional capabilities a document exposes to presentation code."""

    span_mapping: SpanMappingService | None = None
    excerpt: ExcerptService | None = None


@dataclass(frozen=True, eq=False)
class Document:
    """A workspace document backed by a text buffer."""

    document_id: str
    file_path: str
    buffer: TextBuffer
    projection: ProjectionSource | None = None
    services: DocumentServices = field(default_factory=DocumentServices)
    is_generated: bool = False

    @property
    def name(self) -> str:
        """Return the file name, or the raw path when it has no usable name."""

        name = PurePath(self.file_path).name
        return name or self.file_path

    async def get_text(self) -> BufferSnapshot:
        """Capture the buffer's current snapshot."""

        return self.buffer.current


@dataclass(frozen=True)
class DocumentSpan:
    """A span anchored to the document it was found in."""

    document: Document
    span: TextSpan


__all__ = [
    "Document",
    "DocumentServices",
    "DocumentSpan",
    "ExcerptService",
    "SpanMappingService",
]
