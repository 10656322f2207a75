"""Extract display excerpts for spans of generated documents."""
from __future__ import annotations

import logging
from typing import Sequence

from spanmap.cancellation import CancellationToken, check_cancelled
from spanmap.documents.models import Document
from spanmap.excerpt.models import ClassifiedSpan, ExcerptMode, ExcerptResult
from spanmap.mapping.mapper import resolve_projection
from spanmap.projection import ProjectionCandidate
from spanmap.text import BufferSnapshot, TextSpan

logger = logging.getLogger("spanmap.excerpt.excerpter")


def compute_content_span(
    snapshot: BufferSnapshot,
    span: TextSpan,
    mode: object,
) -> TextSpan | None:
    """Return the window of *snapshot* to show for *span*, or None for unknown modes.

    ``SINGLE_LINE`` covers the line holding the span start. ``TOOLTIP`` also
    covers the line before and the line after, clamped to the first and last
    lines of the snapshot. Line breaks after the window are not included.
    """

    line = snapshot.line_from_position(span.start)

    if mode is ExcerptMode.SINGLE_LINE:
        return line.span

    if mode is ExcerptMode.TOOLTIP:
        # One line either side, clamped to the buffer. Deliberately not
        # min(0, line - 1) / max(last, line + 1), which always spans the whole text.
        first = snapshot.lines[max(0, line.line_number - 1)]
        last = snapshot.lines[min(snapshot.last_line_number, line.line_number + 1)]
        return TextSpan.from_bounds(first.start, last.end)

    return None


class ProjectionExcerpter:
    """Excerpt capability for documents generated from another file.

    Plain documents are declined; they are served by a basic excerpting
    strategy outside this package. Subclasses override :meth:`classify` to
    attach classifications to the excerpt content.
    """

    async def try_excerpt(
        self,
        document: Document,
        span: TextSpan,
        mode: ExcerptMode,
        cancellation: CancellationToken | None = None,
    ) -> ExcerptResult | None:
        """Return an excerpt for *span*, or None when the span cannot be excerpted."""

        check_cancelled(cancellation)
        snapshot = await document.get_text()
        check_cancelled(cancellation)

        projection = resolve_projection(document, snapshot)
        if projection is None:
            logger.debug("No projection registered; declining excerpt", extra={"document": document.file_path})
            return None

        candidates = await projection.map_to_primary(span)
        check_cancelled(cancellation)

        if len(candidates) != 1:
            logger.debug(
                "Span does not map to exactly one range; declining excerpt",
                extra={
                    "document": document.file_path,
                    "span": str(span),
                    "candidate_count": len(candidates),
                },
            )
            return None

        candidate = candidates[0]
        content_span = compute_content_span(candidate.snapshot, candidate.span, mode)
        if content_span is None:
            logger.debug("Unsupported excerpt mode", extra={"mode": repr(mode)})
            return None

        content = candidate.snapshot.text_of(content_span)
        mapped_span = candidate.span.relative_to(content_span.start)

        return ExcerptResult(
            content=content,
            mapped_span=mapped_span,
            classified_spans=self.classify(content, mapped_span, candidate),
            document=document,
            span=span,
        )

    def classify(
        self,
        content: str,
        mapped_span: TextSpan,
        candidate: ProjectionCandidate,
    ) -> Sequence[ClassifiedSpan]:
        """Classify the excerpt content; raw-text excerpts carry no classifications."""

        return ()


__all__ = ["ProjectionExcerpter", "compute_content_span"]
