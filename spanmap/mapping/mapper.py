"""Translate generated-buffer spans into locations in their original documents."""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from spanmap.cancellation import CancellationToken, check_cancelled
from spanmap.documents.models import Document, DocumentSpan
from spanmap.errors import ContractViolationError
from spanmap.mapping.models import MappedSpanResult
from spanmap.projection import ProjectionCandidate, ProjectionRelation
from spanmap.text import BufferSnapshot, TextSpan

logger = logging.getLogger("spanmap.mapping.mapper")


def resolve_projection(document: Document, snapshot: BufferSnapshot) -> ProjectionRelation | None:
    """Return the projection registered for *snapshot*, or None for plain documents.

    The mapper and the excerpt extractor both go through this lookup so they
    always agree on which projection a snapshot has.
    """

    if document.projection is None:
        return None
    return document.projection.snapshot_for(snapshot)


def map_identity(document: Document, snapshot: BufferSnapshot, span: TextSpan) -> MappedSpanResult:
    """Treat *span* as already being in the document's own terms."""

    return MappedSpanResult(
        file_path=document.file_path,
        line_position_span=snapshot.line_position_span(span),
        span=span,
    )


def select_candidate(
    span: TextSpan,
    candidates: Sequence[ProjectionCandidate],
) -> ProjectionCandidate | None:
    """Pick the first candidate covering the whole query; split candidates never qualify."""

    for candidate in candidates:
        if candidate.length == span.length:
            return candidate
    return None


class ProjectionSpanMapper:
    """Span mapping capability for documents that may be projections of another file."""

    def __init__(self, *, strict: bool = False) -> None:
        self._strict = strict

    async def map_spans(
        self,
        document: Document,
        spans: Iterable[TextSpan],
        cancellation: CancellationToken | None = None,
    ) -> tuple[MappedSpanResult, ...]:
        """Map every span in order; the result always has one entry per input span."""

        requested = tuple(spans)
        if not requested:
            return ()

        check_cancelled(cancellation)
        snapshot = await document.get_text()
        check_cancelled(cancellation)
        _require_within(snapshot, requested, document)

        projection = resolve_projection(document, snapshot)
        if projection is None:
            logger.debug(
                "No projection registered; using identity mapping",
                extra={"document": document.file_path, "span_count": len(requested)},
            )
            return tuple(map_identity(document, snapshot, span) for span in requested)

        results: list[MappedSpanResult] = []
        for span in requested:
            candidates = await projection.map_to_primary(span)
            check_cancelled(cancellation)

            selected = select_candidate(span, candidates)
            if selected is None:
                if self._strict:
                    raise ContractViolationError(
                        message=(
                            f"Span {span} of {document.file_path} does not map to "
                            f"{projection.primary_path} as a single range."
                        ),
                        remediation="Only request spans that lie entirely inside a projected segment.",
                    )
                logger.debug(
                    "Span did not map cleanly; using identity mapping",
                    extra={
                        "document": document.file_path,
                        "span": str(span),
                        "candidate_count": len(candidates),
                    },
                )
                results.append(map_identity(document, snapshot, span))
                continue

            results.append(
                MappedSpanResult(
                    file_path=projection.primary_path,
                    line_position_span=selected.line_position_span(),
                    span=selected.span,
                )
            )

        return tuple(results)


async def map_and_get_first(
    document_span: DocumentSpan,
    cancellation: CancellationToken | None = None,
) -> MappedSpanResult:
    """Map one document span through the document's mapping service, if it has one."""

    document = document_span.document
    service = document.services.span_mapping
    if service is not None:
        results = await service.map_spans(document, (document_span.span,), cancellation)
        if results:
            return results[0]

    snapshot = await document.get_text()
    check_cancelled(cancellation)
    return map_identity(document, snapshot, document_span.span)


def _require_within(
    snapshot: BufferSnapshot,
    spans: Sequence[TextSpan],
    document: Document,
) -> None:
    for span in spans:
        if not snapshot.contains_span(span):
            raise ContractViolationError(
                message=(
                    f"Span {span} lies outside {document.file_path} "
                    f"({len(snapshot)} characters at version {snapshot.version})."
                ),
                remediation="Compute spans against the same snapshot that is being mapped.",
            )


__all__ = [
    "ProjectionSpanMapper",
    "map_and_get_first",
    "map_identity",
    "resolve_projection",
    "select_candidate",
]
