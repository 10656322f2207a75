"""Execution orchestrator for spanmap CLI commands."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from spanmap.configuration import load_projection_map
from spanmap.documents import Document, DocumentSpan, SpanMappingService
from spanmap.documents.dynamic import ProjectionMapFileInfoProvider, build_dynamic_file_info
from spanmap.errors import (
    ContractViolationError,
    DocumentChangedError,
    InputValidationError,
    OperationCancelledError,
    ProjectionMapError,
    SpanMapError,
    TimeoutExceededError,
)
from spanmap.excerpt import ExcerptMode, ExcerptResult, ProjectionExcerpter
from spanmap.exit_codes import ExitCode
from spanmap.mapping import MappedSpanResult, ProjectionSpanMapper
from spanmap.reporting import (
    ReferenceRow,
    ReportEnvelope,
    ReportRenderOptions,
    build_reference_row,
)
from spanmap.text import BufferSnapshot, TextSpan
from spanmap.utils import load_text_document

logger = logging.getLogger("spanmap.orchestration.runner")

DEFAULT_TIMEOUT_SECONDS = 10.0
_MAX_MAPPING_ATTEMPTS = 3


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of invoking the orchestration pipeline."""

    exit_code: ExitCode
    status: str
    message: str | None = None
    remediation: str | None = None
    report: ReportEnvelope | None = None


_ERROR_MAPPINGS: tuple[
    tuple[type[SpanMapError], ExitCode, str, str | None],
    ...,
] = (
    (
        InputValidationError,
        ExitCode.INVALID_INPUT,
        "Input validation failed.",
        "Double-check the document paths and span arguments.",
    ),
    (
        ProjectionMapError,
        ExitCode.PROJECTION_MAP_ERROR,
        "The projection map could not be loaded.",
        "Regenerate the projection map alongside the generated document.",
    ),
    (
        ContractViolationError,
        ExitCode.CONTRACT_VIOLATION,
        "A span request violated the mapping contract.",
        "Request only spans that lie inside the generated document.",
    ),
    (
        OperationCancelledError,
        ExitCode.CANCELLED,
        "The lookup was cancelled before it completed.",
        None,
    ),
    (
        TimeoutExceededError,
        ExitCode.TIMEOUT,
        "The lookup timed out.",
        "Retry with a larger --timeout value.",
    ),
    (
        DocumentChangedError,
        ExitCode.DOCUMENT_CHANGED,
        "The document changed while its spans were being mapped.",
        "Retry once edits to the document have settled.",
    ),
)


def run_lookup(
    spans: Sequence[TextSpan],
    *,
    document_path: Path | None = None,
    projection_map_path: Path | None = None,
    primary_path: Path | None = None,
    excerpt_mode: ExcerptMode | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    quiet: bool = False,
    wide: bool = False,
) -> ExecutionOutcome:
    """Map *spans* of one document and optionally excerpt each of them."""

    try:
        document = _open_document(
            document_path=document_path,
            projection_map_path=projection_map_path,
            primary_path=primary_path,
        )
        rows, excerpts = asyncio.run(
            _collect_with_timeout(document, spans, excerpt_mode, timeout_seconds)
        )
    except SpanMapError as error:
        return handle_domain_error(error)
    except Exception as error:  # pragma: no cover
        logger.exception("Unexpected error occurred during lookup.")
        return ExecutionOutcome(
            exit_code=ExitCode.UNEXPECTED_ERROR,
            status="failure",
            message=str(error) or "An unexpected error occurred during the lookup.",
            remediation="Re-run without --quiet and inspect logs for details before retrying.",
        )

    projected = sum(1 for row in rows if row.file_path != document.file_path)
    summary = [
        f"Mapped {len(rows)} span(s) of {document.name} "
        f"({projected} resolved through a projection).",
    ]
    if excerpt_mode is not None:
        produced = sum(1 for excerpt in excerpts if excerpt is not None)
        summary.append(f"Extracted {produced} {excerpt_mode.value} excerpt(s).")

    report = ReportEnvelope(
        rows=rows,
        excerpts=excerpts,
        render_options=ReportRenderOptions(quiet=quiet, wide=wide),
    )

    return ExecutionOutcome(
        exit_code=ExitCode.SUCCESS,
        status="success",
        message="\n".join(summary),
        report=report,
    )


def handle_domain_error(error: SpanMapError) -> ExecutionOutcome:
    """Translate a domain error into an execution outcome and log remediation hints."""

    exit_code, default_message, default_remediation = _map_error(error)
    message = error.message or default_message
    remediation = error.remediation or default_remediation

    logger.error(message, extra={"exit_code": int(exit_code)})
    if remediation:
        logger.error("Remediation: %s", remediation)

    return ExecutionOutcome(
        exit_code=exit_code,
        status="failure",
        message=message,
        remediation=remediation,
    )


def _open_document(
    *,
    document_path: Path | None,
    projection_map_path: Path | None,
    primary_path: Path | None,
) -> Document:
    """Resolve the document whose spans are being looked up."""

    if document_path is not None and primary_path is None:
        return _open_generated_or_plain(document_path, projection_map_path)
    if primary_path is not None and document_path is None:
        return _open_from_primary(primary_path, projection_map_path)
    raise InputValidationError(
        message="Provide exactly one of --document or --primary.",
        remediation="Use --document for a generated or plain file, or --primary to locate a generated file.",
    )


def _open_from_primary(primary_path: Path, projection_map_path: Path | None) -> Document:
    if projection_map_path is not None:
        raise InputValidationError(
            message="--projection-map cannot be combined with --primary.",
            remediation="The map beside the primary file is used automatically.",
        )
    info = ProjectionMapFileInfoProvider().get_dynamic_file_info(primary_path)
    if info is None:
        raise InputValidationError(
            message=f"No projection map found beside {primary_path.name}.",
            remediation=f"Create {primary_path.name}.projection.yaml or pass --document instead.",
        )
    return info.to_document()


def _open_generated_or_plain(document_path: Path, projection_map_path: Path | None) -> Document:
    if projection_map_path is not None:
        projection_map = load_projection_map(projection_map_path)
        if _same_file(projection_map.generated_path, document_path):
            return build_dynamic_file_info(projection_map).to_document()
        raise ProjectionMapError(
            message=(
                f"Projection map {projection_map.source.name} describes "
                f"{projection_map.generated_path.name}, not {document_path.name}."
            ),
            remediation="Pass the generated document named by the projection map.",
        )

    loaded = load_text_document(document_path, "document")
    logger.info(
        "Loaded document",
        extra={
            "document": loaded.display_name,
            "encoding": loaded.display_encoding,
            "line_breaks": loaded.line_break_style,
        },
    )
    return Document(
        document_id=str(document_path),
        file_path=str(document_path),
        buffer=loaded.to_buffer(),
    )


async def _collect_with_timeout(
    document: Document,
    spans: Sequence[TextSpan],
    excerpt_mode: ExcerptMode | None,
    timeout_seconds: float,
) -> tuple[tuple[ReferenceRow, ...], tuple[ExcerptResult | None, ...]]:
    try:
        return await asyncio.wait_for(
            _collect(document, spans, excerpt_mode),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        raise TimeoutExceededError(
            message=f"Lookup exceeded the {timeout_seconds:.1f}-second budget.",
            remediation="Retry with a larger --timeout value.",
        ) from exc


async def _collect(
    document: Document,
    spans: Sequence[TextSpan],
    excerpt_mode: ExcerptMode | None,
) -> tuple[tuple[ReferenceRow, ...], tuple[ExcerptResult | None, ...]]:
    mapper = document.services.span_mapping or ProjectionSpanMapper()
    snapshot, mapped = await _map_against_one_snapshot(document, spans, mapper)
    logger.info(
        "Mapped spans",
        extra={"document": document.file_path, "span_count": len(mapped)},
    )

    rows = tuple(
        build_reference_row(DocumentSpan(document=document, span=span), snapshot, result)
        for span, result in zip(spans, mapped)
    )

    if excerpt_mode is None:
        return rows, ()

    excerpter = document.services.excerpt or ProjectionExcerpter()
    excerpts = await asyncio.gather(
        *(excerpter.try_excerpt(document, span, excerpt_mode) for span in spans)
    )
    return rows, tuple(excerpts)


async def _map_against_one_snapshot(
    document: Document,
    spans: Sequence[TextSpan],
    mapper: SpanMappingService,
) -> tuple[BufferSnapshot, tuple[MappedSpanResult, ...]]:
    """Map *spans* and return them with the snapshot the mapping observed.

    Versions only grow, so an unchanged version before and after the call means
    the mapper saw the same snapshot used for the preview rows.
    """

    for attempt in range(1, _MAX_MAPPING_ATTEMPTS + 1):
        before = await document.get_text()
        mapped = await mapper.map_spans(document, spans)
        after = await document.get_text()
        if after.version == before.version:
            return before, mapped
        logger.debug(
            "Document edited during mapping; retrying",
            extra={
                "document": document.file_path,
                "attempt": attempt,
                "version": before.version,
                "current_version": after.version,
            },
        )

    raise DocumentChangedError(
        message=(
            f"{document.name} changed during each of {_MAX_MAPPING_ATTEMPTS} mapping attempts."
        ),
        remediation="Retry once edits to the document have settled.",
    )


def _same_file(left: Path, right: Path) -> bool:
    try:
        return left.resolve() == right.resolve()
    except OSError:  # pragma: no cover
        return left == right


def _map_error(error: SpanMapError) -> tuple[ExitCode, str, str | None]:
    """Match an error instance to its configured exit code and remediation."""

    for error_type, exit_code, message, remediation in _ERROR_MAPPINGS:
        if isinstance(error, error_type):
            return exit_code, message, remediation

    return (
        ExitCode.UNEXPECTED_ERROR,
        "An unexpected error occurred during the lookup.",
        "Enable logging and retry. If the issue persists, open a bug ticket with the logs.",
    )


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "ExecutionOutcome", "handle_domain_error", "run_lookup"]
