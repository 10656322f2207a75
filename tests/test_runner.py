from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from spanmap.documents import Document
from spanmap.errors import (
    ContractViolationError,
    DocumentChangedError,
    OperationCancelledError,
    SpanMapError,
    TimeoutExceededError,
)
from spanmap.excerpt import ExcerptMode
from spanmap.exit_codes import ExitCode
from spanmap.orchestration import handle_domain_error, run_lookup
from spanmap.orchestration import runner
from spanmap.text import BufferSnapshot, TextBuffer, TextSpan


def test_run_lookup_builds_report_for_projected_document(projected_files) -> None:
    outcome = run_lookup(
        [TextSpan(18, 5), TextSpan(31, 4)],
        document_path=projected_files.generated,
        projection_map_path=projected_files.projection_map,
        excerpt_mode=ExcerptMode.TOOLTIP,
    )

    assert outcome.exit_code == ExitCode.SUCCESS
    assert outcome.status == "success"
    assert outcome.message is not None
    assert "Mapped 2 span(s) of page.tmpl.py (2 resolved through a projection)." in outcome.message
    assert "Extracted 2 tooltip excerpt(s)." in outcome.message

    report = outcome.report
    assert report is not None
    assert [(row.line, row.column) for row in report.rows] == [(1, 8), (2, 7)]
    assert [excerpt.highlighted_text for excerpt in report.excerpts] == ["title", "body"]


def test_run_lookup_rejects_projection_map_with_primary(projected_files) -> None:
    outcome = run_lookup(
        [TextSpan(0, 1)],
        primary_path=projected_files.primary,
        projection_map_path=projected_files.projection_map,
    )

    assert outcome.exit_code == ExitCode.INVALID_INPUT
    assert outcome.report is None


def test_run_lookup_requires_map_beside_primary(tmp_path: Path) -> None:
    primary = tmp_path / "lonely.tmpl"
    primary.write_text("text", encoding="utf-8")

    outcome = run_lookup([TextSpan(0, 1)], primary_path=primary)

    assert outcome.exit_code == ExitCode.INVALID_INPUT
    assert "lonely.tmpl.projection.yaml" in (outcome.remediation or "")


def test_run_lookup_times_out(monkeypatch: pytest.MonkeyPatch, projected_files) -> None:
    async def _slow_collect(*args: object, **kwargs: object):
        await asyncio.sleep(5)

    monkeypatch.setattr("spanmap.orchestration.runner._collect", _slow_collect)

    outcome = run_lookup(
        [TextSpan(0, 1)],
        document_path=projected_files.generated,
        timeout_seconds=0.05,
    )

    assert outcome.exit_code == ExitCode.TIMEOUT
    assert outcome.remediation == "Retry with a larger --timeout value."


@pytest.mark.parametrize(
    "error, exit_code",
    [
        (ContractViolationError("bad span"), ExitCode.CONTRACT_VIOLATION),
        (OperationCancelledError("stopped"), ExitCode.CANCELLED),
        (TimeoutExceededError("slow"), ExitCode.TIMEOUT),
        (DocumentChangedError("moving"), ExitCode.DOCUMENT_CHANGED),
        (SpanMapError("odd"), ExitCode.UNEXPECTED_ERROR),
    ],
)
def test_handle_domain_error_maps_exit_codes(error: SpanMapError, exit_code: ExitCode) -> None:
    outcome = handle_domain_error(error)

    assert outcome.exit_code == exit_code
    assert outcome.status == "failure"
    assert outcome.message == error.message


def test_handle_domain_error_prefers_error_remediation() -> None:
    outcome = handle_domain_error(ContractViolationError("bad span", remediation="Shrink it."))

    assert outcome.remediation == "Shrink it."


class EditingRelation:
    """Relation that inserts text into the generated buffer while it is queried."""

    primary_path = "page.tmpl"

    def __init__(self, buffer: TextBuffer, *, edits: int) -> None:
        self.buffer = buffer
        self.edits = edits
        self.queries = 0

    async def map_to_primary(self, span: TextSpan):
        self.queries += 1
        if self.edits:
            self.edits -= 1
            self.buffer.replace(TextSpan(0, 0), "# ")
        return ()


class EditingSource:
    def __init__(self, relation: EditingRelation) -> None:
        self.relation = relation

    def snapshot_for(self, snapshot: BufferSnapshot) -> EditingRelation:
        return self.relation


def _editing_document(*, edits: int) -> tuple[Document, EditingRelation]:
    buffer = TextBuffer("alpha\nbeta\n")
    relation = EditingRelation(buffer, edits=edits)
    document = Document(
        document_id="notes",
        file_path="notes.txt",
        buffer=buffer,
        projection=EditingSource(relation),
    )
    return document, relation


def test_rows_and_mapping_share_one_snapshot_after_concurrent_edit() -> None:
    document, relation = _editing_document(edits=1)

    rows, excerpts = asyncio.run(runner._collect(document, [TextSpan(6, 4)], None))

    assert relation.queries == 2
    assert excerpts == ()
    (row,) = rows
    assert row.text == "# alpha"
    assert (row.line, row.column) == (1, 7)


def test_document_that_never_settles_is_reported() -> None:
    document, relation = _editing_document(edits=10)

    with pytest.raises(DocumentChangedError):
        asyncio.run(runner._collect(document, [TextSpan(6, 4)], None))

    assert relation.queries == 3


def test_run_lookup_rejects_document_with_primary(projected_files) -> None:
    outcome = run_lookup(
        [TextSpan(0, 1)],
        document_path=projected_files.generated,
        primary_path=projected_files.primary,
    )

    assert outcome.exit_code == ExitCode.INVALID_INPUT
    assert outcome.message == "Provide exactly one of --document or --primary."


def test_run_lookup_requires_document_or_primary() -> None:
    outcome = run_lookup([TextSpan(0, 1)])

    assert outcome.exit_code == ExitCode.INVALID_INPUT
