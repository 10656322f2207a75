"""Rendering utilities for mapped reference reports."""
from __future__ import annotations

from dataclasses import dataclass
import unicodedata
from typing import Sequence

from spanmap.documents.models import DocumentSpan
from spanmap.excerpt.models import ExcerptResult
from spanmap.mapping.models import MappedSpanResult
from spanmap.text import BufferSnapshot, TextSpan
from spanmap.utils import collapse_whitespace, format_display_path, mark_span

_FILE_WIDTH = 28
_LINE_WIDTH = 6
_COLUMN_WIDTH = 6
_TEXT_WIDTH = 48
_WIDE_TEXT_WIDTH = 40
_SPAN_WIDTH = 14
_TITLE = "Mapped References"
_PLACEHOLDER = "-- no spans requested --"
_NO_EXCERPT = "-- no excerpt available --"
_EXCERPT_INDENT = "    "


@dataclass(frozen=True)
class ReportRenderOptions:
    """Render-time switches influencing CLI layout."""

    quiet: bool = False
    wide: bool = False


@dataclass(frozen=True)
class ReferenceRow:
    """One list entry describing where a span really lives."""

    file_path: str
    display_path: str
    line: int
    column: int
    text: str
    mapped_span: TextSpan
    source_span: TextSpan


@dataclass(frozen=True)
class ReportEnvelope:
    """Structured data needed to render the references section."""

    rows: tuple[ReferenceRow, ...]
    render_options: ReportRenderOptions
    excerpts: tuple[ExcerptResult | None, ...] = ()

    @property
    def has_rows(self) -> bool:
        """Return True when at least one reference is available."""

        return bool(self.rows)


def build_reference_row(
    document_span: DocumentSpan,
    snapshot: BufferSnapshot,
    mapped: MappedSpanResult,
) -> ReferenceRow:
    """Convert a mapping result into display values.

    Line and column become 1-based here. The preview text is the trimmed line
    of the requesting document's own text, not of the mapped file.
    """

    line = snapshot.line_from_position(document_span.span.start)
    start = mapped.line_position_span.start
    return ReferenceRow(
        file_path=mapped.file_path,
        display_path=format_display_path(mapped.file_path),
        line=start.line + 1,
        column=start.character + 1,
        text=snapshot.text_of(line.span).strip(),
        mapped_span=mapped.span,
        source_span=document_span.span,
    )


def render_references_report(envelope: ReportEnvelope) -> str:
    """Render the references table, followed by any excerpts."""

    options = envelope.render_options
    lines: list[str] = [_TITLE, ""]
    lines.extend(_build_table(envelope.rows, wide=options.wide))

    if envelope.excerpts:
        for index, excerpt in enumerate(envelope.excerpts, start=1):
            lines.append("")
            lines.append(f"Excerpt {index}")
            if excerpt is None:
                lines.append(f"{_EXCERPT_INDENT}{_NO_EXCERPT}")
                continue
            lines.extend(
                f"{_EXCERPT_INDENT}{content_line}"
                for content_line in render_excerpt(excerpt).splitlines()
            )

    if not options.wide and not options.quiet:
        lines.append("")
        lines.append("Tip: re-run with --wide to include generated span columns.")

    return "\n".join(lines)


def render_excerpt(excerpt: ExcerptResult) -> str:
    """Return excerpt content with the mapped span wrapped in ``[[`` ``]]``."""

    return mark_span(excerpt.content, excerpt.mapped_span)


def _build_table(rows: Sequence[ReferenceRow], *, wide: bool) -> list[str]:
    columns = _table_columns(wide=wide)
    header_line = _format_header(columns)
    separator_line = _format_separator(columns)

    formatted = [_format_row(row, columns) for row in rows]
    if not formatted:
        formatted = [_placeholder_row(columns, _PLACEHOLDER)]

    return [header_line, separator_line, *formatted]


def _table_columns(*, wide: bool) -> Sequence[tuple[str, int, str]]:
    text_width = _WIDE_TEXT_WIDTH if wide else _TEXT_WIDTH
    columns: list[tuple[str, int, str]] = [
        ("File", _FILE_WIDTH, "left"),
        ("Line", _LINE_WIDTH, "right"),
        ("Col", _COLUMN_WIDTH, "right"),
        ("Text", text_width, "left"),
    ]
    if wide:
        columns.append(("Mapped Span", _SPAN_WIDTH, "left"))
        columns.append(("Source Span", _SPAN_WIDTH, "left"))
    return columns


def _format_header(columns: Sequence[tuple[str, int, str]]) -> str:
    return " | ".join(_pad_text(title.upper(), width) for title, width, _ in columns)


def _format_separator(columns: Sequence[tuple[str, int, str]]) -> str:
    return "-+-".join("-" * width for _, width, _ in columns)


def _format_row(row: ReferenceRow, columns: Sequence[tuple[str, int, str]]) -> str:
    column_map = {
        "File": row.display_path,
        "Line": str(row.line),
        "Col": str(row.column),
        "Text": row.text or "--",
        "Mapped Span": str(row.mapped_span),
        "Source Span": str(row.source_span),
    }
    return " | ".join(
        _pad_text(column_map.get(title, ""), width, align=alignment)
        for title, width, alignment in columns
    )


def _placeholder_row(
    columns: Sequence[tuple[str, int, str]],
    placeholder: str,
) -> str:
    padded_first = _pad_text(placeholder, columns[0][1], align=columns[0][2])
    remainder = [
        _pad_text("", width, align=align)
        for _, width, align in columns[1:]
    ]
    return " | ".join([padded_first, *remainder])


def _pad_text(value: str, width: int, *, align: str = "left") -> str:
    text = _truncate(_normalize_text(value), width)
    if align == "right":
        return text.rjust(width)
    if align == "center":
        return text.center(width)
    return text.ljust(width)


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:width]
    return value[: width - 3] + "..."


def _normalize_text(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", collapse_whitespace(str(value)))
    return normalized.encode("ascii", "ignore").decode("ascii")


__all__ = [
    "ReferenceRow",
    "ReportEnvelope",
    "ReportRenderOptions",
    "build_reference_row",
    "render_excerpt",
    "render_references_report",
]
