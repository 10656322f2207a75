from __future__ import annotations

from pathlib import Path

import pytest

from spanmap.errors import InputValidationError
from spanmap.text import TextSpan
from spanmap.utils import collapse_whitespace, format_display_path, load_text_document, mark_span


def test_load_text_document_prefers_utf8(tmp_path: Path) -> None:
    document = tmp_path / "page.tmpl"
    document.write_bytes("plantilla uno\r\nlinea dos".encode("utf-8-sig"))

    loaded = load_text_document(document, "primary")

    assert loaded.encoding == "utf-8-sig"
    assert loaded.display_encoding == "UTF-8 (with BOM)"
    assert loaded.text == "plantilla uno\r\nlinea dos"


def test_load_text_document_keeps_line_breaks(tmp_path: Path) -> None:
    document = tmp_path / "page.tmpl.py"
    document.write_bytes(b"uno\r\ndos\rtres\n")

    loaded = load_text_document(document, "generated")

    assert loaded.text == "uno\r\ndos\rtres\n"


def test_load_text_document_falls_back_to_cp1252(tmp_path: Path) -> None:
    document = tmp_path / "legacy.tmpl"
    document.write_bytes("requisición".encode("cp1252"))

    loaded = load_text_document(document, "primary")

    assert loaded.encoding == "cp1252"
    assert loaded.display_encoding == "Windows-1252"
    assert loaded.text == "requisición"


def test_load_text_document_raises_when_unsupported(tmp_path: Path) -> None:
    document = tmp_path / "broken.tmpl"
    document.write_bytes(bytes([0x81, 0x82, 0x83]))

    with pytest.raises(InputValidationError) as exc:
        load_text_document(document, "primary")

    assert "Windows-1252" in exc.value.message


def test_format_display_path_quotes_names_with_spaces() -> None:
    assert format_display_path(Path("/tmp/My Page.tmpl")) == '"My Page.tmpl"'
    assert format_display_path("out/page.py") == "page.py"


def test_mark_span_clamps_to_text() -> None:
    assert mark_span("abcdef", TextSpan(2, 2)) == "ab[[cd]]ef"
    assert mark_span("abc", TextSpan(2, 10)) == "ab[[c]]"
    assert mark_span("abc", TextSpan(3, 0), opening="<", closing=">") == "abc<>"


def test_collapse_whitespace_folds_runs() -> None:
    assert collapse_whitespace("  a \t b\n\nc ") == "a b c"


@pytest.mark.parametrize(
    "text, style",
    [
        ("a\r\nb\r\n", "CRLF"),
        ("a\nb", "LF"),
        ("a\rb", "CR"),
        ("a\r\nb\nc", "mixed"),
        ("single line", "none"),
    ],
)
def test_line_break_style_reports_stored_breaks(tmp_path: Path, text: str, style: str) -> None:
    document = tmp_path / "page.tmpl"
    document.write_bytes(text.encode("utf-8"))

    assert load_text_document(document, "primary").line_break_style == style


def test_to_buffer_opens_first_version(tmp_path: Path) -> None:
    document = tmp_path / "page.tmpl"
    document.write_bytes(b"one\r\ntwo")

    snapshot = load_text_document(document, "primary").to_buffer().current

    assert snapshot.version == 0
    assert snapshot.line_count == 2
    assert snapshot.text == "one\r\ntwo"


def test_custom_encodings_are_tried_in_order(tmp_path: Path) -> None:
    document = tmp_path / "legacy.tmpl"
    document.write_bytes("café".encode("latin-1"))

    loaded = load_text_document(document, "primary", encodings=("utf-8", "latin-1"))

    assert loaded.encoding == "latin-1"
    assert loaded.display_encoding == "latin-1"
