"""Loading primary and generated documents from disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from spanmap.errors import InputValidationError
from spanmap.text import TextBuffer

DEFAULT_ENCODINGS: tuple[str, ...] = ("utf-8-sig", "cp1252")
_ENCODING_LABELS: dict[str, str] = {
    "utf-8-sig": "UTF-8 (with BOM)",
    "cp1252": "Windows-1252",
    "utf-8": "UTF-8",
}
_LINE_BREAKS: tuple[tuple[str, str], ...] = (("\r\n", "CRLF"), ("\r", "CR"), ("\n", "LF"))


@dataclass(frozen=True)
class LoadedDocument:
    """Decoded file contents, kept byte-for-byte apart from the encoding."""

    path: Path
    text: str
    encoding: str

    @property
    def display_name(self) -> str:
        return format_display_path(self.path)

    @property
    def display_encoding(self) -> str:
        return _ENCODING_LABELS.get(self.encoding, self.encoding)

    @property
    def line_break_style(self) -> str:
        """Return ``CRLF``, ``CR``, ``LF``, ``mixed`` or ``none``."""

        remainder = self.text
        found: list[str] = []
        for sequence, label in _LINE_BREAKS:
            if sequence in remainder:
                found.append(label)
                remainder = remainder.replace(sequence, "")
        if not found:
            return "none"
        return found[0] if len(found) == 1 else "mixed"

    def to_buffer(self) -> TextBuffer:
        """Open a text buffer over the decoded contents."""

        return TextBuffer(self.text)


def format_display_path(path: Path | str) -> str:
    """Show only the file name, quoted when it contains spaces."""

    name = Path(path).name or str(path)
    return f'"{name}"' if " " in name else name


def load_text_document(
    path: Path,
    description: str,
    *,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> LoadedDocument:
    """Decode *path* with the first encoding in *encodings* that fits.

    Line breaks are never rewritten: projection maps address characters of
    the file exactly as the generator wrote it.
    """

    try:
        data = path.read_bytes()
    except OSError as exc:  # pragma: no cover - mirrors Path error messaging
        raise InputValidationError(
            message=f"Unable to read the {description} file {format_display_path(path)}.",
            remediation="Verify the path and file permissions, then retry.",
        ) from exc

    last_error: UnicodeDecodeError | None = None
    for encoding in encodings:
        try:
            return LoadedDocument(path=path, text=data.decode(encoding), encoding=encoding)
        except UnicodeDecodeError as exc:
            last_error = exc

    supported = ", ".join(_ENCODING_LABELS.get(enc, enc) for enc in encodings)
    raise InputValidationError(
        message=f"The {description} file {format_display_path(path)} is not encoded as {supported}.",
        remediation="Regenerate or re-save the file as UTF-8 and retry.",
    ) from last_error


__all__ = [
    "DEFAULT_ENCODINGS",
    "LoadedDocument",
    "format_display_path",
    "load_text_document",
]
