"""Utility helpers for spanmap."""

from __future__ import annotations

from .io import DEFAULT_ENCODINGS, LoadedDocument, format_display_path, load_text_document
from .text import collapse_whitespace, mark_span

__all__ = [
    "DEFAULT_ENCODINGS",
    "LoadedDocument",
    "collapse_whitespace",
    "format_display_path",
    "load_text_document",
    "mark_span",
]
