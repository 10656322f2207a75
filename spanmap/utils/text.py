"""Text transformation helpers for shared use across modules."""
from __future__ import annotations

from spanmap.text import TextSpan


def mark_span(text: str, span: TextSpan, *, opening: str = "[[", closing: str = "]]") -> str:
    """Wrap the part of *text* covered by *span* in markers, clamping to the text."""

    text_length = len(text)
    start = max(0, min(span.start, text_length))
    end = max(start, min(span.end, text_length))

    return f"{text[:start]}{opening}{text[start:end]}{closing}{text[end:]}"


def collapse_whitespace(value: str) -> str:
    """Trim *value* and fold internal whitespace runs into single spaces."""

    return " ".join(value.split())


__all__ = ["collapse_whitespace", "mark_span"]
