"""Text model shared by the mapper and the excerpt extractor."""
from __future__ import annotations

from .snapshot import BufferSnapshot, TextBuffer, TextLine
from .spans import LinePosition, LinePositionSpan, TextSpan

__all__ = [
    "BufferSnapshot",
    "LinePosition",
    "LinePositionSpan",
    "TextBuffer",
    "TextLine",
    "TextSpan",
]
