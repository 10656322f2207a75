"""Result values produced by the span mapper."""
from __future__ import annotations

from dataclasses import dataclass

from spanmap.text import LinePositionSpan, TextSpan


@dataclass(frozen=True)
class MappedSpanResult:
    """A generated-buffer location expressed in real document terms.

    Holds no buffer reference, so it stays valid after the snapshot it was
    computed from is gone.
    """

    file_path: str
    line_position_span: LinePositionSpan
    span: TextSpan


__all__ = ["MappedSpanResult"]
