"""Value types describing character and line/column ranges."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class TextSpan:
    """Half-open character interval ``[start, start + length)`` within one snapshot."""

    start: int
    length: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("span start must be non-negative")
        if self.length < 0:
            raise ValueError("span length must be non-negative")

    @classmethod
    def from_bounds(cls, start: int, end: int) -> TextSpan:
        """Build a span from inclusive *start* and exclusive *end* offsets."""

        if end < start:
            raise ValueError("span end must not precede its start")
        return cls(start=start, length=end - start)

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    def contains(self, position: int) -> bool:
        """Return True when *position* lies inside the span (end excluded)."""

        return self.start <= position < self.end

    def contains_span(self, other: TextSpan) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: TextSpan) -> bool:
        """Return True when both spans share at least one character."""

        return max(self.start, other.start) < min(self.end, other.end)

    def intersection(self, other: TextSpan) -> TextSpan | None:
        """Return the shared range, or None when the spans are disjoint.

        Touching spans intersect in an empty span at the shared boundary.
        """

        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start > end:
            return None
        return TextSpan.from_bounds(start, end)

    def relative_to(self, origin: int) -> TextSpan:
        """Re-anchor the span so that *origin* becomes offset zero."""

        if origin > self.start:
            raise ValueError("origin must not lie after the span start")
        return TextSpan(start=self.start - origin, length=self.length)

    def __str__(self) -> str:
        return f"[{self.start}..{self.end})"


@dataclass(frozen=True, order=True)
class LinePosition:
    """Zero-based line and character offset."""

    line: int
    character: int

    def __str__(self) -> str:
        return f"({self.line},{self.character})"


@dataclass(frozen=True)
class LinePositionSpan:
    """Zero-based start and end positions derived from a snapshot's line table."""

    start: LinePosition
    end: LinePosition

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("line position span end must not precede its start")

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


__all__ = ["LinePosition", "LinePositionSpan", "TextSpan"]
