"""Immutable text snapshots and the buffers that hand them out."""
from __future__ import annotations

import re
import threading
import uuid
from bisect import bisect_right
from dataclasses import dataclass, field

from spanmap.text.spans import LinePosition, LinePositionSpan, TextSpan

_LINE_BREAK_PATTERN = re.compile("\r\n|[\r\n\u0085\u2028\u2029]")


@dataclass(frozen=True)
class TextLine:
    """One line of a snapshot, with and without its terminating line break."""

    line_number: int
    start: int
    end: int
    end_including_line_break: int

    @property
    def span(self) -> TextSpan:
        return TextSpan.from_bounds(self.start, self.end)

    @property
    def span_including_line_break(self) -> TextSpan:
        return TextSpan.from_bounds(self.start, self.end_including_line_break)


@dataclass(frozen=True)
class BufferSnapshot:
    """Full text of a buffer at one version, plus its line-break table."""

    buffer_id: str
    version: int
    text: str
    lines: tuple[TextLine, ...] = field(init=False, repr=False, compare=False)
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lines = tuple(_split_lines(self.text))
        object.__setattr__(self, "lines", lines)
        object.__setattr__(self, "_line_starts", tuple(line.start for line in lines))

    @classmethod
    def from_text(cls, text: str, *, buffer_id: str | None = None, version: int = 0) -> BufferSnapshot:
        return cls(buffer_id=buffer_id or uuid.uuid4().hex, version=version, text=text)

    def __len__(self) -> int:
        return len(self.text)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def last_line_number(self) -> int:
        return len(self.lines) - 1

    def line_from_position(self, position: int) -> TextLine:
        """Return the line containing *position*; the end of the text belongs to the last line."""

        self._require_position(position)
        index = bisect_right(self._line_starts, position) - 1
        return self.lines[index]

    def line_position(self, position: int) -> LinePosition:
        line = self.line_from_position(position)
        return LinePosition(line=line.line_number, character=position - line.start)

    def line_position_span(self, span: TextSpan) -> LinePositionSpan:
        """Derive the zero-based line/column span of *span* against this snapshot."""

        self._require_span(span)
        return LinePositionSpan(
            start=self.line_position(span.start),
            end=self.line_position(span.end),
        )

    def text_of(self, span: TextSpan) -> str:
        self._require_span(span)
        return self.text[span.start : span.end]

    def contains_span(self, span: TextSpan) -> bool:
        return span.end <= len(self.text)

    def _require_position(self, position: int) -> None:
        if position < 0 or position > len(self.text):
            raise ValueError(
                f"position {position} is outside snapshot bounds [0..{len(self.text)}]"
            )

    def _require_span(self, span: TextSpan) -> None:
        if not self.contains_span(span):
            raise ValueError(f"span {span} extends past snapshot length {len(self.text)}")


class TextBuffer:
    """Mutable text container; every edit publishes a new immutable snapshot."""

    def __init__(self, text: str = "", *, buffer_id: str | None = None) -> None:
        self._lock = threading.Lock()
        self._current = BufferSnapshot.from_text(text, buffer_id=buffer_id)

    @property
    def buffer_id(self) -> str:
        return self._current.buffer_id

    @property
    def current(self) -> BufferSnapshot:
        return self._current

    def replace(self, span: TextSpan, new_text: str) -> BufferSnapshot:
        """Replace *span* of the current text with *new_text* and return the new snapshot."""

        with self._lock:
            previous = self._current
            if not previous.contains_span(span):
                raise ValueError(f"span {span} extends past buffer length {len(previous)}")
            text = previous.text[: span.start] + new_text + previous.text[span.end :]
            self._current = BufferSnapshot(
                buffer_id=previous.buffer_id,
                version=previous.version + 1,
                text=text,
            )
            return self._current


def _split_lines(text: str):
    start = 0
    number = 0
    for match in _LINE_BREAK_PATTERN.finditer(text):
        yield TextLine(
            line_number=number,
            start=start,
            end=match.start(),
            end_including_line_break=match.end(),
        )
        start = match.end()
        number += 1
    yield TextLine(
        line_number=number,
        start=start,
        end=len(text),
        end_including_line_break=len(text),
    )


__all__ = ["BufferSnapshot", "TextBuffer", "TextLine"]
