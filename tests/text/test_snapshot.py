from __future__ import annotations

import pytest

from spanmap.text import BufferSnapshot, LinePosition, TextBuffer, TextSpan


def test_line_table_recognises_mixed_line_breaks() -> None:
    snapshot = BufferSnapshot.from_text("one\r\ntwo\nthree\rfour")

    assert snapshot.line_count == 4
    assert [snapshot.text_of(line.span) for line in snapshot.lines] == ["one", "two", "three", "four"]
    assert snapshot.lines[0].span_including_line_break == TextSpan(0, 5)


def test_trailing_line_break_opens_an_empty_last_line() -> None:
    snapshot = BufferSnapshot.from_text("alpha\n")

    assert snapshot.line_count == 2
    assert snapshot.lines[-1].span == TextSpan(6, 0)
    assert snapshot.line_position(6) == LinePosition(1, 0)


def test_line_position_span_derives_from_line_table() -> None:
    snapshot = BufferSnapshot.from_text("first\nsecond line\nthird")

    span = TextSpan(start=13, length=7)  # "line\nth"

    result = snapshot.line_position_span(span)

    assert result.start == LinePosition(1, 7)
    assert result.end == LinePosition(2, 2)


def test_position_inside_crlf_belongs_to_preceding_line() -> None:
    snapshot = BufferSnapshot.from_text("ab\r\ncd")

    assert snapshot.line_from_position(3).line_number == 0
    assert snapshot.line_from_position(4).line_number == 1


def test_positions_outside_snapshot_raise() -> None:
    snapshot = BufferSnapshot.from_text("short")

    with pytest.raises(ValueError):
        snapshot.line_position(6)
    with pytest.raises(ValueError):
        snapshot.text_of(TextSpan(3, 5))


def test_empty_text_has_a_single_empty_line() -> None:
    snapshot = BufferSnapshot.from_text("")

    assert snapshot.line_count == 1
    assert snapshot.line_position_span(TextSpan(0, 0)).start == LinePosition(0, 0)


def test_text_buffer_edits_publish_new_snapshots() -> None:
    buffer = TextBuffer("hello world")
    before = buffer.current

    after = buffer.replace(TextSpan(6, 5), "there")

    assert before.text == "hello world"
    assert before.version == 0
    assert after.text == "hello there"
    assert after.version == 1
    assert after.buffer_id == before.buffer_id
    assert buffer.current is after


def test_text_buffer_rejects_edits_past_the_end() -> None:
    buffer = TextBuffer("abc")

    with pytest.raises(ValueError):
        buffer.replace(TextSpan(2, 5), "x")
    assert buffer.current.version == 0
