"""Segment-based projection between a generated buffer and its primary buffer."""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from spanmap.projection.models import ProjectionCandidate, ProjectionSegment
from spanmap.text import BufferSnapshot, TextBuffer, TextSpan

logger = logging.getLogger("spanmap.projection.buffer")


class ProjectionSnapshot:
    """Projection of one generated snapshot onto one primary snapshot.

    The generated text is a sequence of segments copied from the primary
    buffer interleaved with generated-only text. A query over the generated
    buffer yields one candidate per segment it touches, each clipped to the
    part of the query inside that segment. A query straddling a segment
    boundary therefore produces candidates shorter than the query.
    """

    def __init__(
        self,
        *,
        secondary: BufferSnapshot,
        primary: BufferSnapshot,
        primary_path: str,
        segments: Iterable[ProjectionSegment],
    ) -> None:
        ordered = tuple(sorted(segments, key=lambda segment: segment.secondary.start))
        _validate_segments(ordered, secondary=secondary, primary=primary)
        self.secondary = secondary
        self.primary = primary
        self.primary_path = primary_path
        self.segments = ordered

    async def map_to_primary(self, span: TextSpan) -> Sequence[ProjectionCandidate]:
        return self.candidates_for(span)

    def candidates_for(self, span: TextSpan) -> tuple[ProjectionCandidate, ...]:
        """Synchronous form of :meth:`map_to_primary`."""

        candidates: list[ProjectionCandidate] = []
        for segment in self.segments:
            overlap = segment.secondary.intersection(span)
            if overlap is None:
                continue
            # Non-empty queries ignore segments they merely touch.
            if overlap.is_empty and not span.is_empty:
                continue
            offset = overlap.start - segment.secondary.start
            candidates.append(
                ProjectionCandidate(
                    span=TextSpan(start=segment.primary.start + offset, length=overlap.length),
                    snapshot=self.primary,
                )
            )
        return tuple(candidates)


class ProjectionBuffer:
    """Ties a generated buffer to the primary buffer it was produced from.

    Segments are recorded against the current version of both buffers. Once
    either buffer is edited the segments no longer describe it, and
    :meth:`snapshot_for` stops handing out projections.
    """

    def __init__(
        self,
        *,
        secondary: TextBuffer,
        primary: TextBuffer,
        primary_path: str,
        segments: Iterable[ProjectionSegment],
    ) -> None:
        ordered = tuple(sorted(segments, key=lambda segment: segment.secondary.start))
        _validate_segments(ordered, secondary=secondary.current, primary=primary.current)
        self.secondary = secondary
        self.primary = primary
        self.primary_path = primary_path
        self.segments = ordered
        self.secondary_version = secondary.current.version
        self.primary_version = primary.current.version

    def snapshot_for(self, snapshot: BufferSnapshot) -> ProjectionSnapshot | None:
        """Return the projection of *snapshot*, or None when either side has moved on."""

        if snapshot.buffer_id != self.secondary.buffer_id or snapshot.version != self.secondary_version:
            logger.debug(
                "No projection for snapshot",
                extra={
                    "buffer_id": snapshot.buffer_id,
                    "version": snapshot.version,
                    "projected_version": self.secondary_version,
                },
            )
            return None

        primary = self.primary.current
        if primary.version != self.primary_version:
            logger.debug(
                "Primary buffer edited since projection was built",
                extra={
                    "primary_path": self.primary_path,
                    "primary_version": primary.version,
                    "projected_version": self.primary_version,
                },
            )
            return None

        return ProjectionSnapshot(
            secondary=snapshot,
            primary=primary,
            primary_path=self.primary_path,
            segments=self.segments,
        )


def _validate_segments(
    segments: Sequence[ProjectionSegment],
    *,
    secondary: BufferSnapshot,
    primary: BufferSnapshot,
) -> None:
    previous: ProjectionSegment | None = None
    for segment in segments:
        if not secondary.contains_span(segment.secondary):
            raise ValueError(f"generated range {segment.secondary} is outside the generated text")
        if not primary.contains_span(segment.primary):
            raise ValueError(f"primary range {segment.primary} is outside the primary text")
        if previous is not None and previous.secondary.overlaps(segment.secondary):
            raise ValueError(
                f"generated ranges {previous.secondary} and {segment.secondary} overlap"
            )
        previous = segment


__all__ = ["ProjectionBuffer", "ProjectionSnapshot"]
