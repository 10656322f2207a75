"""Projection value types and the capabilities the mapper depends on."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from spanmap.text import BufferSnapshot, LinePositionSpan, TextSpan


@dataclass(frozen=True)
class ProjectionSegment:
    """A run of primary text copied verbatim into the generated buffer."""

    secondary: TextSpan
    primary: TextSpan

    def __post_init__(self) -> None:
        if self.secondary.length != self.primary.length:
            raise ValueError(
                f"segment lengths differ: generated {self.secondary} vs primary {self.primary}"
            )


@dataclass(frozen=True)
class ProjectionCandidate:
    """One primary-buffer range a generated span maps onto."""

    span: TextSpan
    snapshot: BufferSnapshot

    @property
    def length(self) -> int:
        return self.span.length

    def line_position_span(self) -> LinePositionSpan:
        return self.snapshot.line_position_span(self.span)


@runtime_checkable
class ProjectionRelation(Protocol):
    """Maps ranges of one generated snapshot onto its primary buffer."""

    primary_path: str

    async def map_to_primary(self, span: TextSpan) -> Sequence[ProjectionCandidate]:
        """Return candidate primary ranges in a meaningful order, possibly none."""
        ...


@runtime_checkable
class ProjectionSource(Protocol):
    """Resolves the projection that corresponds to a generated snapshot."""

    def snapshot_for(self, snapshot: BufferSnapshot) -> ProjectionRelation | None:
        ...


__all__ = [
    "ProjectionCandidate",
    "ProjectionRelation",
    "ProjectionSegment",
    "ProjectionSource",
]
