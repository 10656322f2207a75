"""Span mapping from generated buffers to original documents."""
from __future__ import annotations

from .mapper import (
    ProjectionSpanMapper,
    map_and_get_first,
    map_identity,
    resolve_projection,
    select_candidate,
)
from .models import MappedSpanResult

__all__ = [
    "MappedSpanResult",
    "ProjectionSpanMapper",
    "map_and_get_first",
    "map_identity",
    "resolve_projection",
    "select_candidate",
]
