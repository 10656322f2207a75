"""Projection primitive relating generated buffers to their primary buffers."""
from __future__ import annotations

from .buffer import ProjectionBuffer, ProjectionSnapshot
from .models import (
    ProjectionCandidate,
    ProjectionRelation,
    ProjectionSegment,
    ProjectionSource,
)

__all__ = [
    "ProjectionBuffer",
    "ProjectionCandidate",
    "ProjectionRelation",
    "ProjectionSegment",
    "ProjectionSnapshot",
    "ProjectionSource",
]
