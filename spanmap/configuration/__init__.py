"""Configuration utilities for spanmap."""
from __future__ import annotations

from .projection_map import (
    PROJECTION_MAP_SUFFIX,
    ProjectionMap,
    ProjectionMapDetails,
    load_projection_map,
    projection_map_path_for,
)

__all__ = [
    "PROJECTION_MAP_SUFFIX",
    "ProjectionMap",
    "ProjectionMapDetails",
    "load_projection_map",
    "projection_map_path_for",
]
