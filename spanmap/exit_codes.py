"""Shared exit code definitions for spanmap CLI operations."""
from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Deterministic exit codes returned by the CLI."""

    SUCCESS = 0
    UNEXPECTED_ERROR = 1
    INVALID_INPUT = 2
    PROJECTION_MAP_ERROR = 3
    CONTRACT_VIOLATION = 4
    CANCELLED = 5
    TIMEOUT = 6
    DOCUMENT_CHANGED = 7


__all__ = ["ExitCode"]
