"""Orchestration layer for spanmap."""
from __future__ import annotations

from .runner import DEFAULT_TIMEOUT_SECONDS, ExecutionOutcome, handle_domain_error, run_lookup

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "ExecutionOutcome",
    "handle_domain_error",
    "run_lookup",
]
