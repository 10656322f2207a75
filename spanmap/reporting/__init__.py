"""Reporting helpers for spanmap CLI output."""
from __future__ import annotations

from .renderer import (
    ReferenceRow,
    ReportEnvelope,
    ReportRenderOptions,
    build_reference_row,
    render_excerpt,
    render_references_report,
)

__all__ = [
    "ReferenceRow",
    "ReportEnvelope",
    "ReportRenderOptions",
    "build_reference_row",
    "render_excerpt",
    "render_references_report",
]
