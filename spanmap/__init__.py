"""Cross-buffer span mapping and excerpt engine."""
from __future__ import annotations

from .errors import SpanMapError

__all__ = ("__version__", "SpanMapError")

__version__ = "0.1.0"
