"""Documents, capabilities and the workspace that tracks them."""
from __future__ import annotations

from .models import Document, DocumentServices, DocumentSpan, ExcerptService, SpanMappingService
from .workspace import Workspace

__all__ = [
    "Document",
    "DocumentServices",
    "DocumentSpan",
    "ExcerptService",
    "SpanMappingService",
    "Workspace",
]
