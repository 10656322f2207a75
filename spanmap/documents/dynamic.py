"""Generated documents discovered from projection maps beside non-source files."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from spanmap.configuration import ProjectionMap, load_projection_map, projection_map_path_for
from spanmap.documents.models import Document, DocumentServices
from spanmap.excerpt import ProjectionExcerpter
from spanmap.mapping import ProjectionSpanMapper
from spanmap.projection import ProjectionBuffer
from spanmap.text import TextBuffer
from spanmap.utils import load_text_document

logger = logging.getLogger("spanmap.documents.dynamic")


@dataclass(frozen=True)
class DynamicFileInfo:
    """A generated document together with the projection back to its primary file."""

    file_path: Path
    primary_path: Path
    buffer: TextBuffer
    projection: ProjectionBuffer
    services: DocumentServices

    def to_document(self, document_id: str | None = None) -> Document:
        return Document(
            document_id=document_id or str(self.file_path),
            file_path=str(self.file_path),
            buffer=self.buffer,
            projection=self.projection,
            services=self.services,
            is_generated=True,
        )


class DynamicFileInfoProvider(Protocol):
    """Supplies generated documents for files that are not source files themselves."""

    def get_dynamic_file_info(self, file_path: Path) -> DynamicFileInfo | None:
        """Return the generated document for *file_path*, or None if it cannot be handled."""
        ...

    def remove_dynamic_file_info(self, file_path: Path) -> None:
        ...


def default_services() -> DocumentServices:
    """Capabilities exposed by every projected document."""

    return DocumentServices(span_mapping=ProjectionSpanMapper(), excerpt=ProjectionExcerpter())


def build_dynamic_file_info(
    projection_map: ProjectionMap,
    *,
    services: DocumentServices | None = None,
) -> DynamicFileInfo:
    """Load both documents named by *projection_map* and wire the projection between them."""

    primary_doc = load_text_document(projection_map.primary_path, "primary")
    generated_doc = load_text_document(projection_map.generated_path, "generated")
    projection_map.validate_against(
        primary_length=len(primary_doc.text),
        generated_length=len(generated_doc.text),
    )

    primary = primary_doc.to_buffer()
    generated = generated_doc.to_buffer()
    projection = ProjectionBuffer(
        secondary=generated,
        primary=primary,
        primary_path=str(projection_map.primary_path),
        segments=projection_map.segments,
    )

    details = projection_map.details()
    logger.info(
        "Loaded projection map",
        extra={
            "projection_map": str(details.source),
            "primary": str(details.primary_path),
            "generated": str(details.generated_path),
            "segment_count": details.segment_count,
            "projected_characters": details.projected_characters,
            "line_breaks": generated_doc.line_break_style,
        },
    )

    return DynamicFileInfo(
        file_path=projection_map.generated_path,
        primary_path=projection_map.primary_path,
        buffer=generated,
        projection=projection,
        services=services or default_services(),
    )


class ProjectionMapFileInfoProvider:
    """Finds ``<file>.projection.yaml`` next to a primary file and loads its generated twin."""

    def __init__(self, *, services: DocumentServices | None = None) -> None:
        self._services = services
        self._known: dict[Path, DynamicFileInfo] = {}

    def get_dynamic_file_info(self, file_path: Path) -> DynamicFileInfo | None:
        key = _normalize_key(file_path)
        known = self._known.get(key)
        if known is not None:
            return known

        map_path = projection_map_path_for(key)
        if not map_path.is_file():
            logger.debug("No projection map beside file", extra={"file_path": str(key)})
            return None

        info = build_dynamic_file_info(load_projection_map(map_path), services=self._services)
        self._known[key] = info
        return info

    def remove_dynamic_file_info(self, file_path: Path) -> None:
        self._known.pop(_normalize_key(file_path), None)


def _normalize_key(file_path: Path) -> Path:
    candidate = file_path.expanduser()
    try:
        return candidate.resolve()
    except OSError:
        return candidate


__all__ = [
    "DynamicFileInfo",
    "DynamicFileInfoProvider",
    "ProjectionMapFileInfoProvider",
    "build_dynamic_file_info",
    "default_services",
]
