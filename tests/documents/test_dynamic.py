from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from spanmap.configuration import load_projection_map
from spanmap.documents import DocumentServices
from spanmap.documents.dynamic import (
    ProjectionMapFileInfoProvider,
    build_dynamic_file_info,
)
from spanmap.errors import ProjectionMapError
from spanmap.excerpt import ExcerptMode, ProjectionExcerpter
from spanmap.mapping import ProjectionSpanMapper
from spanmap.text import TextSpan


def test_build_dynamic_file_info_wires_projection(projected_files) -> None:
    info = build_dynamic_file_info(load_projection_map(projected_files.projection_map))
    document = info.to_document()

    assert document.is_generated
    assert document.name == "page.tmpl.py"
    assert isinstance(document.services.span_mapping, ProjectionSpanMapper)
    assert isinstance(document.services.excerpt, ProjectionExcerpter)

    (result,) = asyncio.run(document.services.span_mapping.map_spans(document, [TextSpan(18, 5)]))

    assert Path(result.file_path).name == "page.tmpl"
    assert result.span == TextSpan(7, 5)
    assert (result.line_position_span.start.line, result.line_position_span.start.character) == (0, 7)


def test_projected_document_supports_excerpts(projected_files) -> None:
    document = build_dynamic_file_info(load_projection_map(projected_files.projection_map)).to_document()

    excerpt = asyncio.run(
        document.services.excerpt.try_excerpt(document, TextSpan(31, 4), ExcerptMode.TOOLTIP)
    )

    assert excerpt is not None
    assert excerpt.content == "<h1>{{ title }}</h1>\n<p>{{ body }}</p>\n"
    assert excerpt.highlighted_text == "body"


def test_build_logs_projection_details(projected_files, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="spanmap.documents.dynamic")

    build_dynamic_file_info(load_projection_map(projected_files.projection_map))

    record = next(record for record in caplog.records if record.getMessage() == "Loaded projection map")
    assert record.segment_count == 2
    assert record.projected_characters == 9


def test_segments_past_loaded_text_are_rejected(projected_files) -> None:
    projected_files.generated.write_text("short", encoding="utf-8")

    with pytest.raises(ProjectionMapError, match="generated range"):
        build_dynamic_file_info(load_projection_map(projected_files.projection_map))


def test_custom_services_are_attached(projected_files) -> None:
    services = DocumentServices(span_mapping=ProjectionSpanMapper(strict=True))

    info = build_dynamic_file_info(load_projection_map(projected_files.projection_map), services=services)

    assert info.services is services
    assert info.to_document(document_id="custom").document_id == "custom"


def test_provider_finds_map_beside_primary_and_caches(projected_files) -> None:
    provider = ProjectionMapFileInfoProvider()

    info = provider.get_dynamic_file_info(projected_files.primary)

    assert info is not None
    assert info.file_path == projected_files.generated.resolve()
    assert info.primary_path == projected_files.primary.resolve()
    assert provider.get_dynamic_file_info(projected_files.primary) is info

    provider.remove_dynamic_file_info(projected_files.primary)
    assert provider.get_dynamic_file_info(projected_files.primary) is not info


def test_provider_ignores_files_without_map(tmp_path: Path) -> None:
    plain = tmp_path / "notes.txt"
    plain.write_text("nothing to see", encoding="utf-8")

    assert ProjectionMapFileInfoProvider().get_dynamic_file_info(plain) is None
