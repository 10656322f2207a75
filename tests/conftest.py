"""Shared test fixtures for spanmap."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

PRIMARY_TEXT = "<h1>{{ title }}</h1>\n<p>{{ body }}</p>\n"
GENERATED_TEXT = "# generated\nwrite(title)\nwrite(body)\n"

PROJECTION_MAP_YAML = """\
primary: page.tmpl
generated: page.tmpl.py
segments:
  - generated: [18, 5]
    primary: [7, 5]
  - generated: [31, 4]
    primary: [27, 4]
"""


@dataclass(frozen=True)
class ProjectedFiles:
    primary: Path
    generated: Path
    projection_map: Path


@pytest.fixture
def projected_files(tmp_path: Path) -> ProjectedFiles:
    """Write a template, its generated twin and the map between them."""

    primary = tmp_path / "page.tmpl"
    generated = tmp_path / "page.tmpl.py"
    projection_map = tmp_path / "page.tmpl.projection.yaml"
    primary.write_text(PRIMARY_TEXT, encoding="utf-8", newline="")
    generated.write_text(GENERATED_TEXT, encoding="utf-8", newline="")
    projection_map.write_text(PROJECTION_MAP_YAML, encoding="utf-8")
    return ProjectedFiles(primary=primary, generated=generated, projection_map=projection_map)
