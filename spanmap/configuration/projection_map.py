"""Projection map loading and validation helpers."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import yaml

from spanmap.errors import ProjectionMapError
from spanmap.projection import ProjectionSegment
from spanmap.text import TextSpan

PROJECTION_MAP_SUFFIX = ".projection.yaml"


@dataclass(frozen=True)
class ProjectionMapDetails:
    """Summary details describing a loaded projection map."""

    source: Path
    primary_path: Path
    generated_path: Path
    segment_count: int
    projected_characters: int


@dataclass(frozen=True)
class ProjectionMap:
    """Describes how a generated file was assembled from its primary file."""

    source: Path
    primary_path: Path
    generated_path: Path
    segments: tuple[ProjectionSegment, ...]

    def details(self) -> ProjectionMapDetails:
        """Summarise map coverage for diagnostics and logging."""

        return ProjectionMapDetails(
            source=self.source,
            primary_path=self.primary_path,
            generated_path=self.generated_path,
            segment_count=len(self.segments),
            projected_characters=sum(segment.primary.length for segment in self.segments),
        )

    def validate_against(self, *, primary_length: int, generated_length: int) -> None:
        """Ensure every segment lies inside the loaded primary and generated texts."""

        for index, segment in enumerate(self.segments):
            if segment.secondary.end > generated_length:
                raise ProjectionMapError(
                    message=(
                        f"Segment {index} of {self.source} covers generated range {segment.secondary} "
                        f"but {self.generated_path.name} has {generated_length} characters."
                    ),
                    remediation="Regenerate the projection map after rebuilding the generated file.",
                )
            if segment.primary.end > primary_length:
                raise ProjectionMapError(
                    message=(
                        f"Segment {index} of {self.source} covers primary range {segment.primary} "
                        f"but {self.primary_path.name} has {primary_length} characters."
                    ),
                    remediation="Regenerate the projection map after editing the primary file.",
                )


def projection_map_path_for(primary_path: Path) -> Path:
    """Return the conventional map location next to *primary_path*."""

    return primary_path.with_name(primary_path.name + PROJECTION_MAP_SUFFIX)


def load_projection_map(path: Path) -> ProjectionMap:
    """Load and validate the projection map stored at *path*."""

    resolved = _resolve_path(path)
    payload = _load_yaml(resolved)
    base = resolved.parent

    primary_path = _read_document_path(payload, "primary", base, resolved)
    generated_path = _read_document_path(payload, "generated", base, resolved)
    segments = _read_segments(payload.get("segments"), resolved)

    return ProjectionMap(
        source=resolved,
        primary_path=primary_path,
        generated_path=generated_path,
        segments=segments,
    )


def _resolve_path(path: Path) -> Path:
    candidate = path.expanduser()
    try:
        resolved = candidate.resolve()
    except OSError:
        resolved = candidate

    if not resolved.exists() or not resolved.is_file():
        raise ProjectionMapError(
            message=f"Projection map file {resolved} does not exist or is not a file.",
            remediation="Verify the path passed with --projection-map.",
        )
    return resolved


def _load_yaml(path: Path) -> dict:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProjectionMapError(
            message=f"Unable to read projection map file {path}.",
            remediation="Check file permissions and retry.",
        ) from exc

    try:
        loaded = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ProjectionMapError(
            message=f"Projection map file {path} contains invalid YAML.",
            remediation="Ensure the file follows the documented schema.",
        ) from exc

    if not isinstance(loaded, dict):
        raise ProjectionMapError(
            message=f"Projection map file {path} must define a mapping at the root level.",
            remediation="Provide 'primary', 'generated' and 'segments' keys.",
        )
    return loaded


def _read_document_path(payload: Mapping, key: str, base: Path, source: Path) -> Path:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ProjectionMapError(
            message=f"Projection map file {source} must name the {key} document.",
            remediation=f"Add a '{key}: <path>' entry relative to the map file.",
        )
    candidate = Path(value.strip()).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate


def _read_segments(data: object, source: Path) -> tuple[ProjectionSegment, ...]:
    if data is None:
        return ()
    if not isinstance(data, Sequence) or isinstance(data, str | bytes):
        raise ProjectionMapError(
            message=f"Segments in {source} must be a list.",
            remediation="Under 'segments', provide entries with 'generated' and 'primary' ranges.",
        )

    segments: list[ProjectionSegment] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, Mapping):
            raise ProjectionMapError(
                message=f"Segment {index} in {source} must be a mapping.",
                remediation="Example: - {generated: [120, 14], primary: [30, 14]}.",
            )
        generated = _read_range(entry.get("generated"), "generated", index, source)
        primary = _read_range(entry.get("primary"), "primary", index, source)
        if generated.length != primary.length:
            raise ProjectionMapError(
                message=(
                    f"Segment {index} in {source} has generated length {generated.length} "
                    f"but primary length {primary.length}."
                ),
                remediation="Projected segments copy text verbatim; use the same length on both sides.",
            )
        segments.append(ProjectionSegment(secondary=generated, primary=primary))

    ordered = sorted(segments, key=lambda segment: segment.secondary.start)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.secondary.overlaps(current.secondary):
            raise ProjectionMapError(
                message=(
                    f"Generated ranges {previous.secondary} and {current.secondary} in {source} overlap."
                ),
                remediation="Each generated character may come from at most one segment.",
            )
    return tuple(segments)


def _read_range(value: object, label: str, index: int, source: Path) -> TextSpan:
    if (
        not isinstance(value, Sequence)
        or isinstance(value, str | bytes)
        or len(value) != 2
        or not all(isinstance(item, int) and not isinstance(item, bool) for item in value)
    ):
        raise ProjectionMapError(
            message=f"The {label} range of segment {index} in {source} must be [start, length].",
            remediation="Use two non-negative integers, e.g. [30, 14].",
        )
    start, length = value
    if start < 0 or length < 0:
        raise ProjectionMapError(
            message=f"The {label} range of segment {index} in {source} cannot be negative.",
            remediation="Use two non-negative integers, e.g. [30, 14].",
        )
    return TextSpan(start=start, length=length)


__all__ = [
    "PROJECTION_MAP_SUFFIX",
    "ProjectionMap",
    "ProjectionMapDetails",
    "load_projection_map",
    "projection_map_path_for",
]
