"""Domain-specific exception hierarchy for spanmap."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SpanMapError(Exception):
    """Base exception for spanmap errors with optional remediation text."""

    message: str
    remediation: str | None = None

    def __post_init__(self) -> None:  # pragma: no cover - dataclass validation hook
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InputValidationError(SpanMapError):
    """Raised when the CLI receives invalid or missing input."""


class ProjectionMapError(SpanMapError):
    """Raised when a projection map file cannot be loaded or is inconsistent."""


class ContractViolationError(SpanMapError):
    """Raised when a caller breaks a contract that must hold under correct usage."""


class OperationCancelledError(SpanMapError):
    """Raised when a mapping or excerpt call observes a cancellation request."""


class TimeoutExceededError(SpanMapError):
    """Raised when orchestration exceeds its allotted execution time."""


class DocumentChangedError(SpanMapError):
    """Raised when a document keeps changing while its spans are being mapped."""


__all__ = [
    "SpanMapError",
    "InputValidationError",
    "ProjectionMapError",
    "ContractViolationError",
    "OperationCancelledError",
    "TimeoutExceededError",
    "DocumentChangedError",
]
