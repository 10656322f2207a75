"""Cooperative cancellation for mapping and excerpt calls."""
from __future__ import annotations

import threading

from spanmap.errors import OperationCancelledError


class CancellationToken:
    """Flag checked by long-running calls at each suspension point.

    Tokens may be cancelled from any thread. A call that observes the flag
    raises :class:`OperationCancelledError` and discards its partial work.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(
                message="The operation was cancelled before it completed.",
                remediation="Re-issue the request once the caller no longer needs to abort it.",
            )


def check_cancelled(token: CancellationToken | None) -> None:
    """Raise when *token* has been cancelled; tolerate a missing token."""

    if token is not None:
        token.raise_if_cancelled()


__all__ = ["CancellationToken", "check_cancelled"]
