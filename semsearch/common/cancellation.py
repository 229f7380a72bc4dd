"""Cooperative cancellation for long-running operations."""

from __future__ import annotations

import threading

from ..core.domain.exceptions import OperationCancelledError


class CancellationToken:
    """Thread-safe flag checked between units of work.

    Cancellation is cooperative: the token never interrupts a running
    provider call, it only stops the operation at its next checkpoint.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation."""
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str = "operation") -> None:
        """Raise ``OperationCancelledError`` if cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelledError(
                f"{operation} was cancelled",
                context={"operation": operation, "reason": self.reason},
            )
