"""Cooperative cancellation exception."""

from .base import ErrorKind, SemSearchError


class OperationCancelledError(SemSearchError):
    """The operation was cancelled through its cancellation token."""

    error_code = "SEM_OPS_001"
    kind = ErrorKind.CANCELLED
