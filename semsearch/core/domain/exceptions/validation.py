"""Validation exceptions."""

from .base import ErrorKind, SemSearchError


class ValidationError(SemSearchError):
    """Input validation failed."""

    error_code = "SEM_VAL_001"
    kind = ErrorKind.INVALID_INPUT


class EmptyQueryError(ValidationError):
    """Query cannot be empty or whitespace only."""

    error_code = "SEM_VAL_002"
