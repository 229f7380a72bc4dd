"""Common utilities and shared functionality.

This package contains helper functions and classes used across the
chunking and search services.
"""

from .cancellation import CancellationToken
from .exception_handler import (
    ErrorKind,
    classify_error,
    format_exception_json,
    get_error_code,
    log_exception,
)
from .rate_limiter import RateLimiter
from .utils import clean_text, normalize_key

__all__ = [
    # Utilities
    "clean_text",
    "normalize_key",
    "CancellationToken",
    "RateLimiter",
    # Exception handlers
    "ErrorKind",
    "classify_error",
    "format_exception_json",
    "get_error_code",
    "log_exception",
]
