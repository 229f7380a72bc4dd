"""Structured reporting of exceptions.

Package errors render themselves through ``SemSearchError.to_dict``; anything
else is described from its traceback so both end up in the same JSON shape:

    {"error": {"type", "code", "kind", "message"}, "location": {...},
     "context": {...}, "cause": {...}, "stack_trace": [...]}
"""

import json
import logging
import traceback
from pathlib import PurePath
from typing import Any

from ..core.domain.exceptions import ErrorKind, SemSearchError, classify_error

logger = logging.getLogger(__name__)

FOREIGN_ERROR_CODE = "PYTHON_ERR"

__all__ = [
    "FOREIGN_ERROR_CODE",
    "ErrorKind",
    "classify_error",
    "format_exception_json",
    "get_error_code",
    "log_exception",
]


def get_error_code(exc: BaseException) -> str:
    """Error code of a package error, ``PYTHON_ERR`` for anything else."""
    if isinstance(exc, SemSearchError):
        return exc.error_code
    return FOREIGN_ERROR_CODE


def _innermost_frame(exc: BaseException) -> dict[str, Any]:
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    if not frames:
        return {"class": "<unknown>", "method": "<unknown>", "file": "<unknown>", "line": 0}
    frame = frames[-1]
    return {
        "class": "<unknown>",
        "method": frame.name,
        "file": PurePath(frame.filename.replace("\\", "/")).name,
        "line": frame.lineno or 0,
    }


def _describe_foreign(exc: BaseException, include_trace: bool) -> dict[str, Any]:
    described: dict[str, Any] = {
        "error": {
            "type": type(exc).__name__,
            "code": FOREIGN_ERROR_CODE,
            "kind": classify_error(exc).value,
            "message": str(exc),
        },
        "location": _innermost_frame(exc),
    }
    if include_trace and exc.__traceback__ is not None:
        lines = "".join(traceback.format_exception(exc)).splitlines()
        described["stack_trace"] = [line for line in lines if line.strip()]
    return described


def format_exception_json(
    exc: BaseException,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Describe any exception as a JSON-serializable dictionary.

    Args:
        exc: The exception to describe.
        include_trace: Include the stack trace when one is available.
        extra_context: Merged over the exception's own context; these keys win.
    """
    if isinstance(exc, SemSearchError):
        result = exc.to_dict(include_trace=include_trace)
    else:
        result = _describe_foreign(exc, include_trace)

    if extra_context:
        result["context"] = {**result.get("context", {}), **extra_context}
    return result


def log_exception(
    exc: BaseException,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log an exception as a single JSON line, stack trace included."""
    payload = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    (log or logger).log(level, json.dumps(payload, default=str))
