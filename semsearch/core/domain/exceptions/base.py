"""Base exception and error classification for the semantic chunk search engine.

Every error raised by the package carries:
- an error code (``SEM_<AREA>_<NNN>``) for quick identification
- an ``ErrorKind`` telling the caller whether retrying can help
- an optional cause, chained as ``__cause__``
- the raise site (class, function, file, line), captured on construction
"""

from __future__ import annotations

import inspect
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import PurePath
from types import FrameType
from typing import Any


class ErrorKind(Enum):
    """What a failure means for the caller's retry strategy."""

    INVALID_INPUT = "invalid_input"
    SERVICE_UNAVAILABLE = "service_unavailable"
    INTERNAL_INCONSISTENCY = "internal_inconsistency"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RaiseSite:
    """Where an exception was constructed."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def from_frame(cls, frame: FrameType | None) -> RaiseSite:
        if frame is None:
            return cls("<unknown>", "<unknown>", "<unknown>", 0)
        owner = frame.f_locals.get("self")
        return cls(
            class_name=type(owner).__name__ if owner is not None else "<module>",
            method_name=frame.f_code.co_name,
            file_name=PurePath(frame.f_code.co_filename.replace("\\", "/")).name,
            line_number=frame.f_lineno,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method_name,
            "file": self.file_name,
            "line": self.line_number,
            "timestamp": self.timestamp,
        }


class SemSearchError(Exception):
    """Base exception for all semantic chunk search errors.

    Subclasses set ``error_code`` and ``kind``. Wrapper errors set
    ``classify_by_cause`` so they are classified like the failure they wrap.

    Example:
        try:
            vectors = provider.embed_batch(batch)
        except EmbeddingError as e:
            raise EmbeddingGenerationError(
                "Embedding batch failed",
                cause=e,
                context={"batch_index": 3},
            ) from e
    """

    error_code: str = "SEM_ERR_001"
    kind: ErrorKind = ErrorKind.UNKNOWN
    classify_by_cause: bool = False

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            cause: The underlying exception, if any.
            context: Key-value pairs describing the failed operation.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = dict(context or {})
        self.location = RaiseSite.from_frame(_raise_site_frame())
        self.stack_trace = "".join(traceback.format_exception(cause)) if cause else None
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_kind(self) -> ErrorKind:
        return classify_error(self)

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Convert the exception to a JSON-serializable dictionary.

        Args:
            include_trace: Include the cause's stack trace, if there is one.
        """
        result: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "kind": self.error_kind.value,
                "message": self.message,
            },
            "location": self.location.to_dict(),
        }
        if self.extra_context:
            result["context"] = dict(self.extra_context)
        if self.cause is not None:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        if include_trace and self.stack_trace:
            result["stack_trace"] = [line for line in self.stack_trace.splitlines() if line.strip()]
        return result


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception to the kind of failure it represents.

    Wrapper errors are classified by their cause, so a provider outage seen
    through the cache or the chunker still reads as ``SERVICE_UNAVAILABLE``.
    A wrapped failure of unknown nature is treated as a service failure.
    """
    if isinstance(exc, SemSearchError):
        if exc.classify_by_cause and exc.cause is not None:
            kind = classify_error(exc.cause)
            return ErrorKind.SERVICE_UNAVAILABLE if kind is ErrorKind.UNKNOWN else kind
        return exc.kind
    if isinstance(exc, ConnectionError | TimeoutError):
        return ErrorKind.SERVICE_UNAVAILABLE
    if isinstance(exc, ValueError | TypeError):
        return ErrorKind.INVALID_INPUT
    return ErrorKind.UNKNOWN


def _raise_site_frame() -> FrameType | None:
    """First frame outside the chain of exception constructors."""
    frame = inspect.currentframe()
    frame = frame.f_back if frame else None
    while (
        frame is not None
        and frame.f_code.co_name == "__init__"
        and isinstance(frame.f_locals.get("self"), SemSearchError)
    ):
        frame = frame.f_back
    return frame
