"""Similarity calculation exceptions.

A similarity error always means the data or the embedding model is
inconsistent; it is fatal for the comparison that raised it.
"""

from typing import Any

from .base import ErrorKind, SemSearchError


class SimilarityError(SemSearchError):
    """Similarity could not be computed."""

    error_code = "SEM_SIM_001"
    kind = ErrorKind.INTERNAL_INCONSISTENCY


class DimensionMismatchError(SimilarityError):
    """Two vectors have different dimensions."""

    error_code = "SEM_SIM_002"

    def __init__(
        self,
        expected: int,
        actual: int,
        *,
        message: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            message or f"Vector dimension mismatch: expected {expected}, got {actual}",
            context={"expected": expected, "actual": actual, **(context or {})},
        )


class ZeroVectorError(SimilarityError):
    """A vector with zero magnitude has no direction to compare."""

    error_code = "SEM_SIM_003"


class InvalidSimilarityValueError(SimilarityError):
    """Similarity came out as NaN or infinite."""

    error_code = "SEM_SIM_004"
