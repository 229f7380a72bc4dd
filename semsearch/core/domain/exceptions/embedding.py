"""Embedding provider exceptions.

These are raised by ``EmbeddingPort`` implementations once their own retry
policy is exhausted.
"""

from .base import ErrorKind, SemSearchError


class EmbeddingError(SemSearchError):
    """Failed to generate embeddings."""

    error_code = "SEM_EMB_001"
    kind = ErrorKind.SERVICE_UNAVAILABLE


class EmbeddingAPIError(EmbeddingError):
    """Embedding API returned an error or an unusable payload."""

    error_code = "SEM_EMB_002"


class EmbeddingRateLimitError(EmbeddingError):
    """Embedding API rate limit exceeded."""

    error_code = "SEM_EMB_003"


class EmbeddingConnectionError(EmbeddingError):
    """Embedding service could not be reached or timed out."""

    error_code = "SEM_EMB_004"


class EmbeddingDimensionError(EmbeddingError):
    """Embeddings returned for one request do not share a dimension."""

    error_code = "SEM_EMB_005"
    kind = ErrorKind.INTERNAL_INCONSISTENCY
