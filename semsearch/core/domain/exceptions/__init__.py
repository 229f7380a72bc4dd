"""Custom exception hierarchy for the semantic chunk search engine.

This package provides structured exceptions with automatic context capture.
Each exception includes:
- Error codes for quick identification
- An ErrorKind that tells callers whether a retry can help
- Automatic capture of class, method, file, and line number
- Cause chaining for underlying exceptions
- JSON serialization for structured logging

Import from this package directly:

    from semsearch.core.domain.exceptions import SemSearchError, ZeroVectorError
"""

# Base classes
from .base import ErrorKind, RaiseSite, SemSearchError, classify_error

# Cache exceptions
from .cache import CacheComputeError, CacheError

# Cancellation
from .cancellation import OperationCancelledError

# Chunking exceptions
from .chunking import (
    ChunkingError,
    EmbeddingGenerationError,
    EmptyDocumentError,
    SentenceSplittingError,
)

# Configuration exceptions
from .configuration import ConfigurationError, InvalidConfigurationError

# Embedding exceptions
from .embedding import (
    EmbeddingAPIError,
    EmbeddingConnectionError,
    EmbeddingDimensionError,
    EmbeddingError,
    EmbeddingRateLimitError,
)

# Similarity exceptions
from .similarity import (
    DimensionMismatchError,
    InvalidSimilarityValueError,
    SimilarityError,
    ZeroVectorError,
)

# Validation exceptions
from .validation import EmptyQueryError, ValidationError

__all__ = [
    # Base
    "ErrorKind",
    "RaiseSite",
    "SemSearchError",
    "classify_error",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    # Validation
    "ValidationError",
    "EmptyQueryError",
    # Embedding
    "EmbeddingError",
    "EmbeddingAPIError",
    "EmbeddingRateLimitError",
    "EmbeddingConnectionError",
    "EmbeddingDimensionError",
    # Similarity
    "SimilarityError",
    "DimensionMismatchError",
    "ZeroVectorError",
    "InvalidSimilarityValueError",
    # Chunking
    "ChunkingError",
    "EmptyDocumentError",
    "EmbeddingGenerationError",
    "SentenceSplittingError",
    # Cache
    "CacheError",
    "CacheComputeError",
    # Cancellation
    "OperationCancelledError",
]
