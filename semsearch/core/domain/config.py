"""Validated configuration values for chunking and search.

Both configs validate themselves on construction, so an invalid value is
reported before any document is split or any embedding is requested.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class ChunkerConfig:
    """Parameters of the adaptive chunker.

    Attributes:
        similarity_threshold: Split strictness in [0, 1]. A gap is only a
            boundary candidate when its similarity is below
            ``1 - similarity_threshold``; higher values demand a sharper
            topic shift and give larger chunks.
        min_chunk_sentences: Minimum sentences per chunk (the last chunk of a
            document may be shorter).
        max_chunk_sentences: Maximum sentences per chunk.
        similarity_percentile: Percentile in [0, 100] of the document's own
            similarity distribution used as the adaptive cutoff.
        min_sentence_length: Sentences shorter than this (trimmed) are dropped.
        embedding_batch_size: Sentences per embedding request.
        max_concurrent_batches: Embedding requests allowed in flight at once.
    """

    similarity_threshold: float = 0.5
    min_chunk_sentences: int = 3
    max_chunk_sentences: int = 30
    similarity_percentile: float = 75.0
    min_sentence_length: int = 10
    embedding_batch_size: int = 32
    max_concurrent_batches: int = 4

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def technical_docs(cls) -> ChunkerConfig:
        """Stricter preset producing larger chunks."""
        return cls(
            similarity_threshold=0.6,
            similarity_percentile=70.0,
            max_chunk_sentences=40,
        )

    @classmethod
    def narrative(cls) -> ChunkerConfig:
        """Looser preset producing smaller chunks."""
        return cls(
            similarity_threshold=0.4,
            similarity_percentile=80.0,
            max_chunk_sentences=20,
        )

    def validate(self) -> None:
        """Check every parameter.

        Raises:
            InvalidConfigurationError: If any value is out of range.
        """
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise InvalidConfigurationError(
                "similarity_threshold must be between 0.0 and 1.0",
                context={"similarity_threshold": self.similarity_threshold},
            )
        if not 0.0 <= self.similarity_percentile <= 100.0:
            raise InvalidConfigurationError(
                "similarity_percentile must be between 0 and 100",
                context={"similarity_percentile": self.similarity_percentile},
            )
        if self.min_chunk_sentences < 1:
            raise InvalidConfigurationError(
                "min_chunk_sentences must be at least 1",
                context={"min_chunk_sentences": self.min_chunk_sentences},
            )
        if self.max_chunk_sentences < self.min_chunk_sentences:
            raise InvalidConfigurationError(
                "max_chunk_sentences must be >= min_chunk_sentences",
                context={
                    "min_chunk_sentences": self.min_chunk_sentences,
                    "max_chunk_sentences": self.max_chunk_sentences,
                },
            )
        if self.min_sentence_length <= 0:
            raise InvalidConfigurationError(
                "min_sentence_length must be greater than 0",
                context={"min_sentence_length": self.min_sentence_length},
            )
        if self.embedding_batch_size <= 0:
            raise InvalidConfigurationError(
                "embedding_batch_size must be greater than 0",
                context={"embedding_batch_size": self.embedding_batch_size},
            )
        if self.max_concurrent_batches <= 0:
            raise InvalidConfigurationError(
                "max_concurrent_batches must be greater than 0",
                context={"max_concurrent_batches": self.max_concurrent_batches},
            )


@dataclass(frozen=True)
class SearchConfig:
    """Parameters of a single search.

    Attributes:
        max_results: Maximum number of results returned.
        min_similarity: Inclusive lower bound on query similarity, in [0, 1].
        category_filter: Only rank chunks whose category matches exactly.
    """

    max_results: int = 10
    min_similarity: float = 0.0
    category_filter: str | None = None

    def __post_init__(self) -> None:
        if self.max_results <= 0:
            raise InvalidConfigurationError(
                "max_results must be greater than 0",
                context={"max_results": self.max_results},
            )
        if not 0.0 <= self.min_similarity <= 1.0:
            raise InvalidConfigurationError(
                "min_similarity must be between 0.0 and 1.0",
                context={"min_similarity": self.min_similarity},
            )
