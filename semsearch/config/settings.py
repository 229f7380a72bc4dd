"""Configuration management for the semantic chunk search engine."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.domain.config import ChunkerConfig, SearchConfig


def _sanitize_url(value: str) -> str:
    """Remove BOM characters, whitespace and trailing slashes from a URL."""
    if not value:
        return value
    return value.lstrip("\ufeff").strip().rstrip("/")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Embedding service
    ollama_base_url: str = "http://localhost:11434"
    embedding_model: str = "nomic-embed-text"
    embedding_timeout_seconds: float = 30.0
    embedding_max_retries: int = 3
    embedding_requests_per_minute: int | None = None

    @field_validator("ollama_base_url", mode="after")
    @classmethod
    def sanitize_base_url(cls, value: str) -> str:
        """Remove BOM, whitespace and trailing slash from the base URL."""
        return _sanitize_url(value)

    # Chunking
    similarity_threshold: float = 0.5
    similarity_percentile: float = 75.0
    min_chunk_sentences: int = 3
    max_chunk_sentences: int = 30
    min_sentence_length: int = 10
    embedding_batch_size: int = 32
    max_concurrent_batches: int = 4

    # Query embedding cache
    cache_capacity: int = 1000
    cache_ttl_seconds: float = 3600.0
    cache_tti_seconds: float = 1800.0

    # Search
    search_max_results: int = 10
    search_min_similarity: float = 0.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def chunker_config(self) -> ChunkerConfig:
        """Build a validated chunker configuration.

        Raises:
            InvalidConfigurationError: If any chunking value is out of range.
        """
        return ChunkerConfig(
            similarity_threshold=self.similarity_threshold,
            min_chunk_sentences=self.min_chunk_sentences,
            max_chunk_sentences=self.max_chunk_sentences,
            similarity_percentile=self.similarity_percentile,
            min_sentence_length=self.min_sentence_length,
            embedding_batch_size=self.embedding_batch_size,
            max_concurrent_batches=self.max_concurrent_batches,
        )

    def search_config(self, category_filter: str | None = None) -> SearchConfig:
        """Build a validated default search configuration."""
        return SearchConfig(
            max_results=self.search_max_results,
            min_similarity=self.search_min_similarity,
            category_filter=category_filter,
        )


# Global settings instance
settings = Settings()
