"""Composition root wiring the embedding adapter to the services."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.outbound.embeddings.ollama_adapter import OllamaEmbeddingAdapter
from ..common.rate_limiter import RateLimiter
from ..config import settings, setup_logging
from ..core.services.chunker import SemanticChunker
from ..core.services.embedding_cache import EmbeddingCache
from ..core.services.search_ranker import SearchRanker
from ..core.services.semantic_search import SemanticSearchService

logger = logging.getLogger(__name__)


@lru_cache
def configure_logging() -> logging.Logger:
    return setup_logging(level=settings.log_level, json_format=settings.log_json)


@lru_cache
def get_embedding_provider() -> OllamaEmbeddingAdapter:
    configure_logging()
    logger.info(f"Initializing OllamaEmbeddingAdapter ({settings.embedding_model})...")
    rate_limiter = RateLimiter(settings.embedding_requests_per_minute)
    return OllamaEmbeddingAdapter(
        base_url=settings.ollama_base_url,
        model=settings.embedding_model,
        timeout=settings.embedding_timeout_seconds,
        max_retries=settings.embedding_max_retries,
        rate_limiter=rate_limiter if rate_limiter.enabled else None,
    )


@lru_cache
def get_embedding_cache() -> EmbeddingCache:
    logger.info("Initializing EmbeddingCache...")
    return EmbeddingCache(
        capacity=settings.cache_capacity,
        ttl_seconds=settings.cache_ttl_seconds,
        tti_seconds=settings.cache_tti_seconds,
    )


@lru_cache
def get_chunker() -> SemanticChunker:
    logger.info("Initializing SemanticChunker...")
    return SemanticChunker(settings.chunker_config(), get_embedding_provider())


@lru_cache
def get_search_service() -> SemanticSearchService:
    logger.info("Initializing SemanticSearchService...")
    ranker = SearchRanker(settings.search_config())
    return SemanticSearchService(get_embedding_provider(), get_embedding_cache(), ranker)
