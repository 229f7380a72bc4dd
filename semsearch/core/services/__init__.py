"""Core services for chunking and search.

- splitter: SentenceSplitter
- similarity: cosine similarity and score statistics
- chunker: SemanticChunker (adaptive boundary detection)
- embedding_cache: EmbeddingCache (LRU/TTL/TTI, single-flight)
- search_ranker: SearchRanker
- semantic_search: SemanticSearchService
"""

from .chunker import SemanticChunker
from .embedding_cache import CacheEntry, CacheStats, EmbeddingCache
from .search_ranker import SearchRanker
from .semantic_search import SemanticSearchService
from .similarity import cosine_similarity, mean_similarity, pairwise_similarities, percentile
from .splitter import DEFAULT_ABBREVIATIONS, SentenceSplitter

__all__ = [
    "SentenceSplitter",
    "DEFAULT_ABBREVIATIONS",
    "cosine_similarity",
    "pairwise_similarities",
    "percentile",
    "mean_similarity",
    "SemanticChunker",
    "EmbeddingCache",
    "CacheEntry",
    "CacheStats",
    "SearchRanker",
    "SemanticSearchService",
]
