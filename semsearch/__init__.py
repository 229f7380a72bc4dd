"""Semantic chunk search: adaptive document chunking and embedding search.

Typical use goes through the composition root:

    from semsearch.composition.container import get_chunker, get_search_service

    chunks = get_chunker().chunk_document(text, DocumentMetadata(source_file="guide.md"))
    results = get_search_service().search("configure retries", candidates)
"""

from .core.domain import (
    ChunkCandidate,
    ChunkerConfig,
    ChunkMetadata,
    DocumentMetadata,
    SearchConfig,
    SearchResult,
    SemanticChunk,
    Sentence,
)
from .core.services import (
    EmbeddingCache,
    SearchRanker,
    SemanticChunker,
    SemanticSearchService,
    SentenceSplitter,
)

__version__ = "0.1.0"

__all__ = [
    "ChunkCandidate",
    "ChunkerConfig",
    "ChunkMetadata",
    "DocumentMetadata",
    "SearchConfig",
    "SearchResult",
    "SemanticChunk",
    "Sentence",
    "EmbeddingCache",
    "SearchRanker",
    "SemanticChunker",
    "SemanticSearchService",
    "SentenceSplitter",
]
