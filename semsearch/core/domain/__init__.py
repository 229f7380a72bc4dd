"""Domain models for the semantic chunk search engine.

Models are organized by area:

- chunk: Sentence, DocumentMetadata, ChunkMetadata, SemanticChunk, ChunkDraft
- search: ChunkCandidate and SearchResult for ranking
- config: ChunkerConfig and SearchConfig

All models are re-exported here for convenient importing:

    from semsearch.core.domain import SemanticChunk, SearchResult, ChunkerConfig
"""

from .chunk import ChunkDraft, ChunkMetadata, DocumentMetadata, SemanticChunk, Sentence
from .config import ChunkerConfig, SearchConfig
from .search import ChunkCandidate, SearchResult

__all__ = [
    # Chunk models
    "Sentence",
    "DocumentMetadata",
    "ChunkMetadata",
    "SemanticChunk",
    "ChunkDraft",
    # Search models
    "ChunkCandidate",
    "SearchResult",
    # Configuration
    "ChunkerConfig",
    "SearchConfig",
]
