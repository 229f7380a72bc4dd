"""Search candidate and result models."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .chunk import SemanticChunk


@dataclass(frozen=True)
class ChunkCandidate:
    """A stored chunk offered to the ranker together with its embedding.

    Candidate snapshots are supplied by the persistence layer and are never
    modified by a search.

    Attributes:
        chunk_id: Storage identifier of the chunk.
        chunk: The chunk record.
        embedding: The chunk's embedding vector.
    """

    chunk_id: int | str
    chunk: SemanticChunk
    embedding: Sequence[float]

    @property
    def category(self) -> str | None:
        return self.chunk.metadata.category

    @property
    def source_file(self) -> str:
        return self.chunk.metadata.source_file


@dataclass(frozen=True)
class SearchResult:
    """A ranked chunk returned for one query.

    Attributes:
        chunk_id: Storage identifier of the matched chunk.
        source_file: File the chunk came from.
        content: Chunk text.
        similarity: Cosine similarity between query and chunk (-1.0 to 1.0).
        chunk_index: Position of the chunk in its document.
        total_chunks: Number of chunks in that document.
        title: Optional document title.
        category: Optional document category.
        sentence_range: Inclusive (start, end) sentence indices.
        avg_chunk_similarity: The chunk's internal coherence score.
    """

    chunk_id: int | str
    source_file: str
    content: str
    similarity: float
    chunk_index: int
    total_chunks: int
    title: str | None
    category: str | None
    sentence_range: tuple[int, int]
    avg_chunk_similarity: float

    @classmethod
    def from_candidate(cls, candidate: ChunkCandidate, similarity: float) -> SearchResult:
        chunk = candidate.chunk
        return cls(
            chunk_id=candidate.chunk_id,
            source_file=chunk.metadata.source_file,
            content=chunk.content,
            similarity=similarity,
            chunk_index=chunk.chunk_index,
            total_chunks=chunk.total_chunks,
            title=chunk.metadata.title,
            category=chunk.metadata.category,
            sentence_range=(chunk.start_sentence, chunk.end_sentence),
            avg_chunk_similarity=chunk.avg_similarity,
        )
