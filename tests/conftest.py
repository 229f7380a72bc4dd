"""
Pytest configuration and shared fixtures.
"""

import math
import threading

import pytest

from semsearch.core.domain import ChunkCandidate, ChunkMetadata, SemanticChunk
from semsearch.core.ports import EmbeddingPort


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "slow: Slow tests (real sleeps, threads)")


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MappingEmbeddingProvider(EmbeddingPort):
    """Returns pre-registered vectors and records every batch it sees."""

    def __init__(self, vectors: dict[str, list[float]]):
        self.vectors = vectors
        self.batches: list[list[str]] = []
        self.embed_calls: list[str] = []
        self._lock = threading.Lock()

    def embed(self, text: str) -> list[float]:
        with self._lock:
            self.embed_calls.append(text)
        return list(self.vectors[text])

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        with self._lock:
            self.batches.append(list(texts))
        return [list(self.vectors[text]) for text in texts]


def angle_vectors(similarities: list[float]) -> list[list[float]]:
    """2-D unit vectors whose neighbours have the given cosine similarities."""
    theta = 0.0
    vectors = [[1.0, 0.0]]
    for similarity in similarities:
        theta += math.acos(similarity)
        vectors.append([math.cos(theta), math.sin(theta)])
    return vectors


def numbered_sentences(count: int) -> list[str]:
    return [f"Sentence {i} covers its own topic." for i in range(count)]


def make_candidate(
    chunk_id,
    embedding,
    *,
    chunk_index: int = 0,
    total_chunks: int = 1,
    source_file: str = "doc.md",
    category: str | None = None,
    title: str | None = None,
    content: str = "Chunk content for testing.",
) -> ChunkCandidate:
    chunk = SemanticChunk(
        content=content,
        chunk_index=chunk_index,
        total_chunks=total_chunks,
        start_sentence=0,
        end_sentence=2,
        avg_similarity=0.8,
        metadata=ChunkMetadata(
            source_file=source_file,
            title=title,
            category=category,
            word_count=len(content.split()),
            char_count=len(content),
        ),
    )
    return ChunkCandidate(chunk_id=chunk_id, chunk=chunk, embedding=embedding)


@pytest.fixture
def manual_clock():
    """A clock starting at 0 that only moves when advanced."""
    return ManualClock()
