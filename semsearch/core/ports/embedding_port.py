"""Embedding Port Interface."""

from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for embedding providers.

    Implementations own their timeout and retry policy and raise an
    ``EmbeddingError`` subclass once that policy is exhausted.
    """

    @abstractmethod
    def embed(self, text: str) -> list[float]: ...

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts, returning vectors in input order."""
        ...
