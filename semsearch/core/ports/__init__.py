"""Ports implemented by outbound adapters."""

from .embedding_port import EmbeddingPort

__all__ = ["EmbeddingPort"]
