"""Embedding provider adapters."""

from .ollama_adapter import OllamaEmbeddingAdapter

__all__ = ["OllamaEmbeddingAdapter"]
