"""Ollama embedding adapter implementing the embedding port."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import requests

from ....common.rate_limiter import RateLimiter
from ....common.utils import clean_text
from ....core.domain.exceptions import (
    EmbeddingAPIError,
    EmbeddingConnectionError,
    EmbeddingDimensionError,
    EmbeddingError,
    EmbeddingRateLimitError,
    InvalidConfigurationError,
)
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "nomic-embed-text"
REQUEST_TIMEOUT = 30.0


class OllamaEmbeddingAdapter(EmbeddingPort):
    """Embedding provider backed by an Ollama server.

    Each text is sent to ``POST {base_url}/api/embeddings``. Rate limits,
    connection failures and server errors are retried with exponential
    backoff; other client errors fail immediately.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = 3,
        rate_limiter: RateLimiter | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the adapter.

        Args:
            base_url: Ollama server URL.
            model: Embedding model name.
            timeout: Per-request timeout in seconds.
            max_retries: Total attempts per text, at least 1.
            rate_limiter: Optional limiter acquired before every request.
            session: HTTP session; a new one is created when omitted.
            sleep: Backoff sleep function, injectable for tests.
        """
        if max_retries < 1:
            raise InvalidConfigurationError(
                "max_retries must be at least 1", context={"max_retries": max_retries}
            )
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limiter = rate_limiter
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "semsearch/0.1"})
        self._sleep = sleep

    def __enter__(self) -> OllamaEmbeddingAdapter:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/embeddings"

    def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            EmbeddingError: If the text is blank, or a subclass once the
                retry policy is exhausted.
        """
        prompt = clean_text(text).strip()
        if not prompt:
            raise EmbeddingError("Cannot embed empty text")

        last_error: EmbeddingError | None = None
        for attempt in range(self.max_retries):
            try:
                return self._request(prompt)
            except (EmbeddingRateLimitError, EmbeddingConnectionError) as e:
                last_error = e
            except EmbeddingAPIError as e:
                status = e.extra_context.get("status_code")
                if status is None or status < 500:
                    raise
                last_error = e

            if attempt < self.max_retries - 1:
                wait_time = 2**attempt
                logger.warning(
                    f"Embedding request failed ({last_error}), retrying in {wait_time}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                self._sleep(wait_time)

        assert last_error is not None
        logger.error(f"Embedding request failed after {self.max_retries} attempts")
        raise last_error

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts in order.

        Raises:
            EmbeddingDimensionError: If the returned vectors differ in length.
        """
        vectors = [self.embed(text) for text in texts]
        dimensions = {len(vector) for vector in vectors}
        if len(dimensions) > 1:
            raise EmbeddingDimensionError(
                "Embedding model returned vectors of different dimensions",
                context={"dimensions": sorted(dimensions), "model": self.model},
            )
        return vectors

    def _request(self, prompt: str) -> list[float]:
        if self.rate_limiter:
            self.rate_limiter.acquire()

        payload = {"model": self.model, "prompt": prompt}
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise EmbeddingConnectionError(
                f"Failed to reach embedding service: {e}",
                cause=e,
                context={"url": self.endpoint},
            )

        if response.status_code == 429:
            raise EmbeddingRateLimitError(
                "Embedding service rate limit exceeded",
                context={"status_code": 429, "model": self.model},
            )
        if not response.ok:
            raise EmbeddingAPIError(
                f"Embedding service returned HTTP {response.status_code}",
                context={
                    "status_code": response.status_code,
                    "model": self.model,
                    "body": response.text[:200],
                },
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingAPIError(
                "Embedding service returned invalid JSON", cause=e, context={"model": self.model}
            )

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise EmbeddingAPIError(
                "Embedding response has no embedding", context={"model": self.model}
            )
        try:
            return [float(x) for x in embedding]
        except (TypeError, ValueError) as e:
            raise EmbeddingAPIError(
                "Embedding response contains non-numeric values",
                cause=e,
                context={"model": self.model},
            )
