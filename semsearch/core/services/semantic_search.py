"""Query-side search service.

Embeds the query through the shared embedding cache and ranks the supplied
candidates against it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ...common.cancellation import CancellationToken
from ..domain import ChunkCandidate, SearchConfig, SearchResult
from ..domain.exceptions import EmptyQueryError
from ..ports.embedding_port import EmbeddingPort
from .embedding_cache import EmbeddingCache
from .search_ranker import SearchRanker

logger = logging.getLogger(__name__)


class SemanticSearchService:
    """Answers text queries against a candidate snapshot."""

    def __init__(
        self,
        embedding_provider: EmbeddingPort,
        cache: EmbeddingCache,
        ranker: SearchRanker | None = None,
    ) -> None:
        self.embedding_provider = embedding_provider
        self.cache = cache
        self.ranker = ranker or SearchRanker()

    def search(
        self,
        query: str,
        candidates: Sequence[ChunkCandidate],
        config: SearchConfig | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[SearchResult]:
        """Search candidates for chunks similar to ``query``.

        Args:
            query: Query text.
            candidates: Chunks to rank, e.g. every chunk of a category.
            config: Search parameters; the ranker's defaults when omitted.
            cancel_token: Cooperative cancellation flag.

        Returns:
            Ranked results.

        Raises:
            EmptyQueryError: If the query is blank.
            CacheComputeError: If the query could not be embedded.
            DimensionMismatchError: If candidates and query differ in dimension.
        """
        query = query.strip()
        if not query:
            raise EmptyQueryError("Query cannot be empty")

        if cancel_token:
            cancel_token.raise_if_cancelled("search")
        query_embedding = self.cache.get_or_compute(query, self.embedding_provider.embed)

        results = self.ranker.search(query_embedding, candidates, config, cancel_token)
        logger.info(f"Search '{query[:50]}' returned {len(results)} results")
        return results
