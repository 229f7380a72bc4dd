"""Similarity ranking of candidate chunks against a query embedding."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ...common.cancellation import CancellationToken
from ..domain import ChunkCandidate, SearchConfig, SearchResult
from ..domain.exceptions import DimensionMismatchError
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)

# Candidates scored between cancellation checks
CANCEL_CHECK_INTERVAL = 256


class SearchRanker:
    """Scores, filters and orders chunk candidates for a query.

    Results are ordered by similarity (descending), then chunk index
    (ascending), then source file (ascending), so equal scores always come
    back in the same order.
    """

    def __init__(self, default_config: SearchConfig | None = None) -> None:
        self.default_config = default_config or SearchConfig()

    def search(
        self,
        query_embedding: Sequence[float],
        candidates: Sequence[ChunkCandidate],
        config: SearchConfig | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[SearchResult]:
        """Rank candidates by cosine similarity to the query.

        Args:
            query_embedding: Embedding of the query text.
            candidates: Snapshot of stored chunks with their embeddings.
            config: Result limit, similarity floor and category filter.
            cancel_token: Checked before and periodically during scoring.

        Returns:
            At most ``max_results`` results, possibly empty.

        Raises:
            DimensionMismatchError: If any candidate embedding differs in
                length from the query embedding.
            OperationCancelledError: If cancelled while scoring.
        """
        config = config or self.default_config
        if cancel_token:
            cancel_token.raise_if_cancelled("search")

        dimension = len(query_embedding)
        for candidate in candidates:
            if len(candidate.embedding) != dimension:
                raise DimensionMismatchError(
                    expected=dimension,
                    actual=len(candidate.embedding),
                    context={"chunk_id": candidate.chunk_id},
                )

        if config.category_filter is not None:
            candidates = [c for c in candidates if c.category == config.category_filter]

        results: list[SearchResult] = []
        for position, candidate in enumerate(candidates):
            if cancel_token and position % CANCEL_CHECK_INTERVAL == 0:
                cancel_token.raise_if_cancelled("search")
            similarity = cosine_similarity(query_embedding, candidate.embedding)
            if similarity >= config.min_similarity:
                results.append(SearchResult.from_candidate(candidate, similarity))

        results.sort(key=lambda r: (-r.similarity, r.chunk_index, r.source_file))
        logger.debug(
            f"Ranked {len(candidates)} candidates, {len(results)} above "
            f"{config.min_similarity}, returning {min(len(results), config.max_results)}"
        )
        return results[: config.max_results]
