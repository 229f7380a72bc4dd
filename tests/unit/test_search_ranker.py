"""Unit tests for SearchRanker."""

import math

import pytest
from conftest import make_candidate

from semsearch.common.cancellation import CancellationToken
from semsearch.core.domain import SearchConfig
from semsearch.core.domain.exceptions import (
    DimensionMismatchError,
    InvalidConfigurationError,
    OperationCancelledError,
    ZeroVectorError,
)
from semsearch.core.services.search_ranker import SearchRanker

pytestmark = pytest.mark.unit

QUERY = [1.0, 0.0]


def vector_with_similarity(similarity):
    """Unit vector whose cosine with QUERY equals ``similarity``."""
    return [similarity, math.sqrt(1.0 - similarity**2)]


@pytest.fixture
def ranker():
    return SearchRanker()


@pytest.fixture
def candidates():
    return [
        make_candidate("low", vector_with_similarity(0.3)),
        make_candidate("high", vector_with_similarity(0.9)),
        make_candidate("mid", vector_with_similarity(0.6)),
    ]


class TestRanking:
    """Tests for ordering and truncation."""

    def test_returns_top_results_in_order(self, ranker, candidates):
        results = ranker.search(QUERY, candidates, SearchConfig(max_results=2))
        assert [r.chunk_id for r in results] == ["high", "mid"]
        assert results[0].similarity == pytest.approx(0.9)
        assert results[1].similarity == pytest.approx(0.6)

    def test_min_similarity_with_no_match_returns_empty(self, ranker, candidates):
        assert ranker.search(QUERY, candidates, SearchConfig(min_similarity=0.95)) == []

    def test_min_similarity_filters(self, ranker, candidates):
        results = ranker.search(QUERY, candidates, SearchConfig(min_similarity=0.5))
        assert [r.chunk_id for r in results] == ["high", "mid"]

    def test_results_sorted_descending(self, ranker, candidates):
        results = ranker.search(QUERY, candidates)
        similarities = [r.similarity for r in results]
        assert similarities == sorted(similarities, reverse=True)

    def test_empty_candidates(self, ranker):
        assert ranker.search(QUERY, []) == []

    def test_ties_broken_by_chunk_index_then_source(self, ranker):
        same = vector_with_similarity(0.7)
        tied = [
            make_candidate("b-2", same, chunk_index=2, total_chunks=3, source_file="b.md"),
            make_candidate("b-0", same, chunk_index=0, total_chunks=3, source_file="b.md"),
            make_candidate("a-2", same, chunk_index=2, total_chunks=3, source_file="a.md"),
            make_candidate("a-0", same, chunk_index=0, total_chunks=3, source_file="a.md"),
        ]
        results = ranker.search(QUERY, tied)
        assert [r.chunk_id for r in results] == ["a-0", "b-0", "a-2", "b-2"]

    def test_ordering_is_deterministic(self, ranker, candidates):
        first = ranker.search(QUERY, candidates)
        second = ranker.search(QUERY, list(reversed(candidates)))
        assert first == second

    def test_negative_similarity_below_default_floor(self, ranker):
        opposite = make_candidate("opposite", [-1.0, 0.0])
        assert ranker.search(QUERY, [opposite]) == []

    def test_default_config_from_constructor(self, candidates):
        ranker = SearchRanker(SearchConfig(max_results=1))
        assert [r.chunk_id for r in ranker.search(QUERY, candidates)] == ["high"]


class TestFiltering:
    """Tests for category filtering."""

    def test_category_filter(self, ranker):
        candidates = [
            make_candidate("ref", vector_with_similarity(0.9), category="reference"),
            make_candidate("tut", vector_with_similarity(0.8), category="tutorial"),
            make_candidate("none", vector_with_similarity(0.95)),
        ]
        results = ranker.search(QUERY, candidates, SearchConfig(category_filter="tutorial"))
        assert [r.chunk_id for r in results] == ["tut"]

    def test_category_filter_is_exact(self, ranker):
        candidates = [make_candidate("ref", vector_with_similarity(0.9), category="Reference")]
        assert ranker.search(QUERY, candidates, SearchConfig(category_filter="reference")) == []


class TestResultFields:
    """Tests for the result projection."""

    def test_fields_copied_from_chunk(self, ranker):
        candidate = make_candidate(
            42,
            vector_with_similarity(0.8),
            chunk_index=1,
            total_chunks=4,
            source_file="docs/guide.md",
            category="howto",
            title="Guide",
            content="How to configure retries.",
        )
        (result,) = ranker.search(QUERY, [candidate])
        assert result.chunk_id == 42
        assert result.source_file == "docs/guide.md"
        assert result.content == "How to configure retries."
        assert result.chunk_index == 1
        assert result.total_chunks == 4
        assert result.title == "Guide"
        assert result.category == "howto"
        assert result.sentence_range == (0, 2)
        assert result.avg_chunk_similarity == pytest.approx(0.8)


class TestErrors:
    """Tests for fatal errors and cancellation."""

    def test_dimension_mismatch_is_fatal(self, ranker, candidates):
        bad = [*candidates, make_candidate("bad", [1.0, 0.0, 0.0])]
        with pytest.raises(DimensionMismatchError) as exc_info:
            ranker.search(QUERY, bad)
        assert exc_info.value.extra_context["chunk_id"] == "bad"

    def test_zero_vector_candidate_is_fatal(self, ranker):
        with pytest.raises(ZeroVectorError):
            ranker.search(QUERY, [make_candidate("zero", [0.0, 0.0])])

    def test_cancelled_search(self, ranker, candidates):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            ranker.search(QUERY, candidates, cancel_token=token)

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_results": 0}, {"min_similarity": -0.1}, {"min_similarity": 1.5}],
    )
    def test_invalid_search_config(self, kwargs):
        with pytest.raises(InvalidConfigurationError):
            SearchConfig(**kwargs)
