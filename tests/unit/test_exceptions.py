"""Unit tests for the exception hierarchy and exception reporting.

Covers error codes, error kinds used for retry decisions, raise-site capture
and the JSON shapes produced for package and foreign exceptions.
"""

import json
import logging

import pytest

from semsearch.common.exception_handler import (
    ErrorKind,
    classify_error,
    format_exception_json,
    get_error_code,
    log_exception,
)
from semsearch.core.domain.exceptions import (
    CacheComputeError,
    CacheError,
    ChunkingError,
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingAPIError,
    EmbeddingConnectionError,
    EmbeddingDimensionError,
    EmbeddingError,
    EmbeddingGenerationError,
    EmbeddingRateLimitError,
    EmptyDocumentError,
    EmptyQueryError,
    InvalidConfigurationError,
    InvalidSimilarityValueError,
    OperationCancelledError,
    RaiseSite,
    SemSearchError,
    SentenceSplittingError,
    SimilarityError,
    ValidationError,
    ZeroVectorError,
)

pytestmark = pytest.mark.unit

ALL_ERRORS = [
    SemSearchError,
    ConfigurationError,
    InvalidConfigurationError,
    ValidationError,
    EmptyQueryError,
    EmbeddingError,
    EmbeddingAPIError,
    EmbeddingRateLimitError,
    EmbeddingConnectionError,
    EmbeddingDimensionError,
    SimilarityError,
    ZeroVectorError,
    InvalidSimilarityValueError,
    ChunkingError,
    EmptyDocumentError,
    EmbeddingGenerationError,
    SentenceSplittingError,
    CacheError,
    CacheComputeError,
    OperationCancelledError,
]


class TestHierarchy:
    """Every error derives from SemSearchError through its area base."""

    @pytest.mark.parametrize("cls", ALL_ERRORS + [DimensionMismatchError])
    def test_rooted_at_sem_search_error(self, cls):
        assert issubclass(cls, SemSearchError)

    @pytest.mark.parametrize(
        ("area", "members"),
        [
            (
                EmbeddingError,
                (
                    EmbeddingAPIError,
                    EmbeddingRateLimitError,
                    EmbeddingConnectionError,
                    EmbeddingDimensionError,
                ),
            ),
            (ChunkingError, (EmptyDocumentError, EmbeddingGenerationError, SentenceSplittingError)),
            (SimilarityError, (DimensionMismatchError, ZeroVectorError, InvalidSimilarityValueError)),
            (ConfigurationError, (InvalidConfigurationError,)),
            (ValidationError, (EmptyQueryError,)),
            (CacheError, (CacheComputeError,)),
        ],
    )
    def test_area_bases(self, area, members):
        for cls in members:
            assert issubclass(cls, area)

    def test_error_codes_are_unique_and_prefixed(self):
        codes = [cls.error_code for cls in ALL_ERRORS + [DimensionMismatchError]]
        assert len(set(codes)) == len(codes)
        assert all(code.startswith("SEM_") for code in codes)

    def test_embedding_errors_caught_by_area_base(self):
        with pytest.raises(EmbeddingError) as exc_info:
            raise EmbeddingRateLimitError("slow down")
        assert exc_info.value.error_code == "SEM_EMB_003"


class TestConstruction:
    """Message, cause, context and raise site."""

    def test_message_and_default_code(self):
        exc = SemSearchError("cache unavailable")
        assert str(exc) == exc.message == "cache unavailable"
        assert exc.error_code == "SEM_ERR_001"
        assert exc.cause is None
        assert exc.stack_trace is None

    def test_context_is_copied(self):
        context = {"model": "nomic-embed-text", "timeout": 30}
        exc = EmbeddingConnectionError("unreachable", context=context)
        context["timeout"] = 5
        assert exc.extra_context == {"model": "nomic-embed-text", "timeout": 30}

    def test_cause_is_chained(self):
        refused = ConnectionError("connection refused")
        exc = EmbeddingConnectionError("unreachable", cause=refused)
        assert exc.cause is refused
        assert exc.__cause__ is refused
        assert "connection refused" in exc.stack_trace

    def test_raise_site_is_the_caller(self):
        exc = SemSearchError("here")
        assert isinstance(exc.location, RaiseSite)
        assert exc.location.file_name == "test_exceptions.py"
        assert exc.location.method_name == "test_raise_site_is_the_caller"
        assert exc.location.class_name == "TestConstruction"
        assert exc.location.line_number > 0

    def test_subclass_init_location_points_at_raise_site(self):
        exc = DimensionMismatchError(expected=3, actual=4)
        assert exc.location.method_name == "test_subclass_init_location_points_at_raise_site"

    def test_raise_site_without_frame(self):
        site = RaiseSite.from_frame(None)
        assert (site.class_name, site.method_name, site.line_number) == (
            "<unknown>",
            "<unknown>",
            0,
        )

    def test_dimension_mismatch_fields(self):
        exc = DimensionMismatchError(expected=768, actual=384, context={"chunk_id": 7})
        assert exc.expected == 768
        assert exc.actual == 384
        assert exc.extra_context == {"expected": 768, "actual": 384, "chunk_id": 7}
        assert "768" in exc.message


class TestToDict:
    """Tests for SemSearchError.to_dict."""

    def test_error_and_location_sections(self):
        result = ZeroVectorError("query vector is all zeros").to_dict()

        assert result["error"] == {
            "type": "ZeroVectorError",
            "code": "SEM_SIM_003",
            "kind": "internal_inconsistency",
            "message": "query vector is all zeros",
        }
        assert set(result["location"]) == {"class", "method", "file", "line", "timestamp"}
        assert "context" not in result
        assert "cause" not in result

    def test_context_and_cause_sections(self):
        exc = CacheComputeError(
            "compute failed",
            cause=ValueError("empty vector"),
            context={"key": "how to install"},
        )
        result = exc.to_dict()

        assert result["context"] == {"key": "how to install"}
        assert result["cause"] == {"type": "ValueError", "message": "empty vector"}
        assert result["error"]["kind"] == "invalid_input"

    def test_stack_trace_only_on_request(self):
        exc = EmbeddingGenerationError("batch failed", cause=RuntimeError("model crashed"))
        assert "stack_trace" not in exc.to_dict()
        trace = exc.to_dict(include_trace=True)["stack_trace"]
        assert any("model crashed" in line for line in trace)

    def test_json_serializable(self):
        exc = EmbeddingGenerationError("batch failed", context={"batch_index": 3, "batch_size": 32})
        assert json.loads(json.dumps(exc.to_dict()))["context"]["batch_index"] == 3


class TestExceptionReporting:
    """Tests for format_exception_json, get_error_code and log_exception."""

    def test_package_error_uses_to_dict(self):
        exc = EmbeddingConnectionError("unreachable", context={"url": "http://ollama:11434"})
        result = format_exception_json(exc)

        assert result["error"]["type"] == "EmbeddingConnectionError"
        assert result["error"]["code"] == "SEM_EMB_004"
        assert result["context"]["url"] == "http://ollama:11434"

    def test_foreign_error_described_from_traceback(self):
        try:
            int("not a number")
        except ValueError as e:
            result = format_exception_json(e, include_trace=True)

        assert result["error"]["type"] == "ValueError"
        assert result["error"]["code"] == "PYTHON_ERR"
        assert result["error"]["kind"] == "invalid_input"
        assert result["location"]["file"] == "test_exceptions.py"
        assert result["location"]["method"] == "test_foreign_error_described_from_traceback"
        assert result["stack_trace"]

    def test_foreign_error_never_raised(self):
        result = format_exception_json(KeyError("missing"))
        assert result["location"]["line"] == 0
        assert "stack_trace" not in result

    def test_extra_context_wins_over_own_context(self):
        exc = EmbeddingConnectionError("unreachable", context={"url": "a", "attempt": 1})
        result = format_exception_json(exc, extra_context={"attempt": 3, "source_file": "guide.md"})
        assert result["context"] == {"url": "a", "attempt": 3, "source_file": "guide.md"}

    def test_get_error_code(self):
        assert get_error_code(CacheComputeError("test")) == "SEM_CACHE_002"
        assert get_error_code(EmptyDocumentError("test")) == "SEM_CHK_002"
        assert get_error_code(RuntimeError("test")) == "PYTHON_ERR"

    def test_log_exception_emits_json(self, caplog):
        log = logging.getLogger("semsearch.tests")
        exc = EmbeddingGenerationError("Batch failed", context={"batch_index": 1})

        with caplog.at_level(logging.ERROR, logger="semsearch.tests"):
            log_exception(exc, log, extra_context={"source_file": "guide.md"})

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["error"]["code"] == "SEM_CHK_003"
        assert payload["context"]["batch_index"] == 1
        assert payload["context"]["source_file"] == "guide.md"

    def test_log_exception_level(self, caplog):
        log = logging.getLogger("semsearch.tests")
        with caplog.at_level(logging.WARNING, logger="semsearch.tests"):
            log_exception(EmptyQueryError("empty"), log, level=logging.WARNING)
        assert caplog.records[-1].levelno == logging.WARNING


class TestClassifyError:
    """Tests for mapping errors to retry strategies."""

    @pytest.mark.parametrize(
        "exc",
        [
            InvalidConfigurationError("bad threshold"),
            EmptyQueryError("empty"),
            EmptyDocumentError("empty"),
            SentenceSplittingError("bad utf-8"),
            ValueError("plain"),
        ],
    )
    def test_invalid_input(self, exc):
        assert classify_error(exc) is ErrorKind.INVALID_INPUT

    @pytest.mark.parametrize(
        "exc",
        [
            EmbeddingConnectionError("down"),
            EmbeddingRateLimitError("slow down"),
            EmbeddingAPIError("500"),
            TimeoutError("timed out"),
        ],
    )
    def test_service_unavailable(self, exc):
        assert classify_error(exc) is ErrorKind.SERVICE_UNAVAILABLE

    @pytest.mark.parametrize(
        "exc",
        [
            DimensionMismatchError(768, 384),
            ZeroVectorError("zero"),
            EmbeddingGenerationError("wrong vector count"),
        ],
    )
    def test_internal_inconsistency(self, exc):
        assert classify_error(exc) is ErrorKind.INTERNAL_INCONSISTENCY

    def test_cancelled(self):
        assert classify_error(OperationCancelledError("stop")) is ErrorKind.CANCELLED

    def test_unknown(self):
        assert classify_error(RuntimeError("?")) is ErrorKind.UNKNOWN

    def test_wrapper_classified_by_cause(self):
        cause = EmbeddingConnectionError("down")
        assert classify_error(CacheComputeError("failed", cause=cause)) is (
            ErrorKind.SERVICE_UNAVAILABLE
        )
        assert classify_error(EmbeddingGenerationError("failed", cause=cause)) is (
            ErrorKind.SERVICE_UNAVAILABLE
        )

    def test_wrapper_with_unknown_cause(self):
        wrapped = CacheComputeError("failed", cause=RuntimeError("model crashed"))
        assert classify_error(wrapped) is ErrorKind.SERVICE_UNAVAILABLE

    def test_wrapper_with_invalid_input_cause(self):
        wrapped = CacheComputeError("failed", cause=ValueError("empty vector"))
        assert classify_error(wrapped) is ErrorKind.INVALID_INPUT

    def test_kind_property_matches_classification(self):
        wrapped = EmbeddingGenerationError("failed", cause=EmbeddingRateLimitError("slow"))
        assert wrapped.error_kind is ErrorKind.SERVICE_UNAVAILABLE
        assert EmbeddingGenerationError.kind is ErrorKind.INTERNAL_INCONSISTENCY

    def test_dimension_error_from_provider_is_inconsistency(self):
        assert classify_error(EmbeddingDimensionError("mixed")) is (
            ErrorKind.INTERNAL_INCONSISTENCY
        )
