"""Chunking pipeline exceptions."""

from .base import ErrorKind, SemSearchError


class ChunkingError(SemSearchError):
    """Chunking a document failed."""

    error_code = "SEM_CHK_001"


class EmptyDocumentError(ChunkingError):
    """Document is empty or contains no valid sentences."""

    error_code = "SEM_CHK_002"
    kind = ErrorKind.INVALID_INPUT


class EmbeddingGenerationError(ChunkingError):
    """An embedding batch failed; the whole document is aborted.

    The failing batch index is available in ``extra_context["batch_index"]``
    and the provider error in ``cause``.
    """

    error_code = "SEM_CHK_003"
    kind = ErrorKind.INTERNAL_INCONSISTENCY
    classify_by_cause = True


class SentenceSplittingError(ChunkingError):
    """Input text could not be decoded or split."""

    error_code = "SEM_CHK_004"
    kind = ErrorKind.INVALID_INPUT
