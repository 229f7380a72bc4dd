"""Embedding cache exceptions."""

from .base import SemSearchError


class CacheError(SemSearchError):
    """Embedding cache failure."""

    error_code = "SEM_CACHE_001"


class CacheComputeError(CacheError):
    """The compute function of ``get_or_compute`` failed.

    Every caller attached to the same in-flight computation receives this
    error. Nothing is cached, so a later call may retry.
    """

    error_code = "SEM_CACHE_002"
    classify_by_cause = True
