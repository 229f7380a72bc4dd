"""Query embedding cache with LRU, TTL and idle-time eviction.

The cache avoids regenerating embeddings for repeated queries. It is safe to
share between threads: a single lock guards the entries, and misses are
computed outside the lock with at most one computation per key in flight.

Example:
    cache = EmbeddingCache(capacity=1000)
    vector = cache.get_or_compute("rust error handling", provider.embed)
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from dataclasses import dataclass

from ...common.utils import clean_text, normalize_key
from ..domain.exceptions import CacheComputeError, InvalidConfigurationError

logger = logging.getLogger(__name__)

CachedVector = tuple[float, ...]


@dataclass
class CacheEntry:
    """A cached vector and its timestamps (monotonic seconds)."""

    key: str
    value: CachedVector
    inserted_at: float
    last_accessed_at: float


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time cache counters."""

    hits: int
    misses: int
    evictions: int
    size: int
    capacity: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class EmbeddingCache:
    """Bounded, thread-safe cache of text to embedding vector.

    An entry is evicted when it is the least recently used one and room is
    needed, when it is older than ``ttl_seconds`` since insertion, or when it
    has not been read for ``tti_seconds``, whichever comes first. Expiry is
    checked lazily whenever the cache is accessed, so a stale vector is never
    returned.
    """

    def __init__(
        self,
        capacity: int = 1000,
        ttl_seconds: float = 3600.0,
        tti_seconds: float = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            capacity: Maximum number of entries.
            ttl_seconds: Maximum age of an entry since insertion.
            tti_seconds: Maximum time an entry may go without being read.
            clock: Monotonic time source, injectable for tests.
        """
        if capacity <= 0:
            raise InvalidConfigurationError(
                "cache capacity must be greater than 0", context={"capacity": capacity}
            )
        if ttl_seconds <= 0 or tti_seconds <= 0:
            raise InvalidConfigurationError(
                "cache ttl and tti must be greater than 0",
                context={"ttl_seconds": ttl_seconds, "tti_seconds": tti_seconds},
            )
        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self.tti_seconds = tti_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._pending: dict[str, Future[CachedVector]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        logger.debug(
            f"Created embedding cache with capacity {capacity}, "
            f"TTL {ttl_seconds}s, idle {tti_seconds}s"
        )

    def get(self, key: str) -> CachedVector | None:
        """Return the cached vector for ``key`` or None.

        A hit refreshes the idle timer and LRU position, never the insertion
        time.
        """
        normalized = normalize_key(key)
        with self._lock:
            entry = self._lookup(normalized, self._clock())
            return entry.value if entry else None

    def insert(self, key: str, value: Sequence[float]) -> None:
        """Cache ``value`` under ``key``, evicting entries if needed.

        Raises:
            ValueError: If the vector is empty.
        """
        normalized = normalize_key(key)
        vector = _freeze(value)
        with self._lock:
            self._store(normalized, vector, self._clock())

    def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[str], Sequence[float]],
    ) -> CachedVector:
        """Return the cached vector, computing it once on a miss.

        Concurrent callers for the same missing key share one call to
        ``compute_fn``; callers for other keys are not blocked by it. A
        failed computation is not cached.

        Args:
            key: Cache key, normalized before lookup.
            compute_fn: Called on a miss with the caller's text, cleaned and
                trimmed but not case-folded.

        Returns:
            The cached or freshly computed vector.

        Raises:
            CacheComputeError: If the computation failed, for the computing
                caller and every caller waiting on it.
        """
        normalized = normalize_key(key)
        with self._lock:
            entry = self._lookup(normalized, self._clock())
            if entry is not None:
                return entry.value
            future = self._pending.get(normalized)
            owner = future is None
            if future is None:
                future = Future()
                self._pending[normalized] = future

        if not owner:
            logger.debug(f"Waiting on in-flight computation for '{normalized}'")
            return future.result()

        logger.debug(f"Computing embedding for '{normalized}'")
        try:
            vector = _freeze(compute_fn(clean_text(key).strip()))
        except Exception as e:
            error = CacheComputeError(
                f"Failed to compute embedding for '{normalized}': {e}",
                cause=e,
                context={"key": normalized},
            )
            self._abandon(normalized, future, error)
            raise error from e
        except BaseException as e:
            self._abandon(normalized, future, e)
            raise

        with self._lock:
            self._store(normalized, vector, self._clock())
            self._pending.pop(normalized, None)
        future.set_result(vector)
        return vector

    def invalidate(self, key: str) -> bool:
        """Remove ``key`` from the cache. Returns True if it was present."""
        normalized = normalize_key(key)
        with self._lock:
            removed = self._entries.pop(normalized, None) is not None
        if removed:
            logger.debug(f"Invalidated cache entry for '{normalized}'")
        return removed

    def clear(self) -> None:
        """Drop every entry. In-flight computations are unaffected."""
        with self._lock:
            self._entries.clear()
        logger.debug("Cleared embedding cache")

    def purge_expired(self) -> int:
        """Evict every entry past its TTL or idle time.

        Returns:
            Number of entries evicted.
        """
        with self._lock:
            return self._evict_expired(self._clock())

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._entries),
                capacity=self.capacity,
            )

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired(self._clock())
            return len(self._entries)

    # Helpers below expect self._lock to be held

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return (
            now - entry.inserted_at >= self.ttl_seconds
            or now - entry.last_accessed_at >= self.tti_seconds
        )

    def _lookup(self, key: str, now: float) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is not None and self._is_expired(entry, now):
            del self._entries[key]
            self._evictions += 1
            entry = None
        if entry is None:
            self._misses += 1
            return None
        entry.last_accessed_at = now
        self._entries.move_to_end(key)
        self._hits += 1
        return entry

    def _store(self, key: str, vector: CachedVector, now: float) -> None:
        self._entries.pop(key, None)
        self._evict_expired(now)
        while len(self._entries) >= self.capacity:
            evicted_key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted least recently used entry '{evicted_key}'")
        self._entries[key] = CacheEntry(
            key=key, value=vector, inserted_at=now, last_accessed_at=now
        )

    def _evict_expired(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        self._evictions += len(expired)
        return len(expired)

    def _abandon(self, key: str, future: Future[CachedVector], error: BaseException) -> None:
        with self._lock:
            self._pending.pop(key, None)
        future.set_exception(error)


def _freeze(value: Sequence[float]) -> CachedVector:
    vector = tuple(float(x) for x in value)
    if not vector:
        raise ValueError("Embedding vector must not be empty")
    return vector
