"""
In-memory caches for the ranking pipeline.

Two independent caches, both process-lifetime (no persistence):

1. TokenCache - raw text → normalized tokens
   - Exact-string keys (whitespace differences = different keys)
   - Bounded: once size exceeds max_size, the oldest evict_count keys
     are dropped before the next insert (batch FIFO, not LRU)

2. CollectionCache - single slot holding the last fetched story batch
   - Valid while age < expiry window (default 5 minutes)
   - Serve-stale-on-error: failed refresh falls back to the expired batch

Each cache owns a lock around its read-modify-write sections, so
concurrent requests never lose or duplicate entries.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .models import Story

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_CACHE_SIZE = 100
DEFAULT_EVICT_COUNT = 20
DEFAULT_EXPIRY_SECONDS = 5 * 60


class TokenCache:
    """Bounded text → tokens memo with batch FIFO eviction."""

    def __init__(self, max_size: int = DEFAULT_TOKEN_CACHE_SIZE, evict_count: int = DEFAULT_EVICT_COUNT):
        """
        Args:
            max_size: Distinct-key bound; exceeding it triggers eviction
            evict_count: Number of oldest keys dropped per eviction
        """
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        if evict_count < 1:
            raise ValueError("evict_count must be >= 1")
        self.max_size = max_size
        self.evict_count = evict_count
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[str, Tuple[str, ...]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, text: str) -> Optional[List[str]]:
        """Return a copy of cached tokens, or None on miss."""
        with self._lock:
            tokens = self._entries.get(text)
            if tokens is None:
                self.misses += 1
                return None
            self.hits += 1
            return list(tokens)

    def set(self, text: str, tokens: Sequence[str]) -> None:
        """Insert tokens, evicting the oldest batch first if over the bound."""
        with self._lock:
            if text not in self._entries and len(self._entries) > self.max_size:
                self._evict_oldest()
            self._entries[text] = tuple(tokens)

    def evict(self) -> int:
        """Drop the oldest batch of keys. Returns number of keys removed."""
        with self._lock:
            return self._evict_oldest()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def _evict_oldest(self) -> int:
        # Caller holds the lock
        removed = 0
        while self._entries and removed < self.evict_count:
            self._entries.popitem(last=False)
            removed += 1
        logger.debug(f"Token cache evicted {removed} keys ({len(self._entries)} remaining)")
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, text: str) -> bool:
        with self._lock:
            return text in self._entries


@dataclass
class CollectionSnapshot:
    """Story batch as served by CollectionCache"""
    stories: List[Story]
    fetched_at: float
    cache_hit: bool = False
    stale: bool = False     # True when served after a failed refresh
    age_seconds: float = field(default=0.0)


class CollectionCache:
    """Single-slot cache for the last fetched story batch."""

    def __init__(self, expiry_seconds: float = DEFAULT_EXPIRY_SECONDS, clock: Callable[[], float] = time.time):
        """
        Args:
            expiry_seconds: Entry is valid while now - fetched_at < expiry_seconds
            clock: Time source in epoch seconds (injectable for tests)
        """
        self.expiry_seconds = expiry_seconds
        self._clock = clock
        self._stories: Optional[List[Story]] = None
        self._fetched_at: Optional[float] = None
        self._lock = threading.Lock()

    def is_valid(self) -> bool:
        with self._lock:
            return self._is_valid_locked()

    def peek(self) -> Optional[CollectionSnapshot]:
        """Current entry regardless of age, or None if nothing cached."""
        with self._lock:
            return self._snapshot_locked(cache_hit=True, stale=not self._is_valid_locked())

    def store(self, stories: List[Story]) -> CollectionSnapshot:
        with self._lock:
            self._stories = list(stories)
            self._fetched_at = self._clock()
            return self._snapshot_locked(cache_hit=False, stale=False)

    def invalidate(self) -> None:
        with self._lock:
            self._stories = None
            self._fetched_at = None

    def get_or_fetch(self, fetch: Callable[[], List[Story]]) -> CollectionSnapshot:
        """
        Serve the cached batch if fresh, otherwise refresh via fetch().

        Refresh failures fall back to the expired batch when one exists;
        with nothing cached the original exception propagates.

        Args:
            fetch: Zero-argument callable returning a fresh story batch

        Returns:
            CollectionSnapshot with cache_hit/stale flags set
        """
        with self._lock:
            if self._is_valid_locked():
                logger.info("Using cached stories")
                return self._snapshot_locked(cache_hit=True, stale=False)

        # Fetch outside the lock so slow upstream calls don't block readers
        try:
            stories = fetch()
        except Exception as e:
            with self._lock:
                if self._stories is None:
                    raise
                if self._is_valid_locked():
                    # Another request refreshed the slot while this fetch was failing
                    logger.info(f"Story fetch failed ({e}); using batch stored by a concurrent refresh")
                    return self._snapshot_locked(cache_hit=True, stale=False)
                logger.warning(f"Story fetch failed ({e}); using expired cache as fallback")
                return self._snapshot_locked(cache_hit=True, stale=True)

        return self.store(stories)

    def _is_valid_locked(self) -> bool:
        if self._stories is None or self._fetched_at is None:
            return False
        return (self._clock() - self._fetched_at) < self.expiry_seconds

    def _snapshot_locked(self, cache_hit: bool, stale: bool) -> Optional[CollectionSnapshot]:
        if self._stories is None:
            return None
        return CollectionSnapshot(
            stories=list(self._stories),
            fetched_at=self._fetched_at,
            cache_hit=cache_hit,
            stale=stale,
            age_seconds=max(0.0, self._clock() - self._fetched_at),
        )
