"""
Bounded in-process cache of text embeddings.

Entries are keyed by the SHA-256 digest of the exact input text and held
in a ``cachetools.TTLCache``: least-recently-used eviction when full, and
expiry a fixed time after insertion. A cache hit refreshes recency but
not age.
"""

import hashlib
import threading
import time
from typing import Callable, Optional, Sequence

import numpy as np
from cachetools import TTLCache

from cvmatch.utils.config import get_settings
from cvmatch.utils.logger import get_logger

logger = get_logger(__name__)


def cache_key(text: str) -> str:
    """Deterministic cache key for a text (case and whitespace sensitive)."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class EmbeddingCache:
    """
    Thread-safe LRU + TTL cache for embeddings.

    Stored vectors are private read-only copies, so callers can neither
    mutate a cached vector nor observe a partially written one.
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries. Defaults to config setting.
            ttl_seconds: Entry lifetime in seconds. Defaults to config setting.
            clock: Time source, injectable for tests.
        """
        settings = get_settings()
        self.max_size = max_size if max_size is not None else settings.cache.max_entries
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else settings.cache.ttl_seconds
        )
        if self.max_size < 1:
            raise ValueError("Cache max_size must be at least 1")

        self._store: TTLCache = TTLCache(
            maxsize=self.max_size, ttl=self.ttl_seconds, timer=clock
        )
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, text: str) -> Optional[np.ndarray]:
        """
        Look up the embedding for ``text``.

        Returns:
            The cached vector (read-only), or None when absent or expired.
        """
        key = cache_key(text)
        with self._lock:
            vector = self._store.get(key)
            if vector is None:
                self._misses += 1
            else:
                self._hits += 1
            return vector

    def set(self, text: str, embedding: Sequence[float] | np.ndarray) -> None:
        """Store an embedding, evicting the least recently used entry when full."""
        vector = np.array(embedding, dtype=np.float32, copy=True).ravel()
        vector.setflags(write=False)

        with self._lock:
            self._store[cache_key(text)] = vector

    def clear(self) -> None:
        """Remove all entries and reset statistics."""
        with self._lock:
            size = self._live_size()
            self._store.clear()
            self._hits = 0
            self._misses = 0
        logger.info(f"Embedding cache cleared ({size} entries)")

    def purge_expired(self) -> int:
        """Drop expired entries. Returns the number removed."""
        with self._lock:
            return len(self._store.expire())

    def stats(self) -> dict[str, float]:
        """Return ``size``, ``max_size``, ``hits``, ``misses`` and ``hit_rate``."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": self._live_size(),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / lookups if lookups else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return self._live_size()

    def __contains__(self, text: object) -> bool:
        if not isinstance(text, str):
            return False
        with self._lock:
            return cache_key(text) in self._store

    def _live_size(self) -> int:
        self._store.expire()
        return len(self._store)
