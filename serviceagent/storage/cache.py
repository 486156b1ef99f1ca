"""
Key-value cache collaborator for plan resolution.

Plan lookups are cached per user for a fixed window. The resolver only
depends on ``KeyValueCache``, so the storage can be swapped (in-process
dict, Redis, browser storage bridge) without touching resolution logic.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Optional

from serviceagent.utils.logging import get_logger

logger = get_logger(__name__)


class KeyValueCache(ABC):
    """Abstract get/set/expire-by-ttl cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a value; ``ttl`` in seconds overrides the default."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""
        pass


@dataclass
class CacheEntry:
    """Cache entry with TTL and access metadata."""

    data: Any
    created_at: float
    ttl_seconds: int
    access_count: int = 0
    last_accessed: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        """Entries with a non-positive TTL never expire."""
        if self.ttl_seconds <= 0:
            return False
        return now - self.created_at >= self.ttl_seconds

    def access(self, now: float) -> Any:
        self.access_count += 1
        self.last_accessed = now
        return self.data


class InMemoryTTLCache(KeyValueCache):
    """
    In-process cache with per-entry TTL and LRU eviction.

    A cached ``None`` is indistinguishable from a miss through ``get``;
    callers that need to cache "no value" should wrap it (the plan
    resolver stores ``{"plan": None}``).
    """

    def __init__(
        self,
        max_entries: int = 1000,
        default_ttl: int = 600,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_entries: Maximum number of entries to store
            default_ttl: Default TTL in seconds
            clock: Monotonic time source, injectable for tests
        """
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()
        self.stats = {"hits": 0, "misses": 0, "evictions": 0, "expired_cleanups": 0}

        logger.debug(
            f"Cache initialized with max_entries={max_entries}, default_ttl={default_ttl}s"
        )

    def _evict_lru(self) -> None:
        if len(self._entries) <= self.max_entries:
            return

        sorted_entries = sorted(
            self._entries.items(),
            key=lambda item: item[1].last_accessed or item[1].created_at,
        )
        overflow = len(self._entries) - self.max_entries
        for key, _ in sorted_entries[:overflow]:
            del self._entries[key]
            self.stats["evictions"] += 1

        logger.debug(f"Evicted {overflow} LRU entries")

    def _cleanup_expired(self, now: float) -> None:
        expired_keys = [
            key for key, entry in self._entries.items() if entry.is_expired(now)
        ]
        for key in expired_keys:
            del self._entries[key]
            self.stats["expired_cleanups"] += 1

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)

            if entry is None:
                self.stats["misses"] += 1
                return None

            if entry.is_expired(now):
                del self._entries[key]
                self.stats["misses"] += 1
                self.stats["expired_cleanups"] += 1
                return None

            self.stats["hits"] += 1
            return entry.access(now)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        with self._lock:
            now = self._clock()
            ttl = ttl if ttl is not None else self.default_ttl
            self._entries[key] = CacheEntry(data=value, created_at=now, ttl_seconds=ttl)

            self._cleanup_expired(now)
            self._evict_lru()

    def delete(self, key: str) -> bool:
        with self._lock:
            if key in self._entries:
                del self._entries[key]
                return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            logger.info("Cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total_requests = self.stats["hits"] + self.stats["misses"]
            hit_rate = (self.stats["hits"] / max(total_requests, 1)) * 100

            return {
                "size": len(self._entries),
                "max_entries": self.max_entries,
                "hit_rate": round(hit_rate, 2),
                "total_hits": self.stats["hits"],
                "total_misses": self.stats["misses"],
                "total_evictions": self.stats["evictions"],
                "expired_cleanups": self.stats["expired_cleanups"],
            }
