"""Status cache with per-family TTL and eager invalidation.

Holds the most recent StatusSummary for each (family, owner scope) pair.
Entries expire after their family's TTL and are dropped immediately when a
configuration in that family changes. Each entry has its own lock; there is
no cache-wide lock held while reading or writing an entry.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class CacheEntry:
    """Cache entry with TTL support.

    Attributes:
        value: The cached value.
        expires_at: Unix timestamp when this entry expires.
    """

    value: Any
    expires_at: float


class StatusCache:
    """Thread-safe TTL cache for family status summaries.

    Cache keys are formatted as: {family}:{owner_scope}
    """

    def __init__(
        self,
        ttl_seconds: int = 30,
        ttl_for_family: Callable[[str], int] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Default time-to-live for entries in seconds.
            ttl_for_family: Optional per-family TTL lookup.
            clock: Time source, injectable for tests.
        """
        self.ttl_seconds = ttl_seconds
        self._ttl_for_family = ttl_for_family
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._generations: dict[str, int] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @staticmethod
    def _make_key(family: str, owner_scope: str | None) -> str:
        return f"{family}:{owner_scope or ''}"

    def _lock_for(self, key: str) -> threading.Lock:
        lock = self._locks.get(key)
        if lock is None:
            with self._locks_guard:
                lock = self._locks.setdefault(key, threading.Lock())
        return lock

    def ttl_for(self, family: str) -> int:
        if self._ttl_for_family is not None:
            return self._ttl_for_family(family)
        return self.ttl_seconds

    def get(self, family: str, owner_scope: str | None = None) -> Any | None:
        """Get a cached summary.

        Returns:
            Cached value if found and not expired, None otherwise.
        """
        key = self._make_key(family, owner_scope)
        with self._lock_for(key):
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def generation(self, family: str, owner_scope: str | None = None) -> int:
        """Current invalidation generation for a key.

        Read before recomputing and pass to set() so a summary computed
        concurrently with an invalidation is not stored.
        """
        key = self._make_key(family, owner_scope)
        with self._lock_for(key):
            return self._generations.setdefault(key, 0)

    def set(
        self,
        family: str,
        value: Any,
        owner_scope: str | None = None,
        generation: int | None = None,
    ) -> bool:
        """Store a summary.

        Args:
            family: Provider family value.
            value: Summary to cache.
            owner_scope: Owner scope the summary was computed for.
            generation: Generation observed before computing; if it has moved
                on since, the value is discarded.

        Returns:
            True if stored, False if discarded as stale.
        """
        key = self._make_key(family, owner_scope)
        with self._lock_for(key):
            if generation is not None and generation != self._generations.get(key, 0):
                return False
            self._entries[key] = CacheEntry(
                value=value,
                expires_at=self._clock() + self.ttl_for(family),
            )
            return True

    def invalidate_family(self, family: str) -> int:
        """Drop every entry of a family, across all owner scopes.

        Returns:
            Number of entries removed.
        """
        prefix = f"{family}:"
        with self._locks_guard:
            keys = [k for k in set(self._entries) | set(self._generations) if k.startswith(prefix)]
        removed = 0
        for key in keys:
            with self._lock_for(key):
                self._generations[key] = self._generations.get(key, 0) + 1
                if self._entries.pop(key, None) is not None:
                    removed += 1
        return removed

    def invalidate_all(self) -> None:
        """Clear entire cache."""
        with self._locks_guard:
            keys = list(set(self._entries) | set(self._generations))
        for key in keys:
            with self._lock_for(key):
                self._generations[key] = self._generations.get(key, 0) + 1
                self._entries.pop(key, None)

    def size(self) -> int:
        """Get current cache size."""
        return len(self._entries)
