"""In-process key-value store with TTL support."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


@dataclass(frozen=True)
class CacheEntry:
    """One stored value and its absolute expiry on the store's clock."""

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryStore:
    """Dictionary-backed store for a single process.

    Entries are replaced atomically per key, so concurrent coroutines may read
    and write without a lock. Expired entries are dropped lazily on read or in
    bulk with :meth:`prune`.

    Attributes:
        clock: Monotonic time source in seconds; injectable for tests.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self.clock = clock

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            self._entries.pop(key, None)
            return None
        return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=self.clock() + ttl_seconds)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def prune(self) -> int:
        """Remove expired entries.

        Returns:
            The number of entries removed.
        """
        now = self.clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> Dict[str, int]:
        """Return ``{"size": ..., "expired": ...}`` without mutating the store."""
        now = self.clock()
        expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        return {"size": len(self._entries), "expired": expired}

    def keys(self) -> List[str]:
        return list(self._entries)

    def size(self) -> int:
        return len(self._entries)
