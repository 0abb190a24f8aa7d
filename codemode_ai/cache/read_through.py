"""Read-through cache: compute on miss, serve the stored value until expiry."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from .base import KeyValueStore
from .memory import InMemoryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 60 * 60


def generate_cache_key(prefix: str, *parts: Any) -> str:
    """Build a readable cache key.

    ``None`` parts are dropped; the rest are lower-cased with whitespace
    replaced by underscores.

    >>> generate_cache_key("tools", "DataForSEO", None, "v2")
    'tools:dataforseo:v2'
    """
    clean = ["_".join(str(p).lower().split()) for p in parts if p is not None]
    return ":".join([prefix, *clean])


def make_call_cache_key(prefix: str, name: str, args: Mapping[str, Any]) -> str:
    """Build a deterministic key for one capability call.

    Arguments are serialized with sorted keys and hashed, so logically equal
    argument mappings share a key regardless of ordering.
    """
    encoded = json.dumps(args, sort_keys=True, default=str, separators=(",", ":"))
    digest = hashlib.md5(encoded.encode("utf-8")).hexdigest()[:16]
    return f"{prefix}:{name}:{digest}"


class ReadThroughCache:
    """Get-or-compute wrapper over a :class:`KeyValueStore`.

    - On hit, returns the stored value without calling ``compute``.
    - On miss, awaits ``compute``, stores the result for ``ttl_seconds`` and
      returns it.
    - ``compute`` failures propagate unmodified and nothing is stored.

    ``None`` cannot be told apart from an absent key, so a ``None`` result is
    recomputed on the next call.

    Args:
        store: Backing store; an :class:`InMemoryStore` when omitted.
        default_ttl_seconds: TTL used when ``cached_call`` receives none.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        *,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._store: KeyValueStore = store if store is not None else InMemoryStore()
        self._default_ttl = default_ttl_seconds

    @property
    def store(self) -> KeyValueStore:
        return self._store

    async def cached_call(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl_seconds: Optional[float] = None,
    ) -> T:
        """Return the cached value for ``key`` or compute and store it.

        Args:
            key: Cache key.
            compute: Zero-argument coroutine function producing the value.
            ttl_seconds: Entry lifetime; defaults to the cache's default TTL.

        Returns:
            The cached or freshly computed value.
        """
        cached = await self._store.get(key)
        if cached is not None:
            logger.debug("Cache HIT for %s", key)
            return cached

        logger.debug("Cache MISS for %s, computing", key)
        started = time.monotonic()
        value = await compute()
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        if value is not None:
            await self._store.set(key, value, ttl)
        logger.debug("Cached %s in %.0fms (TTL: %ss)", key, (time.monotonic() - started) * 1000, ttl)
        return value

    async def invalidate(self, key: str) -> None:
        """Drop the entry for ``key`` so the next call recomputes it."""
        await self._store.delete(key)
        logger.debug("Invalidated cache for %s", key)
