"""Two-level store: a process-local map in front of a shared backend."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .base import KeyValueStore
from .memory import InMemoryStore

logger = logging.getLogger(__name__)


class TieredStore:
    """Serve reads from memory first and fall back to the shared store.

    A hit in the shared store refills the local level for
    ``local_ttl_seconds``, since the shared entry's remaining lifetime is not
    known. Writes and deletes go to both levels.

    Args:
        local: First-level store, usually an :class:`InMemoryStore`.
        remote: Second-level store shared across processes, usually Redis.
        local_ttl_seconds: Lifetime of refilled local copies.
    """

    def __init__(self, local: InMemoryStore, remote: KeyValueStore, *, local_ttl_seconds: float) -> None:
        self.local = local
        self.remote = remote
        self.local_ttl_seconds = local_ttl_seconds

    async def get(self, key: str) -> Optional[Any]:
        value = await self.local.get(key)
        if value is not None:
            return value
        value = await self.remote.get(key)
        if value is not None:
            logger.debug("Refilling local cache from shared store for key %s", key)
            await self.local.set(key, value, self.local_ttl_seconds)
        return value

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        await self.local.set(key, value, ttl_seconds)
        await self.remote.set(key, value, ttl_seconds)

    async def delete(self, key: str) -> None:
        await self.local.delete(key)
        await self.remote.delete(key)
