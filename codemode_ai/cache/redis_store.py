"""Redis-backed key-value store.

Values are JSON encoded, so only JSON-compatible data should be cached here
(tool metadata and API payloads are; capability callables are not). Redis
errors are logged and treated as a miss or a skipped write: a cache outage
degrades to direct provider calls instead of failing them.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisStore:
    """Store implementation over an async Redis client.

    Args:
        client: A ``redis.asyncio.Redis`` instance.
        prefix: Prepended to every key.
    """

    def __init__(self, client: redis.Redis, *, prefix: str = "") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, *, prefix: str = "") -> "RedisStore":
        """Create a store with a new client for ``url``."""
        return cls(redis.from_url(url, decode_responses=True), prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._client.get(self._key(key))
        except redis.RedisError as e:
            logger.error("Failed to get cache for key %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("Discarding undecodable cache value for key %s: %s", key, e)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning("Not caching non-JSON value for key %s: %s", key, e)
            return
        ttl = max(1, math.ceil(ttl_seconds))
        try:
            await self._client.setex(self._key(key), ttl, payload)
        except redis.RedisError as e:
            logger.error("Failed to set cache for key %s: %s", key, e)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except redis.RedisError as e:
            logger.error("Failed to delete cache for key %s: %s", key, e)

    async def close(self) -> None:
        await self._client.aclose()
