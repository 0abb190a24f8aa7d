"""Read-through caching for provider calls.

The cache sits in front of expensive, read-heavy provider operations: MCP tool
listings (which rarely change) and search-data lookups (which are billed per
call). It is deliberately simple:

- ``ReadThroughCache``: get-or-compute with a TTL over any ``KeyValueStore``.
- ``InMemoryStore``: process-local store with lazy expiry.
- ``RedisStore``: shared store over ``redis.asyncio`` with JSON encoding.
- ``TieredStore``: ``InMemoryStore`` in front of a shared store, refilled on
  shared hits.

There is no stampede protection; concurrent misses for the same key may both
compute and the last write wins.
"""

from .base import KeyValueStore
from .memory import CacheEntry, InMemoryStore
from .read_through import ReadThroughCache, generate_cache_key, make_call_cache_key
from .redis_store import RedisStore
from .tiered import TieredStore

__all__ = [
    "CacheEntry",
    "InMemoryStore",
    "KeyValueStore",
    "ReadThroughCache",
    "RedisStore",
    "TieredStore",
    "generate_cache_key",
    "make_call_cache_key",
]
