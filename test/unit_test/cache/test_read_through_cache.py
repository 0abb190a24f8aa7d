from __future__ import annotations

import asyncio

import pytest

from codemode_ai.cache import InMemoryStore, ReadThroughCache, generate_cache_key, make_call_cache_key


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _Counter:
    def __init__(self, value=None) -> None:
        self.calls = 0
        self.value = value

    async def __call__(self):
        self.calls += 1
        return self.value if self.value is not None else f"value-{self.calls}"


@pytest.mark.asyncio
async def test_hit_does_not_recompute_before_ttl() -> None:
    clock = _Clock()
    cache = ReadThroughCache(InMemoryStore(clock=clock))
    compute = _Counter()

    assert await cache.cached_call("k", compute, ttl_seconds=30) == "value-1"
    clock.now = 29.9
    assert await cache.cached_call("k", compute, ttl_seconds=30) == "value-1"
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_stale_entry_is_recomputed() -> None:
    clock = _Clock()
    cache = ReadThroughCache(InMemoryStore(clock=clock), default_ttl_seconds=10)
    compute = _Counter()

    await cache.cached_call("k", compute)
    clock.now = 10
    assert await cache.cached_call("k", compute) == "value-2"
    assert compute.calls == 2


@pytest.mark.asyncio
async def test_compute_error_propagates_and_is_not_cached() -> None:
    cache = ReadThroughCache()
    calls = {"n": 0}

    async def failing():
        calls["n"] += 1
        raise ValueError("backend down")

    with pytest.raises(ValueError, match="backend down"):
        await cache.cached_call("k", failing)
    with pytest.raises(ValueError):
        await cache.cached_call("k", failing)
    assert calls["n"] == 2
    assert await cache.store.get("k") is None


@pytest.mark.asyncio
async def test_none_result_is_recomputed() -> None:
    cache = ReadThroughCache()
    calls = {"n": 0}

    async def compute_none():
        calls["n"] += 1
        return None

    assert await cache.cached_call("k", compute_none) is None
    assert await cache.cached_call("k", compute_none) is None
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_invalidate_forces_recompute() -> None:
    cache = ReadThroughCache()
    compute = _Counter()
    await cache.cached_call("k", compute)
    await cache.invalidate("k")
    assert await cache.cached_call("k", compute) == "value-2"


@pytest.mark.asyncio
async def test_concurrent_misses_both_compute() -> None:
    cache = ReadThroughCache()
    gate = asyncio.Event()
    calls = {"n": 0}

    async def slow():
        calls["n"] += 1
        await gate.wait()
        return calls["n"]

    first = asyncio.create_task(cache.cached_call("k", slow))
    second = asyncio.create_task(cache.cached_call("k", slow))
    await asyncio.sleep(0)
    gate.set()
    await asyncio.gather(first, second)
    assert calls["n"] == 2


def test_generate_cache_key_normalizes_parts() -> None:
    assert generate_cache_key("tools", "DataForSEO", None, "v2") == "tools:dataforseo:v2"
    assert generate_cache_key("mcp", "Keyword  Ideas") == "mcp:keyword_ideas"


def test_make_call_cache_key_ignores_argument_order() -> None:
    a = make_call_cache_key("dfs", "keyword_ideas", {"keywords": ["seo"], "limit": 10})
    b = make_call_cache_key("dfs", "keyword_ideas", {"limit": 10, "keywords": ["seo"]})
    c = make_call_cache_key("dfs", "keyword_ideas", {"limit": 11, "keywords": ["seo"]})
    assert a == b
    assert a != c
    assert a.startswith("dfs:keyword_ideas:")
