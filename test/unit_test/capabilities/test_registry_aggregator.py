from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

import pytest

from codemode_ai.capabilities import Capability, RegistryAggregator
from codemode_ai.capabilities.aggregator import coerce_capability
from codemode_ai.errors import ProviderLoadError, ProviderNotConfiguredError


class _FakeProvider:
    def __init__(self, prefix: str, label: str, caps: Mapping[str, Any] | None = None, error: Exception | None = None):
        self.prefix = prefix
        self.label = label
        self._caps = dict(caps or {})
        self._error = error
        self.calls = 0

    async def list_capabilities(self) -> Dict[str, Any]:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._caps


class _FakeAdapter:
    def __init__(self, name: str, *, configured: bool = True) -> None:
        self.name = name
        self._configured = configured

    def build(self) -> Capability:
        if not self._configured:
            raise ProviderNotConfiguredError(self.name, "API_KEY")
        return Capability(name=self.name, description=f"{self.name} adapter", invoke=lambda: self.name)


def _fn(value: Any):
    async def invoke(*args: Any, **kwargs: Any) -> Any:
        return value

    return invoke


@pytest.mark.asyncio
async def test_registry_namespaces_and_defaults_descriptions() -> None:
    provider = _FakeProvider(
        "dataforseo",
        "DataForSEO",
        {
            "keyword_ideas": Capability(name="keyword_ideas", description="Keyword ideas", invoke=_fn(1)),
            "serp": Capability(name="serp", description=None, invoke=_fn(2)),
        },
    )
    registry = await RegistryAggregator(providers=[provider]).build_registry()

    assert registry.names() == ["dataforseo_keyword_ideas", "dataforseo_serp"]
    assert registry.get("dataforseo_keyword_ideas").description == "Keyword ideas"
    assert registry.get("dataforseo_serp").description == "DataForSEO tool: serp"
    assert registry.frozen


@pytest.mark.asyncio
async def test_failing_provider_is_isolated_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    ok_a = _FakeProvider("firecrawl", "Firecrawl", {"scrape": _fn("a")})
    broken = _FakeProvider("winston", "Winston AI", error=ProviderLoadError("winston", "timed out"))
    ok_b = _FakeProvider("jina", "Jina AI", {"read_url": _fn("b")})
    aggregator = RegistryAggregator(providers=[ok_a, broken, ok_b])

    with caplog.at_level(logging.WARNING, logger="codemode_ai.capabilities.aggregator"):
        registry = await aggregator.build_registry()

    assert registry.names() == ["firecrawl_scrape", "jina_read_url"]
    report = aggregator.last_report
    assert report is not None
    assert report.counts == {"firecrawl": 1, "winston": 0, "jina": 1}
    assert "winston" in report.failures and "timed out" in report.failures["winston"]
    assert report.total == 2
    assert any("winston" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_all_providers_failing_yields_empty_registry() -> None:
    aggregator = RegistryAggregator(
        providers=[_FakeProvider("a", "A", error=RuntimeError("x")), _FakeProvider("b", "B", error=RuntimeError())]
    )
    registry = await aggregator.build_registry()
    assert len(registry) == 0
    assert aggregator.last_report.failures == {"a": "x", "b": "RuntimeError"}


@pytest.mark.asyncio
async def test_preloaded_sources_skip_provider_queries() -> None:
    provider = _FakeProvider("firecrawl", "Firecrawl", {"scrape": _fn("live")})
    preloaded = {
        "firecrawl": {
            "crawl": {"execute": _fn("pre"), "description": "Crawl a site"},
            "map": _fn("map"),
            "junk": 42,
        }
    }
    registry = await RegistryAggregator(providers=[provider]).build_registry(preloaded)

    assert provider.calls == 0
    assert registry.names() == ["firecrawl_crawl", "firecrawl_map"]
    assert registry.get("firecrawl_crawl").description == "Crawl a site"
    assert registry.get("firecrawl_map").description == "Firecrawl tool: map"


@pytest.mark.asyncio
async def test_collision_later_provider_wins() -> None:
    first = _FakeProvider("x", "First", {"a_b": _fn(1)})
    second = _FakeProvider("x_a", "Second", {"b": _fn(2)})
    registry = await RegistryAggregator(providers=[first, second]).build_registry()

    assert registry.names() == ["x_a_b"]
    assert await registry.get("x_a_b").invoke() == 2


@pytest.mark.asyncio
async def test_adapters_registered_under_fixed_names_unconfigured_skipped() -> None:
    aggregator = RegistryAggregator(
        adapters=[_FakeAdapter("perplexity_search"), _FakeAdapter("rytr_generate", configured=False)]
    )
    registry = await aggregator.build_registry()

    assert registry.names() == ["perplexity_search"]
    assert "rytr_generate" in aggregator.last_report.failures
    assert "API_KEY is missing" in aggregator.last_report.failures["rytr_generate"]


@pytest.mark.asyncio
async def test_prewarm_counts_successes() -> None:
    providers = [_FakeProvider("a", "A", {"t": _fn(1)}), _FakeProvider("b", "B", error=RuntimeError("no"))]
    assert await RegistryAggregator(providers=providers).prewarm() == (1, 2)
    assert providers[0].calls == 1


def test_coerce_capability_variants() -> None:
    fn = _fn(1)
    assert coerce_capability("a", fn).invoke is fn
    assert coerce_capability("b", {"invoke": fn, "description": "d"}).description == "d"
    assert coerce_capability("c", {"description": "no callable"}) is None
    assert coerce_capability("d", "not a tool") is None
