"""Wire the default providers, adapters and cache from settings.

``create_orchestration_tool`` is the one-call entry point for hosts:

    tool, report = await create_orchestration_tool()
    payload = await tool.run("return await codemode.perplexity_search(query='aeo')")

Providers whose credentials are missing are not constructed; adapters are
always constructed and the aggregator skips the unconfigured ones, so the
report names every adapter it could not offer.
"""

from __future__ import annotations

import base64
import logging
from typing import List, Optional, Tuple

import httpx

from codemode_ai.cache import InMemoryStore, KeyValueStore, ReadThroughCache, RedisStore, TieredStore
from codemode_ai.capabilities import AggregationReport, CapabilityAdapter, CapabilityProvider, RegistryAggregator
from codemode_ai.capabilities.aggregator import PreloadedSources
from codemode_ai.core.config import CacheConfig, Settings
from codemode_ai.core.config import settings as default_settings
from codemode_ai.providers.api import (
    JinaScrapeAdapter,
    OpenAIChatAdapter,
    PerplexitySearchAdapter,
    RytrGenerateAdapter,
)
from codemode_ai.providers.mcp import McpCapabilityProvider, SseMCPTransport, StreamableHttpMCPTransport
from codemode_ai.sandbox import SandboxExecutor

from .tool import OrchestrationTool, make_orchestration_tool

logger = logging.getLogger(__name__)


def build_store(config: CacheConfig) -> KeyValueStore:
    """Memory in front of Redis when ``REDIS_URL`` is set, otherwise memory only."""
    if config.redis_url:
        logger.info("Using in-memory cache store backed by Redis")
        return TieredStore(
            InMemoryStore(),
            RedisStore.from_url(config.redis_url, prefix=config.key_prefix),
            local_ttl_seconds=config.memory_ttl_seconds,
        )
    logger.info("REDIS_URL not set, using in-memory cache store")
    return InMemoryStore()


def build_cache(config: CacheConfig) -> ReadThroughCache:
    return ReadThroughCache(build_store(config), default_ttl_seconds=config.tools_ttl_seconds)


def _basic_auth(login: str, password: str) -> str:
    token = base64.b64encode(f"{login}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_default_providers(settings: Settings, cache: Optional[ReadThroughCache] = None) -> List[CapabilityProvider]:
    """MCP providers for every backend that has credentials configured."""
    tools_ttl = settings.cache.tools_ttl_seconds
    providers: List[CapabilityProvider] = []

    dataforseo = settings.dataforseo
    if dataforseo.configured:
        providers.append(
            McpCapabilityProvider(
                "dataforseo",
                "DataForSEO",
                dataforseo.mcp_url,
                transport=StreamableHttpMCPTransport(),
                headers={"Authorization": _basic_auth(dataforseo.login or "", dataforseo.password or "")},
                cache=cache,
                tools_ttl_seconds=tools_ttl,
                result_ttl_seconds=settings.cache.dataforseo_ttl_seconds,
            )
        )
    else:
        logger.info("DataForSEO credentials not configured, skipping provider")

    firecrawl_url = settings.firecrawl.endpoint_url
    if firecrawl_url:
        providers.append(
            McpCapabilityProvider(
                "firecrawl",
                "Firecrawl",
                firecrawl_url,
                transport=StreamableHttpMCPTransport(),
                cache=cache,
                tools_ttl_seconds=tools_ttl,
            )
        )
    else:
        logger.info("Firecrawl API key not configured, skipping provider")

    winston = settings.winston
    if winston.api_key:
        providers.append(
            McpCapabilityProvider(
                "winston",
                "Winston AI",
                winston.mcp_url,
                transport=StreamableHttpMCPTransport(),
                headers={"Accept": "application/json"},
                injected_arguments={"apiKey": winston.api_key},
                cache=cache,
                tools_ttl_seconds=tools_ttl,
                list_timeout_seconds=winston.list_timeout_seconds,
            )
        )
    else:
        logger.info("Winston AI API key not configured, skipping provider")

    jina = settings.jina
    if jina.api_key:
        providers.append(
            McpCapabilityProvider(
                "jina",
                "Jina AI",
                jina.mcp_url,
                transport=SseMCPTransport(),
                headers={"Authorization": f"Bearer {jina.api_key}"},
                cache=cache,
                tools_ttl_seconds=tools_ttl,
            )
        )
    else:
        logger.info("Jina API key not configured, skipping MCP provider")

    return providers


def build_default_adapters(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> List[CapabilityAdapter]:
    """HTTP adapters in registration order."""
    return [
        PerplexitySearchAdapter(settings.perplexity.api_key, api_url=settings.perplexity.api_url, client=http_client),
        RytrGenerateAdapter(settings.rytr.api_key, api_base=settings.rytr.api_base, client=http_client),
        JinaScrapeAdapter(settings.jina.api_key, reader_url=settings.jina.reader_url, client=http_client),
        OpenAIChatAdapter(
            settings.openai.api_key,
            model=settings.openai.model,
            base_url=settings.openai.base_url,
            client=http_client,
        ),
    ]


async def create_orchestration_tool(
    settings: Optional[Settings] = None,
    *,
    preloaded: Optional[PreloadedSources] = None,
    cache: Optional[ReadThroughCache] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Tuple[OrchestrationTool, AggregationReport]:
    """Build the registry from the default sources and wrap it in the tool.

    Args:
        settings: Configuration; the module-level settings when omitted.
        preloaded: Capability listings already loaded by the caller, keyed by
            provider prefix.
        cache: Read-through cache for provider listings; built from settings
            when omitted.
        http_client: Shared client for the HTTP adapters.

    Returns:
        ``(tool, report)`` where ``report`` lists per-source counts and failures.
    """
    settings = settings or default_settings
    cache = cache or build_cache(settings.cache)
    aggregator = RegistryAggregator(
        providers=build_default_providers(settings, cache),
        adapters=build_default_adapters(settings, http_client),
    )
    registry = await aggregator.build_registry(preloaded)
    executor = SandboxExecutor.from_config(settings.codemode)
    report = aggregator.last_report or AggregationReport(total=len(registry))
    return make_orchestration_tool(registry, executor), report
