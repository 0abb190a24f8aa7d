"""Capability providers: MCP servers and single-function HTTP adapters."""

from .api import (
    HttpApiAdapter,
    JinaScrapeAdapter,
    OpenAIChatAdapter,
    PerplexitySearchAdapter,
    RytrGenerateAdapter,
)
from .base import BaseSchema, merge_options
from .mcp import McpCapabilityProvider, McpToolSpec, SseMCPTransport, StreamableHttpMCPTransport

__all__ = [
    "BaseSchema",
    "HttpApiAdapter",
    "JinaScrapeAdapter",
    "McpCapabilityProvider",
    "McpToolSpec",
    "OpenAIChatAdapter",
    "PerplexitySearchAdapter",
    "RytrGenerateAdapter",
    "SseMCPTransport",
    "StreamableHttpMCPTransport",
    "merge_options",
]
