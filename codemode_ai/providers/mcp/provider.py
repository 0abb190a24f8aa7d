"""MCP-backed capability provider.

Lists the tools of one MCP server and turns each into a :class:`Capability`
bound to this provider. Tool metadata (not the callables) goes through the
read-through cache, so a warm cache rebuilds the capability set without
contacting the server. Each tool call opens its own short-lived session.

Typical usage:
    provider = McpCapabilityProvider(
        "jina",
        "Jina AI",
        "https://mcp.jina.ai/sse",
        transport=SseMCPTransport(),
        headers={"Authorization": "Bearer ..."},
        cache=cache,
    )
    caps = await provider.list_capabilities()
    result = await caps["read_url"].invoke({"url": "https://example.com"})
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from mcp import ClientSession
from pydantic import Field

from codemode_ai.cache import ReadThroughCache, generate_cache_key, make_call_cache_key
from codemode_ai.capabilities import Capability
from codemode_ai.errors import ProviderError, ProviderLoadError, ToolInvocationError

from ..base import BaseSchema, merge_options
from .transport import AsyncMCPTransport, StreamableHttpMCPTransport

logger = logging.getLogger(__name__)


class McpToolSpec(BaseSchema):
    """Cacheable metadata for one MCP tool."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    input_schema: Dict[str, Any] = Field(default_factory=dict)


def _content_text(content: Any) -> List[str]:
    texts: List[str] = []
    for item in content or []:
        text = getattr(item, "text", None)
        if isinstance(text, str):
            texts.append(text)
    return texts


def decode_tool_content(content: Any) -> Any:
    """Normalize MCP content blocks into a JSON-compatible value.

    Text blocks are joined and JSON-decoded when possible; otherwise the text
    itself is returned. Non-text blocks are dumped as dictionaries.
    """
    texts = _content_text(content)
    if texts and len(texts) == len(content or []):
        text = "\n".join(texts)
        try:
            return json.loads(text)
        except ValueError:
            return text
    items: List[Any] = []
    for item in content or []:
        dump = getattr(item, "model_dump", None)
        items.append(dump(mode="json") if callable(dump) else item)
    return items


class McpCapabilityProvider:
    """Contribute the tools of one MCP server as capabilities.

    Args:
        prefix: Namespace for the provider's capabilities (``{prefix}_{tool}``).
        label: Display name used in logs and default descriptions.
        endpoint_url: MCP endpoint URL.
        transport: Session factory; streamable HTTP when omitted.
        headers: HTTP headers sent with every request (authentication).
        injected_arguments: Arguments merged into every tool call, such as an
            API key the server expects per call. They are not part of the
            result cache key.
        cache: Read-through cache for tool listings (and results when
            ``result_ttl_seconds`` is set). No caching when omitted.
        tools_ttl_seconds: TTL for the cached tool listing.
        result_ttl_seconds: TTL for cached call results; ``None`` disables.
        list_timeout_seconds: Upper bound for one tool listing.
    """

    def __init__(
        self,
        prefix: str,
        label: str,
        endpoint_url: str,
        *,
        transport: Optional[AsyncMCPTransport] = None,
        headers: Optional[Mapping[str, str]] = None,
        injected_arguments: Optional[Mapping[str, Any]] = None,
        cache: Optional[ReadThroughCache] = None,
        tools_ttl_seconds: float = 60 * 60,
        result_ttl_seconds: Optional[float] = None,
        list_timeout_seconds: Optional[float] = None,
    ) -> None:
        self.prefix = prefix
        self.label = label
        self.endpoint_url = endpoint_url
        self._transport: AsyncMCPTransport = transport or StreamableHttpMCPTransport()
        self._headers: Dict[str, str] = dict(headers or {})
        self._injected: Dict[str, Any] = dict(injected_arguments or {})
        self._cache = cache
        self._tools_ttl = tools_ttl_seconds
        self._result_ttl = result_ttl_seconds
        self._list_timeout = list_timeout_seconds

    @property
    def tools_cache_key(self) -> str:
        return generate_cache_key("mcp", "tools", self.prefix)

    @asynccontextmanager
    async def _open_session(self) -> AsyncIterator[ClientSession]:
        async with self._transport.session(self.endpoint_url.rstrip("/"), headers=self._headers) as session:
            yield session

    async def list_capabilities(self) -> Dict[str, Capability]:
        """Return the server's tools as unqualified capabilities.

        Raises:
            ProviderLoadError: If the listing fails or times out.
        """
        specs = await self.list_tool_specs()
        return {spec.name: self._capability(spec) for spec in specs}

    async def list_tool_specs(self) -> List[McpToolSpec]:
        if self._cache is None:
            raw = await self._fetch_tool_specs()
        else:
            raw = await self._cache.cached_call(self.tools_cache_key, self._fetch_tool_specs, ttl_seconds=self._tools_ttl)
        return [McpToolSpec.model_validate(item) for item in raw]

    async def invalidate_tools(self) -> None:
        """Drop the cached tool listing so the next load contacts the server."""
        if self._cache is not None:
            await self._cache.invalidate(self.tools_cache_key)

    async def _fetch_tool_specs(self) -> List[Dict[str, Any]]:
        try:
            if self._list_timeout is None:
                specs = await self._list_tools()
            else:
                specs = await asyncio.wait_for(self._list_tools(), self._list_timeout)
        except asyncio.TimeoutError as e:
            raise ProviderLoadError(self.prefix, f"tool listing timed out after {self._list_timeout}s") from e
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderLoadError(self.prefix, str(e) or type(e).__name__) from e
        logger.info("Loaded %d tools from %s MCP server", len(specs), self.label)
        return [spec.model_dump(by_alias=True) for spec in specs]

    async def _list_tools(self) -> List[McpToolSpec]:
        specs: List[McpToolSpec] = []
        async with self._open_session() as session:
            logger.debug("McpCapabilityProvider.list_tools: prefix=%s url=%s", self.prefix, self.endpoint_url)
            resp = await session.list_tools()
            for tool in getattr(resp, "tools", []) or []:
                name = getattr(tool, "name", None)
                if not isinstance(name, str) or not name:
                    continue
                desc_val = getattr(tool, "description", None)
                input_schema = getattr(tool, "inputSchema", None) or {}
                specs.append(
                    McpToolSpec(
                        name=name,
                        description=desc_val if isinstance(desc_val, str) else None,
                        input_schema=input_schema if isinstance(input_schema, dict) else {},
                    )
                )
        return specs

    async def call_tool(self, tool_name: str, arguments: Optional[Mapping[str, Any]] = None) -> Any:
        """Invoke one tool, reading through the result cache when enabled.

        Raises:
            ToolInvocationError: If the server flags the result as an error.
        """
        args = dict(arguments or {})
        if self._cache is None or self._result_ttl is None:
            return await self._call_tool(tool_name, args)
        key = make_call_cache_key(generate_cache_key("mcp", "call", self.prefix), tool_name, args)
        return await self._cache.cached_call(key, lambda: self._call_tool(tool_name, args), ttl_seconds=self._result_ttl)

    async def _call_tool(self, tool_name: str, args: Dict[str, Any]) -> Any:
        payload = {**args, **self._injected}
        async with self._open_session() as session:
            logger.debug(
                "McpCapabilityProvider.call_tool: prefix=%s tool=%s args_keys=%s",
                self.prefix,
                tool_name,
                list(args.keys()),
            )
            result = await session.call_tool(tool_name, payload)
        if getattr(result, "isError", False):
            message = "\n".join(_content_text(getattr(result, "content", None))) or "tool reported an error"
            raise ToolInvocationError(self.prefix, tool_name, message)
        structured = getattr(result, "structuredContent", None)
        if structured is not None:
            return structured
        return decode_tool_content(getattr(result, "content", None))

    def _capability(self, spec: McpToolSpec) -> Capability:
        tool_name = spec.name

        async def invoke(options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Any:
            return await self.call_tool(tool_name, merge_options(options, kwargs))

        return Capability(name=tool_name, description=spec.description, invoke=invoke)
