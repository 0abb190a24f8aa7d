from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import pytest
from mcp.types import CallToolResult, ListToolsResult, TextContent, Tool

from codemode_ai.cache import InMemoryStore, ReadThroughCache
from codemode_ai.errors import ProviderLoadError, ToolInvocationError
from codemode_ai.providers.mcp import McpCapabilityProvider, McpToolSpec, decode_tool_content


def _text(text: str) -> TextContent:
    return TextContent(type="text", text=text)


class _FakeSession:
    def __init__(self, state: dict) -> None:
        self._state = state

    async def list_tools(self) -> ListToolsResult:
        self._state["list_count"] = self._state.get("list_count", 0) + 1
        if self._state.get("list_delay"):
            await asyncio.sleep(self._state["list_delay"])
        return ListToolsResult(
            tools=[
                Tool(
                    name="keyword_ideas",
                    description="Keyword ideas for a seed",
                    inputSchema={"type": "object", "properties": {"keywords": {"type": "array"}}},
                ),
                Tool(name="serp", inputSchema={"type": "object"}),
            ]
        )

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> CallToolResult:
        self._state.setdefault("calls", []).append((name, dict(arguments or {})))
        result = self._state.get("result")
        if result is not None:
            return result
        return CallToolResult(content=[_text('{"items": [1, 2]}')])


class _FakeMCPTransport:
    def __init__(self, state: dict) -> None:
        self._state = state

    def session(self, endpoint_url: str, *, headers=None):
        self._state.setdefault("sessions", []).append((endpoint_url, dict(headers or {})))

        @asynccontextmanager
        async def _cm():
            if self._state.get("connect_error"):
                raise ConnectionError(self._state["connect_error"])
            yield _FakeSession(self._state)

        return _cm()


def _provider(state: dict, **kwargs: Any) -> McpCapabilityProvider:
    return McpCapabilityProvider(
        "dataforseo",
        "DataForSEO",
        "http://mock/mcp/",
        transport=_FakeMCPTransport(state),
        headers={"Authorization": "Basic abc"},
        **kwargs,
    )


@pytest.mark.asyncio
async def test_list_capabilities_builds_capabilities_from_tools() -> None:
    state: dict = {}
    caps = await _provider(state).list_capabilities()

    assert list(caps) == ["keyword_ideas", "serp"]
    assert caps["keyword_ideas"].description == "Keyword ideas for a seed"
    assert caps["serp"].description is None
    assert state["sessions"][0] == ("http://mock/mcp", {"Authorization": "Basic abc"})


@pytest.mark.asyncio
async def test_tool_listing_is_cached_as_metadata() -> None:
    state: dict = {}
    store = InMemoryStore()
    provider = _provider(state, cache=ReadThroughCache(store))

    await provider.list_capabilities()
    caps = await provider.list_capabilities()

    assert state["list_count"] == 1
    assert "keyword_ideas" in caps
    cached = await store.get("mcp:tools:dataforseo")
    assert cached[0]["name"] == "keyword_ideas"
    assert cached[0]["inputSchema"]["type"] == "object"

    await provider.invalidate_tools()
    await provider.list_capabilities()
    assert state["list_count"] == 2


@pytest.mark.asyncio
async def test_invoke_accepts_mapping_or_kwargs_and_decodes_json_text() -> None:
    state: dict = {}
    caps = await _provider(state).list_capabilities()

    assert await caps["keyword_ideas"].invoke({"keywords": ["seo"]}) == {"items": [1, 2]}
    await caps["keyword_ideas"].invoke(keywords=["aeo"], limit=5)
    assert state["calls"] == [("keyword_ideas", {"keywords": ["seo"]}), ("keyword_ideas", {"keywords": ["aeo"], "limit": 5})]


@pytest.mark.asyncio
async def test_structured_content_is_returned_as_is() -> None:
    state: dict = {"result": CallToolResult(content=[_text("ignored")], structuredContent={"total": 3})}
    assert await _provider(state).call_tool("serp", {}) == {"total": 3}


@pytest.mark.asyncio
async def test_error_result_raises_tool_invocation_error() -> None:
    state: dict = {"result": CallToolResult(content=[_text("quota exceeded")], isError=True)}
    with pytest.raises(ToolInvocationError, match="quota exceeded"):
        await _provider(state).call_tool("serp", {})


@pytest.mark.asyncio
async def test_injected_arguments_are_sent_but_not_part_of_result_key() -> None:
    state: dict = {}
    cache = ReadThroughCache(InMemoryStore())
    provider = McpCapabilityProvider(
        "winston",
        "Winston AI",
        "http://mock/winston",
        transport=_FakeMCPTransport(state),
        injected_arguments={"apiKey": "secret"},
        cache=cache,
        result_ttl_seconds=60,
    )

    await provider.call_tool("plagiarism", {"text": "hello"})
    await provider.call_tool("plagiarism", {"text": "hello"})

    assert state["calls"] == [("plagiarism", {"text": "hello", "apiKey": "secret"})]


@pytest.mark.asyncio
async def test_listing_failure_raises_provider_load_error() -> None:
    state: dict = {"connect_error": "refused"}
    with pytest.raises(ProviderLoadError, match="refused"):
        await _provider(state).list_capabilities()


@pytest.mark.asyncio
async def test_listing_timeout_raises_provider_load_error() -> None:
    state: dict = {"list_delay": 1.0}
    with pytest.raises(ProviderLoadError, match="timed out"):
        await _provider(state, list_timeout_seconds=0.05).list_capabilities()


def test_decode_tool_content_variants() -> None:
    assert decode_tool_content([_text("not json")]) == "not json"
    assert decode_tool_content([_text("[1,"), _text("2]")]) == [1, 2]
    assert decode_tool_content([]) == []


def test_tool_spec_accepts_camel_and_snake_case() -> None:
    a = McpToolSpec.model_validate({"name": "t", "inputSchema": {"type": "object"}})
    b = McpToolSpec(name="t", input_schema={"type": "object"})
    assert a == b
