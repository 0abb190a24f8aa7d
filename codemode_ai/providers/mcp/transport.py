"""MCP client transports.

Each transport opens a short-lived, initialized ``ClientSession`` against an
endpoint using the official ``mcp`` client, optionally sending extra HTTP
headers (for example ``Authorization``).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Mapping, Optional, Protocol

from mcp import ClientSession
from mcp.client.sse import sse_client
from mcp.client.streamable_http import streamablehttp_client


class AsyncMCPTransport(Protocol):
    """Protocol for creating MCP ClientSession connections asynchronously.

    Implementations return an async context manager via
    ``session(endpoint_url, headers=...)`` that yields an initialized
    ``ClientSession``.
    """

    def session(
        self, endpoint_url: str, *, headers: Optional[Mapping[str, str]] = None
    ) -> AsyncContextManager[ClientSession]:
        """
        Establish a session with the given endpoint.

        Args:
            endpoint_url: The URL of the MCP server (HTTP or SSE).
            headers: Extra HTTP headers sent with every request.

        Returns:
            AsyncContextManager[ClientSession]: An async context manager yielding a connected session.
        """
        ...


class StreamableHttpMCPTransport(AsyncMCPTransport):
    """MCP transport using the streamable HTTP client."""

    def session(
        self, endpoint_url: str, *, headers: Optional[Mapping[str, str]] = None
    ) -> AsyncContextManager[ClientSession]:
        @asynccontextmanager
        async def _cm() -> AsyncIterator[ClientSession]:
            async with streamablehttp_client(endpoint_url, headers=dict(headers or {})) as (
                read_stream,
                write_stream,
                _close_fn,
            ):
                async with ClientSession(read_stream, write_stream) as session:
                    await session.initialize()
                    yield session

        return _cm()


class SseMCPTransport(AsyncMCPTransport):
    """MCP transport using the SSE client (MCP over SSE)."""

    def session(
        self, endpoint_url: str, *, headers: Optional[Mapping[str, str]] = None
    ) -> AsyncContextManager[ClientSession]:
        @asynccontextmanager
        async def _cm() -> AsyncIterator[ClientSession]:
            async with sse_client(endpoint_url, headers=dict(headers or {})) as (read_stream, write_stream):
                async with ClientSession(read_stream, write_stream) as session:
                    await session.initialize()
                    yield session

        return _cm()
