"""MCP server providers and their session transports."""

from .provider import McpCapabilityProvider, McpToolSpec, decode_tool_content
from .transport import AsyncMCPTransport, SseMCPTransport, StreamableHttpMCPTransport

__all__ = [
    "AsyncMCPTransport",
    "McpCapabilityProvider",
    "McpToolSpec",
    "SseMCPTransport",
    "StreamableHttpMCPTransport",
    "decode_tool_content",
]
