"""The model-facing orchestration tool.

The tool advertises every capability in a registry and accepts one argument,
``code``: Python that orchestrates capability calls. Running it returns the
wire payload ``{"success", "result"|"error", "type"}``.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError
from pydantic_ai import Tool

from codemode_ai.capabilities import CapabilityRegistry
from codemode_ai.sandbox import (
    ExecutionFailure,
    ExecutionPayload,
    ExecutionRequest,
    FailureKind,
    SandboxExecutor,
)

TOOL_NAME = "codemode"

_EXAMPLE = '''\
# Use either 'codemode' or 'functions' - both work the same way
keyword_data = await codemode.dataforseo_keyword_search_volume({"keywords": ["seo tools"]})
content = await functions.rytr_generate(useCase="blog_section_writing", input="SEO Tools")

# Handle errors
try:
    overview = await codemode.dataforseo_domain_overview({"domain": "example.com"})
except Exception as e:
    return {"success": False, "error": str(e)}

# Run independent calls concurrently
a, b = await codemode.gather(
    codemode.perplexity_search(query="ai seo"),
    codemode.jina_scrape(url="https://example.com"),
)

# Conditional logic
if keyword_data.get("total_volume", 0) > 1000:
    return await functions.rytr_generate({"useCase": "blog_section_writing", "input": "AI SEO"})
return {"message": "Low search volume, skipping content generation"}'''


def build_description(registry: CapabilityRegistry, timeout_ms: int) -> str:
    """Render the tool description shown to the model."""
    lines = [f"- {name}: {desc or 'Tool available for use'}" for name, desc in registry.describe().items()]
    listing = "\n".join(lines) if lines else "- (no capabilities are currently available)"
    return (
        "Execute Python code that orchestrates multiple tool calls.\n"
        "You can use this to chain operations, handle errors, and perform complex workflows.\n"
        "\n"
        f"Available tools in codemode context ({len(registry)} total):\n"
        f"{listing}\n"
        "\n"
        "Example usage:\n"
        "```python\n"
        f"{_EXAMPLE}\n"
        "```\n"
        "\n"
        "Important:\n"
        f"- Code runs as the body of an async function in a sandbox ({timeout_ms // 1000}s timeout)\n"
        "- Tools are available via both `codemode.<tool>` and `functions.<tool>`, and by bare name\n"
        "- Pass tool arguments as one dict or as keyword arguments\n"
        "- Only registered tools are available: no imports, files, network or print\n"
        "- Use await for every tool call\n"
        "- Return a value or object; it will be serialized\n"
        "- All errors are caught and returned in structured format"
    )


class OrchestrationTool(BaseModel):
    """Tool definition for the single orchestration entry point.

    Mirrors the shape hosts expect from a tool (name, description, input and
    output schemas, async handler). The registry and executor stay private.
    """

    name: str = Field(default=TOOL_NAME, description="Unique identifier for the tool")
    description: str = Field(..., description="Capability listing and calling conventions")
    input_schema: Type[BaseModel] = Field(default=ExecutionRequest, description="Input model")
    output_schema: Type[BaseModel] = Field(default=ExecutionPayload, description="Output model")
    handler: Optional[Callable] = Field(default=None, description="Async handler executing one script")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _registry: CapabilityRegistry = PrivateAttr()
    _executor: SandboxExecutor = PrivateAttr()

    async def run(self, code: str) -> Dict[str, Any]:
        """Execute ``code`` against the registry and return the wire payload."""
        try:
            request = ExecutionRequest(code=code)
        except ValidationError as e:
            failure = ExecutionFailure(
                error_message=f"Invalid request: {e.errors()[0]['msg']}",
                failure_kind=FailureKind.compilation,
            )
            return failure.to_payload()
        result = await self._executor.execute(self._registry, request.code)
        return result.to_payload()

    @property
    def capability_names(self) -> list[str]:
        return self._registry.names()

    def to_dict(self) -> Dict[str, Any]:
        """Convert tool definition to dictionary format.

        Returns:
            Dictionary representation of tool definition with JSON schema
        """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema.model_json_schema(),
        }

    def to_pydantic_ai_tool(self) -> Tool:
        """Expose the tool to a pydantic-ai ``Agent``."""

        async def run_code(code: str) -> Dict[str, Any]:
            return await self.run(code)

        return Tool(run_code, takes_ctx=False, name=self.name, description=self.description)


def make_orchestration_tool(
    registry: CapabilityRegistry,
    executor: Optional[SandboxExecutor] = None,
) -> OrchestrationTool:
    """Create the orchestration tool over a frozen registry.

    Args:
        registry: Capabilities the scripts may call. Frozen here if the caller
            has not done so.
        executor: Script executor; a default :class:`SandboxExecutor` when omitted.
    """
    executor = executor or SandboxExecutor()
    if not registry.frozen:
        registry.freeze()
    tool = OrchestrationTool(description=build_description(registry, executor.default_timeout_ms))
    tool._registry = registry
    tool._executor = executor
    tool.handler = tool.run
    return tool
