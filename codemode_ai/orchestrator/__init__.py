"""Model-facing orchestration tool and its default wiring."""

from .factory import (
    build_cache,
    build_default_adapters,
    build_default_providers,
    build_store,
    create_orchestration_tool,
)
from .tool import TOOL_NAME, OrchestrationTool, build_description, make_orchestration_tool

__all__ = [
    "TOOL_NAME",
    "OrchestrationTool",
    "build_cache",
    "build_default_adapters",
    "build_default_providers",
    "build_description",
    "build_store",
    "create_orchestration_tool",
    "make_orchestration_tool",
]
