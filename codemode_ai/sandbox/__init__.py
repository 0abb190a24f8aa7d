"""Script sandbox: compilation, isolated scope and deadline-bounded execution."""

from .executor import DEFAULT_TIMEOUT_MS, SandboxExecutor, invoke_capability
from .models import (
    ExecutionFailure,
    ExecutionPayload,
    ExecutionRequest,
    ExecutionResult,
    ExecutionSuccess,
    FailureKind,
    serialize_value,
)
from .namespace import CapabilityNamespace

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "CapabilityNamespace",
    "ExecutionFailure",
    "ExecutionPayload",
    "ExecutionRequest",
    "ExecutionResult",
    "ExecutionSuccess",
    "FailureKind",
    "SandboxExecutor",
    "invoke_capability",
    "serialize_value",
]
