"""Error types for the codemode orchestrator.

Defines a small hierarchy of exceptions raised by providers, the capability
wrappers and the sandbox. Provider errors are isolated at registry build time;
capability and script errors are converted into ``ExecutionFailure`` results by
the executor and never reach the model host as exceptions.
"""

from __future__ import annotations


class CodemodeError(Exception):
    """Base error for all codemode exceptions."""


class ProviderError(CodemodeError):
    """Base error for capability provider failures."""


class ProviderLoadError(ProviderError):
    """Raised when a provider cannot list its capabilities."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"Provider '{provider}' failed to load capabilities: {message}")


class ProviderNotConfiguredError(ProviderError):
    """Raised when a provider or adapter is missing required credentials."""

    def __init__(self, provider: str, setting: str) -> None:
        self.provider = provider
        super().__init__(f"Provider '{provider}' is not configured: {setting} is missing")


class ToolInvocationError(ProviderError):
    """Raised when an MCP tool reports an unsuccessful invocation."""

    def __init__(self, provider: str, tool_name: str, message: str) -> None:
        super().__init__(f"Tool invocation failed for '{tool_name}' on '{provider}': {message}")


class ApiRequestError(ProviderError):
    """Raised when an HTTP adapter receives a non-success response."""

    def __init__(self, service: str, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        message = f"{service} API error: {status_code}"
        if detail:
            message = f"{message} - {detail}"
        super().__init__(message)


class CapabilityInvocationError(CodemodeError):
    """Raised inside a script when a wrapped capability fails.

    The message always names the capability so failures stay traceable even
    though the script body is opaque.
    """

    def __init__(self, capability: str, message: str) -> None:
        self.capability = capability
        super().__init__(f"Capability '{capability}' failed: {message}")


class ScriptError(CodemodeError):
    """Base error for script compilation and execution problems."""


class ScriptCompilationError(ScriptError):
    """Raised when the script text is not valid Python."""


class ScriptTimeoutError(ScriptError):
    """Raised when a script is stopped after its deadline."""


class ScriptCancelledError(ScriptError):
    """Raised when the script's own task was cancelled."""


class ScriptAbortedError(BaseException):
    """Injected into script frames after the deadline.

    Derives from ``BaseException`` so ``except Exception`` blocks in a script
    cannot swallow the abort.
    """
