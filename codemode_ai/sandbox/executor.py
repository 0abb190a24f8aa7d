"""Sandboxed execution of orchestration scripts.

``SandboxExecutor.execute`` compiles a script, binds the registry's
capabilities into a fresh scope and races the script against a deadline. It
never raises for anything the script does: every outcome is an
:class:`ExecutionSuccess` or an :class:`ExecutionFailure`.

Capability calls made by the script are marshalled back onto the caller's
event loop, so providers keep using the HTTP clients and sessions they were
created with.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from codemode_ai.capabilities import Capability, CapabilityRegistry
from codemode_ai.core.monitoring import log_script_execution
from codemode_ai.errors import (
    CapabilityInvocationError,
    ScriptCompilationError,
    ScriptTimeoutError,
)

from .compiler import bind_entrypoint, compile_script
from .models import ExecutionFailure, ExecutionResult, ExecutionSuccess, FailureKind, serialize_value
from .namespace import CapabilityNamespace
from .runner import ScriptRun

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000
_PREVIEW_CHARS = 200


def _preview(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> str:
    try:
        text = json.dumps({"args": list(args), "kwargs": kwargs}, default=str)
    except (TypeError, ValueError):
        text = repr((args, kwargs))
    if len(text) > _PREVIEW_CHARS:
        return text[:_PREVIEW_CHARS] + "..."
    return text


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


async def invoke_capability(cap: Capability, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Any:
    """Call one capability with logging and uniform error wrapping.

    Raises:
        CapabilityInvocationError: When the capability raises. The original
            error is kept as ``__cause__``.
    """
    logger.info("Calling capability %s with args: %s", cap.name, _preview(args, kwargs))
    started = time.monotonic()
    try:
        result = cap.invoke(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
    except CapabilityInvocationError:
        raise
    except Exception as e:
        logger.error("Capability %s failed after %.0fms: %s", cap.name, (time.monotonic() - started) * 1000, e)
        raise CapabilityInvocationError(cap.name, _describe(e)) from e
    logger.info("Capability %s completed in %.0fms", cap.name, (time.monotonic() - started) * 1000)
    return result


class SandboxExecutor:
    """Execute scripts against a frozen capability registry.

    Args:
        default_timeout_ms: Deadline used when ``execute`` gets none.
        cancel_on_timeout: Stop the script (and its pending capability calls)
            once the deadline passes. When off, a timed-out script keeps
            running in the background and only the caller is released.
    """

    def __init__(self, *, default_timeout_ms: int = DEFAULT_TIMEOUT_MS, cancel_on_timeout: bool = True) -> None:
        self.default_timeout_ms = default_timeout_ms
        self.cancel_on_timeout = cancel_on_timeout

    @classmethod
    def from_config(cls, config: Any) -> "SandboxExecutor":
        """Build from a :class:`~codemode_ai.core.config.CodemodeConfig`."""
        return cls(default_timeout_ms=config.timeout_ms, cancel_on_timeout=config.cancel_on_timeout)

    async def execute(
        self,
        registry: CapabilityRegistry,
        script: str,
        timeout_ms: Optional[int] = None,
    ) -> ExecutionResult:
        """Run ``script`` and return its settled outcome."""
        timeout_ms = self.default_timeout_ms if timeout_ms is None else timeout_ms
        started = time.monotonic()
        try:
            result = await self._execute(registry, script, timeout_ms)
        except Exception as e:
            logger.exception("Unexpected error while executing script")
            result = ExecutionFailure(error_message=f"{type(e).__name__}: {e}", failure_kind=FailureKind.runtime)
        duration_ms = (time.monotonic() - started) * 1000
        if isinstance(result, ExecutionFailure):
            logger.warning("Script failed (%s) after %.0fms: %s", result.failure_kind.value, duration_ms, result.error_message)
            failure_kind: Optional[str] = result.failure_kind.value
        else:
            logger.info("Script completed in %.0fms (type=%s)", duration_ms, result.value_type)
            failure_kind = None
        log_script_execution(
            success=result.success,
            failure_kind=failure_kind,
            duration_ms=duration_ms,
            script_chars=len(script or ""),
        )
        return result

    async def _execute(self, registry: CapabilityRegistry, script: str, timeout_ms: int) -> ExecutionResult:
        try:
            code = compile_script(script)
        except ScriptCompilationError as e:
            return ExecutionFailure(error_message=str(e), failure_kind=FailureKind.compilation)

        host_loop = asyncio.get_running_loop()
        namespace = CapabilityNamespace({name: self._wrap(cap, host_loop) for name, cap in registry.items()})
        run = ScriptRun(bind_entrypoint(code, namespace))
        waiter = asyncio.wrap_future(run.start())
        try:
            done, _ = await asyncio.wait({waiter}, timeout=max(timeout_ms, 0) / 1000)
        except asyncio.CancelledError:
            run.abort()
            raise

        if not done:
            waiter.cancel()
            if self.cancel_on_timeout:
                run.abort()
            return ExecutionFailure(
                error_message=f"Code execution timeout after {timeout_ms}ms",
                failure_kind=FailureKind.timeout,
            )

        try:
            value = waiter.result()
        except CapabilityInvocationError as e:
            return ExecutionFailure(error_message=str(e), failure_kind=FailureKind.capability)
        except ScriptTimeoutError:
            return ExecutionFailure(
                error_message=f"Code execution timeout after {timeout_ms}ms",
                failure_kind=FailureKind.timeout,
            )
        except Exception as e:
            return ExecutionFailure(error_message=f"{type(e).__name__}: {e}", failure_kind=FailureKind.runtime)

        try:
            text, value_type = serialize_value(value)
        except Exception as e:
            return ExecutionFailure(
                error_message=f"Failed to serialize result: {e}",
                failure_kind=FailureKind.serialization,
            )
        return ExecutionSuccess(value=text, value_type=value_type)

    @staticmethod
    def _wrap(cap: Capability, host_loop: asyncio.AbstractEventLoop) -> Callable[..., Awaitable[Any]]:
        async def call(*args: Any, **kwargs: Any) -> Any:
            future = asyncio.run_coroutine_threadsafe(invoke_capability(cap, args, kwargs), host_loop)
            return await asyncio.wrap_future(future)

        call.__name__ = cap.name
        call.__qualname__ = cap.name
        call.__doc__ = cap.description
        return call
