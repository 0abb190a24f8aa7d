"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring the
orchestrator:
- Script execution outcomes and latency
- Registry builds (per-provider contribution counts and failures)
- HTTPX request tracing for the HTTP capability adapters

Logfire is opt-in: nothing is sent unless LOGFIRE_ENABLED is true and a token
is configured. The ``log_*`` helpers are safe to call either way.
"""

import logging
import os
from typing import Dict, List

import logfire

logger = logging.getLogger(__name__)

# Logfire configuration from environment
LOGFIRE_ENABLED = os.getenv("LOGFIRE_ENABLED", "false").lower() in ("true", "1", "yes")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "codemode-ai")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.1.0")

# Feature flags
LOGFIRE_TRACE_HTTPX = os.getenv("LOGFIRE_TRACE_HTTPX", "true").lower() in ("true", "1", "yes")

_initialized = False


def initialize_logfire() -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    The initialization is conditional based on the LOGFIRE_ENABLED environment
    variable and requires LOGFIRE_TOKEN.

    Returns:
        True when Logfire was configured, False otherwise.
    """
    global _initialized

    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    logfire.configure(
        token=LOGFIRE_TOKEN,
        service_name=LOGFIRE_SERVICE_NAME,
        service_version=LOGFIRE_SERVICE_VERSION,
        environment=LOGFIRE_ENVIRONMENT,
    )

    if LOGFIRE_TRACE_HTTPX:
        try:
            logfire.instrument_httpx()
            logger.info("Logfire: HTTPX instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument HTTPX: {e}")

    _initialized = True
    logger.info(f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}")
    return True


def log_script_execution(*, success: bool, failure_kind: str | None, duration_ms: float, script_chars: int) -> None:
    """
    Log the outcome of one orchestration script execution.

    Args:
        success: Whether the script produced a value
        failure_kind: The failure category when it did not
        duration_ms: Wall time from compilation to result
        script_chars: Length of the script text
    """
    if not _initialized:
        return
    logfire.info(
        "Codemode script executed",
        success=success,
        failure_kind=failure_kind,
        duration_ms=duration_ms,
        script_chars=script_chars,
    )


def log_registry_build(*, counts: Dict[str, int], failures: List[str], total: int) -> None:
    """
    Log the result of a capability registry build.

    Args:
        counts: Capabilities contributed per provider prefix
        failures: Identities of providers/adapters that failed to load
        total: Size of the merged registry
    """
    if not _initialized:
        return
    logfire.info("Codemode registry built", counts=counts, failures=failures, total=total)
