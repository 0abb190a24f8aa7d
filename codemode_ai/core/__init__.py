"""
Core utilities and configuration for codemode-ai.

This package provides core functionality including settings, logging
configuration and optional Logfire monitoring.
"""

from codemode_ai.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
