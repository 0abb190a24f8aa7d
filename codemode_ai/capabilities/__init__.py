"""Capability model, registry and aggregation.

A *capability* is one named operation an orchestration script may call.

- Providers (MCP servers, HTTP adapters) own their capabilities.
- ``RegistryAggregator`` asks every provider for its capabilities, prefixes
  the names with the provider's prefix and merges them into one
  ``CapabilityRegistry``. A provider that fails to load contributes nothing;
  the rest of the registry is still built.
- The sandbox executes scripts against a frozen registry.

This package exports:

- ``Capability``: name, description and invoke callable.
- ``CapabilityProvider``/``CapabilityAdapter``: provider protocols.
- ``CapabilityRegistry``: qualified name → capability mapping.
- ``RegistryAggregator``/``AggregationReport``/``ProviderOutcome``.
"""

from .aggregator import AggregationReport, ProviderOutcome, RegistryAggregator
from .base import Capability, CapabilityAdapter, CapabilityProvider
from .registry import CapabilityRegistry

__all__ = [
    "AggregationReport",
    "Capability",
    "CapabilityAdapter",
    "CapabilityProvider",
    "CapabilityRegistry",
    "ProviderOutcome",
    "RegistryAggregator",
]
