"""Capability and provider protocols.

A capability is the unit an orchestration script calls. Providers create
capabilities; the aggregator and registry only reference them.

Capabilities should:

- accept either keyword arguments or a single options mapping,
- return JSON-compatible values so script results stay serializable,
- raise on failure (the sandbox wraps the error with the capability name).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class Capability:
    """One named operation exposed to orchestration scripts.

    Attributes
    ----------
    name:
        Name of the capability. Qualified (``{prefix}_{tool}``) once it is in
        a registry.
    description:
        Human-readable summary shown to the model. ``None`` when the provider
        supplied none; the aggregator substitutes a generic one.
    invoke:
        Sync or async callable performing the operation.
    """

    name: str
    description: Optional[str]
    invoke: Callable[..., Any]

    def renamed(self, name: str, *, default_description: Optional[str] = None) -> "Capability":
        """Return a copy under ``name``, filling a missing description."""
        return Capability(name=name, description=self.description or default_description, invoke=self.invoke)


@runtime_checkable
class CapabilityProvider(Protocol):
    """Protocol for providers contributing a related set of capabilities.

    ``prefix`` namespaces every capability name; ``label`` is the display name
    used in default descriptions and logs.
    """

    prefix: str
    label: str

    async def list_capabilities(self) -> Mapping[str, Capability]: ...


@runtime_checkable
class CapabilityAdapter(Protocol):
    """Protocol for single-function integrations registered under a fixed name.

    ``build`` raises ``ProviderNotConfiguredError`` (or any error) when the
    adapter cannot be offered; the aggregator skips it and logs why.
    """

    name: str

    def build(self) -> Capability: ...
