"""Best-effort aggregation of capability providers into one registry.

Every provider is loaded independently and its outcome is folded as either
``Ok(capabilities)`` or ``Err(reason)``. Successful providers contribute their
capabilities under ``{prefix}_{name}``; failed providers are logged with their
identity and contribute nothing. Building the registry therefore never fails
because one backend is down.

Typical usage:
    aggregator = RegistryAggregator(providers=[dataforseo, firecrawl], adapters=[perplexity])
    registry = await aggregator.build_registry()
    print(aggregator.last_report.counts)   # {"dataforseo": 12, "firecrawl": 0, ...}
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from codemode_ai.core.monitoring import log_registry_build

from .base import Capability, CapabilityAdapter, CapabilityProvider
from .registry import CapabilityRegistry

logger = logging.getLogger(__name__)

PreloadedSources = Mapping[str, Mapping[str, Any]]


@dataclass(frozen=True)
class ProviderOutcome:
    """Result of loading one provider or adapter."""

    source: str
    capabilities: Tuple[Capability, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: str, capabilities: Iterable[Capability]) -> "ProviderOutcome":
        return cls(source=source, capabilities=tuple(capabilities))

    @classmethod
    def failure(cls, source: str, error: str) -> "ProviderOutcome":
        return cls(source=source, error=error)


@dataclass(frozen=True)
class AggregationReport:
    """Diagnostics for one registry build."""

    outcomes: List[ProviderOutcome] = field(default_factory=list)
    total: int = 0

    @property
    def counts(self) -> Dict[str, int]:
        """Capabilities contributed per source (failed sources count 0)."""
        return {o.source: len(o.capabilities) for o in self.outcomes}

    @property
    def failures(self) -> Dict[str, str]:
        """Failure reason per failed source."""
        return {o.source: o.error for o in self.outcomes if o.error is not None}


def coerce_capability(name: str, obj: Any) -> Optional[Capability]:
    """Normalize one provider entry into a :class:`Capability`.

    Accepts ``Capability`` instances, mappings carrying an ``invoke`` (or
    ``execute``) callable with an optional ``description``, and bare callables.
    Returns ``None`` for anything else.
    """
    if isinstance(obj, Capability):
        return obj
    if isinstance(obj, Mapping):
        fn = obj.get("invoke") or obj.get("execute")
        if callable(fn):
            description = obj.get("description")
            return Capability(name=name, description=description if isinstance(description, str) else None, invoke=fn)
        return None
    if callable(obj):
        return Capability(name=name, description=None, invoke=obj)
    return None


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class RegistryAggregator:
    """Merge capabilities from many providers into one frozen registry.

    Args:
        providers: Capability providers, in merge order. A later provider wins
            when two qualified names collide.
        adapters: Single-function adapters appended after all providers under
            their fixed names.
    """

    def __init__(
        self,
        providers: Sequence[CapabilityProvider] = (),
        adapters: Sequence[CapabilityAdapter] = (),
    ) -> None:
        self._providers: List[CapabilityProvider] = list(providers)
        self._adapters: List[CapabilityAdapter] = list(adapters)
        self.last_report: Optional[AggregationReport] = None

    @property
    def providers(self) -> List[CapabilityProvider]:
        return list(self._providers)

    @property
    def adapters(self) -> List[CapabilityAdapter]:
        return list(self._adapters)

    async def build_registry(self, preloaded: Optional[PreloadedSources] = None) -> CapabilityRegistry:
        """Build the merged, frozen capability registry.

        Args:
            preloaded: Already-loaded capability listings keyed by provider
                prefix. A provider with an entry here is not queried.

        Returns:
            The frozen :class:`CapabilityRegistry`. Never raises because of a
            single provider's failure.
        """
        preloaded = preloaded or {}
        provider_outcomes = await asyncio.gather(
            *(self._load_provider(p, preloaded.get(p.prefix)) for p in self._providers)
        )
        adapter_outcomes = [self._load_adapter(a) for a in self._adapters]
        outcomes = [*provider_outcomes, *adapter_outcomes]

        registry = CapabilityRegistry()
        for outcome in outcomes:
            for cap in outcome.capabilities:
                registry.register(cap)
        registry.freeze()

        report = AggregationReport(outcomes=outcomes, total=len(registry))
        self.last_report = report
        logger.info("Total capabilities registered: %d", report.total)
        logger.info("Capability breakdown: %s", report.counts)
        if report.failures:
            logger.warning("Capability sources unavailable: %s", sorted(report.failures))
        log_registry_build(counts=report.counts, failures=sorted(report.failures), total=report.total)
        return registry

    async def prewarm(self) -> Tuple[int, int]:
        """Load every provider once so their listings land in the cache.

        Returns:
            ``(succeeded, total)`` provider counts. Failures are logged only.
        """
        logger.info("Starting capability prewarm for %d providers", len(self._providers))
        started = time.monotonic()
        outcomes = await asyncio.gather(*(self._load_provider(p, None) for p in self._providers))
        succeeded = sum(1 for o in outcomes if o.ok)
        logger.info(
            "Prewarm completed in %.0fms (%d/%d successful)",
            (time.monotonic() - started) * 1000,
            succeeded,
            len(outcomes),
        )
        return succeeded, len(outcomes)

    async def _load_provider(
        self,
        provider: CapabilityProvider,
        preloaded: Optional[Mapping[str, Any]],
    ) -> ProviderOutcome:
        try:
            raw = preloaded if preloaded is not None else await provider.list_capabilities()
            caps = self._qualify(provider, raw)
        except Exception as e:
            logger.warning("Failed to load %s capabilities (provider=%s): %s", provider.label, provider.prefix, e)
            return ProviderOutcome.failure(provider.prefix, _describe(e))
        logger.info("Registered %d %s capabilities", len(caps), provider.label)
        return ProviderOutcome.success(provider.prefix, caps)

    def _qualify(self, provider: CapabilityProvider, raw: Mapping[str, Any]) -> List[Capability]:
        caps: List[Capability] = []
        for name, obj in raw.items():
            cap = coerce_capability(name, obj)
            if cap is None:
                logger.debug("Skipping non-callable entry %r from provider %s", name, provider.prefix)
                continue
            caps.append(cap.renamed(f"{provider.prefix}_{name}", default_description=f"{provider.label} tool: {name}"))
        return caps

    def _load_adapter(self, adapter: CapabilityAdapter) -> ProviderOutcome:
        try:
            cap = adapter.build()
        except Exception as e:
            logger.warning("Failed to register %s capability: %s", adapter.name, e)
            return ProviderOutcome.failure(adapter.name, _describe(e))
        if cap.name != adapter.name:
            cap = cap.renamed(adapter.name)
        logger.info("Registered %s capability", adapter.name)
        return ProviderOutcome.success(adapter.name, (cap,))
