from __future__ import annotations

import pytest

from codemode_ai.capabilities import Capability, CapabilityRegistry


def _cap(name: str, description: str | None = None) -> Capability:
    return Capability(name=name, description=description, invoke=lambda: name)


def test_register_get_and_overwrite() -> None:
    registry = CapabilityRegistry()
    registry.register(_cap("dataforseo_a", "first"))
    registry.register(_cap("dataforseo_a", "second"))

    assert len(registry) == 1
    assert registry.get("dataforseo_a").description == "second"
    assert registry.has("dataforseo_a")
    assert "dataforseo_a" in registry


def test_get_missing_raises_key_error() -> None:
    with pytest.raises(KeyError):
        CapabilityRegistry().get("nope")


def test_frozen_registry_rejects_register() -> None:
    registry = CapabilityRegistry.from_capabilities(_cap("a"))
    assert registry.frozen
    with pytest.raises(RuntimeError, match="frozen"):
        registry.register(_cap("b"))


def test_read_api_keeps_registration_order() -> None:
    registry = CapabilityRegistry.from_capabilities(
        _cap("firecrawl_scrape", "Scrape"),
        _cap("dataforseo_serp"),
        _cap("firecrawl_search"),
    )
    assert registry.names() == ["firecrawl_scrape", "dataforseo_serp", "firecrawl_search"]
    assert list(registry) == registry.names()
    assert registry.describe() == {"firecrawl_scrape": "Scrape", "dataforseo_serp": "", "firecrawl_search": ""}
    assert [name for name, _ in registry.items()] == registry.names()


def test_renamed_fills_missing_description_only() -> None:
    cap = _cap("x")
    assert cap.renamed("p_x", default_description="P tool: x").description == "P tool: x"
    described = _cap("y", "own")
    assert described.renamed("p_y", default_description="P tool: y").description == "own"
