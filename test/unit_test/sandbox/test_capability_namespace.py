from __future__ import annotations

import pytest

from codemode_ai.sandbox import CapabilityNamespace


async def _echo(value):
    return value


def _namespace() -> CapabilityNamespace:
    return CapabilityNamespace({"dataforseo_serp": _echo, "firecrawl-crawl": _echo, "len": _echo, "class": _echo})


def test_attribute_and_item_access() -> None:
    ns = _namespace()
    assert ns.dataforseo_serp is _echo
    assert ns["firecrawl-crawl"] is _echo
    assert len(ns) == 4
    assert "dataforseo_serp" in ns


def test_unknown_names_list_available() -> None:
    ns = _namespace()
    with pytest.raises(AttributeError, match="Unknown capability 'missing'"):
        ns.missing
    with pytest.raises(KeyError, match="dataforseo_serp"):
        ns["missing"]
    assert ns.get("missing") is None


def test_namespace_is_read_only() -> None:
    ns = _namespace()
    with pytest.raises(AttributeError, match="read-only"):
        ns.dataforseo_serp = None
    with pytest.raises(AttributeError):
        del ns.dataforseo_serp
    with pytest.raises(TypeError):
        ns["x"] = _echo


def test_member_table_cannot_be_mutated() -> None:
    ns = _namespace()
    with pytest.raises(TypeError):
        ns._members["extra"] = _echo
    with pytest.raises(TypeError):
        del ns._members["len"]
    assert len(ns) == 4 and "extra" not in ns


def test_bare_bindings_skip_invalid_reserved_and_keywords() -> None:
    bindings = _namespace().bare_bindings({"len": len})
    assert list(bindings) == ["dataforseo_serp"]


def test_dir_and_repr() -> None:
    ns = _namespace()
    assert dir(ns) == sorted(["dataforseo_serp", "firecrawl-crawl", "len", "class"])
    assert "dataforseo_serp" in repr(ns)


@pytest.mark.asyncio
async def test_gather_keeps_call_order() -> None:
    ns = _namespace()
    assert await ns.gather(ns.dataforseo_serp(1), ns.dataforseo_serp(2)) == [1, 2]
