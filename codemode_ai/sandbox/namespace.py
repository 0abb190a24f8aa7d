"""Read-only capability namespace bound into script scope."""

from __future__ import annotations

import asyncio
import keyword
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterator, List


class CapabilityNamespace(Mapping):
    """Wrapped capabilities exposed as ``codemode`` and ``functions``.

    Supports attribute access (``codemode.dataforseo_keyword_ideas``) and item
    access (``codemode["dataforseo_keyword_ideas"]``). Unknown names raise an
    ``AttributeError``/``KeyError`` listing what is available. The namespace
    cannot be modified from a script.
    """

    __slots__ = ("_members",)

    def __init__(self, members: Mapping[str, Callable[..., Awaitable[Any]]]) -> None:
        object.__setattr__(self, "_members", MappingProxyType(dict(members)))

    def __getattr__(self, name: str) -> Callable[..., Awaitable[Any]]:
        try:
            return self._members[name]
        except KeyError:
            raise AttributeError(self._unknown(name)) from None

    def __getitem__(self, name: str) -> Callable[..., Awaitable[Any]]:
        try:
            return self._members[name]
        except KeyError:
            raise KeyError(self._unknown(name)) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("capability namespace is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("capability namespace is read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __dir__(self) -> List[str]:
        return sorted(self._members)

    def __repr__(self) -> str:
        return f"<capabilities: {', '.join(sorted(self._members))}>"

    @staticmethod
    async def gather(*calls: Awaitable[Any], return_exceptions: bool = False) -> List[Any]:
        """Await several capability calls concurrently; results keep call order."""
        return list(await asyncio.gather(*calls, return_exceptions=return_exceptions))

    def bare_bindings(self, reserved: Mapping[str, Any]) -> Dict[str, Callable[..., Awaitable[Any]]]:
        """Capabilities that can also be bound as bare names in script scope.

        Names that are not identifiers, are keywords, or would shadow a name in
        ``reserved`` are only reachable through the namespace.
        """
        return {
            name: fn
            for name, fn in self._members.items()
            if name.isidentifier() and not keyword.iskeyword(name) and name not in reserved
        }

    def _unknown(self, name: str) -> str:
        available = ", ".join(sorted(self._members)) or "none"
        return f"Unknown capability '{name}'. Available capabilities: {available}"
