"""Key-value store protocol consumed by the read-through cache."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal async store contract.

    ``get`` returns ``None`` for absent or expired keys. ``set`` stores a value
    for ``ttl_seconds``. Any conforming backend (in-process map, Redis) works.
    """

    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None: ...

    async def delete(self, key: str) -> None: ...
