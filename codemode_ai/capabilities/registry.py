"""Capability registry.

The registry maps a globally unique, provider-qualified name to a
:class:`Capability`. It is built fresh for each orchestration session and
frozen before any script runs against it.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

from .base import Capability


class CapabilityRegistry:
    """
    In-memory mapping of qualified capability names to implementations.

    Notes:
        - ``register`` overwrites any existing mapping for the name, so the
          later provider wins on collision.
        - ``get`` will raise ``KeyError`` if the capability is missing.
        - After ``freeze`` the registry is read-only; ``register`` raises
          ``RuntimeError``.
    """

    def __init__(self) -> None:
        """Initialize an empty, mutable capability registry."""
        self._caps: Dict[str, Capability] = {}
        self._frozen = False

    def register(self, cap: Capability) -> None:
        """
        Register a capability implementation under ``cap.name``.

        Args:
            cap: The capability instance to register.

        Raises:
            RuntimeError: If the registry has been frozen.
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register '{cap.name}': capability registry is frozen")
        self._caps[cap.name] = cap

    def freeze(self) -> "CapabilityRegistry":
        """Make the registry read-only and return it."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Capability:
        """
        Retrieve a registered capability by name.

        Raises:
            KeyError: If no capability is registered with the given name.
        """
        return self._caps[name]

    def has(self, name: str) -> bool:
        """Check if a capability is registered."""
        return name in self._caps

    def names(self) -> List[str]:
        """Registered names in registration order."""
        return list(self._caps)

    def items(self) -> List[Tuple[str, Capability]]:
        return list(self._caps.items())

    def describe(self) -> Dict[str, str]:
        """Map each name to its description (empty string when missing)."""
        return {name: cap.description or "" for name, cap in self._caps.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._caps

    def __iter__(self) -> Iterator[str]:
        return iter(self._caps)

    def __len__(self) -> int:
        return len(self._caps)

    @classmethod
    def from_capabilities(cls, *caps: Capability) -> "CapabilityRegistry":
        """Build a frozen registry from capabilities, in order."""
        registry = cls()
        for cap in caps:
            registry.register(cap)
        return registry.freeze()
