"""Extcap interface registry."""
from __future__ import annotations

from typing import Dict, Optional


class InterfaceRegistry:
    """
    Maps interface name -> owning provider path.

    Rebuilt by every interface-listing pass and consulted by the
    capability and configuration queries. First registration wins; the
    table is append-only until reset(). Writers must be serialized.
    """

    def __init__(self):
        self._owners: Dict[str, str] = {}

    def reset(self) -> None:
        self._owners.clear()

    def lookup(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        return self._owners.get(name)

    def register(self, name: str, provider_path: str) -> bool:
        """Insert name unless already owned. Returns True if inserted."""
        if name in self._owners:
            return False
        self._owners[name] = provider_path
        return True

    def owns(self, name: Optional[str], provider_path: str) -> bool:
        return self.lookup(name) == provider_path

    def __contains__(self, name: object) -> bool:
        return name in self._owners

    def __len__(self) -> int:
        return len(self._owners)


_DEFAULT_REGISTRY: Optional[InterfaceRegistry] = None


def default_registry() -> InterfaceRegistry:
    """Process-wide registry, created on first use."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = InterfaceRegistry()
    return _DEFAULT_REGISTRY
