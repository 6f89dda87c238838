"""
Abstract interface for the key-value store.

Values are JSON-compatible objects. Keys are namespaced strings such as
``quotation:<userId>:<id>``; ownership is encoded in the prefix.
"""

from abc import ABC, abstractmethod
from typing import Any

JsonValue = dict[str, Any]


class IKeyValueStore(ABC):
    """Interface for key-value persistence."""

    @abstractmethod
    async def get(self, key: str) -> JsonValue | None:
        """Get the value stored under *key*, or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: JsonValue) -> None:
        """Store *value* under *key*, replacing any previous value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete *key*. Returns True if a value was removed."""
        pass

    @abstractmethod
    async def get_by_prefix(self, prefix: str) -> list[JsonValue]:
        """All values whose key starts with *prefix*, ordered by key."""
        pass

    async def ping(self) -> bool:
        """Check that the store is reachable."""
        return True
