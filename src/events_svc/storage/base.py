"""Base persistent store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class PersistentStore(ABC):
    """
    Durable string key/value storage.

    Used to save the serialized queue of unsent events between runs.
    Implementations raise StoreError when the backend cannot be read or
    written.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        ...

    async def close(self) -> None:
        """Release resources (called on shutdown)."""
        pass
