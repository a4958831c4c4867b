"""In-memory store for tests and ephemeral hosts."""

from __future__ import annotations

from dataclasses import dataclass, field

from .base import PersistentStore


@dataclass
class InMemoryStore(PersistentStore):
    """
    Dict-backed store.

    Nothing survives the process, but a single instance can be shared
    between service instances to simulate a restart.
    """
    _store: dict[str, str] = field(default_factory=dict, init=False)

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._store)
