"""Shared test fixtures for events service tests."""

from __future__ import annotations

import asyncio
import json

import pytest

from events_svc.service import EventsService
from events_svc.storage.memory import InMemoryStore
from events_svc.transport.base import Transport


COOLDOWN = 2.0
CACHE_KEY = "EVENTS_CACHE"


# =============================================================================
# Test doubles
# =============================================================================

class ManualSleep:
    """
    Replacement for asyncio.sleep that only returns when released.

    Lets tests step through cooldowns without real waiting.
    """

    def __init__(self):
        self.calls: list[float] = []
        self._waiters: list[asyncio.Future] = []

    async def __call__(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(seconds)
        self._waiters.append(future)
        await future

    @property
    def pending(self) -> int:
        return sum(1 for f in self._waiters if not f.done())

    async def advance(self) -> None:
        """Finish every pending sleep and let the woken tasks run."""
        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(None)
        await settle()


async def settle(rounds: int = 50) -> None:
    """Give scheduled tasks a chance to run to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class RecordingTransport(Transport):
    """Transport that records payloads and replies from a script of results."""

    def __init__(self, results: list[bool] | None = None, default: bool = True):
        self.payloads: list[str] = []
        self.results = list(results or [])
        self.default = default
        self.closed = False
        self.gate: asyncio.Event | None = None

    async def send(self, payload: str) -> bool:
        self.payloads.append(payload)
        if self.gate is not None:
            await self.gate.wait()
        if self.results:
            return self.results.pop(0)
        return self.default

    async def close(self) -> None:
        self.closed = True

    @property
    def batches(self) -> list[list[tuple[str, str]]]:
        """Sent payloads decoded to (type, data) pairs."""
        return [
            [(e["type"], e["data"]) for e in json.loads(p)["events"]]
            for p in self.payloads
        ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def clock() -> ManualSleep:
    return ManualSleep()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def make_service(clock, store):
    """Factory for services sharing the test clock and store."""
    def _make(transport: Transport, **kwargs) -> EventsService:
        kwargs.setdefault("cooldown_seconds", COOLDOWN)
        kwargs.setdefault("cache_key", CACHE_KEY)
        kwargs.setdefault("store", store)
        return EventsService(transport=transport, sleep=clock, **kwargs)
    return _make


@pytest.fixture
def service(make_service, transport) -> EventsService:
    return make_service(transport)


def stored_events(store: InMemoryStore, key: str = CACHE_KEY) -> list[tuple[str, str]] | None:
    """Decode the persisted queue, or None if the key is absent."""
    raw = store._store.get(key)
    if raw is None:
        return None
    return [(e["type"], e["data"]) for e in json.loads(raw)["events"]]
