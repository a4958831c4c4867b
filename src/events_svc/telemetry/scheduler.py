"""Cooldown-driven flush scheduling."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable


logger = logging.getLogger(__name__)


class CooldownState(str, Enum):
    IDLE = "idle"                           # No cycle running
    COOLDOWN_PENDING = "cooldown_pending"   # Waiting out the cooldown
    FLUSHING = "flushing"                   # Flush attempt in progress


@dataclass
class FlushScheduler:
    """
    Runs cooldown -> flush -> (re-arm or idle) cycles.

    A cycle is started when the first event arrives while idle. It waits
    the cooldown, so a burst of events ends up in a single request, then
    calls the flush callback. If events are still pending afterwards
    (the flush failed, or more events arrived meanwhile) the cooldown is
    applied again before the next attempt. Failures are therefore retried
    at a fixed interval for as long as there is something to send.

    Only one cycle exists at a time.
    """
    # Delay before each flush attempt
    cooldown_seconds: float = 2.0

    # Performs one flush attempt
    flush: Callable[[], Awaitable[Any]] | None = None

    # Whether anything is left to send after an attempt
    has_pending: Callable[[], bool] = lambda: False

    # Injectable for tests
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    # Internal state
    _state: CooldownState = field(default=CooldownState.IDLE, init=False)
    _task: asyncio.Task | None = field(default=None, init=False)
    _stats: dict = field(default_factory=dict, init=False)

    def __post_init__(self):
        self._stats = {
            "cycles_started": 0,
            "flush_attempts": 0,
            "flush_errors": 0,
        }

    @property
    def state(self) -> CooldownState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state != CooldownState.IDLE

    def start(self) -> bool:
        """
        Start a new cycle if none is active.

        Must be called from the event loop thread. Returns True if a cycle
        was started, False if one is already running.
        """
        if self.is_active:
            return False

        loop = asyncio.get_running_loop()
        self._state = CooldownState.COOLDOWN_PENDING
        self._task = loop.create_task(self._run_cycle())
        self._stats["cycles_started"] += 1
        return True

    async def _run_cycle(self) -> None:
        try:
            while True:
                self._state = CooldownState.COOLDOWN_PENDING
                await self.sleep(self.cooldown_seconds)

                self._state = CooldownState.FLUSHING
                self._stats["flush_attempts"] += 1
                try:
                    if self.flush is not None:
                        await self.flush()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.error(f"Flush attempt raised: {e}")
                    self._stats["flush_errors"] += 1

                if not self.has_pending():
                    break
        finally:
            self._state = CooldownState.IDLE
            self._task = None

    async def cancel(self) -> None:
        """
        Stop the current cycle, if any, and wait for its task to end.

        A flush in progress is cancelled at its current await, so a request
        already on the wire is abandoned. No further attempts are made.
        """
        task = self._task
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Flush cycle cancelled")

        self._state = CooldownState.IDLE
        self._task = None

    async def wait_idle(self) -> None:
        """Wait for the current cycle to finish on its own."""
        while self._task is not None:
            await asyncio.shield(self._task)

    @property
    def stats(self) -> dict:
        return {
            **self._stats,
            "state": self._state.value,
        }
