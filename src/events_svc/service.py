"""Events service - buffers, flushes and persists tracked events."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from .config import DEFAULT_CACHE_KEY
from .errors import SerializationError, StoreError
from .storage.base import PersistentStore
from .telemetry.events import Event, EventBatch
from .telemetry.queue import EventQueue
from .telemetry.scheduler import CooldownState, FlushScheduler
from .transport.base import Transport


logger = logging.getLogger(__name__)


class EventsService:
    """
    Client-side telemetry pipe.

    Events passed to track_event() are queued in memory and sent to the
    collector in batches, one request per cooldown interval at most. The
    queue is written to the persistent store after every flush attempt
    and on shutdown, so events that were not confirmed delivered are
    picked up again by initialize() on the next run.

    Nothing here raises to the caller on network or storage problems:
    telemetry must never interrupt the host application.

    Usage:
        service = EventsService(transport=HttpTransport(url), store=FileStore(path))
        await service.initialize()
        service.track_event("login", "{}")
        ...
        await service.shutdown()
    """

    def __init__(
        self,
        transport: Transport,
        store: PersistentStore,
        cooldown_seconds: float = 2.0,
        cache_key: str = DEFAULT_CACHE_KEY,
        debug: bool = False,
        flush_on_start: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.transport = transport
        self.store = store
        self.cache_key = cache_key
        self.debug = debug
        self.flush_on_start = flush_on_start

        self.queue = EventQueue()
        self.scheduler = FlushScheduler(
            cooldown_seconds=cooldown_seconds,
            flush=self.flush_once,
            has_pending=lambda: not self.queue.is_empty,
            sleep=sleep,
        )

        self._loaded = False
        self._initialized = False
        self._closed = False
        self._flush_lock = asyncio.Lock()
        self._stats = {
            "events_tracked": 0,
            "events_recovered": 0,
            "events_sent": 0,
            "flushes_succeeded": 0,
            "flushes_failed": 0,
            "persist_errors": 0,
        }

    def _log(self, info: str) -> None:
        """Diagnostic channel; silent unless debug is enabled."""
        if not self.debug:
            return
        logger.info(f"[Events] - {info}")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """Recover events left unsent by a previous run."""
        if self._initialized:
            return
        self._initialized = True

        await self._load()

        if self.flush_on_start and not self.queue.is_empty:
            self.scheduler.start()

    async def _load(self) -> bool:
        """
        Read the saved queue and put its events ahead of the live ones.

        Returns False if the store could not be read; the saved events are
        then still unknown and must not be overwritten.
        """
        if self._loaded:
            return True

        try:
            raw = await self.store.get(self.cache_key)
        except StoreError as e:
            logger.error(f"Failed to read cached events, will retry: {e}")
            return False

        self._loaded = True

        if raw is None:
            self._log("[Init] - 0 cached events")
            return True

        try:
            batch = EventBatch.from_json(raw)
        except SerializationError as e:
            logger.warning(f"Discarding unreadable cached events: {e}")
            return True

        self.queue.extend_front(batch.events)
        self._stats["events_recovered"] += len(batch)
        self._log(f"[Init] - Found {len(batch)} unsent events. Adding to queue.")
        return True

    async def shutdown(self) -> None:
        """
        Stop scheduling flushes and save whatever is still pending.

        An in-flight request is cancelled; it may or may not have reached
        the collector. Its events are persisted regardless and may be sent
        again on the next run.
        """
        if self._closed:
            return
        self._closed = True

        await self.scheduler.cancel()
        await self.persist()

        await self.transport.close()
        await self.store.close()

        logger.info(f"Events service stopped. Stats: {self.stats}")

    # =========================================================================
    # Tracking and flushing
    # =========================================================================

    def track_event(self, type: str, data: str) -> None:
        """
        Queue an event for delivery (fire and forget).

        Starts a flush cycle if none is running. Must be called from the
        event loop thread for scheduling to happen; from anywhere else the
        event is queued and goes out with the next cycle.
        """
        event = Event(type=type, data=data)
        self.queue.append(event)
        self._stats["events_tracked"] += 1

        if self._closed:
            logger.warning(f"Event '{type}' tracked after shutdown; call persist() to keep it")
        elif not self.scheduler.is_active:
            try:
                self.scheduler.start()
            except RuntimeError:
                logger.warning("No running event loop; flush deferred to the next cycle")

        self._log(f"Track Event Type: {type}, Data: {data}")

    async def flush_once(self) -> bool | None:
        """
        Attempt to deliver everything currently queued.

        Only one flush runs at a time; a second caller waits and then sends
        whatever is left. Returns True on success, False on failure, None if
        there was nothing to send.
        """
        async with self._flush_lock:
            return await self._flush_unsafe()

    async def _flush_unsafe(self) -> bool | None:
        """Flush without lock (caller must hold lock)."""
        await self._load()

        if self.queue.is_empty:
            return None

        self._log("Start Flush")

        batch = self.queue.snapshot()
        payload = batch.to_json()

        try:
            delivered = await self.transport.send(payload)
        except Exception as e:
            logger.error(f"Transport error while flushing {len(batch)} events: {e}")
            delivered = False

        if delivered:
            removed = self.queue.remove_delivered(batch)
            self._stats["flushes_succeeded"] += 1
            self._stats["events_sent"] += removed
            self._log("Flush Success")
        else:
            self._stats["flushes_failed"] += 1
            self._log("Flush Failed")

        await self.persist()
        return delivered

    async def persist(self) -> None:
        """
        Write the current queue to the store.

        An empty queue deletes the key rather than storing an empty batch.
        Nothing is written while the saved queue could not be read yet.
        Failures are logged, not raised.
        """
        if not await self._load():
            self._stats["persist_errors"] += 1
            logger.error(f"Saved events not loaded; keeping store untouched ({len(self.queue)} pending in memory)")
            return

        try:
            if self.queue.is_empty:
                await self.store.delete(self.cache_key)
            else:
                await self.store.set(self.cache_key, self.queue.to_json())
        except (StoreError, OSError) as e:
            self._stats["persist_errors"] += 1
            logger.error(f"Failed to persist {len(self.queue)} unsent events: {e}")

    async def wait_idle(self) -> None:
        """Wait until the current flush cycle (if any) ends."""
        await self.scheduler.wait_idle()

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def pending_events(self) -> tuple[Event, ...]:
        return self.queue.events

    @property
    def queue_depth(self) -> int:
        return len(self.queue)

    @property
    def state(self) -> CooldownState:
        return self.scheduler.state

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def stats(self) -> dict:
        return {
            **self._stats,
            "queue_depth": self.queue_depth,
            "scheduler": self.scheduler.stats,
        }
