"""Wiring - build an events service from configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from .config import Config
from .service import EventsService
from .storage import FileStore, InMemoryStore, PersistentStore, RedisStore
from .transport import ConsoleTransport, HttpTransport, Transport


logger = logging.getLogger(__name__)


def create_transport(config: Config) -> Transport:
    """Create the transport selected by config."""
    transport_type = config.transport.type

    if transport_type == "http":
        return HttpTransport(
            server_url=config.transport.server_url,
            timeout_seconds=config.transport.timeout_seconds,
        )
    elif transport_type == "console":
        return ConsoleTransport(**config.transport.console)
    else:
        raise ValueError(f"Unknown transport type: {transport_type}")


def create_store(config: Config) -> PersistentStore:
    """Create the persistent store selected by config."""
    storage = config.storage

    if storage.type == "file":
        return FileStore(path=storage.path)
    elif storage.type == "memory":
        return InMemoryStore()
    elif storage.type == "redis":
        return RedisStore(
            host=storage.redis_host,
            port=storage.redis_port,
            db=storage.redis_db,
            password=storage.redis_password,
            prefix=storage.redis_prefix,
        )
    else:
        raise ValueError(f"Unknown storage type: {storage.type}")


def create_service(
    config: Config,
    transport: Transport | None = None,
    store: PersistentStore | None = None,
) -> EventsService:
    """Create an events service; transport/store default to the configured ones."""
    return EventsService(
        transport=transport or create_transport(config),
        store=store or create_store(config),
        cooldown_seconds=config.flush.cooldown_seconds,
        cache_key=config.storage.key,
        debug=config.logging.debug,
        flush_on_start=config.flush.flush_on_start,
    )


@asynccontextmanager
async def running_service(
    config: Config | None = None,
    transport: Transport | None = None,
    store: PersistentStore | None = None,
) -> AsyncIterator[EventsService]:
    """
    Service lifespan - initialize on entry, shutdown on exit.

    Usage:
        async with running_service(Config.from_yaml("events.yaml")) as events:
            events.track_event("login", "{}")
    """
    service = create_service(config or Config(), transport=transport, store=store)

    logger.info("Starting events service...")
    await service.initialize()

    try:
        yield service
    finally:
        logger.info("Shutting down events service...")
        await service.shutdown()
