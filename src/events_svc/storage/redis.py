"""Redis-backed persistent store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import StoreError
from .base import PersistentStore


logger = logging.getLogger(__name__)


@dataclass
class RedisStore(PersistentStore):
    """
    Redis-based store.

    Lets unsent events survive restarts on hosts without a writable disk,
    and lets a replacement process pick up events left by a crashed one.

    Key format: {prefix}{key}
    Value: the serialized event batch
    """
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str | None = None
    prefix: str = "events:"
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0

    # Optional pre-built client (tests, shared pools)
    client: Any = None

    _owns_client: bool = field(default=False, init=False)

    def _get_client(self) -> Any:
        if self.client is None:
            self.client = redis.Redis(
                host=self.host,
                port=self.port,
                db=self.db,
                password=self.password,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_connect_timeout,
                decode_responses=True,
            )
            self._owns_client = True
            logger.info(f"Using Redis at {self.host}:{self.port} for event persistence")
        return self.client

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> str | None:
        try:
            return await self._get_client().get(self._key(key))
        except RedisError as e:
            raise StoreError(f"Redis get error for {key}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            await self._get_client().set(self._key(key), value)
        except RedisError as e:
            raise StoreError(f"Redis set error for {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._get_client().delete(self._key(key)))
        except RedisError as e:
            raise StoreError(f"Redis delete error for {key}: {e}") from e

    async def close(self) -> None:
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            self._owns_client = False
            logger.info("Redis connection closed")
