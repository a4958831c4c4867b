"""HTTP transport for posting event batches."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from .base import Transport


logger = logging.getLogger(__name__)


@dataclass
class HttpTransport(Transport):
    """
    Posts batches as JSON to the collector URL.

    Any 2xx response counts as delivered. Non-2xx responses and network
    errors (including timeouts) count as failures; nothing is raised.
    """
    server_url: str

    # Request timeout (seconds, None = wait forever)
    timeout_seconds: float | None = 30.0

    # Optional pre-built client (tests, shared pools)
    client: httpx.AsyncClient | None = None

    _owns_client: bool = field(default=False, init=False)

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout_seconds)
            self._owns_client = True
        return self.client

    async def send(self, payload: str) -> bool:
        client = self._get_client()
        try:
            response = await client.post(
                self.server_url,
                content=payload.encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"POST {self.server_url} failed: {e!r}")
            return False

        if not response.is_success:
            logger.warning(f"POST {self.server_url} returned {response.status_code}")
            return False

        return True

    async def close(self) -> None:
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            self._owns_client = False
