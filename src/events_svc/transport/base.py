"""Base transport interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Transport(ABC):
    """
    Abstract base class for transports.

    A transport delivers one serialized event batch to the collector and
    reports whether the collector accepted it. Transports do not retry;
    the flush scheduler takes care of that.
    """

    @abstractmethod
    async def send(self, payload: str) -> bool:
        """
        Send a serialized batch.

        Returns True on confirmed delivery, False on any failure.
        """
        ...

    async def close(self) -> None:
        """Release resources (called on shutdown)."""
        pass
