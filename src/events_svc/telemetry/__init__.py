"""Telemetry core - event types, the pending queue and flush scheduling."""

from .events import Event, EventBatch
from .queue import EventQueue
from .scheduler import CooldownState, FlushScheduler

__all__ = [
    "Event",
    "EventBatch",
    "EventQueue",
    "CooldownState",
    "FlushScheduler",
]
