"""Exceptions raised by the events service."""

from __future__ import annotations


class EventsError(Exception):
    """Base exception for events service errors."""
    pass


class StoreError(EventsError):
    """A persistent store backend failed to read or write."""
    pass


class SerializationError(EventsError, ValueError):
    """A serialized event batch could not be parsed."""
    pass
