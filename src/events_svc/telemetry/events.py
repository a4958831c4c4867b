"""Event types and the batch wire format."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from ..errors import SerializationError


@dataclass(frozen=True, slots=True)
class Event:
    """A single tracked application event."""
    type: str
    data: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {"type": self.type, "data": self.data}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Event:
        type_, data = d.get("type"), d.get("data")
        if not isinstance(type_, str) or not isinstance(data, str):
            raise SerializationError(f"Event needs string 'type' and 'data': {d!r}")
        return cls(type=type_, data=data)


@dataclass(frozen=True, slots=True)
class EventBatch:
    """
    An ordered, immutable sequence of events.

    The same shape is used on the wire and in the persistent store:

        {"events": [{"type": "...", "data": "..."}, ...]}

    so a persisted batch can be loaded straight back as a pending queue.
    """
    events: tuple[Event, ...] = ()

    @classmethod
    def of(cls, events: Iterable[Event]) -> EventBatch:
        return cls(events=tuple(events))

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    def to_dict(self) -> dict[str, Any]:
        return {"events": [e.to_dict() for e in self.events]}

    def to_json(self) -> str:
        """Serialize to the wire/persistence JSON shape."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_json(cls, json_str: str) -> EventBatch:
        """
        Parse a serialized batch.

        Raises:
            SerializationError: If the payload is not a valid batch
        """
        try:
            d = json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Invalid event batch JSON: {e}") from e

        if not isinstance(d, dict):
            raise SerializationError("Event batch must be a JSON object")

        raw_events = d.get("events", [])
        if not isinstance(raw_events, list):
            raise SerializationError("'events' must be a list")

        events = []
        for item in raw_events:
            if not isinstance(item, dict):
                raise SerializationError(f"Invalid event entry: {item!r}")
            events.append(Event.from_dict(item))
        return cls(events=tuple(events))
