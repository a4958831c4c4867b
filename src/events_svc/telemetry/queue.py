"""In-memory queue of events waiting to be delivered."""

from __future__ import annotations

import threading
from typing import Iterable

from .events import Event, EventBatch


class EventQueue:
    """
    Ordered buffer of unsent events.

    This is the source of truth while the process runs. Events leave the
    queue only after the collector has confirmed a batch containing them,
    and only the confirmed prefix is removed: anything appended while a
    send was in flight stays for the next cycle.
    """

    def __init__(self, events: Iterable[Event] = ()):
        self._events: list[Event] = list(events)
        self._lock = threading.Lock()

    def append(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)

    def extend_front(self, events: Iterable[Event]) -> None:
        """Put recovered events ahead of anything tracked so far."""
        with self._lock:
            self._events[:0] = list(events)

    def snapshot(self) -> EventBatch:
        """Immutable copy of the current queue for transmission."""
        with self._lock:
            return EventBatch.of(self._events)

    def remove_delivered(self, batch: EventBatch) -> int:
        """
        Remove the events of a confirmed batch from the head of the queue.

        Returns the number of events removed.
        """
        with self._lock:
            count = 0
            for delivered, queued in zip(batch.events, self._events):
                if delivered is not queued:
                    break
                count += 1
            del self._events[:count]
            return count

    @property
    def events(self) -> tuple[Event, ...]:
        with self._lock:
            return tuple(self._events)

    @property
    def is_empty(self) -> bool:
        return not self._events

    def __len__(self) -> int:
        return len(self._events)

    def to_json(self) -> str:
        return self.snapshot().to_json()
