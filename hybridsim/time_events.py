# hybridsim/time_events.py

"""Time-ordered queue of pending time events."""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from .events import TimeEvent

if TYPE_CHECKING:
    from .capabilities import SimComponent


@dataclass(order=True)
class _QueueEntry:
    event_time: float
    neg_priority: int
    sequence: int
    event: TimeEvent = field(compare=False)


class TimeEventQueue:
    """Pending time events ordered by time, then priority, then insertion.

    For two queued events e1 and e2, e1 is dispatched first when its time is
    earlier, or the times are equal and its priority is higher, or time and
    priority are equal and it was added first. The sort key is captured when
    the event is added; changing ``event_time`` of a queued event does not
    reorder it.
    """

    def __init__(self):
        self._heap: list[_QueueEntry] = []
        self._counter = itertools.count()

    def add(self, event: TimeEvent) -> None:
        """Insert an event, keeping dispatch order."""
        entry = _QueueEntry(event.event_time, -event.priority, next(self._counter), event)
        heapq.heappush(self._heap, entry)

    def peek_first(self) -> Optional[TimeEvent]:
        """Return the next event without removing it, or None if empty."""
        if not self._heap:
            return None
        return self._heap[0].event

    def remove_first(self) -> Optional[TimeEvent]:
        """Remove and return the next event, or None if empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap).event

    def remove(self, event: TimeEvent) -> None:
        """Remove a specific event (by identity). No-op if it is not queued."""
        self._filter(lambda queued: queued is not event)

    def remove_all_for(self, component: "SimComponent") -> None:
        """Remove every event whose source or target is ``component``."""
        self._filter(lambda queued: not queued.references(component))

    def clear(self) -> None:
        self._heap.clear()

    def _filter(self, keep) -> None:
        kept = [entry for entry in self._heap if keep(entry.event)]
        if len(kept) != len(self._heap):
            heapq.heapify(kept)
            self._heap = kept

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __iter__(self) -> Iterator[TimeEvent]:
        """Iterate over a snapshot of the queue in dispatch order."""
        return iter([entry.event for entry in sorted(self._heap)])
