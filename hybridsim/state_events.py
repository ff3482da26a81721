# hybridsim/state_events.py

"""Priority-ordered list of pending state events."""

from typing import TYPE_CHECKING, Callable, Iterator, Optional

from .events import StateEvent

if TYPE_CHECKING:
    from .capabilities import SimComponent


class StateEventList:
    """Pending state events, polled against the owner's current time.

    Events are kept in descending priority; events of equal priority keep
    their insertion order. State events have no scheduled time, so this is
    the only ordering.
    """

    def __init__(self, time_source: Callable[[], float]):
        self._events: list[StateEvent] = []
        self._time_source = time_source

    def add(self, event: StateEvent) -> None:
        """Insert behind every event of higher or equal priority."""
        index = 0
        for index, queued in enumerate(self._events):
            if queued.priority < event.priority:
                break
        else:
            index = len(self._events)
        self._events.insert(index, event)

    def has_any(self) -> bool:
        """True if any predicate holds at the current time. Does not modify the list."""
        time = self._time_source()
        return any(event.check_state(time) for event in self._events)

    def take_next(self) -> Optional[StateEvent]:
        """Remove and return the highest priority event whose predicate holds.

        Returns None when no predicate holds. Call repeatedly to drain; handling
        one event may change which others are true.
        """
        time = self._time_source()
        for index, event in enumerate(self._events):
            if event.check_state(time):
                del self._events[index]
                return event
        return None

    def remove(self, event: StateEvent) -> None:
        """Remove a specific event (by identity). No-op if it is not listed."""
        self._events = [queued for queued in self._events if queued is not event]

    def remove_all_for(self, component: "SimComponent") -> None:
        """Remove every event whose source or target is ``component``."""
        self._events = [queued for queued in self._events if not queued.references(component)]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)

    def __iter__(self) -> Iterator[StateEvent]:
        return iter(list(self._events))
