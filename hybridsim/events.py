# hybridsim/events.py

"""Simulation events: scheduled time events and condition-checked state events."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

from .capabilities import UpdateSchedule
from .exceptions import EventTargetError, InvalidIntervalError

if TYPE_CHECKING:
    from .capabilities import SimComponent
    from .simulation import Simulation


class SimEvent:
    """Base class for everything the coordinator dispatches to a component.

    Source, priority and message are fixed at construction. The target may be
    assigned later, but only once. ``simulation`` is set by the coordinator
    when the event is registered.
    """

    def __init__(
        self,
        source: Optional["SimComponent"] = None,
        target: Optional["SimComponent"] = None,
        priority: int = 0,
        message: int = 0,
    ):
        self._source = source
        self._target = target
        self._priority = int(priority)
        self._message = int(message)
        self._canceled = False
        self.simulation: Optional["Simulation"] = None

    @property
    def source(self) -> Optional["SimComponent"]:
        return self._source

    @property
    def target(self) -> Optional["SimComponent"]:
        return self._target

    @target.setter
    def target(self, value: "SimComponent") -> None:
        if self._target is not None:
            raise EventTargetError("Event target is already set and cannot be reassigned")
        self._target = value

    @property
    def priority(self) -> int:
        """Events with a higher priority are handled first."""
        return self._priority

    @property
    def message(self) -> int:
        """Optional payload tag for the target."""
        return self._message

    @property
    def canceled(self) -> bool:
        return self._canceled

    def cancel(self) -> None:
        """Mark the event canceled; recurring events will not reschedule."""
        self._canceled = True

    def _target_registered(self) -> bool:
        """True while the target is still owned by the simulation that dispatched this event."""
        return self.simulation is not None and getattr(self._target, "simulation", None) is self.simulation

    def references(self, component: "SimComponent") -> bool:
        """True if ``component`` is the source or the target of this event."""
        return self._source is component or self._target is component

    def handle(self) -> None:
        """Deliver the event to its target.

        Raises:
            EventTargetError: If no target was assigned
        """
        if self._target is None:
            raise EventTargetError(f"No target specified to handle {self!r}")
        self._target.handle_event(self)

    def __repr__(self) -> str:
        target_name = getattr(self._target, "name", None)
        return f"{type(self).__name__}(target={target_name!r}, priority={self._priority})"


class TimeEvent(SimEvent):
    """An action scheduled at an absolute simulation time."""

    def __init__(
        self,
        source: Optional["SimComponent"] = None,
        target: Optional["SimComponent"] = None,
        priority: int = 0,
        message: int = 0,
        event_time: float = 0.0,
    ):
        super().__init__(source, target, priority, message)
        self.event_time = float(event_time)

    def __repr__(self) -> str:
        target_name = getattr(self.target, "name", None)
        return (
            f"{type(self).__name__}(target={target_name!r}, priority={self.priority}, "
            f"event_time={self.event_time})"
        )


class RecurringTimeEvent(TimeEvent):
    """Time event that reschedules itself every ``interval`` until canceled."""

    def __init__(
        self,
        source: Optional["SimComponent"] = None,
        target: Optional["SimComponent"] = None,
        priority: int = 0,
        message: int = 0,
        event_time: float = 0.0,
        interval: float = 1.0,
    ):
        super().__init__(source, target, priority, message, event_time)
        self.interval = interval

    @property
    def interval(self) -> float:
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        if value <= 0:
            raise InvalidIntervalError(f"Recurring event intervals must be > 0, got {value}")
        self._interval = float(value)

    def handle(self) -> None:
        super().handle()

        if not self.canceled and self._target_registered():
            self.event_time += self._interval
            self.simulation.register_event(self)


class UpdateTimeEvent(TimeEvent):
    """Recurring time event that follows the time step of its target's update schedule.

    The step is read again after every dispatch, so a component may change its
    own time step while it runs. A step <= 0 ends the recurrence.
    """

    def handle(self) -> None:
        super().handle()

        if not isinstance(self.target, UpdateSchedule):
            raise EventTargetError(f"Target of {self!r} does not declare an update schedule")

        time_step = self.target.time_step
        if time_step > 0 and not self.canceled and self._target_registered():
            self.event_time += time_step
            self.simulation.register_event(self)


class StateEvent(SimEvent, ABC):
    """An action triggered when a condition over the continuous state becomes true.

    ``check_state`` is polled repeatedly, including during bisection, so it
    must not have side effects.
    """

    @abstractmethod
    def check_state(self, time: float) -> bool:
        """Return True when the monitored condition holds at ``time``."""


StateChecker = Callable[[StateEvent, float], bool]


class DelegateStateEvent(StateEvent):
    """State event whose condition is a plain callable ``(event, time) -> bool``."""

    def __init__(
        self,
        source: Optional["SimComponent"] = None,
        target: Optional["SimComponent"] = None,
        priority: int = 0,
        message: int = 0,
        state_checker: Optional[StateChecker] = None,
    ):
        if state_checker is None:
            raise ValueError("DelegateStateEvent requires a state_checker")
        super().__init__(source, target, priority, message)
        self._state_checker = state_checker

    def check_state(self, time: float) -> bool:
        return bool(self._state_checker(self, time))
