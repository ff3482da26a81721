# hybridsim/simulation.py

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Union

from .capabilities import (
    SimComponent,
    UpdateMethod,
    has_update_schedule,
    is_state_contributor,
)
from .config import KernelConfig, config
from .events import SimEvent, StateEvent, TimeEvent, UpdateTimeEvent
from .exceptions import (
    ComponentRegistrationError,
    SchedulingError,
    SimulationStateError,
)
from .integrators import EulerIntegrator, Integrator
from .logging import get_logger
from .notifications import (
    Notification,
    NotificationHandler,
    NotificationRegistry,
    NotificationType,
)
from .state_events import StateEventList
from .time_events import TimeEventQueue


class SimulationStatus(str, Enum):
    """Enumeration for run states."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    ERROR = "error"  # Never assigned by the kernel itself


@dataclass
class _Registration:
    """Capabilities of a registered component, resolved once at registration."""

    component: SimComponent
    in_integrator: bool
    schedules_updates: bool


class Simulation:
    """Coordinator of a hybrid discrete-event / continuous simulation.

    Owns the clock, the time-event queue, the state-event list, the
    integrator and the registered components. One call to ``step`` integrates
    up to the next scheduled time event and dispatches it. State events that
    become true in between are localized by bisection to within ``accuracy``
    and dispatched at that instant.
    """

    def __init__(
        self,
        start_time: Optional[float] = None,
        stop_time: Optional[float] = None,
        accuracy: Optional[float] = None,
        integrator: Optional[Integrator] = None,
        name: Optional[str] = None,
        settings: Optional[KernelConfig] = None,
    ):
        settings = settings or config
        self.name = name or type(self).__name__
        self.start_time = settings.start_time if start_time is None else start_time
        self.stop_time = settings.stop_time if stop_time is None else stop_time
        self.accuracy = settings.accuracy if accuracy is None else accuracy
        self.max_bisection_iterations = settings.max_bisection_iterations
        self.current_time = self.start_time

        self._status = SimulationStatus.IDLE
        self._stop_requested = False
        self._registrations: list[_Registration] = []
        self._integrator: Integrator = integrator if integrator is not None else EulerIntegrator()

        self.time_events = TimeEventQueue()
        self.state_events = StateEventList(lambda: self.current_time)
        self.notifications = NotificationRegistry()

        self.logger = get_logger(f"{__name__}.Simulation")

    # Properties

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def accuracy(self) -> float:
        """Maximum width of the time bracket left around a localized state event."""
        return self._accuracy

    @accuracy.setter
    def accuracy(self, value: float) -> None:
        if value <= 0:
            raise ValueError("Accuracy must be positive")
        self._accuracy = float(value)

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    @property
    def integrator(self) -> Integrator:
        return self._integrator

    @integrator.setter
    def integrator(self, value: Integrator) -> None:
        """Replace the integrator; current contributors are registered onto the new one."""
        if value is None:
            raise ValueError("A simulation needs an integrator")
        for contributor in self._integrator:
            value.add(contributor)
        self._integrator = value

    # Components

    def add(self, component: SimComponent, add_to_integrator: bool = True) -> None:
        """Register a component, taking it over from any previous owner.

        Args:
            component: The component to register
            add_to_integrator: Register a state contributor with this simulation's
                integrator. Pass False when the component is integrated elsewhere.
        """
        if component.simulation is not None:
            component.simulation.remove(component)

        component.simulation = self
        registration = _Registration(
            component=component,
            in_integrator=add_to_integrator and is_state_contributor(component),
            schedules_updates=has_update_schedule(component),
        )
        self._registrations.append(registration)

        if registration.in_integrator:
            self._integrator.add(component)

        self.logger.debug(
            "simulation.component_added",
            component=component.name,
            state_contributor=registration.in_integrator,
            schedules_updates=registration.schedules_updates,
        )

        # A component joining a running simulation starts immediately
        if self._status == SimulationStatus.RUNNING:
            component.start_run()

    def remove(self, component: SimComponent) -> None:
        """Unregister a component and purge every event that references it.

        Raises:
            ComponentRegistrationError: If the component belongs to another simulation
        """
        if component.simulation is not self:
            raise ComponentRegistrationError(
                f"Component {component.name!r} is not registered with {self.name!r}"
            )

        self.time_events.remove_all_for(component)
        self.state_events.remove_all_for(component)

        registration = self._find_registration(component)

        if self._status == SimulationStatus.RUNNING:
            component.end_run()

        if registration is not None and registration.in_integrator:
            self._integrator.remove(component)

        self._registrations = [r for r in self._registrations if r.component is not component]
        component.simulation = None

        self.logger.debug("simulation.component_removed", component=component.name)

    def clear(self) -> None:
        """Remove all components and events, ending a running simulation first."""
        if self._status == SimulationStatus.RUNNING:
            self.end_run()

        for registration in self._registrations:
            registration.component.simulation = None

        self._integrator.clear()
        self._registrations.clear()
        self.unregister_all_events()

    def _find_registration(self, component: SimComponent) -> Optional[_Registration]:
        for registration in self._registrations:
            if registration.component is component:
                return registration
        return None

    def __len__(self) -> int:
        return len(self._registrations)

    def __iter__(self) -> Iterator[SimComponent]:
        return iter([r.component for r in self._registrations])

    def __getitem__(self, key: Union[int, str]) -> SimComponent:
        """Look up a component by registration index or by name."""
        if isinstance(key, str):
            for registration in self._registrations:
                if registration.component.name == key:
                    return registration.component
            raise KeyError(key)
        return self._registrations[key].component

    # Events

    def register_event(self, event: SimEvent) -> None:
        """Schedule a time event or list a state event.

        Raises:
            SchedulingError: If a time event lies before the current time of a running simulation
        """
        if isinstance(event, TimeEvent):
            if self._status == SimulationStatus.RUNNING and event.event_time < self.current_time:
                raise SchedulingError(
                    f"Time event at t={event.event_time} can not be scheduled before "
                    f"the current simulation time t={self.current_time}"
                )
            event.simulation = self
            self.time_events.add(event)
        elif isinstance(event, StateEvent):
            event.simulation = self
            self.state_events.add(event)
        else:
            raise TypeError(f"Cannot register {type(event).__name__}; expected a TimeEvent or StateEvent")

    def unregister_event(self, event: SimEvent) -> None:
        if isinstance(event, TimeEvent):
            self.time_events.remove(event)
        elif isinstance(event, StateEvent):
            self.state_events.remove(event)
        event.simulation = None

    def unregister_all_events(self) -> None:
        self.time_events.clear()
        self.state_events.clear()

    # Notifications

    def on(self, notification_type: NotificationType | str, handler: NotificationHandler) -> None:
        """Subscribe to a notification type."""
        self.notifications.on(notification_type, handler)

    def off(self, notification_type: NotificationType | str, handler: NotificationHandler) -> bool:
        """Unsubscribe from a notification type."""
        return self.notifications.off(notification_type, handler)

    def add_listener(self, handler: NotificationHandler) -> None:
        """Subscribe to every notification."""
        self.notifications.on_all(handler)

    def _notify(
        self,
        notification_type: NotificationType,
        event: Optional[SimEvent] = None,
        message: Any = None,
    ) -> None:
        if not self.notifications.has_handlers(notification_type):
            return
        self.notifications.dispatch(
            Notification(notification_type, self, self.current_time, event, message),
            fail_fast=True,
        )

    def log_message(self, message: Any) -> None:
        """Forward a component's message to LOG observers, or to the log if there are none."""
        if self.notifications.has_handlers(NotificationType.LOG):
            self._notify(NotificationType.LOG, message=message)
        else:
            self.logger.info("component.message", time=self.current_time, message=str(message))

    def _set_status(self, status: SimulationStatus) -> None:
        if status != self._status:
            self._status = status
            self._notify(NotificationType.STATUS_CHANGED)

    # Run control

    def start_run(self) -> None:
        """Reset the clock, start every component and schedule their updates.

        Raises:
            SimulationStateError: If the simulation is not idle
        """
        if self._status != SimulationStatus.IDLE:
            raise SimulationStateError("Simulation not idle, call end_run() first")

        self._set_status(SimulationStatus.STARTING)

        self.current_time = self.start_time
        self._stop_requested = False

        self._integrator.start_run()

        try:
            for component in list(self):
                component.start_run()
        except Exception as e:
            self.logger.error("simulation.start_failed", error=str(e))
            self.unregister_all_events()
            self._integrator.end_run()
            self._set_status(SimulationStatus.IDLE)
            raise

        self._schedule_updates()

        self._set_status(SimulationStatus.RUNNING)

        self.logger.info(
            "simulation.run_started",
            simulation=self.name,
            start_time=self.start_time,
            stop_time=self.stop_time,
            components=len(self),
            integrator=type(self._integrator).__name__,
        )

        # Snapshot of the state at the start of the run
        self._notify(NotificationType.OUTPUT)

    def end_run(self) -> None:
        """Drop all pending events and end every component's run.

        Every component's ``end_run`` is attempted; the first fault is re-raised
        afterwards. The status always returns to idle.

        Raises:
            SimulationStateError: If the simulation is neither starting nor running
        """
        if self._status not in (SimulationStatus.STARTING, SimulationStatus.RUNNING):
            raise SimulationStateError("Simulation not running")

        self._set_status(SimulationStatus.STOPPING)

        first_error: Optional[Exception] = None
        try:
            self.unregister_all_events()
            self._integrator.end_run()

            for component in list(self):
                try:
                    component.end_run()
                except Exception as e:
                    self.logger.error(
                        "simulation.component_end_failed",
                        component=component.name,
                        error=str(e),
                    )
                    if first_error is None:
                        first_error = e
        finally:
            self._set_status(SimulationStatus.IDLE)

        self.logger.info("simulation.run_ended", simulation=self.name, current_time=self.current_time)

        if first_error is not None:
            raise first_error

    def run(self) -> None:
        """Run a complete simulation: start, step until finished, end."""
        self.start_run()
        try:
            self.resume()
        finally:
            if self._status in (SimulationStatus.STARTING, SimulationStatus.RUNNING):
                self.end_run()

    def resume(self) -> None:
        """Call ``step`` until the stop time is reached or a stop is requested."""
        if self._status not in (SimulationStatus.STARTING, SimulationStatus.RUNNING):
            raise SimulationStateError("Call start_run() first")

        self._set_status(SimulationStatus.RUNNING)

        while not self.step():
            pass

    def request_stop(self) -> None:
        """Ask the simulation to stop at its next check point."""
        self._stop_requested = True
        self.logger.info("simulation.stop_requested", time=self.current_time)

    def step(self) -> bool:
        """Integrate to the next time event and handle it.

        Returns:
            True if the run is finished (stop time reached or stop requested)

        Raises:
            SimulationStateError: If the simulation is not running
        """
        if self._status != SimulationStatus.RUNNING:
            raise SimulationStateError("Simulation not running, call start_run() first")

        if self.current_time >= self.stop_time or self._stop_requested:
            return True

        event_time = self._next_event_time()

        while self.current_time < event_time and not self._stop_requested:
            lower_bound = self.current_time

            self.current_time = self._integrator.step(self.current_time, event_time)

            if self.state_events.has_any():
                self._locate_state_event(lower_bound, self.current_time)
                self._notify(NotificationType.INTEGRATION_STEP)

                self._handle_state_events()

                # Handling state events may have changed the head of the queue
                event_time = self._next_event_time()
            else:
                self._notify(NotificationType.INTEGRATION_STEP)

            self._notify(NotificationType.OUTPUT)

        # A requested stop still delivers the head event. Otherwise the head may
        # lie beyond the stop time and stays queued
        head = self.time_events.peek_first()
        if head is not None and (self._stop_requested or head.event_time <= self.current_time):
            time_event = self.time_events.remove_first()
            self._dispatch(time_event)
            # Handling a time event may trigger state events
            self._handle_state_events()
            self._notify(NotificationType.AFTER_TIME_EVENT)

        return self._stop_requested

    def _next_event_time(self) -> float:
        time_event = self.time_events.peek_first()
        if time_event is None:
            return self.stop_time
        return min(time_event.event_time, self.stop_time)

    def _dispatch(self, event: SimEvent) -> None:
        self.logger.debug(
            "event.dispatching",
            sim_event=repr(event),
            time=self.current_time,
        )
        self._notify(NotificationType.BEFORE_EVENT, event)
        event.handle()
        self._notify(NotificationType.AFTER_EVENT, event)

    def _handle_state_events(self) -> None:
        """Dispatch state events, highest priority first, until none holds."""
        event = self.state_events.take_next()
        while event is not None:
            self._dispatch(event)
            event = self.state_events.take_next()

    def _locate_state_event(self, lower_bound: float, upper_bound: float) -> None:
        """Narrow the bracket in which a state event occurred down to ``accuracy``.

        The integrator can only undo its last step, so every trial restarts
        from the original lower bound. On return the components hold exactly
        the state the integrator produced at ``current_time``.
        """
        origin = lower_bound
        lb, ub = lower_bound, upper_bound

        for iteration in range(self.max_bisection_iterations):
            self.current_time = origin
            self._integrator.step_back()

            if ub - lb < self._accuracy:
                # Step to the upper boundary, where the event holds
                self.current_time = self._integrator.step(origin, ub)
                self.logger.debug(
                    "state_event.localized",
                    lower_bound=lb,
                    upper_bound=ub,
                    time=self.current_time,
                    iterations=iteration,
                )
                return

            self.current_time = self._integrator.step(origin, (lb + ub) / 2)

            if self.state_events.has_any():
                ub = self.current_time
            else:
                lb = max(lb, self.current_time)

        self.logger.warning(
            "state_event.bisection_capped",
            lower_bound=lb,
            upper_bound=ub,
            accuracy=self._accuracy,
            iterations=self.max_bisection_iterations,
        )
        self.current_time = origin
        self._integrator.step_back()
        self.current_time = self._integrator.step(origin, ub)

    def _schedule_updates(self) -> None:
        """Schedule the first update event for every component with an update schedule."""
        for registration in self._registrations:
            if not registration.schedules_updates:
                continue
            component = registration.component
            if UpdateMethod(component.update_method) == UpdateMethod.RECURRING:
                event = UpdateTimeEvent(component, component, component.priority, 0, self.start_time)
            else:
                event = TimeEvent(component, component, component.priority, 0, self.start_time)
            self.register_event(event)

    def get_status(self) -> dict:
        """Get current simulation status."""
        return {
            "name": self.name,
            "status": self._status.value,
            "current_time": self.current_time,
            "start_time": self.start_time,
            "stop_time": self.stop_time,
            "accuracy": self._accuracy,
            "stop_requested": self._stop_requested,
            "component_count": len(self._registrations),
            "time_event_count": len(self.time_events),
            "state_event_count": len(self.state_events),
            "integrator": type(self._integrator).__name__,
        }
