"""Hybrid discrete-event / continuous simulation kernel."""

from .capabilities import (
    EventPriority,
    SimComponent,
    StateContributor,
    UpdateMethod,
    UpdateSchedule,
)
from .component import Component, Input, OdeComponent, Output, Port, UpdateableComponent
from .config import KernelConfig, config
from .events import (
    DelegateStateEvent,
    RecurringTimeEvent,
    SimEvent,
    StateEvent,
    TimeEvent,
    UpdateTimeEvent,
)
from .exceptions import (
    ComponentRegistrationError,
    EventException,
    EventTargetError,
    HybridSimException,
    IntegratorException,
    InvalidIntervalError,
    NegativeStepSizeError,
    NotificationException,
    NotificationHandlerError,
    SchedulingError,
    SimulationException,
    SimulationStateError,
    StateContributorError,
    StepSizeUnderflowError,
)
from .integrators import EulerIntegrator, Integrator, RKCKIntegrator
from .notifications import Notification, NotificationRegistry, NotificationType
from .simulation import Simulation, SimulationStatus
from .state_events import StateEventList
from .stepper import IntegratorStepper
from .time_events import TimeEventQueue

__all__ = [
    # Core classes
    "Simulation",
    "SimulationStatus",
    "TimeEventQueue",
    "StateEventList",
    "Notification",
    "NotificationRegistry",
    "NotificationType",
    "KernelConfig",
    "config",
    # Components and capabilities
    "Component",
    "UpdateableComponent",
    "OdeComponent",
    "IntegratorStepper",
    "Port",
    "Input",
    "Output",
    "SimComponent",
    "StateContributor",
    "UpdateSchedule",
    "UpdateMethod",
    "EventPriority",
    # Events
    "SimEvent",
    "TimeEvent",
    "RecurringTimeEvent",
    "UpdateTimeEvent",
    "StateEvent",
    "DelegateStateEvent",
    # Integrators
    "Integrator",
    "EulerIntegrator",
    "RKCKIntegrator",
    # Exceptions
    "HybridSimException",
    "SimulationException",
    "SimulationStateError",
    "SchedulingError",
    "ComponentRegistrationError",
    "EventException",
    "EventTargetError",
    "InvalidIntervalError",
    "IntegratorException",
    "StateContributorError",
    "StepSizeUnderflowError",
    "NegativeStepSizeError",
    "NotificationException",
    "NotificationHandlerError",
]
