# hybridsim/exceptions.py

"""Exception hierarchy for the hybridsim simulation kernel."""


class HybridSimException(Exception):
    """Base exception for all hybridsim errors."""

    pass


# Simulation Exceptions
class SimulationException(HybridSimException):
    """Base exception for coordinator operations."""

    pass


class SimulationStateError(SimulationException):
    """Raised when the simulation is in an invalid status for the requested operation."""

    pass


class SchedulingError(SimulationException):
    """Raised when a time event is scheduled before the current simulation time."""

    pass


class ComponentRegistrationError(SimulationException):
    """Raised when a component is removed from a simulation that does not own it."""

    pass


# Event Exceptions
class EventException(HybridSimException):
    """Base exception for simulation events."""

    pass


class EventTargetError(EventException):
    """Raised when an event has no target to handle it, or its target is reassigned."""

    pass


class InvalidIntervalError(EventException):
    """Raised when a recurring event is given an interval <= 0."""

    pass


# Integrator Exceptions
class IntegratorException(HybridSimException):
    """Base exception for numerical integration."""

    pass


class StateContributorError(IntegratorException):
    """Raised when a component without state variables is added to an integrator."""

    pass


class StepSizeUnderflowError(IntegratorException):
    """Raised when an adaptive integrator cannot meet its tolerance with a usable step."""

    pass


class NegativeStepSizeError(IntegratorException):
    """Raised when an integrator accepts a step of negative size."""

    pass


# Notification Exceptions
class NotificationException(HybridSimException):
    """Base exception for observer notifications."""

    pass


class NotificationHandlerError(NotificationException):
    """Raised when a notification handler fails during dispatch."""

    pass
