"""Tests for custom exception hierarchy."""

import pytest

from hybridsim import (
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
    SimEvent,
    SimulationException,
    SimulationStateError,
    StateContributorError,
    StepSizeUnderflowError,
)
from models import UnknownModelError


class TestExceptionHierarchy:
    """Test exception inheritance hierarchy."""

    def test_hybridsim_exception_is_base(self):
        """HybridSimException is the base for all custom exceptions."""
        assert issubclass(SimulationException, HybridSimException)
        assert issubclass(EventException, HybridSimException)
        assert issubclass(IntegratorException, HybridSimException)
        assert issubclass(NotificationException, HybridSimException)
        assert issubclass(UnknownModelError, HybridSimException)

    def test_simulation_exception_hierarchy(self):
        assert issubclass(SimulationStateError, SimulationException)
        assert issubclass(SchedulingError, SimulationException)
        assert issubclass(ComponentRegistrationError, SimulationException)

    def test_event_exception_hierarchy(self):
        assert issubclass(EventTargetError, EventException)
        assert issubclass(InvalidIntervalError, EventException)

    def test_integrator_exception_hierarchy(self):
        """Numerical failures share a parent so a run can catch them together."""
        assert issubclass(StateContributorError, IntegratorException)
        assert issubclass(StepSizeUnderflowError, IntegratorException)
        assert issubclass(NegativeStepSizeError, IntegratorException)

    def test_notification_exception_hierarchy(self):
        assert issubclass(NotificationHandlerError, NotificationException)


class TestExceptionUsage:
    """Test exceptions raised by the kernel."""

    def test_catch_by_parent_type(self):
        with pytest.raises(EventException):
            SimEvent().handle()

    def test_catch_by_base_type(self):
        with pytest.raises(HybridSimException) as exc_info:
            SimEvent().handle()

        assert isinstance(exc_info.value, EventTargetError)
        assert "No target" in str(exc_info.value)
