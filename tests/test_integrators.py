"""Tests for the Euler and Cash-Karp integrators."""

import math

import numpy as np
import pytest

from hybridsim import (
    EulerIntegrator,
    NegativeStepSizeError,
    RKCKIntegrator,
    StateContributorError,
    StepSizeUnderflowError,
)


class NotFinite:
    """Contributor whose rate is not a number, so no step size is accurate."""

    name = "not_finite"
    simulation = None

    def __init__(self):
        self.y = 1.0

    def count(self):
        return 1

    def read_state(self, buffer, offset):
        buffer[offset] = self.y

    def write_state(self, buffer, offset):
        self.y = float(buffer[offset])

    def read_derivatives(self, buffer, offset):
        buffer[offset] = float("nan")


def integrate(integrator, start, end):
    time = start
    while time < end:
        time = integrator.step(time, end)
    return time


class TestIntegratorRegistration:
    """Adding and removing contributors."""

    def test_add_non_contributor_raises(self, recorder):
        with pytest.raises(StateContributorError):
            EulerIntegrator().add(recorder)

    def test_remove_non_contributor_raises(self, recorder):
        with pytest.raises(StateContributorError):
            EulerIntegrator().remove(recorder)

    def test_add_remove_and_iterate(self, make_ramp):
        integrator = EulerIntegrator()
        a, b = make_ramp("a"), make_ramp("b")
        integrator.add(a)
        integrator.add(b)

        assert list(integrator) == [a, b]
        assert integrator[1] is b

        integrator.remove(a)
        assert len(integrator) == 1

        integrator.clear()
        assert len(integrator) == 0

    def test_defaults_from_config(self):
        integrator = RKCKIntegrator()

        assert integrator.time_step == pytest.approx(0.01)
        assert integrator.tolerance == pytest.approx(1e-4)


class TestEulerIntegrator:
    """Fixed-step explicit Euler."""

    def test_single_step(self, growth):
        """y(t + h) = y(t) + h * dy/dt."""
        integrator = EulerIntegrator(time_step=0.1)
        integrator.add(growth)

        time = integrator.step(0.0, 10.0)

        assert time == pytest.approx(0.1)
        assert growth.outputs["y"].value == pytest.approx(1.1)

    def test_step_is_clamped_to_end_time(self, ramp):
        integrator = EulerIntegrator(time_step=1.0)
        integrator.add(ramp)

        time = integrator.step(0.0, 0.25)

        assert time == pytest.approx(0.25)
        assert ramp.outputs["y"].value == pytest.approx(0.25)

    def test_deterministic(self, make_growth):
        results = []
        for _ in range(2):
            component = make_growth(r=0.3, y0=2.0)
            integrator = EulerIntegrator(time_step=0.1)
            integrator.add(component)
            integrate(integrator, 0.0, 1.0)
            results.append(component.outputs["y"].value)

        assert results[0] == results[1]

    def test_no_contributors_jumps_to_end(self):
        assert EulerIntegrator(time_step=0.1).step(1.0, 3.0) == 3.0

    def test_step_back_restores_state(self, growth):
        integrator = EulerIntegrator(time_step=0.5)
        integrator.add(growth)

        integrator.step(0.0, 1.0)
        assert growth.outputs["y"].value != 1.0

        integrator.step_back()
        assert growth.outputs["y"].value == 1.0

    def test_multiple_contributors_share_state_vector(self, make_ramp, make_growth):
        ramp = make_ramp(slope=2.0, y0=1.0)
        growth = make_growth(r=0.5, y0=4.0)
        integrator = EulerIntegrator(time_step=0.1)
        integrator.add(ramp)
        integrator.add(growth)

        integrator.step(0.0, 1.0)

        assert integrator.state_length == 2
        assert ramp.outputs["y"].value == pytest.approx(1.2)
        assert growth.outputs["y"].value == pytest.approx(4.2)

    def test_state_vector_resized_when_contributor_added(self, make_ramp):
        integrator = EulerIntegrator(time_step=0.1)
        first = make_ramp()
        integrator.add(first)
        integrator.step(0.0, 1.0)

        second = make_ramp()
        integrator.add(second)
        integrator.step(0.1, 1.0)

        assert integrator.state_length == 2
        assert first.outputs["y"].value == pytest.approx(0.2)
        assert second.outputs["y"].value == pytest.approx(0.1)

    def test_array_state(self):
        from hybridsim import OdeComponent

        class Decay(OdeComponent):
            def __init__(self):
                super().__init__("decay")
                self.add_state("y", [1.0, 2.0, 4.0], size=3)

            def compute_rates(self):
                self.rates["y"] = -self.outputs["y"].value

        component = Decay()
        integrator = EulerIntegrator(time_step=0.5)
        integrator.add(component)

        integrator.step(0.0, 1.0)

        np.testing.assert_allclose(component.outputs["y"].value, [0.5, 1.0, 2.0])


class TestRKCKIntegrator:
    """Adaptive Cash-Karp Runge-Kutta."""

    def test_exponential_growth(self, growth):
        """dy/dt = y integrates to e within the requested tolerance."""
        integrator = RKCKIntegrator(time_step=0.1, tolerance=1e-6)
        integrator.add(growth)

        time = integrate(integrator, 0.0, 1.0)

        assert time == pytest.approx(1.0)
        assert growth.outputs["y"].value == pytest.approx(math.e, rel=1e-4)

    def test_tighter_tolerance_is_not_worse(self, make_growth):
        errors = []
        for tolerance in (1e-3, 1e-8):
            component = make_growth(r=1.0, y0=1.0)
            integrator = RKCKIntegrator(time_step=0.1, tolerance=tolerance)
            integrator.add(component)
            integrate(integrator, 0.0, 2.0)
            errors.append(abs(component.outputs["y"].value - math.exp(2.0)))

        assert errors[1] <= errors[0]
        assert errors[1] < 1e-5

    def test_never_passes_end_time(self, growth):
        integrator = RKCKIntegrator(time_step=10.0)
        integrator.add(growth)

        assert integrator.step(0.0, 0.3) <= 0.3

    def test_step_back_restores_state(self, growth):
        integrator = RKCKIntegrator(time_step=0.5)
        integrator.add(growth)

        integrator.step(0.0, 1.0)
        integrator.step_back()

        assert growth.outputs["y"].value == 1.0

    def test_no_contributors_jumps_to_end(self):
        assert RKCKIntegrator().step(0.0, 2.0) == 2.0

    def test_step_size_underflow(self):
        integrator = RKCKIntegrator(time_step=1.0, tolerance=1e-4, min_step=1e-6)
        integrator.add(NotFinite())

        with pytest.raises(StepSizeUnderflowError):
            integrator.step(0.0, 1.0)

    def test_negative_step(self, growth):
        """Stepping towards an earlier end time is a fatal error."""
        integrator = RKCKIntegrator(time_step=0.5, tolerance=1.0)
        integrator.add(growth)

        with pytest.raises(NegativeStepSizeError):
            integrator.step(1.0, 0.5)
