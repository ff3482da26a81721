"""Pytest configuration and shared fixtures."""

import pytest

from hybridsim import EulerIntegrator, Simulation
from hybridsim.logging import configure_logging

from helpers import Growth, Ramp, Recorder


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Keep structured log output to warnings and above during tests."""
    configure_logging("WARNING")


@pytest.fixture
def recorder():
    return Recorder("recorder")


@pytest.fixture
def ramp():
    return Ramp("ramp")


@pytest.fixture
def growth():
    return Growth("growth")


@pytest.fixture
def make_recorder():
    """Factory for named recorders."""
    return Recorder


@pytest.fixture
def make_ramp():
    return Ramp


@pytest.fixture
def make_growth():
    return Growth


@pytest.fixture
def simulation():
    """Idle simulation over [0, 10] with a unit-step Euler integrator."""
    return Simulation(start_time=0.0, stop_time=10.0, accuracy=0.01, integrator=EulerIntegrator(time_step=1.0))
