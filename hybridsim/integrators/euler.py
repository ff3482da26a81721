# hybridsim/integrators/euler.py

"""Fixed-step explicit Euler integration."""

import numpy as np

from .base import Integrator


class EulerIntegrator(Integrator):
    """Rectangular (explicit Euler) integration: y(t + h) = y(t) + h * dy/dt."""

    def __init__(self, time_step=None, tolerance=None):
        super().__init__(time_step, tolerance)
        self._set_state_length(0)

    def _set_state_length(self, length: int) -> None:
        self._y = np.zeros(length)
        self._state = np.zeros(length)
        self._d = np.zeros(length)

    def step(self, current_time: float, end_time: float) -> float:
        n = self._count_states()

        if n == 0:
            return end_time

        h = self.time_step
        if current_time + h > end_time:
            h = end_time - current_time

        self._gather_state(self._y)
        self._gather_derivatives(current_time, self._d)

        np.multiply(self._d, h, out=self._state)
        self._state += self._y

        self._scatter_state(self._state)

        return current_time + h

    def step_back(self) -> None:
        self._scatter_state(self._y)
