# hybridsim/integrators/rkck.py

"""Adaptive Runge-Kutta integration with Cash-Karp coefficients.

Fifth-order solution with an embedded fourth-order error estimate, as
described by J. R. Cash and A. H. Karp, "A variable order Runge-Kutta method
for initial value problems with rapidly varying right-hand sides", ACM
Transactions on Mathematical Software 16: 201-222, 1990.

One call to ``step`` may try several step sizes. A trial whose scaled error
exceeds the tolerance is discarded, the contributors are restored to the
starting state, and the trial is repeated with a smaller step. An accepted
step also sets the nominal step size for the next call.
"""

from typing import Optional

import numpy as np

from ..config import config
from ..exceptions import NegativeStepSizeError, StepSizeUnderflowError
from ..logging import get_logger
from .base import Integrator

logger = get_logger(__name__)

SAFETY = 0.9
PGROW = -0.2
PSHRINK = -0.25
ERRCON = 1.89e-4  # (5 / SAFETY) ** (1 / PGROW): below this, growth is capped at 5x
TINY = 1.0e-30

# Cash-Karp tableau
A2, A3, A4, A5, A6 = 0.2, 0.3, 0.6, 1.0, 0.875

B21 = 0.2
B31, B32 = 3 / 40.0, 9 / 40.0
B41, B42, B43 = 0.3, -0.9, 1.2
B51, B52, B53, B54 = -11 / 54.0, 2.5, -70 / 27.0, 35 / 27.0
B61, B62, B63, B64, B65 = 1631 / 55296.0, 175 / 512.0, 575 / 13824.0, 44275 / 110592.0, 253 / 4096.0

C1, C3, C4, C6 = 37 / 378.0, 250 / 621.0, 125 / 594.0, 512 / 1771.0

DC1 = C1 - 2825 / 27648.0
DC3 = C3 - 18575 / 48384.0
DC4 = C4 - 13525 / 55296.0
DC5 = -277 / 14336.0
DC6 = C6 - 0.25


class RKCKIntegrator(Integrator):
    """Variable step Runge-Kutta integrator (Cash-Karp)."""

    def __init__(
        self,
        time_step: Optional[float] = None,
        tolerance: Optional[float] = None,
        min_step: Optional[float] = None,
    ):
        super().__init__(time_step, tolerance)
        self.min_step = config.min_step if min_step is None else min_step
        self._set_state_length(0)

    def _set_state_length(self, length: int) -> None:
        self._y = np.zeros(length)
        self._state = np.zeros(length)
        self._d = np.zeros(length)
        self._y_err = np.zeros(length)
        self._y_scale = np.zeros(length)
        self._k2 = np.zeros(length)
        self._k3 = np.zeros(length)
        self._k4 = np.zeros(length)
        self._k5 = np.zeros(length)
        self._k6 = np.zeros(length)

    def step(self, current_time: float, end_time: float) -> float:
        n = self._count_states()

        if n == 0:
            return end_time

        h = self.time_step
        if current_time + h > end_time:
            h = end_time - current_time

        self._gather_state(self._y)
        self._gather_derivatives(current_time, self._d)

        np.abs(self._y, out=self._y_scale)
        self._y_scale += np.abs(self._d * h) + TINY

        while True:
            self._trial_step(h, current_time)

            err_max = float(np.max(np.abs(self._y_err / self._y_scale))) / self.tolerance

            if err_max <= 1.0:
                if err_max > ERRCON:
                    self.time_step = SAFETY * h * err_max**PGROW
                else:
                    self.time_step = 5.0 * h
                break

            # Truncation error too large: shrink, but by no more than a factor of 10.
            # A non-finite error shrinks by the full factor.
            h_temp = SAFETY * h * err_max**PSHRINK
            h = h_temp if h_temp > 0.1 * h else 0.1 * h

            if h < self.min_step:
                raise StepSizeUnderflowError(
                    f"Fatal stepsize underflow at t={current_time}: h={h} < {self.min_step}"
                )

            logger.debug("integrator.step_rejected", time=current_time, err_max=err_max, retry_step=h)

            self._scatter_state(self._y)

        if h < 0:
            raise NegativeStepSizeError(f"Accepted step size is negative at t={current_time}: h={h}")

        return current_time + h

    def step_back(self) -> None:
        self._scatter_state(self._y)

    def _trial_step(self, h: float, current_time: float) -> None:
        """Evaluate the six stages from ``self._y`` and leave the 5th-order result in the contributors."""
        y, d, state = self._y, self._d, self._state
        k2, k3, k4, k5, k6 = self._k2, self._k3, self._k4, self._k5, self._k6

        state[:] = y + B21 * h * d
        self._scatter_state(state)

        self._gather_derivatives(current_time + A2 * h, k2)
        state[:] = y + h * (B31 * d + B32 * k2)
        self._scatter_state(state)

        self._gather_derivatives(current_time + A3 * h, k3)
        state[:] = y + h * (B41 * d + B42 * k2 + B43 * k3)
        self._scatter_state(state)

        self._gather_derivatives(current_time + A4 * h, k4)
        state[:] = y + h * (B51 * d + B52 * k2 + B53 * k3 + B54 * k4)
        self._scatter_state(state)

        self._gather_derivatives(current_time + A5 * h, k5)
        state[:] = y + h * (B61 * d + B62 * k2 + B63 * k3 + B64 * k4 + B65 * k5)
        self._scatter_state(state)

        self._gather_derivatives(current_time + A6 * h, k6)
        state[:] = y + h * (C1 * d + C3 * k3 + C4 * k4 + C6 * k6)
        self._scatter_state(state)

        # Difference between the fourth and fifth order solutions
        self._y_err[:] = h * (DC1 * d + DC3 * k3 + DC4 * k4 + DC5 * k5 + DC6 * k6)
