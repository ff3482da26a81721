# hybridsim/integrators/base.py

"""Base class for numerical integrators."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

import numpy as np
from numpy.typing import NDArray

from ..capabilities import StateContributor, is_state_contributor
from ..config import config
from ..exceptions import StateContributorError


class Integrator(ABC):
    """Advances the continuous state of all registered contributors.

    All contributors share one flat state vector. Each contributor owns a
    contiguous slice of it, in registration order. Subclasses allocate their
    scratch buffers in ``_set_state_length``, which is called whenever the
    total state length changes.
    """

    def __init__(self, time_step: Optional[float] = None, tolerance: Optional[float] = None):
        self._contributors: list[StateContributor] = []
        self._state_length = 0
        self.time_step = config.time_step if time_step is None else time_step
        self.tolerance = config.tolerance if tolerance is None else tolerance

    def add(self, component) -> None:
        """Register a state contributor.

        Raises:
            StateContributorError: If the component has no state variables to contribute
        """
        if not is_state_contributor(component):
            raise StateContributorError(
                f"{getattr(component, 'name', component)!r} does not implement StateContributor"
            )
        self._contributors.append(component)

    def remove(self, component) -> None:
        """Unregister a state contributor. No-op if it is not registered."""
        if not is_state_contributor(component):
            raise StateContributorError(
                f"{getattr(component, 'name', component)!r} does not implement StateContributor"
            )
        self._contributors = [c for c in self._contributors if c is not component]

    def clear(self) -> None:
        self._contributors.clear()

    def start_run(self) -> None:
        """Hook called by the coordinator when a run starts."""

    def end_run(self) -> None:
        """Hook called by the coordinator when a run ends."""

    @abstractmethod
    def step(self, current_time: float, end_time: float) -> float:
        """Take at most one step from ``current_time`` without passing ``end_time``.

        The new state is pushed into every contributor.

        Returns:
            The time actually reached
        """

    @abstractmethod
    def step_back(self) -> None:
        """Restore the state held at the start of the last ``step`` call."""

    @property
    def state_length(self) -> int:
        return self._state_length

    # Helpers for integrator implementations

    def _set_state_length(self, length: int) -> None:
        """Allocate integration buffers for ``length`` state variables."""

    def _count_states(self) -> int:
        """Total state length; buffers are resized only when it changes."""
        count = sum(contributor.count() for contributor in self._contributors)

        if count != self._state_length:
            self._state_length = count
            self._set_state_length(count)

        return count

    def _gather_state(self, state: NDArray[np.float64]) -> None:
        offset = 0
        for contributor in self._contributors:
            contributor.read_state(state, offset)
            offset += contributor.count()

    def _scatter_state(self, state: NDArray[np.float64]) -> None:
        offset = 0
        for contributor in self._contributors:
            contributor.write_state(state, offset)
            offset += contributor.count()

    def _gather_derivatives(self, time: float, deriv: NDArray[np.float64]) -> None:
        # Contributors read the coordinator clock themselves if they need time.
        offset = 0
        for contributor in self._contributors:
            contributor.read_derivatives(deriv, offset)
            offset += contributor.count()

    def __len__(self) -> int:
        return len(self._contributors)

    def __iter__(self) -> Iterator[StateContributor]:
        return iter(list(self._contributors))

    def __getitem__(self, index: int) -> StateContributor:
        return self._contributors[index]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(contributors={len(self._contributors)}, "
            f"time_step={self.time_step}, tolerance={self.tolerance})"
        )
