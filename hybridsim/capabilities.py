# hybridsim/capabilities.py

"""Capability interfaces a component may implement.

The coordinator queries these once, when a component is added, and keeps the
answer for the rest of the component's registration:

- every participant is a ``SimComponent``;
- a ``StateContributor`` exposes a slice of the shared continuous state
  vector (and its rates of change) to an integrator;
- an ``UpdateSchedule`` asks for automatic time events at run start.
"""

from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from .events import SimEvent
    from .simulation import Simulation


class UpdateMethod(str, Enum):
    """How a component with an update schedule is time-stepped."""

    NONE = "none"
    ONCE = "once"
    RECURRING = "recurring"


class EventPriority(IntEnum):
    """Conventional priorities; larger values are handled first."""

    COLLECT_OUTPUT = 300
    UPDATE = 400
    INTEGRATION = 500
    SYSTEM = 10000


@runtime_checkable
class SimComponent(Protocol):
    """Lifecycle contract of every participant in a simulation."""

    name: str
    simulation: Optional["Simulation"]

    def start_run(self) -> None: ...

    def end_run(self) -> None: ...

    def handle_event(self, event: "SimEvent") -> None: ...


@runtime_checkable
class StateContributor(Protocol):
    """A component supplying continuous state variables to an integrator.

    Offsets index into a flat buffer shared by all contributors; a contributor
    owns ``buffer[offset:offset + count()]``.
    """

    def count(self) -> int:
        """Number of scalar state variables."""
        ...

    def read_state(self, buffer: "NDArray[Any]", offset: int) -> None:
        """Copy the current state into ``buffer`` starting at ``offset``."""
        ...

    def write_state(self, buffer: "NDArray[Any]", offset: int) -> None:
        """Take the state from ``buffer`` starting at ``offset``."""
        ...

    def read_derivatives(self, buffer: "NDArray[Any]", offset: int) -> None:
        """Compute rates of change for the current state into ``buffer``."""
        ...


@runtime_checkable
class UpdateSchedule(Protocol):
    """A component that wants to be time-stepped by scheduled events."""

    time_step: float
    priority: int
    update_method: UpdateMethod


def is_state_contributor(component: Any) -> bool:
    """Check for the state-contributor capability."""
    return isinstance(component, StateContributor)


def has_update_schedule(component: Any) -> bool:
    """Check for an update schedule that actually requests events."""
    if not isinstance(component, UpdateSchedule):
        return False
    return UpdateMethod(component.update_method) != UpdateMethod.NONE
