# hybridsim/component.py

"""Component base classes with explicit input/output/state declaration.

Components declare their named inputs, outputs and state/rate pairs in their
constructor through a small builder API. The coordinator never inspects
component fields; it only consumes the declared ports and the capability
interfaces in ``capabilities``.
"""

from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from .capabilities import EventPriority, UpdateMethod

if TYPE_CHECKING:
    from .events import SimEvent
    from .simulation import Simulation


class Port:
    """A named, documented value slot on a component."""

    def __init__(self, owner: "Component", name: str, value: Any = 0.0, units: str = "", description: str = ""):
        self.owner = owner
        self.name = name
        self.units = units
        self.description = description
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.owner.name}.{self.name}={self.value!r})"


class Output(Port):
    """A value a component publishes to others."""


class Input(Port):
    """A value a component reads; either set directly or connected to an Output."""

    def __init__(self, owner, name, value=0.0, units="", description=""):
        super().__init__(owner, name, value, units, description)
        self.source: Optional[Output] = None

    def connect(self, output: Output) -> None:
        """Follow another component's output from now on."""
        self.source = output

    def disconnect(self) -> None:
        self.source = None

    @property
    def value(self) -> Any:
        if self.source is not None:
            return self.source.value
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self.source = None
        self._value = value


class Component:
    """Base class for simulation participants.

    Every lifecycle hook is a no-op by default. ``simulation`` is maintained by
    the coordinator that owns the component.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or type(self).__name__
        self.simulation: Optional["Simulation"] = None
        self.inputs: dict[str, Input] = {}
        self.outputs: dict[str, Output] = {}

    def add_input(self, name: str, value: Any = 0.0, units: str = "", description: str = "") -> Input:
        """Declare a named input. Names must be unique per component."""
        if name in self.inputs:
            raise ValueError(f"{self.name} already declares input {name!r}")
        port = Input(self, name, value, units, description)
        self.inputs[name] = port
        return port

    def add_output(self, name: str, value: Any = 0.0, units: str = "", description: str = "") -> Output:
        """Declare a named output. Names must be unique per component."""
        if name in self.outputs:
            raise ValueError(f"{self.name} already declares output {name!r}")
        port = Output(self, name, value, units, description)
        self.outputs[name] = port
        return port

    def start_run(self) -> None:
        pass

    def end_run(self) -> None:
        pass

    def handle_event(self, event: "SimEvent") -> None:
        pass

    def log(self, message: Any) -> None:
        """Send a short message to the user through the owning simulation."""
        if self.simulation is not None:
            self.simulation.log_message(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class UpdateableComponent(Component):
    """Component that is time-stepped by events the coordinator schedules at run start."""

    def __init__(
        self,
        name: Optional[str] = None,
        time_step: float = 1.0,
        priority: int = EventPriority.UPDATE,
        update_method: UpdateMethod = UpdateMethod.RECURRING,
    ):
        super().__init__(name)
        self.time_step = time_step
        self.priority = int(priority)
        self.update_method = update_method


class OdeComponent(Component):
    """Component whose continuous state is declared as state/rate pairs.

    Each state is also published as an output of the same name, either a
    float (size 1) or a numpy array. ``compute_rates`` fills ``self.rates``
    for the current state and is called every time the integrator needs
    derivatives.
    """

    def __init__(self, name: Optional[str] = None):
        super().__init__(name)
        self._states: list[str] = []
        self._sizes: dict[str, int] = {}
        self.rates: dict[str, Any] = {}
        self._state_count: Optional[int] = None

    def add_state(self, name: str, initial: Any = 0.0, units: str = "", description: str = "", size: int = 1) -> Output:
        """Declare a state variable and its rate; the state is published as an output."""
        if size < 1:
            raise ValueError(f"State {name!r} must have size >= 1, got {size}")
        if size == 1:
            value = float(initial)
            self.rates[name] = 0.0
        else:
            value = np.full(size, initial, dtype=float) if np.isscalar(initial) else np.array(initial, dtype=float)
            if value.shape != (size,):
                raise ValueError(f"State {name!r} initial value must have {size} elements")
            self.rates[name] = np.zeros(size)
        port = self.add_output(name, value, units, description)
        self._states.append(name)
        self._sizes[name] = size
        self._state_count = None
        return port

    def compute_rates(self) -> None:
        """Fill ``self.rates`` for the current state."""
        raise NotImplementedError

    def start_run(self) -> None:
        # Array states may have been replaced before the run; recount lazily.
        self._state_count = None

    # StateContributor

    def count(self) -> int:
        if self._state_count is None:
            self._state_count = sum(np.size(self.outputs[name].value) for name in self._states)
        return self._state_count

    def read_state(self, buffer, offset: int) -> None:
        for name in self._states:
            value = self.outputs[name].value
            size = np.size(value)
            buffer[offset : offset + size] = value
            offset += size

    def write_state(self, buffer, offset: int) -> None:
        for name in self._states:
            port = self.outputs[name]
            if self._sizes[name] == 1:
                port.value = float(buffer[offset])
                offset += 1
            else:
                size = np.size(port.value)
                port.value = np.array(buffer[offset : offset + size], dtype=float)
                offset += size

    def read_derivatives(self, buffer, offset: int) -> None:
        self.compute_rates()
        for name in self._states:
            rate = self.rates[name]
            size = np.size(rate)
            buffer[offset : offset + size] = rate
            offset += size
