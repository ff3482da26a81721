# hybridsim/stepper.py

"""Drive a secondary integrator from the time-event system."""

from typing import Optional

from .capabilities import EventPriority
from .component import Component
from .events import SimEvent, TimeEvent
from .integrators import Integrator


class IntegratorStepper(Component):
    """Advances its own integrator one step per time event.

    Contributors registered with this integrator (and added to the simulation
    with ``add_to_integrator=False``) are integrated with their own step
    sizes, independent of the simulation's integrator and of other time
    events. Each step schedules the next one at the time it reached.
    """

    def __init__(self, integrator: Optional[Integrator] = None, name: Optional[str] = None):
        super().__init__(name)
        self.integrator = integrator

    def start_run(self) -> None:
        if self.integrator is None or self.simulation is None:
            return

        self.integrator.start_run()
        self.simulation.register_event(
            TimeEvent(self, self, EventPriority.SYSTEM, 0, self.simulation.start_time)
        )

    def end_run(self) -> None:
        if self.integrator is not None:
            self.integrator.end_run()

    def handle_event(self, event: SimEvent) -> None:
        if self.integrator is None or self.simulation is None:
            return

        time = self.integrator.step(self.simulation.current_time, self.simulation.stop_time)
        if time < self.simulation.stop_time:
            self.simulation.register_event(TimeEvent(self, self, EventPriority.SYSTEM, 0, time))
