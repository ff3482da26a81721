# models/bouncing_ball.py

"""A ball dropped from 1 m that bounces with a coefficient of restitution."""

from hybridsim import Component, SimEvent, StateEvent

GRAVITY = 9.81


class HitGround(StateEvent):
    """Fires when the ball is near the ground and falling.

    Requiring a negative velocity keeps the event from firing again right after
    a bounce, while the ball is still close to the ground but moving up.
    """

    DELTA = 0.05

    def check_state(self, time: float) -> bool:
        outputs = self.target.outputs
        return outputs["height"].value < self.DELTA and outputs["velocity"].value < 0.0


class BouncingBall(Component):
    """Falling ball with state vector [height, velocity]."""

    def __init__(self, name=None, initial_height: float = 1.0, restitution: float = 0.9):
        super().__init__(name)
        self.initial_height = initial_height
        self.restitution = restitution
        self.height = initial_height
        self.velocity = 0.0
        self.bounce_times: list[float] = []

        self.add_output("height", initial_height, "m", "Height of the ball center")
        self.add_output("velocity", 0.0, "m/s", "Vertical velocity")

    def start_run(self) -> None:
        self.height = self.initial_height
        self.velocity = 0.0
        self.bounce_times = []
        self._publish()

        self.simulation.register_event(HitGround(self, self))

    def handle_event(self, event: SimEvent) -> None:
        if isinstance(event, HitGround):
            self.velocity = -self.restitution * self.velocity
            self.bounce_times.append(self.simulation.current_time)
            self._publish()
            self.simulation.register_event(HitGround(self, self))

    def _publish(self) -> None:
        self.outputs["height"].value = self.height
        self.outputs["velocity"].value = self.velocity

    # StateContributor

    def count(self) -> int:
        return 2

    def read_state(self, buffer, offset: int) -> None:
        buffer[offset] = self.height
        buffer[offset + 1] = self.velocity

    def write_state(self, buffer, offset: int) -> None:
        self.height = float(buffer[offset])
        self.velocity = float(buffer[offset + 1])
        self._publish()

    def read_derivatives(self, buffer, offset: int) -> None:
        buffer[offset] = self.velocity
        buffer[offset + 1] = -GRAVITY
