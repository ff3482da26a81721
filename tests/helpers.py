"""Small components shared by the tests."""

from hybridsim import Component, OdeComponent


class Recorder(Component):
    """Component that records every event it handles."""

    def __init__(self, name=None):
        super().__init__(name)
        self.handled = []
        self.started = 0
        self.ended = 0

    def start_run(self):
        self.started += 1

    def end_run(self):
        self.ended += 1

    def handle_event(self, event):
        self.handled.append((self.simulation.current_time if self.simulation else None, event))


class Ramp(OdeComponent):
    """dy/dt = slope, starting from y0."""

    def __init__(self, name=None, slope=1.0, y0=0.0):
        super().__init__(name)
        self.add_input("slope", slope)
        self.add_input("y0", y0)
        self.add_state("y", y0)

    def start_run(self):
        super().start_run()
        self.outputs["y"].value = float(self.inputs["y0"].value)

    def compute_rates(self):
        self.rates["y"] = self.inputs["slope"].value


class Growth(OdeComponent):
    """dy/dt = r * y."""

    def __init__(self, name=None, r=1.0, y0=1.0):
        super().__init__(name)
        self.r = r
        self.y0 = y0
        self.add_state("y", y0)

    def start_run(self):
        super().start_run()
        self.outputs["y"].value = self.y0

    def compute_rates(self):
        self.rates["y"] = self.r * self.outputs["y"].value
