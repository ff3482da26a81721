# models/exp_growth.py

"""Exponential population growth: dS/dt = rgr * S."""

from hybridsim import OdeComponent


class ExpGrowth(OdeComponent):
    """Single population growing at a constant relative rate."""

    def __init__(self, name=None, initial: float = 1.0, rgr: float = 0.05):
        super().__init__(name)
        self.add_input("initial", initial, "individuals", "Initial population size")
        self.add_input("rgr", rgr, "per unit time", "Relative growth rate")
        self.add_state("S", initial, "individuals", "Population size")

    def start_run(self) -> None:
        super().start_run()
        self.outputs["S"].value = float(self.inputs["initial"].value)

    def compute_rates(self) -> None:
        self.rates["S"] = self.inputs["rgr"].value * self.outputs["S"].value
