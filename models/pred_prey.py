# models/pred_prey.py

"""Predator or prey population in a Lotka-Volterra style model.

Two instances are wired together by connecting each one's
``density of other species`` input to the other's ``density`` output.
Taken from Leffelaar (1993), On systems analysis and simulation of
ecological processes, p56.
"""

from hybridsim import OdeComponent, Simulation


class PredOrPrey(OdeComponent):
    """dp/dt = rgr * p + k * p * p2"""

    def __init__(self, name=None, density: float = 3.0, rgr: float = -0.5, k: float = -0.5):
        super().__init__(name)
        self.add_input("density", density, "individuals", "Initial number of individuals")
        self.add_input("rgr", rgr, "per unit time", "Relative growth rate")
        self.add_input("k", k, "per individual per unit time", "Interaction factor")
        self.add_input("density of other species", 0.0, "individuals", "Density of the other species")
        self.add_state("density", 1.0, "individuals", "Number of individuals")

        self._rgr = rgr
        self._k = k

    def start_run(self) -> None:
        super().start_run()
        self.outputs["density"].value = float(self.inputs["density"].value)

        # Parameters are fixed for the duration of a run
        self._rgr = float(self.inputs["rgr"].value)
        self._k = float(self.inputs["k"].value)

    def compute_rates(self) -> None:
        p = self.outputs["density"].value
        p2 = self.inputs["density of other species"].value
        self.rates["density"] = self._rgr * p + self._k * p * p2


def create_predator_prey(simulation: Simulation) -> tuple[PredOrPrey, PredOrPrey]:
    """Add a connected prey/predator pair to ``simulation``."""
    prey = PredOrPrey("prey", density=3.0, rgr=0.5, k=-0.1)
    predator = PredOrPrey("predator", density=1.0, rgr=-0.5, k=0.1)

    prey.inputs["density of other species"].connect(predator.outputs["density"])
    predator.inputs["density of other species"].connect(prey.outputs["density"])

    simulation.add(prey)
    simulation.add(predator)
    return prey, predator
