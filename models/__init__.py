# models/__init__.py

"""Example models built on the hybridsim kernel."""

from hybridsim import Simulation

from .bouncing_ball import BouncingBall, HitGround
from .exp_growth import ExpGrowth
from .pred_prey import PredOrPrey, create_predator_prey
from .registry import ModelRegistry, UnknownModelError


def _add(component_class):
    def factory(simulation: Simulation, **kwargs):
        component = component_class(**kwargs)
        simulation.add(component)
        return component

    return factory


default_registry = ModelRegistry()
default_registry.register("exp_growth", _add(ExpGrowth))
default_registry.register("bouncing_ball", _add(BouncingBall))
default_registry.register("pred_or_prey", create_predator_prey)

__all__ = [
    "BouncingBall",
    "HitGround",
    "ExpGrowth",
    "PredOrPrey",
    "create_predator_prey",
    "ModelRegistry",
    "UnknownModelError",
    "default_registry",
]
