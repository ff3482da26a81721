"""Numerical integrators for continuous state."""

from .base import Integrator
from .euler import EulerIntegrator
from .rkck import RKCKIntegrator

__all__ = [
    "Integrator",
    "EulerIntegrator",
    "RKCKIntegrator",
]
