# models/registry.py

"""Name-keyed factories for the models a host application can run."""

from typing import Any, Callable

from hybridsim import HybridSimException, Simulation

# A factory adds its components to the simulation and returns the main one
ModelFactory = Callable[..., Any]


class UnknownModelError(HybridSimException):
    """Raised when no factory is registered under the requested name."""

    pass


class ModelRegistry:
    """Registry to look up model factories by name."""

    def __init__(self):
        self._factories: dict[str, ModelFactory] = {}

    def register(self, name: str, factory: ModelFactory) -> None:
        """Register a factory ``factory(simulation, **kwargs)`` under ``name``."""
        self._factories[name.lower()] = factory

    def create(self, name: str, simulation: Simulation, **kwargs) -> Any:
        """Build the named model into ``simulation``.

        Raises:
            UnknownModelError: If no factory is registered under ``name``
        """
        factory = self._factories.get(name.lower())
        if factory is None:
            raise UnknownModelError(
                f"Unknown model {name!r}; available: {', '.join(self.names()) or 'none'}"
            )
        return factory(simulation, **kwargs)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._factories
