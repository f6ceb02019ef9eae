"""Exceptions raised by the coding-time Monte Carlo engine."""


class SimulationError(ValueError):
    """Base class for precondition failures in the simulation engine."""


class InvalidConfiguration(SimulationError):
    """A SimulationConfig field violates its bounds."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(f"{field_name}: {message}")


class InvalidInput(SimulationError):
    """An operation was called with unusable input (empty batch, bad batch size)."""
