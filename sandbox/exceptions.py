"""Cube Sandbox exception hierarchy.

Numerical edge cases in the simulation are handled by substituting a safe
value; these exceptions cover the few conditions that cannot be recovered.
"""


class SandboxError(Exception):
    """Root of all Cube Sandbox exceptions."""


class SimulationError(SandboxError):
    """Errors raised while advancing the simulation."""


class GridFullError(SimulationError):
    """No free grid cell remains for a new food item."""


class ConfigurationError(SandboxError):
    """Invalid or unknown configuration value (e.g. an unknown slider)."""
