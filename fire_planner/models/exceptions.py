"""Exceptions raised by the FIRE planning engine."""


class FirePlannerError(Exception):
    """Base exception for planning engine errors."""


class SimulationCancelledError(FirePlannerError):
    """Raised when a Monte Carlo batch is abandoned before all trials finish."""
