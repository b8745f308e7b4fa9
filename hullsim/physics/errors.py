"""
Stability Errors
================

Exception types raised by the physics core.

Capsize is not an error: it is reported through ``BodyState.capsized``.
"""

import math
from typing import Any


class StabilityError(Exception):
    """Base class for all hull stability errors."""


class InvalidParameterError(StabilityError, ValueError):
    """
    A simulation parameter was rejected by the parameter store.

    The store keeps its previous values when this is raised.
    """

    def __init__(self, name: str, value: Any, reason: str = "must be > 0"):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid parameter {name}={value!r}: {reason}")


class DegenerateInertiaError(StabilityError, ZeroDivisionError):
    """Moment of inertia is zero or not finite, so torque cannot be integrated."""

    def __init__(self, moment_of_inertia: float):
        self.moment_of_inertia = moment_of_inertia
        super().__init__(
            f"Degenerate moment of inertia: {moment_of_inertia!r}"
        )


def is_finite_number(value: Any) -> bool:
    """True for real, finite numbers (bools excluded)."""
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False
