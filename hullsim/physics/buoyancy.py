"""
Buoyancy Model
==============

Center of buoyancy and draft of the rectangular hull.
"""

import math

from .mass_model import Point2D
from .parameters import SimulationParameters


def center_of_buoyancy(angle: float, params: SimulationParameters) -> Point2D:
    """
    Center of buoyancy in hull-local coordinates.

    The submerged volume is constant (buoyancy equals weight), so only the
    horizontal shift of its centroid is modelled. The shift is linearized
    in the tilt angle: exact for small angles, an approximation beyond
    roughly 20-30 degrees.

    Args:
        angle: Hull tilt (radians)
        params: Hull parameters

    Returns:
        Center of buoyancy
    """
    half_height = params.hull_height / 2
    return Point2D(half_height * math.sin(angle), -half_height)


def submerged_depth(params: SimulationParameters) -> float:
    """
    Draft of the hull, clamped to [0, hull_height].

    Depth at which the displaced water balances the total weight. Used
    for display only.
    """
    if params.water_density <= 0:
        return params.hull_height
    depth = params.total_mass / (params.hull_width * params.water_density)
    return max(0.0, min(depth, params.hull_height))
