"""
Geometry and Mass Model
=======================

Centers of gravity and moment of inertia of the hull plus load.

Hull-local coordinates have their origin at the hull's bottom-center,
x across the beam and negative y pointing toward the top of the hull
(out of the water), matching screen coordinates.
"""

import math
from dataclasses import dataclass

from .parameters import SimulationParameters, LoadState, LoadAxis


@dataclass(frozen=True)
class Point2D:
    """Immutable 2D point."""
    x: float = 0.0
    y: float = 0.0

    def as_tuple(self) -> tuple:
        return (self.x, self.y)


def to_world(point: Point2D, angle: float) -> Point2D:
    """
    Rotate a hull-local point into the world frame.

    Args:
        point: Point in hull-local coordinates
        angle: Hull tilt (radians)

    Returns:
        Point in the world frame (same origin, waterline horizontal)
    """
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Point2D(
        x=point.x * cos_a - point.y * sin_a,
        y=point.x * sin_a + point.y * cos_a,
    )


def boat_center_of_gravity(params: SimulationParameters) -> Point2D:
    """CG of the empty hull: its geometric center."""
    return Point2D(0.0, -params.hull_height / 2)


def load_center_of_gravity(params: SimulationParameters, load: LoadState) -> Point2D:
    """
    Position of the point load.

    The offset is measured from the hull's center plane. On the vertical
    axis a positive offset raises the load toward the top of the hull.
    """
    half_height = params.hull_height / 2
    if params.load_axis == LoadAxis.VERTICAL:
        return Point2D(0.0, -half_height - load.load_offset)
    return Point2D(load.load_offset, -half_height)


def combined_center_of_gravity(params: SimulationParameters, load: LoadState) -> Point2D:
    """Mass-weighted average of hull and load CGs."""
    boat_cg = boat_center_of_gravity(params)
    load_cg = load_center_of_gravity(params, load)
    total_mass = params.total_mass

    return Point2D(
        x=(params.hull_mass * boat_cg.x + params.load_mass * load_cg.x) / total_mass,
        y=(params.hull_mass * boat_cg.y + params.load_mass * load_cg.y) / total_mass,
    )


def moment_of_inertia(params: SimulationParameters) -> float:
    """
    Flat-plate moment of inertia about the hull center.

    I = (1/12) * m * (w² + (3h)²). The tripled height is part of the
    model's tuning and is kept as-is.
    """
    return (1 / 12) * params.total_mass * (
        params.hull_width * params.hull_width
        + (params.hull_height * 3) * (params.hull_height * 3)
    )
