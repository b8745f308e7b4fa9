"""
Stability Integrator
====================

Rotational dynamics of the floating hull.

Each step recomputes the centers of gravity and buoyancy for the current
tilt, turns the horizontal lever arm between them into a torque, and
advances angle and angular velocity with semi-implicit Euler:

    alpha = torque / I
    omega += alpha * dt
    theta += omega * dt        (uses the updated omega)
    omega *= damping

The hull capsizes when its center of gravity moves outside the waterline
corners (corner-clearance policy) or, as a fallback, when the tilt
exceeds 90°. Capsize is terminal until reset().
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
import logging

from .errors import DegenerateInertiaError
from .parameters import SimulationParameters, LoadState
from .mass_model import (
    Point2D,
    to_world,
    boat_center_of_gravity,
    load_center_of_gravity,
    combined_center_of_gravity,
    moment_of_inertia,
)
from .buoyancy import center_of_buoyancy, submerged_depth

logger = logging.getLogger(__name__)


# Tilt at which the hull lies on its side; capsized hulls are clamped here
CAPSIZE_ANGLE = math.pi / 2


class HullStatus(Enum):
    """Integrator states."""
    FLOATING = "floating"
    CAPSIZED = "capsized"


class CapsizePolicy(Enum):
    """How capsize is detected."""
    CORNER_CLEARANCE = "corner_clearance"   # CG outside waterline corners, then angle limit
    ANGLE_THRESHOLD = "angle_threshold"     # Angle limit only (early model)


@dataclass
class StabilityConfig:
    """Configuration for the stability integrator."""
    capsize_policy: CapsizePolicy = CapsizePolicy.CORNER_CLEARANCE

    # Damping. Per-step multiplier by default; when damping_rate is set
    # the velocity decays as exp(-damping_rate * dt) instead.
    damping_factor: float = 0.99
    damping_rate: Optional[float] = None    # 1/s

    # Include the wave offset in the corner-clearance check
    wave_affects_capsize: bool = True


@dataclass
class BodyState:
    """Rotational state of the hull."""
    angle: float = 0.0                  # radians, signed
    angular_velocity: float = 0.0       # rad/s
    angular_acceleration: float = 0.0   # rad/s², from the last step
    capsized: bool = False

    @property
    def status(self) -> HullStatus:
        return HullStatus.CAPSIZED if self.capsized else HullStatus.FLOATING

    @property
    def angle_degrees(self) -> float:
        return math.degrees(self.angle)


@dataclass(frozen=True)
class DerivedGeometry:
    """Per-step geometry, hull-local coordinates."""
    boat_cg: Point2D
    load_cg: Point2D
    combined_cg: Point2D
    center_of_buoyancy: Point2D
    moment_of_inertia: float
    submerged_depth: float
    total_mass: float


def derive_geometry(params: SimulationParameters, load: LoadState,
                    angle: float) -> DerivedGeometry:
    """
    Compute centers of gravity and buoyancy, inertia and draft.

    Raises:
        DegenerateInertiaError: if the moment of inertia is zero or not finite
    """
    inertia = moment_of_inertia(params)
    if not math.isfinite(inertia) or inertia <= 0:
        raise DegenerateInertiaError(inertia)

    return DerivedGeometry(
        boat_cg=boat_center_of_gravity(params),
        load_cg=load_center_of_gravity(params, load),
        combined_cg=combined_center_of_gravity(params, load),
        center_of_buoyancy=center_of_buoyancy(angle, params),
        moment_of_inertia=inertia,
        submerged_depth=submerged_depth(params),
        total_mass=params.total_mass,
    )


def righting_torque(geometry: DerivedGeometry, gravity: float) -> float:
    """Torque from the horizontal lever arm between buoyancy and gravity."""
    lever_arm = geometry.center_of_buoyancy.x - geometry.combined_cg.x
    return lever_arm * geometry.total_mass * gravity


def angular_acceleration(torque: float, inertia: float) -> float:
    """
    Angular acceleration from torque.

    Raises:
        DegenerateInertiaError: if inertia is zero or not finite
    """
    if not math.isfinite(inertia) or inertia <= 0:
        raise DegenerateInertiaError(inertia)
    return torque / inertia


def corner_half_width(params: SimulationParameters, angle: float) -> float:
    """Horizontal half-extent of the hull's waterline corners under tilt."""
    return (
        (params.hull_width / 2) * math.cos(angle) +
        (params.hull_height / 2) * math.sin(abs(angle))
    )


def corner_clearance_exceeded(cg: Point2D, params: SimulationParameters,
                              angle: float) -> bool:
    """
    True when the CG lies outside the hull's support at the waterline.

    Past this point no restoring torque can exist.
    """
    cg_world = to_world(cg, angle)
    return abs(cg_world.x) > corner_half_width(params, angle)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one integration step."""
    state: BodyState
    geometry: Optional[DerivedGeometry]
    torque: float = 0.0
    skipped: bool = False       # Step not applied (degenerate inertia)
    wave_offset: float = 0.0
    elapsed_time: float = 0.0

    @property
    def angle(self) -> float:
        return self.state.angle

    @property
    def angular_velocity(self) -> float:
        return self.state.angular_velocity

    @property
    def capsized(self) -> bool:
        return self.state.capsized

    @property
    def display_angle(self) -> float:
        return self.state.angle + self.wave_offset

    @property
    def boat_cg(self) -> Optional[Point2D]:
        return self.geometry.boat_cg if self.geometry else None

    @property
    def load_cg(self) -> Optional[Point2D]:
        return self.geometry.load_cg if self.geometry else None

    @property
    def combined_cg(self) -> Optional[Point2D]:
        return self.geometry.combined_cg if self.geometry else None

    @property
    def center_of_buoyancy(self) -> Optional[Point2D]:
        return self.geometry.center_of_buoyancy if self.geometry else None

    @property
    def submerged_depth(self) -> Optional[float]:
        return self.geometry.submerged_depth if self.geometry else None


class StabilityIntegrator:
    """
    Owner of the hull's BodyState.

    States:
    - FLOATING: steps integrate torque into angle and velocity
    - CAPSIZED: terminal, steps return the frozen state until reset()
    """

    def __init__(self, config: Optional[StabilityConfig] = None,
                 initial_state: Optional[BodyState] = None):
        """
        Initialize integrator.

        Args:
            config: Stability configuration
            initial_state: Starting state, upright and at rest when None
        """
        self.config = config or StabilityConfig()
        self._state = replace(initial_state) if initial_state else BodyState()
        self._geometry: Optional[DerivedGeometry] = None
        self._capsize_count = 0

    @property
    def state(self) -> BodyState:
        """Copy of the current body state."""
        return replace(self._state)

    @property
    def status(self) -> HullStatus:
        return self._state.status

    @property
    def geometry(self) -> Optional[DerivedGeometry]:
        """Geometry from the last successful step, None before the first."""
        return self._geometry

    @property
    def capsize_count(self) -> int:
        """Number of capsize transitions since construction."""
        return self._capsize_count

    def step(self, dt: float, params: SimulationParameters, load: LoadState,
             wave_offset: float = 0.0) -> StepResult:
        """
        Advance the hull by one timestep.

        Args:
            dt: Time step (seconds, finite, >= 0)
            params: Current hull parameters (read only)
            load: Current load position (read only)
            wave_offset: Display wave offset (radians), used only by the
                capsize check when wave_affects_capsize is set

        Returns:
            StepResult with a copy of the state and this step's geometry

        Raises:
            ValueError: if dt is negative or not finite
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite, non-negative number, got {dt!r}")

        try:
            geometry = derive_geometry(params, load, self._state.angle)
        except DegenerateInertiaError as e:
            logger.warning(f"Skipping step: {e}")
            return StepResult(self.state, self._geometry, skipped=True, wave_offset=wave_offset)
        self._geometry = geometry

        if self._state.capsized:
            return StepResult(self.state, geometry, wave_offset=wave_offset)

        torque = righting_torque(geometry, params.gravity)

        if self.config.capsize_policy == CapsizePolicy.CORNER_CLEARANCE:
            check_angle = self._state.angle
            if self.config.wave_affects_capsize:
                check_angle += wave_offset
            if corner_clearance_exceeded(geometry.combined_cg, params, check_angle):
                if check_angle != 0:
                    direction = math.copysign(1.0, check_angle)
                else:
                    direction = math.copysign(1.0, torque)
                self._capsize(direction, "center of gravity outside waterline corners")
                return StepResult(self.state, geometry, torque=torque, wave_offset=wave_offset)

        if dt == 0:
            return StepResult(self.state, geometry, torque=torque, wave_offset=wave_offset)

        alpha = angular_acceleration(torque, geometry.moment_of_inertia)

        velocity = self._state.angular_velocity + alpha * dt
        angle = self._state.angle + velocity * dt
        velocity *= self._damping(dt)

        if not (math.isfinite(angle) and math.isfinite(velocity)):
            logger.warning(
                f"Skipping step: non-finite result (dt={dt}, torque={torque:.3g})"
            )
            return StepResult(self.state, geometry, torque=torque, skipped=True,
                              wave_offset=wave_offset)

        self._state.angular_acceleration = alpha
        self._state.angular_velocity = velocity
        self._state.angle = angle

        if abs(self._state.angle) > CAPSIZE_ANGLE:
            self._capsize(math.copysign(1.0, self._state.angle), "tilt beyond 90°")

        return StepResult(self.state, geometry, torque=torque, wave_offset=wave_offset)

    def _damping(self, dt: float) -> float:
        """Velocity multiplier for one step."""
        if self.config.damping_rate is not None:
            return math.exp(-self.config.damping_rate * dt)
        return self.config.damping_factor

    def _capsize(self, direction: float, reason: str):
        """Freeze the hull on its side."""
        self._state.angle = direction * CAPSIZE_ANGLE
        self._state.angular_velocity = 0.0
        self._state.angular_acceleration = 0.0
        self._state.capsized = True
        self._capsize_count += 1
        logger.info(
            f"Capsized to {math.degrees(self._state.angle):+.0f}° ({reason})"
        )

    def set_state(self, angle: float, angular_velocity: float = 0.0):
        """
        Place a floating hull at a given heel and roll rate.

        Raises:
            ValueError: if the hull is capsized or a value is not finite
        """
        if self._state.capsized:
            raise ValueError("Cannot set state of a capsized hull; reset() first")
        if not (math.isfinite(angle) and math.isfinite(angular_velocity)):
            raise ValueError(f"State must be finite, got angle={angle!r}, "
                             f"angular_velocity={angular_velocity!r}")
        self._state.angle = angle
        self._state.angular_velocity = angular_velocity
        self._state.angular_acceleration = 0.0

    def reset(self):
        """Return to upright, at rest, floating."""
        self._state = BodyState()
        self._geometry = None
        logger.debug("Integrator reset")
