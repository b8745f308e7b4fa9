"""
Parameter Store
===============

Holds the hull dimensions, masses and environment constants, plus the
position of the movable load. Values are set from outside (UI sliders,
CLI, scenarios) between frames and read by the physics core.

Units follow the interactive model: centimetres, kilograms, seconds.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
import logging

from .errors import InvalidParameterError, is_finite_number

logger = logging.getLogger(__name__)


class LoadAxis(Enum):
    """Hull axis along which the load offset moves the point load."""
    TRANSVERSE = "transverse"   # Offset moves the load sideways across the beam
    VERTICAL = "vertical"       # Offset raises the load along the hull's vertical axis


@dataclass
class SimulationParameters:
    """Hull and environment parameters."""
    hull_width: float = 160.0       # cm, beam of the rectangular hull
    hull_height: float = 40.0       # cm, depth of the hull
    hull_mass: float = 10.0         # kg, mass of the empty hull
    load_mass: float = 5.0          # kg, movable point load
    gravity: float = 980.0          # cm/s²
    water_density: float = 1.0      # relative units (draft display only)
    load_axis: LoadAxis = LoadAxis.TRANSVERSE

    @property
    def total_mass(self) -> float:
        return self.hull_mass + self.load_mass

    def validate(self):
        """
        Check every value.

        Raises:
            InvalidParameterError: first offending parameter
        """
        for name in ("hull_width", "hull_height", "hull_mass", "load_mass", "gravity"):
            value = getattr(self, name)
            if not is_finite_number(value):
                raise InvalidParameterError(name, value, "must be a finite number")
            if value <= 0:
                raise InvalidParameterError(name, value)

        if not is_finite_number(self.water_density):
            raise InvalidParameterError(
                "water_density", self.water_density, "must be a finite number"
            )
        if self.water_density < 0:
            raise InvalidParameterError("water_density", self.water_density, "must be >= 0")

        if not isinstance(self.load_axis, LoadAxis):
            raise InvalidParameterError("load_axis", self.load_axis, "must be a LoadAxis")


@dataclass
class LoadState:
    """Position of the movable load."""
    load_offset: float = 0.0        # cm, signed, along SimulationParameters.load_axis


class ParameterStore:
    """
    Validated holder for SimulationParameters and LoadState.

    Updates are all-or-nothing: a rejected update leaves the previous
    values in place. Readers get copies, never the live objects.
    """

    def __init__(self, parameters: Optional[SimulationParameters] = None,
                 load_state: Optional[LoadState] = None):
        parameters = replace(parameters) if parameters else SimulationParameters()
        parameters.validate()
        self._parameters = parameters
        self._load = replace(load_state) if load_state else LoadState()
        if not is_finite_number(self._load.load_offset):
            raise InvalidParameterError(
                "load_offset", self._load.load_offset, "must be a finite number"
            )

    @property
    def parameters(self) -> SimulationParameters:
        """Copy of the current parameters."""
        return replace(self._parameters)

    @property
    def load_state(self) -> LoadState:
        """Copy of the current load state."""
        return replace(self._load)

    def set_parameters(self, hull_width: float, hull_height: float,
                       hull_mass: float, load_mass: float,
                       gravity: Optional[float] = None,
                       water_density: Optional[float] = None,
                       load_axis: Optional[LoadAxis] = None) -> SimulationParameters:
        """
        Replace the hull parameters.

        Args:
            hull_width: Hull beam (> 0)
            hull_height: Hull depth (> 0)
            hull_mass: Empty hull mass (> 0)
            load_mass: Load mass (> 0)
            gravity: Gravitational acceleration, unchanged when None
            water_density: Water density (>= 0), unchanged when None
            load_axis: Axis the load offset acts along, unchanged when None

        Returns:
            Copy of the newly applied parameters

        Raises:
            InvalidParameterError: if any value is rejected; nothing is changed
        """
        current = self._parameters
        candidate = SimulationParameters(
            hull_width=hull_width,
            hull_height=hull_height,
            hull_mass=hull_mass,
            load_mass=load_mass,
            gravity=current.gravity if gravity is None else gravity,
            water_density=current.water_density if water_density is None else water_density,
            load_axis=current.load_axis if load_axis is None else load_axis,
        )
        try:
            candidate.validate()
        except InvalidParameterError as e:
            logger.warning(f"Rejected parameter update: {e}")
            raise

        self._parameters = candidate
        logger.info(
            f"Parameters set: width={hull_width}, height={hull_height}, "
            f"hull_mass={hull_mass}, load_mass={load_mass}, "
            f"g={candidate.gravity}, density={candidate.water_density}"
        )
        return replace(candidate)

    def set_load_offset(self, value: float):
        """Move the load. Raises InvalidParameterError for non-finite values."""
        if not is_finite_number(value):
            logger.warning(f"Rejected load offset {value!r}")
            raise InvalidParameterError("load_offset", value, "must be a finite number")
        self._load.load_offset = float(value)
        logger.debug(f"Load offset set to {self._load.load_offset:.1f}")
