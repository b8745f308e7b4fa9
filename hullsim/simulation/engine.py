"""
Simulation Engine
=================

Single owner of one hull simulation: parameter store, stability
integrator and wave modulator. Several independent Simulation objects
can run side by side; nothing is process-global.
"""

import math
from dataclasses import replace
from typing import Optional
import logging

from ..physics.parameters import SimulationParameters, LoadState, LoadAxis, ParameterStore
from ..physics.stability import (
    StabilityIntegrator, StabilityConfig, BodyState, DerivedGeometry,
    StepResult, derive_geometry,
)
from ..physics.wave_model import WaveModel, WaveConfig, wave_offset

logger = logging.getLogger(__name__)


class Simulation:
    """
    Hull stability simulation.

    Call step(dt) once per frame. Parameters and load position may change
    between any two steps; they only affect torque from the next step on.
    """

    def __init__(self,
                 parameters: Optional[SimulationParameters] = None,
                 load_state: Optional[LoadState] = None,
                 stability_config: Optional[StabilityConfig] = None,
                 wave_config: Optional[WaveConfig] = None):
        """
        Initialize simulation.

        Args:
            parameters: Hull parameters (validated)
            load_state: Initial load position
            stability_config: Capsize policy and damping
            wave_config: Wave modulator settings

        Raises:
            InvalidParameterError: if the initial parameters are invalid
        """
        self.store = ParameterStore(parameters, load_state)
        self.integrator = StabilityIntegrator(stability_config)
        self.waves = WaveModel(wave_config)

        self.elapsed_time = 0.0
        self.step_count = 0

    def step(self, dt: float) -> StepResult:
        """
        Advance the simulation by dt seconds.

        Returns:
            StepResult including the wave offset at the new time

        Raises:
            ValueError: if dt is negative or not finite
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite, non-negative number, got {dt!r}")

        self.elapsed_time += dt
        self.step_count += 1
        offset = self.waves.offset(self.elapsed_time)

        result = self.integrator.step(
            dt,
            self.store.parameters,
            self.store.load_state,
            wave_offset=offset,
        )
        return replace(result, elapsed_time=self.elapsed_time)

    def reset(self):
        """Upright and at rest again. Parameters and load position are kept."""
        self.integrator.reset()
        logger.info("Simulation reset")

    def set_parameters(self, hull_width: float, hull_height: float,
                       hull_mass: float, load_mass: float,
                       gravity: Optional[float] = None,
                       water_density: Optional[float] = None,
                       load_axis: Optional[LoadAxis] = None) -> SimulationParameters:
        """See ParameterStore.set_parameters."""
        return self.store.set_parameters(
            hull_width, hull_height, hull_mass, load_mass,
            gravity=gravity, water_density=water_density, load_axis=load_axis,
        )

    def set_load_offset(self, value: float):
        """Move the load."""
        self.store.set_load_offset(value)

    def set_waves(self, enabled: bool):
        """Switch the wave modulator on or off."""
        self.waves.set_enabled(enabled)

    def compute_wave_offset(self, elapsed: float, enabled: bool) -> float:
        """Wave offset with this simulation's wave settings."""
        return wave_offset(elapsed, enabled, self.waves.config)

    @property
    def body_state(self) -> BodyState:
        return self.integrator.state

    @property
    def derived_geometry(self) -> DerivedGeometry:
        """Geometry for the current angle and parameters, freshly computed."""
        return derive_geometry(
            self.store.parameters,
            self.store.load_state,
            self.integrator.state.angle,
        )

    @property
    def parameters(self) -> SimulationParameters:
        return self.store.parameters

    @property
    def load_state(self) -> LoadState:
        return self.store.load_state

    @property
    def capsized(self) -> bool:
        return self.integrator.state.capsized
