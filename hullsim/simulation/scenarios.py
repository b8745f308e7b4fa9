"""
Scenarios Module
================

Predefined hull stability scenarios.
Each scenario fixes hull parameters, load position, capsize policy,
waves and initial heel, so runs are reproducible.
"""

import math
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional
from enum import Enum
import logging

from ..physics.parameters import SimulationParameters, LoadState, LoadAxis
from ..physics.stability import StabilityConfig, CapsizePolicy
from ..physics.wave_model import WaveConfig
from .engine import Simulation

logger = logging.getLogger(__name__)


class ScenarioType(Enum):
    """Types of stability scenarios."""
    UPRIGHT = "upright"
    SHIFTED_LOAD = "shifted_load"
    RAISED_LOAD = "raised_load"
    HEELED_START = "heeled_start"
    WAVES = "waves"
    LEGACY_THRESHOLD = "legacy_threshold"
    CUSTOM = "custom"


@dataclass
class Scenario:
    """
    Complete stability scenario definition.
    """
    name: str
    description: str

    # Hull and load
    parameters: SimulationParameters = field(default_factory=SimulationParameters)
    load_offset: float = 0.0

    # Model settings
    stability_config: StabilityConfig = field(default_factory=StabilityConfig)
    wave_config: WaveConfig = field(default_factory=WaveConfig)

    # Initial conditions
    initial_angle: float = 0.0              # radians
    initial_angular_velocity: float = 0.0   # rad/s

    # Run length
    duration_s: float = 5.0
    frame_rate_hz: float = 60.0

    def build_simulation(self) -> Simulation:
        """Create a Simulation set up for this scenario."""
        simulation = Simulation(
            parameters=replace(self.parameters),
            load_state=LoadState(load_offset=self.load_offset),
            stability_config=replace(self.stability_config),
            wave_config=replace(self.wave_config),
        )
        if self.initial_angle or self.initial_angular_velocity:
            simulation.integrator.set_state(self.initial_angle, self.initial_angular_velocity)
        return simulation


def get_scenario(scenario_type: ScenarioType) -> Scenario:
    """
    Get a predefined scenario by type.

    Args:
        scenario_type: Type of scenario to create

    Returns:
        Configured Scenario object
    """
    if scenario_type == ScenarioType.UPRIGHT:
        return _upright()
    elif scenario_type == ScenarioType.SHIFTED_LOAD:
        return _shifted_load()
    elif scenario_type == ScenarioType.RAISED_LOAD:
        return _raised_load()
    elif scenario_type == ScenarioType.HEELED_START:
        return _heeled_start()
    elif scenario_type == ScenarioType.WAVES:
        return _waves()
    elif scenario_type == ScenarioType.LEGACY_THRESHOLD:
        return _legacy_threshold()
    else:
        return _upright()


def get_all_scenarios() -> List[Scenario]:
    """Get all predefined scenarios."""
    return [
        _upright(),
        _shifted_load(),
        _raised_load(),
        _heeled_start(),
        _waves(),
        _legacy_threshold(),
    ]


def _upright() -> Scenario:
    """Centered load, upright hull: equilibrium."""
    return Scenario(
        name="upright",
        description="Load centered, hull upright and at rest",
        duration_s=10.0,
    )


def _shifted_load() -> Scenario:
    """Load moved well off center across the beam."""
    return Scenario(
        name="shifted_load",
        description="Load 50 cm off center; the hull rolls over toward it",
        load_offset=50.0,
    )


def _raised_load() -> Scenario:
    """Load raised high above the hull's own CG, small initial heel."""
    return Scenario(
        name="raised_load",
        description="Load 50 cm above the hull center, 2° initial heel",
        parameters=SimulationParameters(load_axis=LoadAxis.VERTICAL),
        load_offset=50.0,
        initial_angle=math.radians(2.0),
    )


def _heeled_start() -> Scenario:
    """Centered load, hull released from a heel."""
    return Scenario(
        name="heeled_start",
        description="Load centered, hull released from 5° of heel",
        initial_angle=math.radians(5.0),
    )


def _waves() -> Scenario:
    """Upright hull in the default swell."""
    return Scenario(
        name="waves",
        description="Load centered, 10° / 0.5 Hz waves",
        wave_config=WaveConfig(enabled=True),
        duration_s=10.0,
    )


def _legacy_threshold() -> Scenario:
    """Early model: angle-only capsize test, waves for display only."""
    return Scenario(
        name="legacy_threshold",
        description="Angle-threshold capsize policy, waves ignored by the capsize check",
        stability_config=StabilityConfig(
            capsize_policy=CapsizePolicy.ANGLE_THRESHOLD,
            wave_affects_capsize=False,
        ),
        wave_config=WaveConfig(enabled=True),
        initial_angle=math.radians(1.0),
    )


def create_random_scenario(
    offset_range: tuple = (-60.0, 60.0),
    load_axis: Optional[LoadAxis] = None,
    duration_s: float = 5.0,
) -> Scenario:
    """
    Create a randomized scenario.

    Args:
        offset_range: Range of load offsets (min, max), cm
        load_axis: Specific load axis or None for random
        duration_s: Duration of scenario

    Returns:
        Randomized Scenario
    """
    if load_axis is None:
        load_axis = random.choice([LoadAxis.TRANSVERSE, LoadAxis.VERTICAL])

    parameters = SimulationParameters(
        hull_width=random.uniform(100.0, 220.0),
        hull_height=random.uniform(25.0, 60.0),
        hull_mass=random.uniform(5.0, 20.0),
        load_mass=random.uniform(1.0, 10.0),
        load_axis=load_axis,
    )

    wave_config = WaveConfig(
        enabled=random.random() < 0.5,
        max_angle=math.radians(random.uniform(2.0, 15.0)),
        frequency=random.uniform(0.2, 1.0),
    )

    return Scenario(
        name="random",
        description="Randomly generated scenario",
        parameters=parameters,
        load_offset=random.uniform(*offset_range),
        wave_config=wave_config,
        initial_angle=math.radians(random.uniform(-3.0, 3.0)),
        duration_s=duration_s,
    )
