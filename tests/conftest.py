"""
Shared test fixtures for hull stability tests.
"""

import pytest

from hullsim.physics.parameters import SimulationParameters, LoadState, LoadAxis, ParameterStore
from hullsim.physics.stability import StabilityIntegrator, StabilityConfig
from hullsim.simulation.engine import Simulation
from hullsim.simulation.driver import SimulationDriver


@pytest.fixture
def default_params():
    """Default hull: 160 x 40 cm, 10 kg hull, 5 kg load, g = 980 cm/s²."""
    return SimulationParameters(
        hull_width=160.0,
        hull_height=40.0,
        hull_mass=10.0,
        load_mass=5.0,
        gravity=980.0,
    )


@pytest.fixture
def vertical_params():
    """Default hull with the load moving along the vertical axis."""
    return SimulationParameters(load_axis=LoadAxis.VERTICAL)


@pytest.fixture
def centered_load():
    return LoadState(load_offset=0.0)


@pytest.fixture
def shifted_load():
    """Load 50 cm from the hull center."""
    return LoadState(load_offset=50.0)


@pytest.fixture
def integrator():
    """Integrator with the default (corner-clearance) policy."""
    return StabilityIntegrator(StabilityConfig())


@pytest.fixture
def store(default_params):
    return ParameterStore(default_params)


@pytest.fixture
def simulation(default_params):
    """Simulation with default parameters and waves off."""
    return Simulation(parameters=default_params)


@pytest.fixture
def driver(simulation):
    return SimulationDriver(simulation)
