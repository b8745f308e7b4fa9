"""
Simulation Module
=================

Runs the hull stability physics frame by frame.
Provides the Simulation facade, the frame driver, predefined scenarios
and headless trajectory recording.
"""

from .engine import Simulation
from .driver import SimulationDriver, DriverConfig, FrameSnapshot
from .scenarios import Scenario, ScenarioType, get_scenario, get_all_scenarios, create_random_scenario
from .recorder import TrajectoryRecorder, RecorderConfig, Trajectory, export_trajectories

__all__ = [
    'Simulation',
    'SimulationDriver', 'DriverConfig', 'FrameSnapshot',
    'Scenario', 'ScenarioType', 'get_scenario', 'get_all_scenarios', 'create_random_scenario',
    'TrajectoryRecorder', 'RecorderConfig', 'Trajectory', 'export_trajectories',
]
