"""
Trajectory Recorder
===================

Runs scenarios headlessly through the frame driver, collects the hull's
trajectory as numpy arrays and exports runs as JSON lines with a
metadata summary.
"""

import json
import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List, Iterator, Dict, Any, Union
import logging

import numpy as np

from .driver import SimulationDriver, DriverConfig, FrameSnapshot
from .scenarios import Scenario, ScenarioType, get_scenario, create_random_scenario

logger = logging.getLogger(__name__)

META_FILE_NAME = "stability_runs.meta.json"


@dataclass
class RecorderConfig:
    """Configuration for trajectory recording."""
    duration_s: Optional[float] = None      # Overrides the scenario duration
    frame_rate_hz: Optional[float] = None   # Overrides the scenario frame rate
    stop_on_capsize: bool = False           # End the run at the capsize frame


@dataclass
class Trajectory:
    """Recorded run, one array element per frame."""
    time: np.ndarray
    angle: np.ndarray
    angular_velocity: np.ndarray
    display_angle: np.ndarray
    wave_offset: np.ndarray
    capsized: np.ndarray
    load_offset: np.ndarray

    @classmethod
    def from_snapshots(cls, snapshots: List[FrameSnapshot]) -> 'Trajectory':
        """Stack frame snapshots into arrays."""
        return cls(
            time=np.array([s.result.elapsed_time for s in snapshots], dtype=float),
            angle=np.array([s.angle for s in snapshots], dtype=float),
            angular_velocity=np.array(
                [s.result.angular_velocity for s in snapshots], dtype=float
            ),
            display_angle=np.array([s.display_angle for s in snapshots], dtype=float),
            wave_offset=np.array([s.wave_offset for s in snapshots], dtype=float),
            capsized=np.array([s.capsized for s in snapshots], dtype=bool),
            load_offset=np.array([s.load_offset for s in snapshots], dtype=float),
        )

    def __len__(self) -> int:
        return len(self.time)

    @property
    def capsize_index(self) -> Optional[int]:
        """Index of the first capsized frame, None if the hull stayed afloat."""
        if not self.capsized.any():
            return None
        return int(np.argmax(self.capsized))

    @property
    def capsize_time(self) -> Optional[float]:
        idx = self.capsize_index
        return None if idx is None else float(self.time[idx])

    def summary(self) -> Dict[str, Any]:
        """Run statistics in JSON-friendly types."""
        if len(self) == 0:
            return {"frames": 0, "duration_s": 0.0, "capsized": False}

        return {
            "frames": len(self),
            "duration_s": float(self.time[-1] - self.time[0]),
            "capsized": bool(self.capsized.any()),
            "capsize_time_s": self.capsize_time,
            "max_abs_angle_deg": float(np.degrees(np.max(np.abs(self.angle)))),
            "final_angle_deg": float(np.degrees(self.angle[-1])),
            "max_abs_angular_velocity": float(np.max(np.abs(self.angular_velocity))),
        }


class TrajectoryRecorder:
    """
    Headless scenario runner.

    Builds a Simulation from the scenario, drives it with a synthetic
    display clock and records every frame.
    """

    def __init__(self, scenario: Optional[Scenario] = None,
                 config: Optional[RecorderConfig] = None):
        """
        Initialize recorder.

        Args:
            scenario: Scenario to run, upright hull when None
            config: Recording overrides
        """
        self.scenario = scenario or get_scenario(ScenarioType.UPRIGHT)
        self.config = config or RecorderConfig()

    @property
    def duration_s(self) -> float:
        if self.config.duration_s is not None:
            return self.config.duration_s
        return self.scenario.duration_s

    @property
    def frame_rate_hz(self) -> float:
        if self.config.frame_rate_hz is not None:
            return self.config.frame_rate_hz
        return self.scenario.frame_rate_hz

    def frames(self) -> Iterator[FrameSnapshot]:
        """Run the scenario, yielding every frame snapshot."""
        driver = SimulationDriver(
            self.scenario.build_simulation(),
            DriverConfig(log_frames=False),
        )
        yield from driver.run(
            self.duration_s,
            frame_rate_hz=self.frame_rate_hz,
            stop_on_capsize=self.config.stop_on_capsize,
        )

    def generate(self) -> Iterator[Dict[str, Any]]:
        """
        Run the scenario as JSON-ready records.

        Yields:
            One dictionary per frame
        """
        for snapshot in self.frames():
            yield _create_record(snapshot)

    def record(self) -> Trajectory:
        """Run the scenario and collect the trajectory."""
        trajectory = Trajectory.from_snapshots(list(self.frames()))
        logger.debug(f"Recorded {len(trajectory)} frames of {self.scenario.name}")
        return trajectory


def _create_record(snapshot: FrameSnapshot) -> Dict[str, Any]:
    """Create output record for one frame."""
    result = snapshot.result
    record = {
        "timestamp": result.elapsed_time,
        "angle": result.angle,
        "angle_deg": math.degrees(result.angle),
        "angular_velocity": result.angular_velocity,
        "display_angle": result.display_angle,
        "wave_offset": result.wave_offset,
        "capsized": result.capsized,
        "load_offset": snapshot.load_offset,
    }
    if result.geometry is not None:
        record.update({
            "cg_x": result.geometry.combined_cg.x,
            "cg_y": result.geometry.combined_cg.y,
            "cb_x": result.geometry.center_of_buoyancy.x,
            "cb_y": result.geometry.center_of_buoyancy.y,
            "submerged_depth": result.geometry.submerged_depth,
        })
    return record


def export_trajectories(
    output_path: str,
    scenarios: Optional[List[Union[str, Scenario]]] = None,
    duration_s: Optional[float] = None,
    frame_rate_hz: Optional[float] = None,
    stop_on_capsize: bool = False,
    seed: int = 42,
) -> List[str]:
    """
    Run scenarios and write their trajectories.

    Each scenario is written to ``<index>_<name>.jsonlog``; a single
    ``stability_runs.meta.json`` summarizes all runs.

    Args:
        output_path: Directory for output files
        scenarios: Scenarios or scenario names, all predefined scenarios
            when None. Unknown names get a random scenario.
        duration_s: Override scenario durations
        frame_rate_hz: Override scenario frame rates
        stop_on_capsize: End each run at capsize
        seed: Random seed for random scenarios

    Returns:
        List of generated log file paths
    """
    output_dir = Path(output_path)
    output_dir.mkdir(parents=True, exist_ok=True)
    random.seed(seed)

    if scenarios is None:
        scenarios = [t.value for t in ScenarioType if t != ScenarioType.CUSTOM]

    config = RecorderConfig(
        duration_s=duration_s,
        frame_rate_hz=frame_rate_hz,
        stop_on_capsize=stop_on_capsize,
    )

    generated_files = []
    runs = []

    for run_idx, entry in enumerate(scenarios):
        if isinstance(entry, Scenario):
            scenario = entry
        else:
            try:
                scenario = get_scenario(ScenarioType(entry))
            except ValueError:
                logger.warning(f"Unknown scenario '{entry}', using a random one")
                scenario = create_random_scenario()

        log_file = output_dir / f"{run_idx:02d}_{scenario.name}.jsonlog"
        recorder = TrajectoryRecorder(scenario, config)

        snapshots = list(recorder.frames())
        with open(log_file, 'w') as f:
            for snapshot in snapshots:
                f.write(json.dumps(_create_record(snapshot)) + "\n")

        summary = Trajectory.from_snapshots(snapshots).summary()
        runs.append({
            "scenario": scenario.name,
            "description": scenario.description,
            "log_file": log_file.name,
            "load_offset": scenario.load_offset,
            "load_axis": scenario.parameters.load_axis.value,
            "capsize_policy": scenario.stability_config.capsize_policy.value,
            "waves": scenario.wave_config.enabled,
            **summary,
        })

        generated_files.append(str(log_file))
        logger.info(
            f"{scenario.name}: {summary['frames']} frames, "
            f"capsized={'yes' if summary['capsized'] else 'no'}"
        )

    meta_file = output_dir / META_FILE_NAME
    with open(meta_file, 'w') as f:
        json.dump({"seed": seed, "runs": runs}, f, indent=2)

    return generated_files
