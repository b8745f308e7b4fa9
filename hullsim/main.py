"""
Hull Stability Simulator
========================

Command line entry point: runs a stability scenario headlessly, prints a
summary and optionally exports the trajectory.
"""

import sys
import json
import math
import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .physics.errors import StabilityError
from .physics.parameters import LoadAxis
from .physics.stability import CapsizePolicy
from .simulation.scenarios import Scenario, ScenarioType, get_scenario
from .simulation.recorder import (
    TrajectoryRecorder,
    RecorderConfig,
    export_trajectories,
    META_FILE_NAME,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate the roll stability of a floating hull with a movable load"
    )
    parser.add_argument(
        "--scenario", "-s",
        type=str,
        default=ScenarioType.UPRIGHT.value,
        choices=[t.value for t in ScenarioType],
        help="Predefined scenario to start from"
    )
    parser.add_argument(
        "--duration", "-t",
        type=float,
        default=None,
        help="Simulated seconds (default: scenario duration)"
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=None,
        help="Display refresh rate to emulate (default: scenario rate)"
    )
    parser.add_argument("--load-offset", "-l", type=float, default=None,
                        help="Load offset from the hull center (cm)")
    parser.add_argument("--load-axis", type=str, default=None,
                        choices=[a.value for a in LoadAxis],
                        help="Axis the load offset moves along")
    parser.add_argument("--hull-width", type=float, default=None, help="Hull width (cm)")
    parser.add_argument("--hull-height", type=float, default=None, help="Hull height (cm)")
    parser.add_argument("--hull-mass", type=float, default=None, help="Hull mass (kg)")
    parser.add_argument("--load-mass", type=float, default=None, help="Load mass (kg)")
    parser.add_argument("--gravity", type=float, default=None, help="Gravity (cm/s²)")
    parser.add_argument("--initial-heel", type=float, default=None,
                        help="Initial heel angle (degrees)")
    parser.add_argument(
        "--policy",
        type=str,
        default=None,
        choices=[p.value for p in CapsizePolicy],
        help="Capsize detection policy"
    )
    parser.add_argument(
        "--waves", "-w",
        action="store_true",
        help="Enable waves"
    )
    parser.add_argument(
        "--stop-on-capsize",
        action="store_true",
        help="End the run when the hull capsizes"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Directory to export the trajectory to"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    return parser


def scenario_from_args(args: argparse.Namespace) -> Scenario:
    """Predefined scenario with command line overrides applied."""
    scenario = get_scenario(ScenarioType(args.scenario))

    overrides = {
        name: value for name, value in (
            ("hull_width", args.hull_width),
            ("hull_height", args.hull_height),
            ("hull_mass", args.hull_mass),
            ("load_mass", args.load_mass),
            ("gravity", args.gravity),
        ) if value is not None
    }
    if args.load_axis is not None:
        overrides["load_axis"] = LoadAxis(args.load_axis)
    if overrides:
        scenario.parameters = replace(scenario.parameters, **overrides)
        scenario.name = "custom"

    if args.load_offset is not None:
        scenario.load_offset = args.load_offset
        scenario.name = "custom"
    if args.initial_heel is not None:
        scenario.initial_angle = math.radians(args.initial_heel)
        scenario.name = "custom"
    if args.policy is not None:
        scenario.stability_config = replace(
            scenario.stability_config, capsize_policy=CapsizePolicy(args.policy)
        )
    if args.waves:
        scenario.wave_config = replace(scenario.wave_config, enabled=True)

    return scenario


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format='%(levelname)s: %(message)s')

    scenario = scenario_from_args(args)

    try:
        if args.output:
            files = export_trajectories(
                args.output,
                scenarios=[scenario],
                duration_s=args.duration,
                frame_rate_hz=args.fps,
                stop_on_capsize=args.stop_on_capsize,
            )
            print(f"Trajectory written to {files[0]}")

            with open(Path(args.output) / META_FILE_NAME) as f:
                summary = json.load(f)["runs"][0]
        else:
            recorder = TrajectoryRecorder(scenario, RecorderConfig(
                duration_s=args.duration,
                frame_rate_hz=args.fps,
                stop_on_capsize=args.stop_on_capsize,
            ))
            summary = recorder.record().summary()
    except StabilityError as e:
        logger.error(str(e))
        return 2

    print(f"\nScenario: {scenario.name} ({scenario.description})")
    print(f"  Frames:       {summary['frames']}")
    print(f"  Duration:     {summary['duration_s']:.2f} s")
    print(f"  Max heel:     {summary['max_abs_angle_deg']:.1f}°")
    print(f"  Final angle:  {summary['final_angle_deg']:.1f}°")
    if summary["capsized"]:
        print(f"  Capsized:     Yes (at {summary['capsize_time_s']:.2f} s)")
    else:
        print(f"  Capsized:     No")

    return 0


if __name__ == "__main__":
    sys.exit(main())
