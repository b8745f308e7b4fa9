"""
Simulation Driver
=================

Frame loop glue between a display refresh source and the Simulation.

The refresh source (a GUI timer, an animation-frame callback, or the
synthetic clock in run()) hands the driver one timestamp per frame. The
driver turns timestamps into time deltas, steps the simulation and
publishes a FrameSnapshot to registered frame callbacks (renderers,
readouts, loggers).
"""

import math
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional
import logging

from ..physics.mass_model import Point2D, to_world
from ..physics.stability import StepResult
from .engine import Simulation

logger = logging.getLogger(__name__)


@dataclass
class DriverConfig:
    """Configuration for the frame driver."""
    max_dt: Optional[float] = None      # Clamp long frame gaps (seconds), None = no clamp
    log_frames: bool = True             # Per-frame diagnostics at DEBUG level


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything a renderer needs for one frame."""
    timestamp: float
    dt: float
    result: StepResult
    load_offset: float
    cg_world: Optional[Point2D] = None
    cb_world: Optional[Point2D] = None

    @property
    def angle(self) -> float:
        return self.result.angle

    @property
    def display_angle(self) -> float:
        return self.result.display_angle

    @property
    def wave_offset(self) -> float:
        return self.result.wave_offset

    @property
    def capsized(self) -> bool:
        return self.result.capsized

    @property
    def angle_readout(self) -> str:
        """Tilt in degrees, one decimal."""
        return f"{math.degrees(self.result.angle):.1f}"

    @property
    def capsized_readout(self) -> str:
        return "Yes" if self.result.capsized else "No"


FrameCallback = Callable[[FrameSnapshot], None]


class SimulationDriver:
    """
    Feeds frame timestamps into a Simulation.

    The first frame after construction or reset() has dt = 0. Timestamps
    are in seconds and expected to increase; a timestamp earlier than the
    previous one is treated as a zero-length frame.
    """

    def __init__(self, simulation: Optional[Simulation] = None,
                 config: Optional[DriverConfig] = None):
        self.simulation = simulation or Simulation()
        self.config = config or DriverConfig()

        self._callbacks: List[FrameCallback] = []
        self._last_timestamp: Optional[float] = None
        self._frame_count = 0
        self._last_snapshot: Optional[FrameSnapshot] = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def last_snapshot(self) -> Optional[FrameSnapshot]:
        return self._last_snapshot

    def add_frame_callback(self, callback: FrameCallback):
        """Register a callback invoked with every FrameSnapshot."""
        self._callbacks.append(callback)

    def remove_frame_callback(self, callback: FrameCallback):
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def on_frame(self, timestamp: float) -> FrameSnapshot:
        """
        Process one display frame.

        Args:
            timestamp: Frame time (seconds)

        Returns:
            Snapshot of the simulation after this frame's step
        """
        dt = self._frame_dt(timestamp)
        self._last_timestamp = timestamp

        result = self.simulation.step(dt)
        snapshot = self._snapshot(timestamp, dt, result)
        self._frame_count += 1
        self._last_snapshot = snapshot

        if self.config.log_frames:
            logger.debug(
                f"Timestamp: {timestamp:.3f} Elapsed (s): {result.elapsed_time:.2f} "
                f"Wave Offset (rad): {result.wave_offset:.4f} "
                f"Angle: {snapshot.angle_readout}° Capsized: {snapshot.capsized_readout}"
            )

        for callback in self._callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.warning(f"Frame callback error: {e}")

        return snapshot

    def _frame_dt(self, timestamp: float) -> float:
        """Time since the previous frame, 0 for the first one."""
        if not math.isfinite(timestamp):
            raise ValueError(f"Frame timestamp must be finite, got {timestamp!r}")
        if self._last_timestamp is None:
            return 0.0

        dt = timestamp - self._last_timestamp
        if dt < 0:
            logger.warning(
                f"Frame timestamp went backwards ({self._last_timestamp:.3f} -> "
                f"{timestamp:.3f}), using dt=0"
            )
            return 0.0
        if self.config.max_dt is not None and dt > self.config.max_dt:
            logger.debug(f"Clamping frame dt {dt:.3f}s to {self.config.max_dt:.3f}s")
            return self.config.max_dt
        return dt

    def _snapshot(self, timestamp: float, dt: float, result: StepResult) -> FrameSnapshot:
        cg_world = None
        cb_world = None
        if result.geometry is not None:
            cg_world = to_world(result.geometry.combined_cg, result.display_angle)
            cb_world = to_world(result.geometry.center_of_buoyancy, result.display_angle)

        return FrameSnapshot(
            timestamp=timestamp,
            dt=dt,
            result=result,
            load_offset=self.simulation.load_state.load_offset,
            cg_world=cg_world,
            cb_world=cb_world,
        )

    def run(self, duration: float, frame_rate_hz: float = 60.0,
            start_time: float = 0.0,
            stop_on_capsize: bool = False) -> Iterator[FrameSnapshot]:
        """
        Drive the simulation from a synthetic clock.

        Args:
            duration: Simulated time to cover (seconds)
            frame_rate_hz: Display refresh rate to emulate
            start_time: Timestamp of the first frame
            stop_on_capsize: End the run on the first capsized frame

        Yields:
            One FrameSnapshot per frame, duration * frame_rate_hz + 1 in total
        """
        if frame_rate_hz <= 0:
            raise ValueError(f"frame_rate_hz must be > 0, got {frame_rate_hz}")
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")

        total_frames = int(round(duration * frame_rate_hz)) + 1
        for i in range(total_frames):
            snapshot = self.on_frame(start_time + i / frame_rate_hz)
            yield snapshot
            if stop_on_capsize and snapshot.capsized:
                logger.info(f"Run stopped at capsize after {snapshot.result.elapsed_time:.2f}s")
                return

    def reset(self, reset_load: bool = True):
        """
        Reset the hull and the frame clock.

        Args:
            reset_load: Also move the load back to the center
        """
        self.simulation.reset()
        if reset_load:
            self.simulation.set_load_offset(0.0)
        self._last_timestamp = None
        self._last_snapshot = None
