"""
Wave Model
==========

Periodic wave-induced roll added to the hull angle for display.

The offset is a pure function of elapsed time and never feeds back into
the integrated body state. Depending on StabilityConfig it may be
included in the capsize check.
"""

import math
from dataclasses import dataclass
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class WaveConfig:
    """Configuration for the wave modulator."""
    enabled: bool = False
    max_angle: float = math.radians(10.0)   # Peak roll offset (radians)
    frequency: float = 0.5                  # Oscillations per second (Hz)
    phase: float = 0.0                      # Phase offset (radians)


def wave_offset(elapsed: float, enabled: bool,
                config: Optional[WaveConfig] = None) -> float:
    """
    Wave roll offset at a given time.

    Args:
        elapsed: Elapsed time (seconds)
        enabled: Waves switched on
        config: Amplitude and frequency, defaults to 10° at 0.5 Hz

    Returns:
        Angular offset (radians), 0.0 when disabled
    """
    if not enabled:
        return 0.0
    config = config or WaveConfig()
    return config.max_angle * math.sin(
        2 * math.pi * config.frequency * elapsed + config.phase
    )


class WaveModel:
    """
    Wave modulator bound to a configuration.

    Stateless apart from its config: the same elapsed time always yields
    the same offset.
    """

    def __init__(self, config: Optional[WaveConfig] = None):
        self.config = config or WaveConfig()

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def set_enabled(self, enabled: bool):
        """Switch waves on or off."""
        if enabled != self.config.enabled:
            logger.info(f"Waves {'on' if enabled else 'off'}")
        self.config.enabled = enabled

    def offset(self, elapsed: float, enabled: Optional[bool] = None) -> float:
        """Wave offset at elapsed time; enabled overrides the config flag."""
        if enabled is None:
            enabled = self.config.enabled
        return wave_offset(elapsed, enabled, self.config)

    def display_angle(self, angle: float, elapsed: float) -> float:
        """Physical angle plus the current wave offset."""
        return angle + self.offset(elapsed)

    @classmethod
    def calm(cls) -> 'WaveModel':
        """Gentle, slow swell."""
        return cls(WaveConfig(enabled=True, max_angle=math.radians(4.0), frequency=0.25))

    @classmethod
    def moderate(cls) -> 'WaveModel':
        """The default 10° / 0.5 Hz swell, switched on."""
        return cls(WaveConfig(enabled=True))

    @classmethod
    def rough(cls) -> 'WaveModel':
        """Steep, fast waves."""
        return cls(WaveConfig(enabled=True, max_angle=math.radians(20.0), frequency=0.8))
