"""
Physics Module
==============

Rotational stability of a floating rectangular hull with a movable load:
parameters, mass and buoyancy models, the stability integrator and the
wave modulator.
"""

from .errors import StabilityError, InvalidParameterError, DegenerateInertiaError
from .parameters import SimulationParameters, LoadState, LoadAxis, ParameterStore
from .mass_model import Point2D, to_world, moment_of_inertia
from .buoyancy import center_of_buoyancy, submerged_depth
from .stability import (
    StabilityIntegrator, StabilityConfig, BodyState, DerivedGeometry,
    StepResult, CapsizePolicy, HullStatus, CAPSIZE_ANGLE,
)
from .wave_model import WaveModel, WaveConfig, wave_offset

__all__ = [
    'StabilityError', 'InvalidParameterError', 'DegenerateInertiaError',
    'SimulationParameters', 'LoadState', 'LoadAxis', 'ParameterStore',
    'Point2D', 'to_world', 'moment_of_inertia',
    'center_of_buoyancy', 'submerged_depth',
    'StabilityIntegrator', 'StabilityConfig', 'BodyState', 'DerivedGeometry',
    'StepResult', 'CapsizePolicy', 'HullStatus', 'CAPSIZE_ANGLE',
    'WaveModel', 'WaveConfig', 'wave_offset',
]
