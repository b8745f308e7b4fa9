"""
Tests for Stability Integrator
==============================

Equilibrium, divergence and capsize, damping, degenerate inertia and
the capsize policies.
"""

import math
import pytest

from hullsim.physics.errors import DegenerateInertiaError
from hullsim.physics.parameters import SimulationParameters, LoadState
from hullsim.physics.stability import (
    StabilityIntegrator,
    StabilityConfig,
    BodyState,
    CapsizePolicy,
    HullStatus,
    CAPSIZE_ANGLE,
    angular_acceleration,
    corner_clearance_exceeded,
    corner_half_width,
    derive_geometry,
)
from hullsim.physics.mass_model import Point2D


DT = 0.016


def run_until_capsize(integrator, params, load, dt=DT, max_time=5.0):
    """Step until capsize or max_time; returns (elapsed, angles)."""
    elapsed = 0.0
    angles = []
    while elapsed < max_time:
        result = integrator.step(dt, params, load)
        elapsed += dt
        angles.append(result.angle)
        if result.capsized:
            break
    return elapsed, angles


class TestBodyState:
    """Tests for BodyState."""

    def test_default_state(self):
        state = BodyState()
        assert state.angle == 0.0
        assert state.angular_velocity == 0.0
        assert not state.capsized
        assert state.status == HullStatus.FLOATING

    def test_capsized_status(self):
        assert BodyState(capsized=True).status == HullStatus.CAPSIZED


class TestEquilibrium:
    """Upright hull with a centered load."""

    def test_single_step_example(self, integrator, default_params, centered_load):
        """160x40 hull, 10+5 kg, g=980, dt=0.016: nothing moves."""
        result = integrator.step(DT, default_params, centered_load)

        assert result.torque == 0.0
        assert result.angle == 0.0
        assert result.angular_velocity == 0.0
        assert not result.capsized

    def test_no_drift_over_many_steps(self, integrator, default_params, centered_load):
        for _ in range(1000):
            result = integrator.step(DT, default_params, centered_load)

        assert result.angle == 0.0
        assert result.angular_velocity == 0.0
        assert integrator.status == HullStatus.FLOATING

    def test_step_returns_geometry(self, integrator, default_params, centered_load):
        result = integrator.step(DT, default_params, centered_load)

        assert result.boat_cg == Point2D(0.0, -20.0)
        assert result.combined_cg.x == 0.0
        assert result.center_of_buoyancy.x == 0.0
        assert result.submerged_depth == pytest.approx(15.0 / 160.0)
        assert result.geometry.moment_of_inertia == pytest.approx(50000.0)


class TestCapsize:
    """Divergence and the capsize transition."""

    def test_shifted_load_capsizes_within_five_seconds(self, integrator, default_params, shifted_load):
        """Load 50 cm off center: capsized before 5 s, angle exactly ±90°."""
        elapsed, _ = run_until_capsize(integrator, default_params, shifted_load)

        state = integrator.state
        assert state.capsized
        assert elapsed < 5.0
        assert abs(state.angle) == CAPSIZE_ANGLE
        assert state.angular_velocity == 0.0

    def test_divergence_is_monotonic(self, integrator, default_params, shifted_load):
        """Angle keeps moving the same way until capsize."""
        _, angles = run_until_capsize(integrator, default_params, shifted_load)

        assert len(angles) > 2
        sign = math.copysign(1.0, angles[0])
        for prev, nxt in zip(angles, angles[1:]):
            assert sign * nxt >= sign * prev
        assert math.copysign(1.0, angles[-1]) == sign

    def test_capsize_is_terminal(self, integrator, default_params, shifted_load):
        """Steps after capsize change nothing."""
        run_until_capsize(integrator, default_params, shifted_load)
        frozen = integrator.state

        for _ in range(50):
            result = integrator.step(DT, default_params, shifted_load)

        assert result.capsized
        assert integrator.state == frozen
        assert integrator.capsize_count == 1

    def test_load_moved_back_after_capsize(self, integrator, default_params, shifted_load, centered_load):
        """Moving the load back does not right a capsized hull."""
        run_until_capsize(integrator, default_params, shifted_load)
        frozen = integrator.state

        integrator.step(DT, default_params, centered_load)

        assert integrator.state == frozen

    def test_negative_heel_capsizes_negative(self, default_params, centered_load):
        """Capsize direction follows the excursion."""
        integrator = StabilityIntegrator(initial_state=BodyState(angle=-math.radians(5.0)))
        run_until_capsize(integrator, default_params, centered_load)

        assert integrator.state.capsized
        assert integrator.state.angle == -CAPSIZE_ANGLE

    def test_corner_clearance_precheck(self, vertical_params):
        """Raised load past the waterline corner capsizes before integrating."""
        load = LoadState(50.0)
        integrator = StabilityIntegrator(initial_state=BodyState(angle=math.radians(80.0)))

        result = integrator.step(DT, vertical_params, load)

        assert result.capsized
        assert result.angle == CAPSIZE_ANGLE
        assert result.angular_velocity == 0.0

    def test_angle_threshold_policy_ignores_corners(self, vertical_params):
        """Degraded mode only capsizes beyond 90°."""
        load = LoadState(50.0)
        integrator = StabilityIntegrator(
            StabilityConfig(capsize_policy=CapsizePolicy.ANGLE_THRESHOLD),
            initial_state=BodyState(angle=math.radians(80.0)),
        )

        result = integrator.step(DT, vertical_params, load)

        assert not result.capsized
        assert result.angle > math.radians(80.0)

    def test_angle_threshold_policy_still_capsizes(self, default_params, centered_load):
        integrator = StabilityIntegrator(
            StabilityConfig(capsize_policy=CapsizePolicy.ANGLE_THRESHOLD),
            initial_state=BodyState(angle=math.radians(5.0)),
        )
        run_until_capsize(integrator, default_params, centered_load)

        assert integrator.state.capsized
        assert integrator.state.angle == CAPSIZE_ANGLE

    def test_wave_offset_can_trigger_capsize(self, vertical_params):
        """With the wave-inclusive check, the display angle decides."""
        load = LoadState(50.0)
        integrator = StabilityIntegrator(initial_state=BodyState(angle=math.radians(70.0)))

        result = integrator.step(DT, vertical_params, load, wave_offset=math.radians(10.0))

        assert result.capsized
        assert result.angle == CAPSIZE_ANGLE

    def test_wave_offset_ignored_when_disabled(self, vertical_params):
        load = LoadState(50.0)
        integrator = StabilityIntegrator(
            StabilityConfig(wave_affects_capsize=False),
            initial_state=BodyState(angle=math.radians(70.0)),
        )

        result = integrator.step(DT, vertical_params, load, wave_offset=math.radians(10.0))

        assert not result.capsized

    def test_set_state_rejected_when_capsized(self, integrator, default_params, shifted_load):
        run_until_capsize(integrator, default_params, shifted_load)

        with pytest.raises(ValueError):
            integrator.set_state(0.1)


class TestCornerClearance:
    """Tests for the corner-clearance geometry."""

    def test_upright_half_width(self, default_params):
        assert corner_half_width(default_params, 0.0) == pytest.approx(80.0)

    def test_half_width_symmetric(self, default_params):
        assert corner_half_width(default_params, 0.3) == pytest.approx(
            corner_half_width(default_params, -0.3)
        )

    def test_centered_cg_inside(self, default_params):
        assert not corner_clearance_exceeded(Point2D(0.0, -20.0), default_params, 0.0)

    def test_cg_beyond_beam_outside(self, default_params):
        assert corner_clearance_exceeded(Point2D(81.0, -20.0), default_params, 0.0)


class TestReset:
    """Tests for reset."""

    def test_reset_after_capsize(self, integrator, default_params, shifted_load):
        run_until_capsize(integrator, default_params, shifted_load)

        integrator.reset()

        state = integrator.state
        assert state.angle == 0.0
        assert state.angular_velocity == 0.0
        assert not state.capsized

    def test_reset_mid_roll(self, default_params, centered_load):
        integrator = StabilityIntegrator(initial_state=BodyState(angle=0.2, angular_velocity=0.5))
        integrator.step(DT, default_params, centered_load)

        integrator.reset()

        assert integrator.state == BodyState()

    def test_steps_resume_after_reset(self, integrator, default_params, shifted_load):
        run_until_capsize(integrator, default_params, shifted_load)
        integrator.reset()

        result = integrator.step(DT, default_params, shifted_load)

        assert not result.capsized
        assert result.angle != 0.0


class TestDamping:
    """Tests for velocity damping."""

    def test_per_step_damping(self, default_params, centered_load):
        """With zero torque, velocity shrinks by exactly 0.99 per step."""
        integrator = StabilityIntegrator(initial_state=BodyState(angular_velocity=1.0))

        result = integrator.step(DT, default_params, centered_load)

        assert result.torque == 0.0
        assert result.angular_velocity == pytest.approx(0.99)
        assert result.angle == pytest.approx(DT)

    def test_per_step_damping_independent_of_dt(self, default_params, centered_load):
        for dt in (0.008, 0.033):
            integrator = StabilityIntegrator(initial_state=BodyState(angular_velocity=-2.0))
            result = integrator.step(dt, default_params, centered_load)
            assert result.angular_velocity == pytest.approx(-1.98)

    def test_time_scaled_damping(self, default_params, centered_load):
        """damping_rate switches to exp(-rate * dt)."""
        integrator = StabilityIntegrator(
            StabilityConfig(damping_rate=0.5),
            initial_state=BodyState(angular_velocity=1.0),
        )

        result = integrator.step(0.1, default_params, centered_load)

        assert result.angular_velocity == pytest.approx(math.exp(-0.05))


class TestTimeStep:
    """Tests for dt handling."""

    def test_zero_dt_is_noop(self, default_params, shifted_load):
        integrator = StabilityIntegrator(initial_state=BodyState(angle=0.1, angular_velocity=0.3))
        before = integrator.state

        result = integrator.step(0.0, default_params, shifted_load)

        assert result.angle == before.angle
        assert result.angular_velocity == before.angular_velocity
        assert not result.capsized

    def test_large_dt_stays_finite(self, integrator, default_params, shifted_load):
        """A huge step is coarse but never produces NaN."""
        result = integrator.step(1000.0, default_params, shifted_load)

        assert math.isfinite(result.angle)
        assert math.isfinite(result.angular_velocity)
        assert result.capsized

    @pytest.mark.parametrize("dt", [-0.01, float("nan"), float("inf")])
    def test_invalid_dt_rejected(self, integrator, default_params, centered_load, dt):
        with pytest.raises(ValueError):
            integrator.step(dt, default_params, centered_load)


class TestDegenerateInertia:
    """Tests for zero or non-finite inertia."""

    def test_angular_acceleration_raises(self):
        with pytest.raises(DegenerateInertiaError):
            angular_acceleration(1.0, 0.0)

    def test_error_is_division_by_zero(self):
        assert issubclass(DegenerateInertiaError, ZeroDivisionError)

    def test_derive_geometry_raises(self, centered_load):
        params = SimulationParameters(hull_mass=0.0, load_mass=0.0)
        with pytest.raises(DegenerateInertiaError):
            derive_geometry(params, centered_load, 0.0)

    def test_step_skipped(self, centered_load):
        """Unvalidated zero masses: the step is skipped, state untouched."""
        params = SimulationParameters(hull_mass=0.0, load_mass=0.0)
        integrator = StabilityIntegrator(initial_state=BodyState(angle=0.1, angular_velocity=0.2))

        result = integrator.step(DT, params, centered_load)

        assert result.skipped
        assert integrator.state.angle == 0.1
        assert integrator.state.angular_velocity == 0.2
        assert not math.isnan(result.angle)

    def test_nan_mass_skipped(self, centered_load):
        params = SimulationParameters(hull_mass=float("nan"))
        integrator = StabilityIntegrator()

        result = integrator.step(DT, params, centered_load)

        assert result.skipped
        assert integrator.state == BodyState()

    def test_overflowing_inertia_skipped(self, centered_load):
        """A huge but finite width overflows the inertia to inf."""
        params = SimulationParameters(hull_width=1e200)
        params.validate()
        integrator = StabilityIntegrator(initial_state=BodyState(angle=0.1, angular_velocity=0.2))

        result = integrator.step(DT, params, centered_load)

        assert result.skipped
        assert integrator.state.angle == 0.1
        assert integrator.state.angular_velocity == 0.2
