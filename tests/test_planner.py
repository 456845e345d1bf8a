"""Tests for joint limits and move planning"""

import numpy as np
import pytest

from deltabot.config import CALIBRATION_SAMPLES, OutOfRangePolicy
from deltabot.exceptions import CalibrationOutOfRange, Unreachable
from deltabot.motion import (CalibrationTable, Corrector, DIRECTION_DOWN,
                             DIRECTION_UP, JointAngles, JointLimits,
                             MotionPlanner, MotorCommand, Pose, RobotState)


class TestJointLimits:

    def test_limits(self, geometry):
        limits = JointLimits(geometry)
        assert limits.get_limits() == (-85.0, 28.0)
        assert limits.travel == 113.0

    def test_clamp_is_idempotent(self, geometry):
        limits = JointLimits(geometry)
        for angle in np.linspace(-400.0, 400.0, 161):
            once = limits.clamp(angle)
            assert -85.0 <= once <= 28.0
            assert limits.clamp(once) == once

    def test_clamp_rejects_nan(self, geometry):
        with pytest.raises(ValueError):
            JointLimits(geometry).clamp(float("nan"))

    def test_clamp_angles(self, geometry):
        limits = JointLimits(geometry)
        clamped = limits.clamp_angles(JointAngles(-87.4, 0.0, 40.0))
        assert clamped == (-85.0, 0.0, 28.0)
        assert limits.is_within(clamped)
        assert not limits.is_within(JointAngles(-87.4, 0.0, 0.0))


class TestMotorCommand:

    @pytest.mark.parametrize("kwargs", [
        dict(motor_index=3, pulse_count=10, direction=0),
        dict(motor_index=0, pulse_count=-1, direction=0),
        dict(motor_index=0, pulse_count=10, direction=2),
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            MotorCommand(**kwargs)


class TestMotionPlanner:

    def test_pulses_per_degree(self, planner, geometry):
        assert geometry.pulses_per_degree == pytest.approx(40.0)
        assert planner.degrees_to_pulses(113.0) == 4520
        assert planner.degrees_to_pulses(-113.0) == 4520
        assert planner.degrees_to_pulses(0.0) == 0

    def test_pulses_round_half_up(self, planner):
        # 40 pulses per degree: 0.0124 deg -> 0.496, 0.0126 deg -> 0.504
        assert planner.degrees_to_pulses(0.0124) == 0
        assert planner.degrees_to_pulses(0.0126) == 1

    def test_direction(self):
        assert MotionPlanner.direction_for(5.0) == DIRECTION_UP
        assert MotionPlanner.direction_for(-5.0) == DIRECTION_DOWN
        assert MotionPlanner.direction_for(0.0) == DIRECTION_DOWN

    def test_clamped_move_from_home(self, planner, retracted):
        # Raw solution is about -87.41 deg, clamped to -85
        commands = planner.plan_move(Pose(0, 0, 118), retracted)

        assert len(commands) == 3
        for motor, cmd in enumerate(commands):
            assert cmd.motor_index == motor
            assert cmd.pulse_count == 4520
            assert cmd.direction == DIRECTION_DOWN
        assert retracted.current_angles == (-85.0, -85.0, -85.0)

    def test_move_down_then_up(self, planner, retracted):
        down = planner.plan_move((0, 0, 43), retracted)
        assert all(c.direction == DIRECTION_DOWN for c in down)
        assert all(c.pulse_count == 1111 for c in down)

        # 29.04 deg is above the retract limit, so back to 28
        up = planner.plan_move((0, 0, 25), retracted)
        assert all(c.direction == DIRECTION_UP for c in up)
        assert all(c.pulse_count == 1111 for c in up)
        assert retracted.current_angles == (28.0, 28.0, 28.0)

    def test_repeated_target_is_zero_move(self, planner, retracted):
        planner.plan_move((10, -15, 70), retracted)
        commands = planner.plan_move((10, -15, 70), retracted)
        assert [c.pulse_count for c in commands] == [0, 0, 0]
        assert [c.direction for c in commands] == [DIRECTION_DOWN] * 3

    def test_plan_does_not_touch_state(self, planner, retracted):
        plan = planner.plan((20, 20, 60), retracted)
        assert retracted.current_angles == (28.0, 28.0, 28.0)
        assert plan.target == Pose(20, 20, 60)
        assert plan.angles == pytest.approx((-40.0762, 2.3602, -29.9606), abs=1e-3)
        assert len(plan.commands) == 3

    def test_unreachable_keeps_state(self, planner, retracted):
        planner.plan_move((0, 0, 60), retracted)
        before = retracted.current_angles

        with pytest.raises(Unreachable):
            planner.plan_move((0, 0, 127), retracted)
        assert retracted.current_angles == before

    def test_non_finite_target_keeps_state(self, planner, retracted):
        with pytest.raises(Unreachable):
            planner.plan_move(Pose(float("nan"), 0, 60), retracted)
        assert retracted.current_angles == (28.0, 28.0, 28.0)

    def test_rejected_calibration_keeps_state(self, geometry, ik, retracted):
        table = CalibrationTable.build(CALIBRATION_SAMPLES, ik.inverse)
        planner = MotionPlanner(geometry, ik,
                                Corrector(table, OutOfRangePolicy.REJECT))

        with pytest.raises(CalibrationOutOfRange):
            planner.plan_move((0, 0, 118), retracted)
        assert retracted.current_angles == (28.0, 28.0, 28.0)

    def test_calibrated_move(self, geometry, ik, retracted):
        table = CalibrationTable.build(CALIBRATION_SAMPLES, ik.inverse)
        planner = MotionPlanner(geometry, ik, Corrector(table))

        planner.plan_move((0, 0, 60), retracted)
        assert retracted.current_angles == pytest.approx((-16.5, -16.5, -16.5))

    def test_home_commands(self, planner):
        commands = planner.home_commands()
        assert [c.motor_index for c in commands] == [0, 1, 2]
        assert all(c.pulse_count == 4520 for c in commands)
        assert all(c.direction == DIRECTION_UP for c in commands)


class TestRobotState:

    def test_retracted(self, geometry):
        state = RobotState.retracted(geometry)
        assert state.current_angles == JointAngles(28.0, 28.0, 28.0)

    def test_commit(self, geometry):
        state = RobotState.retracted(geometry)
        state.commit((1.0, 2.0, 3.0))
        assert isinstance(state.current_angles, JointAngles)
        assert state.current_angles == (1.0, 2.0, 3.0)
