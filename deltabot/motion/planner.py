"""
Move planning
Turns a target pose into one stepper command per arm and
tracks the last commanded arm angles
"""

import math
import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from ..config import GeometryConfig
from .kinematics import InverseKinematics, JointAngles, Pose
from .calibration import Corrector
from .limits import JointLimits

logger = logging.getLogger(__name__)

# Direction bits sent to the motor driver
DIRECTION_UP = 0      # Angle increases, arm retracts towards max_angle_deg
DIRECTION_DOWN = 1    # Angle decreases (also used for zero-length moves)


@dataclass(frozen=True)
class MotorCommand:
    """Pulse count and direction for one motor"""
    motor_index: int
    pulse_count: int
    direction: int

    def __post_init__(self):
        if self.motor_index not in (0, 1, 2):
            raise ValueError(f"motor_index must be 0, 1 or 2, got {self.motor_index}")
        if self.pulse_count < 0:
            raise ValueError(f"pulse_count must be >= 0, got {self.pulse_count}")
        if self.direction not in (DIRECTION_UP, DIRECTION_DOWN):
            raise ValueError(f"direction must be 0 or 1, got {self.direction}")


@dataclass
class RobotState:
    """
    Last commanded arm angles

    Nothing reads the motors back, so this is what was sent, not a
    confirmed position. Homing is the only way to resynchronise.
    Drive one state from one caller at a time.
    """
    current_angles: JointAngles

    @classmethod
    def retracted(cls, geometry: GeometryConfig) -> "RobotState":
        """State after homing: every arm at max_angle_deg"""
        return cls(JointAngles(*([geometry.max_angle_deg] * 3)))

    def commit(self, angles: JointAngles):
        """Accept a new commanded position"""
        self.current_angles = JointAngles(*angles)


@dataclass(frozen=True)
class MovePlan:
    """Commands for one move and the angles they lead to"""
    target: Pose
    angles: JointAngles
    commands: Tuple[MotorCommand, ...] = field(default_factory=tuple)


class MotionPlanner:
    """Plan moves: inverse kinematics, correction, clamping, pulses"""

    def __init__(self, geometry: GeometryConfig,
                 solver: InverseKinematics,
                 corrector: Corrector = None,
                 limits: JointLimits = None):
        self.geometry = geometry
        self.solver = solver
        self.corrector = corrector or Corrector()
        self.limits = limits or JointLimits(geometry)

    def degrees_to_pulses(self, delta_deg: float) -> int:
        """Pulse count for an angular move, rounded half up"""
        exact = abs(delta_deg) * self.geometry.pulses_per_degree
        return int(math.floor(exact + 0.5))

    @staticmethod
    def direction_for(delta_deg: float) -> int:
        return DIRECTION_UP if delta_deg > 0 else DIRECTION_DOWN

    def target_angles(self, target: Pose) -> JointAngles:
        """
        Calibrated and clamped angles for a pose

        Raises:
            Unreachable: pose outside the workspace
            CalibrationOutOfRange: only with the reject policy
        """
        raw = self.solver.inverse(*target)
        corrected = self.corrector.correct_angles(raw, target.z)
        return self.limits.clamp_angles(corrected)

    def plan(self, target: Pose, state: RobotState) -> MovePlan:
        """Plan a move without touching the state"""
        target = Pose(*target)
        angles = self.target_angles(target)

        commands = []
        for motor, (goal, current) in enumerate(zip(angles, state.current_angles)):
            delta = goal - current
            commands.append(MotorCommand(
                motor_index=motor,
                pulse_count=self.degrees_to_pulses(delta),
                direction=self.direction_for(delta)
            ))
            logger.debug(
                f"Motor {motor}: {current:.3f}° -> {goal:.3f}° "
                f"({delta:+.3f}°, {commands[-1].pulse_count} pulses)"
            )

        return MovePlan(target=target, angles=angles, commands=tuple(commands))

    def plan_move(self, target: Pose, state: RobotState) -> List[MotorCommand]:
        """
        Plan a move and advance the state to the clamped angles

        Args:
            target: Effector position
            state: Held arm angles, updated only on success

        Returns:
            One MotorCommand per arm
        """
        plan = self.plan(target, state)
        state.commit(plan.angles)
        return list(plan.commands)

    def home_commands(self) -> List[MotorCommand]:
        """Full-travel retract for every motor, limit switches stop it"""
        pulses = self.degrees_to_pulses(self.limits.travel)
        return [MotorCommand(motor, pulses, DIRECTION_UP) for motor in range(3)]
