"""
Main delta robot controller
Coordinates kinematics, calibration, planning and the command transport
"""

import time
import threading
import logging
from typing import List, Optional

from ..config import DeltaConfig
from ..hardware import CommandTransport, create_transport
from ..motion import (ForwardKinematics, InverseKinematics, CalibrationTable,
                      Corrector, JointLimits, MotionPlanner, RobotState,
                      MotorCommand, JointAngles, Pose)

logger = logging.getLogger(__name__)


class DeltaController:
    """Main controller for the delta robot"""

    def __init__(self, config: DeltaConfig,
                 transport: Optional[CommandTransport] = None):
        """
        Initialize controller

        Builds the calibration table once; an unreachable or malformed
        calibration sample raises ConfigurationError here.
        """
        self.config = config
        geometry = config.geometry

        # Kinematics
        self.forward_kinematics = ForwardKinematics(geometry)
        self.inverse_kinematics = InverseKinematics(geometry)

        # Calibration
        table = None
        if config.calibration.samples:
            table = CalibrationTable.build(
                config.calibration.samples, self.inverse_kinematics.inverse
            )
        self.corrector = Corrector(table, config.calibration.policy)

        # Planning
        self.joint_limits = JointLimits(geometry)
        self.planner = MotionPlanner(
            geometry, self.inverse_kinematics, self.corrector, self.joint_limits
        )

        # Hardware
        self.transport = transport or create_transport(config.transport)

        # State
        self.state = RobotState.retracted(geometry)
        self._state_lock = threading.Lock()

    # ==================== State Management ====================

    def get_current_angles(self) -> JointAngles:
        """Get last commanded arm angles"""
        with self._state_lock:
            return self.state.current_angles

    def current_pose(self) -> Pose:
        """Effector position for the last commanded angles"""
        return self.forward_kinematics.forward(*self.get_current_angles())

    def reset(self):
        """Assume the arms are fully retracted without moving them"""
        with self._state_lock:
            self.state = RobotState.retracted(self.config.geometry)
        logger.info("State reset to retracted position")

    # ==================== Movement ====================

    def move_to(self, x: float, y: float, z: float) -> List[MotorCommand]:
        """
        Move effector to (x, y, z)

        The state only advances once the transport took the batch.

        Raises:
            Unreachable: target outside the workspace
            CalibrationOutOfRange: reject policy and uncalibrated height
            TransportError: batch could not be delivered
        """
        target = Pose(x, y, z)

        with self._state_lock:
            plan = self.planner.plan(target, self.state)
            self.transport.send(plan.commands)
            self.state.commit(plan.angles)

        logger.info(
            f"📍 Moved to ({x:.2f}, {y:.2f}, {z:.2f}) -> "
            + ", ".join(f"{a:.2f}°" for a in plan.angles)
        )
        return list(plan.commands)

    def home(self) -> List[MotorCommand]:
        """
        Drive every arm into its retract limit switch

        Sends full-travel pulses, waits for the motors to stall and
        then trusts the state again.
        """
        logger.info("🏠 Homing")
        commands = self.planner.home_commands()

        with self._state_lock:
            self.transport.send(commands)
            time.sleep(self.config.path.home_settle_time)
            self.state = RobotState.retracted(self.config.geometry)

        logger.info(f"✅ Homing complete, angles {self.state.current_angles}")
        return commands

    # ==================== Calibration ====================

    def calibration_report(self) -> List[dict]:
        """Calibration rows (z, measured, computed, error)"""
        return self.corrector.report()

    # ==================== Shutdown ====================

    def close(self):
        """Release the transport"""
        self.transport.close()
