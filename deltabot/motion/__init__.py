"""Motion core: kinematics, calibration, limits and move planning"""

from .kinematics import (Pose, JointAngles, ForwardKinematics,
                         InverseKinematics, NewtonRaphsonSolver, unwrap)
from .calibration import (CalibrationSample, CalibrationPoint,
                          CalibrationTable, Corrector)
from .limits import JointLimits
from .planner import (MotorCommand, RobotState, MovePlan, MotionPlanner,
                      DIRECTION_UP, DIRECTION_DOWN)

__all__ = [
    'Pose',
    'JointAngles',
    'ForwardKinematics',
    'InverseKinematics',
    'NewtonRaphsonSolver',
    'unwrap',
    'CalibrationSample',
    'CalibrationPoint',
    'CalibrationTable',
    'Corrector',
    'JointLimits',
    'MotorCommand',
    'RobotState',
    'MovePlan',
    'MotionPlanner',
    'DIRECTION_UP',
    'DIRECTION_DOWN'
]
