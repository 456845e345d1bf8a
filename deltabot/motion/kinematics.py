"""
Kinematics calculations for the delta robot
Forward (angles -> effector) and inverse (effector -> angles)
for three rotary arms spaced 120° apart
"""

import math
import logging
import numpy as np
from typing import NamedTuple, Tuple

from ..config import ARM_ANGLES, GeometryConfig
from ..exceptions import Unreachable

logger = logging.getLogger(__name__)


class Pose(NamedTuple):
    """Effector position (mm); z grows away from the base plate"""
    x: float
    y: float
    z: float


class JointAngles(NamedTuple):
    """Arm angles in degrees, positive lifts the arm towards the base"""
    theta1: float
    theta2: float
    theta3: float


def unwrap(angle: float) -> float:
    """
    Map an angle into (-180, 180]

    The angle is first reduced into [0, 360); anything above 180
    then becomes negative. 180 itself is kept.
    """
    angle = angle % 360.0
    if angle > 180.0:
        angle -= 360.0
    return angle


def _arm_direction(phi_deg: float) -> np.ndarray:
    """Unit vector from the base centre towards the hinge of one arm"""
    phi = math.radians(phi_deg)
    return np.array([math.sin(phi), -math.cos(phi), 0.0])


class ForwardKinematics:
    """Joint angles -> effector position"""

    def __init__(self, geometry: GeometryConfig):
        self.geometry = geometry

    def elbow_centres(self, angles: Tuple[float, float, float]) -> np.ndarray:
        """
        Elbow positions pulled in by the effector joint offset

        With the offset removed the effector centre is exactly one
        lower-arm length away from each of the three returned points.
        """
        g = self.geometry
        inset = g.base_joint_offset - g.effector_joint_offset

        centres = []
        for theta_deg, phi_deg in zip(angles, ARM_ANGLES):
            theta = math.radians(theta_deg)
            reach = inset + g.upper_arm_length * math.cos(theta)
            centre = reach * _arm_direction(phi_deg)
            centre[2] = -g.upper_arm_length * math.sin(theta)
            centres.append(centre)

        return np.array(centres)

    def forward(self, theta1: float, theta2: float, theta3: float) -> Pose:
        """
        Calculate effector position from joint angles

        Args:
            theta1, theta2, theta3: Arm angles in degrees

        Returns:
            Pose in the same frame inverse() accepts

        Raises:
            Unreachable: the three lower-arm spheres do not meet
        """
        (x1, y1, z1), (x2, y2, z2), (x3, y3, z3) = self.elbow_centres(
            (theta1, theta2, theta3))
        re = self.geometry.lower_arm_length

        w1 = x1 * x1 + y1 * y1 + z1 * z1
        w2 = x2 * x2 + y2 * y2 + z2 * z2
        w3 = x3 * x3 + y3 * y3 + z3 * z3

        # x and y as linear functions of z: x = (a1*z + b1) / dnm
        dnm = (x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1)
        if not abs(dnm) > 0:
            raise Unreachable("Degenerate elbow layout",
                              pose=(theta1, theta2, theta3))

        a1 = (z3 - z1) * (y2 - y1) - (z2 - z1) * (y3 - y1)
        b1 = ((w2 - w1) * (y3 - y1) - (w3 - w1) * (y2 - y1)) / 2.0
        a2 = (x3 - x1) * (z2 - z1) - (x2 - x1) * (z3 - z1)
        b2 = ((x2 - x1) * (w3 - w1) - (x3 - x1) * (w2 - w1)) / 2.0

        # Substitute into the sphere around elbow 1
        p = b1 - x1 * dnm
        q = b2 - y1 * dnm
        a = a1 * a1 + a2 * a2 + dnm * dnm
        b = 2.0 * (a1 * p + a2 * q - z1 * dnm * dnm)
        c = p * p + q * q + dnm * dnm * (z1 * z1 - re * re)

        d = b * b - 4.0 * a * c
        if not d >= 0:
            raise Unreachable("No effector position for joint angles",
                              pose=(theta1, theta2, theta3))

        # Effector hangs below the base: always the larger root
        z0 = (-b + math.sqrt(d)) / (2.0 * a)
        x0 = (a1 * z0 + b1) / dnm
        y0 = (a2 * z0 + b2) / dnm

        return Pose(float(x0), float(y0), float(z0 - self.geometry.z_offset))


class InverseKinematics:
    """Effector position -> joint angles, closed form per arm"""

    def __init__(self, geometry: GeometryConfig):
        self.geometry = geometry

    def _arm_angle(self, x: float, y: float, z: float) -> float:
        """
        Solve one arm in its own frame (hinge on the -y axis)

        Intersects the upper-arm circle in the Y-Z plane with the
        lower-arm sphere around the effector joint.
        """
        g = self.geometry
        rf = g.upper_arm_length
        re = g.lower_arm_length

        if z == 0:
            raise Unreachable("Effector in the base plane")

        y1 = -g.base_joint_offset
        y0 = y - g.effector_joint_offset

        # Elbow lies on z = a + b*y
        a = (x * x + y0 * y0 + z * z + rf * rf - re * re - y1 * y1) / (2.0 * z)
        b = (y1 - y0) / z

        d = -(a + b * y1) ** 2 + rf * rf * (b * b + 1.0)
        if not d >= 0:
            raise Unreachable()

        # Outward elbow
        yj = (y1 - a * b - math.sqrt(d)) / (b * b + 1.0)
        zj = a + b * yj

        return math.degrees(math.atan2(-zj, y1 - yj))

    def inverse(self, x: float, y: float, z: float) -> JointAngles:
        """
        Calculate joint angles for target position

        Args:
            x, y, z: Target position in mm

        Returns:
            JointAngles in degrees

        Raises:
            Unreachable: any arm has no solution
        """
        if not all(math.isfinite(v) for v in (x, y, z)):
            raise Unreachable("Target is not a finite position", pose=(x, y, z))

        z_solve = z + self.geometry.z_offset
        thetas = []

        for arm, phi_deg in enumerate(ARM_ANGLES):
            phi = math.radians(phi_deg)
            x_rot = x * math.cos(phi) + y * math.sin(phi)
            y_rot = y * math.cos(phi) - x * math.sin(phi)
            try:
                thetas.append(self._arm_angle(x_rot, y_rot, z_solve))
            except Unreachable as e:
                logger.debug(f"Arm {arm} cannot reach ({x:.3f}, {y:.3f}, {z:.3f})")
                raise Unreachable(str(e), pose=(x, y, z), arm=arm) from None

        return JointAngles(*thetas)

    def is_reachable(self, x: float, y: float, z: float) -> bool:
        """Check if position is within robot workspace"""
        try:
            self.inverse(x, y, z)
        except Unreachable:
            return False
        return True


class NewtonRaphsonSolver:
    """
    Iterative inverse kinematics

    Slower than the closed form, used to cross-check it. Each arm
    solves f(alpha) = |J(alpha) - E|^2 - re^2 = 0 where J is the
    elbow and E the effector joint of that arm.
    """

    TOLERANCE = 1e-6
    MAX_ITERATIONS = 1000
    INITIAL_GUESS = 0.5     # radians

    def __init__(self, geometry: GeometryConfig):
        self.geometry = geometry

    def _solve_arm(self, phi_deg: float, effector: np.ndarray) -> float:
        g = self.geometry
        rf = g.upper_arm_length
        re_sq = g.lower_arm_length ** 2

        u = _arm_direction(phi_deg)
        hinge = g.base_joint_offset * u
        joint = effector + g.effector_joint_offset * u

        alpha = self.INITIAL_GUESS
        for _ in range(self.MAX_ITERATIONS):
            elbow = hinge + rf * math.cos(alpha) * u
            elbow[2] = -rf * math.sin(alpha)
            diff = elbow - joint

            f = float(np.dot(diff, diff)) - re_sq
            if abs(f) < self.TOLERANCE:
                return alpha

            d_elbow = -rf * math.sin(alpha) * u
            d_elbow[2] = -rf * math.cos(alpha)
            f_prime = 2.0 * float(np.dot(diff, d_elbow))
            if f_prime == 0:
                raise Unreachable("Newton-Raphson derivative vanished")

            alpha -= f / f_prime
            if not math.isfinite(alpha):
                raise Unreachable("Newton-Raphson diverged")

        raise Unreachable("Newton-Raphson did not converge")

    def inverse(self, x: float, y: float, z: float) -> JointAngles:
        """Calculate joint angles for target position, all arms or nothing"""
        effector = np.array([x, y, z + self.geometry.z_offset], dtype=float)
        thetas = []

        for arm, phi_deg in enumerate(ARM_ANGLES):
            try:
                alpha = self._solve_arm(phi_deg, effector)
            except Unreachable as e:
                raise Unreachable(str(e), pose=(x, y, z), arm=arm) from None
            thetas.append(unwrap(math.degrees(alpha)))

        return JointAngles(*thetas)
