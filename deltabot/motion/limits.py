"""
Joint limits validation and clamping
Keeps every commanded arm angle inside the mechanical travel
"""

import math
import logging
from typing import Tuple

from ..config import GeometryConfig
from .kinematics import JointAngles

logger = logging.getLogger(__name__)


class JointLimits:
    """Clamp arm angles to [min_angle_deg, max_angle_deg]"""

    def __init__(self, geometry: GeometryConfig):
        self.min_angle = geometry.min_angle_deg
        self.max_angle = geometry.max_angle_deg

    def get_limits(self) -> Tuple[float, float]:
        """Get (min, max) in degrees, shared by all arms"""
        return self.min_angle, self.max_angle

    @property
    def travel(self) -> float:
        """Full travel in degrees"""
        return self.max_angle - self.min_angle

    def clamp(self, angle: float) -> float:
        """
        Clamp a single angle

        Raises:
            ValueError: angle is NaN or infinite
        """
        if not math.isfinite(angle):
            raise ValueError(f"Cannot clamp non-finite angle {angle!r}")
        return max(self.min_angle, min(self.max_angle, angle))

    def clamp_angles(self, angles: JointAngles) -> JointAngles:
        """
        Clamp each arm independently

        Args:
            angles: Corrected target angles

        Returns:
            JointAngles inside the limits
        """
        clamped = []

        for arm, value in enumerate(angles):
            limited = self.clamp(value)
            if limited != value:
                logger.warning(
                    f"⚠️ arm {arm}={value:.3f}° clamped to {limited:.3f}° "
                    f"(limits: {self.min_angle:.3f} to {self.max_angle:.3f})"
                )
            clamped.append(limited)

        return JointAngles(*clamped)

    def is_within(self, angles: JointAngles) -> bool:
        """Check if all angles are within limits"""
        return all(self.min_angle <= a <= self.max_angle for a in angles)
