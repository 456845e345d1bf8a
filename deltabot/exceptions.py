"""
Exception types for deltabot
Every error raised by the package derives from DeltaError
"""

from typing import Optional, Tuple


class DeltaError(Exception):
    """Base class for all deltabot errors"""


class Unreachable(DeltaError):
    """Requested pose (or joint triple) has no real geometric solution"""

    def __init__(self, message: str = "Target position unreachable",
                 pose: Optional[Tuple[float, float, float]] = None,
                 arm: Optional[int] = None):
        if arm is not None:
            message = f"{message} (arm {arm})"
        super().__init__(message)
        self.pose = pose
        self.arm = arm


class CalibrationOutOfRange(DeltaError):
    """Query height lies outside the measured calibration envelope"""

    def __init__(self, z: float, z_min: float, z_max: float):
        super().__init__(
            f"z={z:.3f} outside calibration range [{z_min:.3f}, {z_max:.3f}]"
        )
        self.z = z
        self.z_min = z_min
        self.z_max = z_max


class ConfigurationError(DeltaError):
    """Missing or invalid configuration, detected at startup"""


class TransportError(DeltaError):
    """A command frame could not be delivered to the controller"""
