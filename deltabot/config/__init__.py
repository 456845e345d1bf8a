"""Configuration module for deltabot"""

from .defaults import *
from .settings import (GeometryConfig, CalibrationConfig, PathConfig,
                       TransportConfig, DeltaConfig, OutOfRangePolicy)

__all__ = [
    'GEOMETRY_DEFAULTS', 'ARM_ANGLES', 'CALIBRATION_SAMPLES',
    'DEFAULT_WAYPOINTS', 'TRANSPORT_DEFAULTS', 'MOTION_PROFILE_DEFAULTS',
    'GeometryConfig', 'CalibrationConfig', 'PathConfig', 'TransportConfig',
    'DeltaConfig', 'OutOfRangePolicy'
]
