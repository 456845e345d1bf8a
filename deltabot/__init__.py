"""
deltabot - Delta Robot Kinematics and Motor Control
===================================================

Inverse/forward kinematics, calibration and stepper pulse planning
for a three-arm rotary delta robot.
"""

__version__ = "1.0.0"
__author__ = "deltabot Team"

# Version check
import sys
if sys.version_info < (3, 8):
    raise RuntimeError("deltabot requires Python 3.8 or later")

# Convenience imports
from .config import DeltaConfig, GeometryConfig
from .control.controller import DeltaController
from .exceptions import (DeltaError, Unreachable, CalibrationOutOfRange,
                         ConfigurationError, TransportError)

__all__ = [
    'DeltaConfig', 'GeometryConfig', 'DeltaController', 'DeltaError',
    'Unreachable', 'CalibrationOutOfRange', 'ConfigurationError',
    'TransportError'
]
