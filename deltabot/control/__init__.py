"""Control module for high-level robot control"""

from .controller import DeltaController
from .path import PathDriver

__all__ = [
    'DeltaController',
    'PathDriver'
]
