"""
===============================================================================
QUATALG - Functions Module
===============================================================================
Functions of quaternions built on the value type.

Submodules:
    transcendental -- exp, log, sqrt, angle with the z-axis branch convention
    euler          -- z-y-z Euler angle and Euler phase conversions
===============================================================================
"""

from .euler import (from_euler_angles, from_euler_phases, to_euler_angles,
                    to_euler_phases)
from .transcendental import angle, exp, log, sqrt

__all__ = [
    'angle', 'exp', 'log', 'sqrt',
    'from_euler_angles', 'to_euler_angles',
    'from_euler_phases', 'to_euler_phases',
]
