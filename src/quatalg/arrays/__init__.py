"""
===============================================================================
QUATALG - Arrays Module
===============================================================================
Vectorized quaternion storage and zero-copy reinterpretation.

Submodules:
    quaternion_array -- QuaternionArray wrapper over a (4, ...) numpy array
    views            -- as_float_array / as_quat_array storage views
===============================================================================
"""

from .quaternion_array import QuaternionArray
from .views import as_float_array, as_quat_array

__all__ = ['QuaternionArray', 'as_float_array', 'as_quat_array']
