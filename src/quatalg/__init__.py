"""
===============================================================================
QUATALG - Generic Quaternion Algebra
===============================================================================
Quaternions over any real scalar type (Python and numpy numbers, Fractions,
mpmath multiprecision floats, sympy expressions), with transcendental
functions, Euler angle / Euler phase conversions, zero-copy numpy views and
spherically symmetric random generation.

Subpackages:
    core      -- scalar abstraction, Quaternion value type, errors
    functions -- exp, log, sqrt, angle and Euler conversions
    arrays    -- QuaternionArray and as_float_array / as_quat_array views
    sampling  -- randn and randn_rotor

Quick start:
    >>> from quatalg import Quaternion
    >>> q = Quaternion(1, 2, 3, 4)
    >>> q * q.conjugate() == q.abs2()
    True
===============================================================================
"""

import logging

from .arrays import QuaternionArray, as_float_array, as_quat_array
from .config import (QuatalgConfig, get_config, load_config, set_config,
                     setup_logging)
from .core.errors import (ConfigError, QuaternionError, ResamplingError,
                          ShapeError, UnsupportedScalarError, ZeroNormError)
from .core.quaternion import (Quaternion, QuaternionF16, QuaternionF32,
                              QuaternionF64, abs2, abs2vec, absvec, conj,
                              imx, imy, imz, isapprox)
from .core.scalars import SYMBOLIC, promote_type
from .functions import (angle, exp, from_euler_angles, from_euler_phases, log,
                        sqrt, to_euler_angles, to_euler_phases)
from .sampling import randn, randn_rotor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'

__all__ = [
    'Quaternion', 'QuaternionF16', 'QuaternionF32', 'QuaternionF64',
    'imx', 'imy', 'imz',
    'conj', 'abs2', 'abs2vec', 'absvec', 'isapprox',
    'angle', 'exp', 'log', 'sqrt',
    'from_euler_angles', 'to_euler_angles',
    'from_euler_phases', 'to_euler_phases',
    'QuaternionArray', 'as_float_array', 'as_quat_array',
    'randn', 'randn_rotor',
    'QuatalgConfig', 'load_config', 'get_config', 'set_config',
    'setup_logging',
    'QuaternionError', 'ZeroNormError', 'ShapeError',
    'UnsupportedScalarError', 'ResamplingError', 'ConfigError',
    'SYMBOLIC', 'promote_type',
]
