"""
===============================================================================
QUATALG - Scalar Abstraction
===============================================================================

A quaternion is four components of one scalar type T. This module decides
which values may serve as components, how mixed types are unified, and which
elementary functions are available for each type.

Supported scalar types
----------------------
    bool, int, fractions.Fraction     exact ring / field types
    float                             Python double precision
    numpy scalar types                np.bool_, integers, float16...longdouble
    mpmath.mpf                        arbitrary precision
    symbolic                          any sympy expression (marker SYMBOLIC)

Promotion
---------
The common type of several scalar types is chosen by a rule table rather
than by trial arithmetic:

    1. anything symbolic          -> SYMBOLIC
    2. anything mpmath            -> mpmath.mpf
    3. any numpy scalar type      -> numpy promotion, with plain Python
                                     numbers treated as weakly typed
                                     (NEP 50), so float32 (op) 1.2 -> float32
    4. plain Python types only    -> bool < int < Fraction < float

Transcendental functions need a type that can hold irrational values;
``float_type`` maps exact types to a floating-capable one, and ``math_for``
returns the matching set of elementary functions.
===============================================================================
"""

import cmath
import math
import sys
from fractions import Fraction
from typing import Any

import mpmath
import numpy as np
import sympy

from .errors import UnsupportedScalarError


# Marker standing in for every symbolic sympy expression type
SYMBOLIC = sympy.Expr

# Plain Python scalar types in promotion order
_PYTHON_ORDER = (bool, int, Fraction, float)

# Weakly typed stand-ins handed to np.result_type for plain Python types
_WEAK_VALUES = {bool: False, int: 0, Fraction: 0.0, float: 0.0}

_NUMPY_REALS = (np.bool_, np.integer, np.floating)

# Values that need an exactness check before conversion to an integral type
_NON_INTEGRAL = (float, Fraction, np.floating, mpmath.mpf, sympy.Basic)


# =============================================================================
# CLASSIFICATION AND PROMOTION
# =============================================================================

def scalar_type(value: Any) -> type:
    """
    Return the scalar type T that ``value`` contributes to a quaternion.

    Raises
    ------
    UnsupportedScalarError
        If ``value`` is not a real scalar of a supported kind (complex
        numbers, arrays and strings are all rejected).
    """
    if isinstance(value, sympy.Basic):
        return SYMBOLIC
    if isinstance(value, mpmath.mpf):
        return mpmath.mpf
    # numpy first: np.float64 is also a subclass of float
    if isinstance(value, _NUMPY_REALS):
        return type(value)
    for t in _PYTHON_ORDER:
        if isinstance(value, t):
            return t
    raise UnsupportedScalarError(
        f"Unsupported quaternion component type {type(value).__name__!r}; "
        "components must be real scalars."
    )


def as_scalar_type(dtype: Any) -> type:
    """Normalize a user-supplied type designation (type, np.dtype or name)."""
    if isinstance(dtype, np.dtype):
        dtype = dtype.type
    if dtype is SYMBOLIC or dtype is mpmath.mpf or dtype in _PYTHON_ORDER:
        return dtype
    if isinstance(dtype, type) and issubclass(dtype, sympy.Basic):
        return SYMBOLIC
    try:
        t = np.dtype(dtype).type
    except TypeError as exc:
        raise UnsupportedScalarError(f"Unsupported scalar type {dtype!r}") from exc
    if not issubclass(t, _NUMPY_REALS):
        raise UnsupportedScalarError(f"Unsupported scalar type {dtype!r}")
    return t


def promote_type(*types: type) -> type:
    """Common scalar type of ``types`` according to the promotion table."""
    if not types:
        return float
    if SYMBOLIC in types:
        return SYMBOLIC
    if mpmath.mpf in types:
        return mpmath.mpf

    strong = [t for t in types if issubclass(t, np.generic)]
    if strong:
        weak = [_WEAK_VALUES[t] for t in types if t in _WEAK_VALUES]
        return np.result_type(*strong, *weak).type

    return max(types, key=_PYTHON_ORDER.index)


def convert(T: type, value: Any) -> Any:
    """Convert ``value`` to scalar type ``T``."""
    if type(value) is T:
        return value
    # bools are numbers here, never sympy/mpmath logic values
    if isinstance(value, (bool, np.bool_)) and T not in (bool, np.bool_):
        value = int(value)

    if T is SYMBOLIC:
        if isinstance(value, sympy.Basic):
            return value
        if isinstance(value, np.generic):
            value = value.item()
        return sympy.sympify(value)

    if T is mpmath.mpf:
        if isinstance(value, Fraction):
            return mpmath.mpf(value.numerator) / value.denominator
        if isinstance(value, np.generic):
            value = value.item()
        return mpmath.mpf(value)

    if _is_integral(T) and isinstance(value, _NON_INTEGRAL):
        try:
            exact = int(value) == value
        except (OverflowError, ValueError, TypeError):
            exact = False
        if not exact:
            raise UnsupportedScalarError(
                f"Converting {value!r} to {T.__name__} would lose information"
            )
    return T(value)


def _is_integral(T: type) -> bool:
    return T in (bool, int) or issubclass(T, (np.integer, np.bool_))


def float_type(T: type) -> type:
    """Floating-capable type used when transcendental results are needed."""
    if T is SYMBOLIC or T is mpmath.mpf or T is float:
        return T
    if issubclass(T, np.floating):
        return T
    if issubclass(T, np.generic):
        return np.float64
    return float


def numpy_dtype(T: type) -> np.dtype:
    """numpy storage dtype for arrays of scalar type ``T``."""
    if issubclass(T, np.generic) or T in (bool, int, float):
        return np.dtype(T)
    return np.dtype(object)


def is_exact(T: type) -> bool:
    """True for types whose arithmetic does not round."""
    if T is SYMBOLIC or T in (bool, int, Fraction):
        return True
    return issubclass(T, np.generic) and not issubclass(T, np.floating)


# =============================================================================
# BRANCH PREDICATES
# =============================================================================
# Symbolic values only take a branch when sympy can prove the condition.

def is_zero(x: Any, simplify: bool = False) -> bool:
    if isinstance(x, sympy.Basic):
        if simplify:
            x = sympy.simplify(x)
        return x.is_zero is True
    return bool(x == 0)


def is_negative(x: Any) -> bool:
    if isinstance(x, sympy.Basic):
        return x.is_negative is True
    return bool(x < 0)


def is_true(condition: Any) -> bool:
    if isinstance(condition, sympy.Basic):
        return condition is sympy.true
    return bool(condition)


# =============================================================================
# ELEMENTARY FUNCTIONS PER SCALAR TYPE
# =============================================================================

class ScalarMath:
    """
    Capability set of a floating-capable scalar type.

    Real functions: sqrt, exp, log, cos, sin, atan2 and the constants zero,
    one, pi, eps. Complex collaborator: complex(re, im), csqrt, real, imag,
    conj, used by the Euler-phase conversions.

    ``log(0)`` is negative infinity on every numeric backend.
    """

    def __init__(self, T: type) -> None:
        self.type = T

    @property
    def zero(self):
        return self.type(0)

    @property
    def one(self):
        return self.type(1)

    def real(self, z):
        return self.type(z.real)

    def imag(self, z):
        return self.type(z.imag)

    def conj(self, z):
        return z.conjugate()


class _PythonMath(ScalarMath):

    pi = math.pi
    eps = sys.float_info.epsilon

    sqrt = staticmethod(math.sqrt)
    cos = staticmethod(math.cos)
    sin = staticmethod(math.sin)
    atan2 = staticmethod(math.atan2)
    csqrt = staticmethod(cmath.sqrt)

    @staticmethod
    def exp(x):
        # saturate to inf on overflow, as numpy does
        try:
            return math.exp(x)
        except OverflowError:
            return math.inf

    @staticmethod
    def log(x):
        return -math.inf if x == 0 else math.log(x)

    @staticmethod
    def complex(re, im):
        return complex(re, im)


class _NumpyMath(ScalarMath):

    sqrt = staticmethod(np.sqrt)
    exp = staticmethod(np.exp)
    cos = staticmethod(np.cos)
    sin = staticmethod(np.sin)
    atan2 = staticmethod(np.arctan2)
    csqrt = staticmethod(np.sqrt)
    conj = staticmethod(np.conjugate)

    def __init__(self, T: type) -> None:
        super().__init__(T)
        self.complex_type = np.result_type(T, np.complex64).type
        self.pi = T(np.pi)
        self.eps = np.finfo(T).eps

    def log(self, x):
        with np.errstate(divide='ignore'):
            return np.log(x)

    def complex(self, re, im):
        return self.complex_type(re) + self.complex_type(1j) * im


class _MPMath(ScalarMath):

    sqrt = staticmethod(mpmath.sqrt)
    exp = staticmethod(mpmath.exp)
    log = staticmethod(mpmath.log)
    cos = staticmethod(mpmath.cos)
    sin = staticmethod(mpmath.sin)
    atan2 = staticmethod(mpmath.atan2)
    csqrt = staticmethod(mpmath.sqrt)
    complex = staticmethod(mpmath.mpc)
    conj = staticmethod(mpmath.conj)

    # Evaluated on access so that changes to mpmath.mp.prec are honoured
    @property
    def pi(self):
        return +mpmath.mp.pi

    @property
    def eps(self):
        return mpmath.mp.eps


class _SymbolicMath(ScalarMath):

    pi = sympy.pi
    eps = 0

    sqrt = staticmethod(sympy.sqrt)
    exp = staticmethod(sympy.exp)
    log = staticmethod(sympy.log)
    cos = staticmethod(sympy.cos)
    sin = staticmethod(sympy.sin)
    atan2 = staticmethod(sympy.atan2)
    csqrt = staticmethod(sympy.sqrt)
    real = staticmethod(sympy.re)
    imag = staticmethod(sympy.im)
    conj = staticmethod(sympy.conjugate)

    @property
    def zero(self):
        return sympy.Integer(0)

    @property
    def one(self):
        return sympy.Integer(1)

    @staticmethod
    def complex(re, im):
        return re + sympy.I * im


def math_for(T: type) -> ScalarMath:
    """Elementary functions for the floating-capable type of ``T``."""
    T = float_type(T)
    if T is SYMBOLIC:
        return _SymbolicMath(T)
    if T is mpmath.mpf:
        return _MPMath(T)
    if T is float:
        return _PythonMath(T)
    return _NumpyMath(T)


def complex_real_type(z: Any) -> type:
    """Scalar type of the real and imaginary parts of a complex value."""
    if isinstance(z, sympy.Basic):
        return SYMBOLIC
    if isinstance(z, mpmath.mpc):
        return mpmath.mpf
    if isinstance(z, np.complexfloating):
        return type(z.real)
    if isinstance(z, complex):
        return float
    return scalar_type(z)


def default_rtol(T: type):
    """Relative tolerance used by approximate comparisons of type ``T``."""
    if is_exact(T):
        return 0
    m = math_for(T)
    return m.sqrt(m.eps)
