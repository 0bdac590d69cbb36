"""
===============================================================================
QUATALG - Transcendental Functions
===============================================================================

exp, log, sqrt and angle of a quaternion q = w + v, with v the vector part
and r = |v|.

    exp(q)   = e^w (cos r + (v/r) sin r)                 (e^w when r = 0)
    log(q)   = log|q| + (v/r) atan2(r, w)
    sqrt(q)  = (q + |q|) / sqrt(2|q| + 2w)
    angle(q) = 2 atan2(r, w)                              always >= 0

Branch convention
-----------------
On the negative real axis the direction of the vector part is undetermined.
Both log and sqrt then place it on the z axis:

    log(-a)  = (log a, 0, 0, pi)
    sqrt(-a) = (0, 0, 0, sqrt(a))          for a > 0

These are well-defined values, not errors.

Result types
------------
Computation happens in ``float_type(T)``: integer, bool and Fraction
quaternions are promoted to float, numpy integer ones to float64, while
floating, mpmath and symbolic quaternions keep their type.

Every function also accepts a QuaternionArray and is then applied to each
element.
===============================================================================
"""

import functools
from typing import Any

import numpy as np

from ..arrays.quaternion_array import QuaternionArray
from ..core.quaternion import Quaternion
from ..core.scalars import (SYMBOLIC, float_type, is_negative, is_zero,
                            math_for)


def _as_floating(q: Any) -> Quaternion:
    """Quaternion (from a quaternion or bare scalar) in its floating type."""
    if not isinstance(q, Quaternion):
        q = Quaternion(q)
    return q.astype(float_type(q.dtype))


def _elementwise(func):
    """Let a single-quaternion function also map over a QuaternionArray."""
    @functools.wraps(func)
    def wrapper(q):
        if isinstance(q, QuaternionArray):
            return q.apply(func)
        return func(q)
    return wrapper


# =============================================================================
# ANGLE
# =============================================================================

def angle(q: Any) -> Any:
    """
    Rotation angle represented by q, 2 atan2(|v|, w).

    Writing q = |q| (cos(theta/2) + n sin(theta/2)) for a unit axis n, this
    returns theta. The sign of n is arbitrary, so the positive angle is
    always reported.

    Parameters
    ----------
    q : Quaternion, QuaternionArray or real scalar

    Returns
    -------
    scalar or np.ndarray
        Angle in [0, 2 pi]; an array of angles for a QuaternionArray.

    Examples
    --------
    >>> round(angle(exp(-1.2 * imz / 2)), 12)
    1.2
    """
    if isinstance(q, QuaternionArray):
        if q.dtype != object:
            data = q.ndarray
            if data.dtype.kind != 'f':
                data = data.astype(np.float64)
            vec = data[1:]
            return 2 * np.arctan2(np.sqrt(np.sum(vec * vec, axis=0)), data[0])
        out = np.empty(q.shape, dtype=object)
        for index in np.ndindex(*q.shape):
            out[index] = angle(q[index])
        return out

    q = _as_floating(q)
    m = math_for(q.dtype)
    return 2 * m.atan2(q.absvec(), q.w)


# =============================================================================
# EXPONENTIAL AND LOGARITHM
# =============================================================================

@_elementwise
def exp(q: Any) -> Quaternion:
    """
    Quaternion exponential, e^w (cos r + (v/r) sin r).

    A quaternion with zero vector part maps to the real exponential of its
    scalar part; there is no branch ambiguity.
    """
    q = _as_floating(q)
    T = q.dtype
    m = math_for(T)

    ew = m.exp(q.w)
    r = q.absvec()
    if is_zero(r):
        return Quaternion(ew, m.zero, m.zero, m.zero, dtype=T)

    s = ew * m.sin(r) / r
    return Quaternion(ew * m.cos(r), s * q.x, s * q.y, s * q.z, dtype=T)


@_elementwise
def log(q: Any) -> Quaternion:
    """
    Principal quaternion logarithm.

    Returns
    -------
    Quaternion
        ``(log|q|, (v/|v|) atan2(|v|, w))`` in general. For zero vector part:
        ``(log w, 0, 0, 0)`` when w >= 0 and ``(log(-w), 0, 0, pi)`` when
        w < 0. The zero quaternion gives ``(-inf, 0, 0, 0)``.

    Notes
    -----
    ``log(exp(q)) == q`` up to rounding whenever ``absvec(q) < pi``.
    """
    q = _as_floating(q)
    T = q.dtype
    m = math_for(T)

    r2 = q.abs2vec()
    if is_zero(r2):
        if is_negative(q.w):
            return Quaternion(m.log(-q.w), m.zero, m.zero, m.pi, dtype=T)
        return Quaternion(m.log(q.w), m.zero, m.zero, m.zero, dtype=T)

    r = m.sqrt(r2)
    f = m.atan2(r, q.w) / r
    return Quaternion(m.log(abs(q)), f * q.x, f * q.y, f * q.z, dtype=T)


# =============================================================================
# SQUARE ROOT
# =============================================================================

@_elementwise
def sqrt(q: Any) -> Quaternion:
    """
    Principal quaternion square root.

    Numeric types use the half-angle relations

        c = sqrt((|q| + w) / 2),  s = sqrt((|q| - w) / 2),  c s = |v| / 2

    computing whichever of c and s avoids cancellation first, and return
    ``(c, s v/|v|)``. Symbolic quaternions use the closed form
    ``(q + |q|) / sqrt(2|q| + 2w)``.

    The denominator 2|q| + 2w vanishes only on the non-positive real axis:
    the zero quaternion maps to zero and ``sqrt(-a) = (0, 0, 0, sqrt(a))``.

    Examples
    --------
    >>> sqrt(Quaternion(-4))
    Quaternion(0.0, 0.0, 0.0, 2.0)
    """
    q = _as_floating(q)
    T = q.dtype
    m = math_for(T)

    r2 = q.abs2vec()
    if is_zero(r2):
        if is_negative(q.w):
            return Quaternion(m.zero, m.zero, m.zero, m.sqrt(-q.w), dtype=T)
        return Quaternion(m.sqrt(q.w), m.zero, m.zero, m.zero, dtype=T)

    a = abs(q)
    if T is SYMBOLIC:
        return (q + a) / m.sqrt(2 * a + 2 * q.w)

    if not is_negative(q.w):
        c = m.sqrt((a + q.w) / 2)
        f = 1 / (2 * c)
    else:
        s = m.sqrt((a - q.w) / 2)
        r = m.sqrt(r2)
        c = r / (2 * s)
        f = s / r
    return Quaternion(c, f * q.x, f * q.y, f * q.z, dtype=T)
