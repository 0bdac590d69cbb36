"""
===============================================================================
QUATALG - Euler Angles and Euler Phases
===============================================================================

Conversions between rotors and the intrinsic z-y-z Euler sequence

    R = exp(alpha k/2) * exp(beta j/2) * exp(gamma k/2)

Expanding the product with S = alpha + gamma and D = alpha - gamma:

    R = ( cos(beta/2) cos(S/2),
         -sin(beta/2) sin(D/2),
          sin(beta/2) cos(D/2),
          cos(beta/2) sin(S/2) )

so (w, z) carry the half-sum and (y, -x) the half-difference. Euler phases
are the unit complex numbers z_a = e^{i alpha}, z_b = e^{i beta},
z_c = e^{i gamma}; they are extracted from the same two pairs with square
roots and products only, no trigonometric calls.

Gimbal lock
-----------
When beta = 0 (x = y = 0 exactly) only alpha + gamma is defined, and when
beta = pi (w = z = 0 exactly) only alpha - gamma is. In both cases the whole
z rotation is reported in alpha and gamma is zero (z_c = 1).

Non-unit input is accepted; only the direction of each pair matters.
===============================================================================
"""

import logging
from typing import Any, Optional, Sequence, Tuple

from ..core.errors import ZeroNormError
from ..core.quaternion import Quaternion, imy, imz
from ..core.scalars import (complex_real_type, float_type, is_true, is_zero,
                            math_for, promote_type)
from .transcendental import _as_floating, exp

logger = logging.getLogger(__name__)


# =============================================================================
# EULER ANGLES
# =============================================================================

def from_euler_angles(alpha: Any, beta: Any = None,
                      gamma: Any = None) -> Quaternion:
    """
    Rotor for the z-y-z Euler angles (alpha, beta, gamma) in radians.

    The angles may also be passed as a single sequence of three values.

    Returns
    -------
    Quaternion
        ``exp(alpha/2 imz) * exp(beta/2 imy) * exp(gamma/2 imz)``.
    """
    if beta is None and gamma is None:
        alpha, beta, gamma = alpha
    return (exp(imz * (alpha / 2))
            * exp(imy * (beta / 2))
            * exp(imz * (gamma / 2)))


def to_euler_angles(R: Any) -> Tuple[Any, Any, Any]:
    """
    Extract z-y-z Euler angles (alpha, beta, gamma) from a rotor.

    Parameters
    ----------
    R : Quaternion
        Rotation; need not be normalized.

    Returns
    -------
    tuple
        ``(alpha, beta, gamma)`` with beta in [0, pi], in the floating type
        of R. At gimbal lock gamma is zero, see the module notes.
    """
    R = _as_floating(R)
    m = math_for(R.dtype)
    w, x, y, z = R.w, R.x, R.y, R.z

    a = w * w + z * z
    b = x * x + y * y
    beta = 2 * m.atan2(m.sqrt(b), m.sqrt(a))

    if is_zero(b):
        logger.debug("Gimbal lock at beta = 0; folding gamma into alpha")
        return 2 * m.atan2(z, w), beta, m.zero
    if is_zero(a):
        logger.debug("Gimbal lock at beta = pi; folding gamma into alpha")
        return 2 * m.atan2(-x, y), beta, m.zero

    half_sum = m.atan2(z, w)
    half_diff = m.atan2(-x, y)
    return half_sum + half_diff, beta, half_sum - half_diff


# =============================================================================
# EULER PHASES
# =============================================================================

def to_euler_phases(R: Any, out: Optional[Any] = None) -> Any:
    """
    Euler phases (z_a, z_b, z_c) = (e^{i alpha}, e^{i beta}, e^{i gamma}).

    Parameters
    ----------
    R : Quaternion
        Rotation; need not be normalized.
    out : mutable sequence of length 3, optional
        If given, the phases are written into ``out[0:3]`` and ``out`` is
        returned instead of a new tuple.

    Raises
    ------
    ZeroNormError
        If R is the zero quaternion, which represents no rotation.

    Examples
    --------
    >>> buffer = np.empty(3, dtype=complex)
    >>> to_euler_phases(from_euler_angles(0.1, 0.2, 0.3), out=buffer) is buffer
    True
    """
    R = _as_floating(R)
    m = math_for(R.dtype)
    w, x, y, z = R.w, R.x, R.y, R.z

    a = w * w + z * z
    b = x * x + y * y
    n = a + b
    if is_zero(n):
        raise ZeroNormError("The zero quaternion has no Euler phases.")

    sqrt_a = m.sqrt(a)
    sqrt_b = m.sqrt(b)
    zb = m.complex((a - b) / n, 2 * sqrt_a * sqrt_b / n)
    unit = m.complex(m.one, m.zero)

    if is_zero(b):
        logger.debug("Gimbal lock at beta = 0; z_c set to 1")
        zp = m.complex(w, z) / sqrt_a
        za, zc = zp * zp, unit
    elif is_zero(a):
        logger.debug("Gimbal lock at beta = pi; z_c set to 1")
        zm = m.complex(y, -x) / sqrt_b
        za, zc = zm * zm, unit
    else:
        zp = m.complex(w, z) / sqrt_a
        zm = m.complex(y, -x) / sqrt_b
        za, zc = zp * zm, zp * m.conj(zm)

    if out is None:
        return za, zb, zc
    out[0], out[1], out[2] = za, zb, zc
    return out


def from_euler_phases(za: Any, zb: Any = None, zc: Any = None) -> Quaternion:
    """
    Rotor for the Euler phases (z_a, z_b, z_c).

    The phases may also be passed as a single sequence of three values.
    Each is expected on the unit circle. The result is exact up to the
    global sign, which represents the same rotation.

    Notes
    -----
    With e^{i beta/2}, e^{i S/2} and e^{i D/2} recovered as square roots of
    z_b, z_a z_c and z_a conj(z_c), the only ambiguity is the relative sign
    of the last two, fixed by requiring their product to equal z_a.
    """
    if zb is None and zc is None:
        za, zb, zc = _three(za)

    T = float_type(promote_type(*(complex_real_type(z) for z in (za, zb, zc))))
    m = math_for(T)

    zb_half = m.csqrt(zb)
    zp = m.csqrt(za * zc)
    zm = m.csqrt(za * m.conj(zc))
    if is_true(abs(za - zp * zm) > abs(za + zp * zm)):
        zp = -zp

    return Quaternion(
        m.real(zb_half) * m.real(zp),
        -m.imag(zb_half) * m.imag(zm),
        m.imag(zb_half) * m.real(zm),
        m.real(zb_half) * m.imag(zp),
        dtype=T,
    )


def _three(values: Sequence[Any]) -> Tuple[Any, Any, Any]:
    values = tuple(values)
    if len(values) != 3:
        raise ValueError(f"Expected 3 Euler phases, got {len(values)}")
    return values
