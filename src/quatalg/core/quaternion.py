"""
===============================================================================
QUATALG - Quaternion Value Type
===============================================================================

Generic quaternion numbers over any supported real scalar type.

Convention
----------
Components are stored scalar-first:

    q = [w, x, y, z] = w + x*i + y*j + z*k

with i^2 = j^2 = k^2 = ijk = -1. The scalar part w is also available as
``re``; the vector part (x, y, z) as ``vec`` or ``im``.

Unlike a rotation-only quaternion class, nothing here normalizes: a
Quaternion is an element of the full quaternion algebra, and rotors are
simply the unit-norm elements.

Scalar types
------------
All four components share one scalar type T (see ``quatalg.core.scalars``).
Mixed arguments are promoted to a common type on construction, and every
binary operation promotes both operands before computing. The unit
constants ``imx``, ``imy``, ``imz`` hold bool components, the weakest type
in the table, so ``1.2 * imx`` is a float quaternion and
``np.float32(1.2) * imx`` a float32 one.

References
----------
    [1] Hamilton, "On Quaternions", Philosophical Magazine, 1844.
    [2] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
===============================================================================
"""

import numbers
from functools import partial
from typing import Any, Optional, Tuple

import numpy as np

from .constants import AXIS_INDEX, N_COMPONENTS
from .errors import UnsupportedScalarError, ZeroNormError
from .scalars import (SYMBOLIC, as_scalar_type, convert, default_rtol,
                      float_type, is_true, is_zero, math_for, promote_type,
                      scalar_type)


class Quaternion:
    """
    Immutable quaternion w + x*i + y*j + z*k with components of one type T.

    Construction
    ------------
    Quaternion(w, x, y, z)     all four components
    Quaternion(x, y, z)        pure vector quaternion (w = 0)
    Quaternion(w)              promotion of a bare scalar
    Quaternion('z')            float unit along 'w', 'x', 'y' or 'z'
    Quaternion(q)              copy of another quaternion
    Quaternion()               float zero

    Missing components are the additive identity of the inferred type.
    Passing ``dtype=T`` forces the scalar type instead of inferring it. A
    conversion that would lose information, such as 1.5 to int, raises
    UnsupportedScalarError.

    Examples
    --------
    >>> Quaternion(1, 2, 3, 4)
    Quaternion(1, 2, 3, 4)
    >>> Quaternion(1, 2, 3, 4, dtype=float)
    Quaternion(1.0, 2.0, 3.0, 4.0)
    >>> Quaternion(2, 3, 4)
    Quaternion(0, 2, 3, 4)
    """

    __slots__ = ('_q', '_dtype')

    # numpy must defer to our reflected operators instead of broadcasting
    __array_ufunc__ = None

    def __init__(self, *args: Any, dtype: Optional[Any] = None) -> None:
        if len(args) == 1 and isinstance(args[0], Quaternion):
            components = args[0]._q
        elif len(args) == 1 and isinstance(args[0], str):
            components = self._unit_components(args[0])
        elif len(args) == 4:
            components = args
        elif len(args) == 3:
            components = (False,) + args
        elif len(args) == 1:
            components = (args[0], False, False, False)
        elif not args:
            components = (0.0, 0.0, 0.0, 0.0)
        else:
            raise TypeError(
                "Quaternion() takes 0, 1, 3 or 4 positional arguments "
                f"({len(args)} given)"
            )

        if dtype is None:
            T = promote_type(*(scalar_type(c) for c in components))
        else:
            T = as_scalar_type(dtype)
            # still reject non-scalars such as complex numbers
            for c in components:
                scalar_type(c)

        self._q = tuple(convert(T, c) for c in components)
        self._dtype = T

    @staticmethod
    def _unit_components(axis: str) -> Tuple[float, float, float, float]:
        try:
            index = AXIS_INDEX[axis]
        except KeyError:
            raise ValueError(
                f"Unknown quaternion axis {axis!r}; expected one of "
                f"{', '.join(map(repr, AXIS_INDEX))}"
            ) from None
        components = [0.0] * N_COMPONENTS
        components[index] = 1.0
        return tuple(components)

    # =========================================================================
    # PROPERTIES - Read access to quaternion components
    # =========================================================================

    @property
    def w(self) -> Any:
        """Scalar (real) part."""
        return self._q[0]

    @property
    def x(self) -> Any:
        return self._q[1]

    @property
    def y(self) -> Any:
        return self._q[2]

    @property
    def z(self) -> Any:
        return self._q[3]

    @property
    def re(self) -> Any:
        """Scalar part, in analogy with complex numbers (alias for w)."""
        return self._q[0]

    @property
    def vec(self) -> np.ndarray:
        """
        Vector (imaginary) part as a new 3-element array [x, y, z].

        The array is a copy; modifying it does not affect the quaternion.
        """
        return np.array(self._q[1:])

    im = vec

    @property
    def components(self) -> np.ndarray:
        """All four components [w, x, y, z] as a new array."""
        return np.array(self._q)

    @property
    def dtype(self) -> type:
        """Scalar type T shared by the four components."""
        return self._dtype

    def astype(self, dtype: Any) -> 'Quaternion':
        """Return this quaternion with components converted to ``dtype``."""
        T = as_scalar_type(dtype)
        if T is self._dtype:
            return self
        return Quaternion(*self._q, dtype=T)

    # =========================================================================
    # NORMS AND CONJUGATION
    # =========================================================================

    def conjugate(self) -> 'Quaternion':
        """
        Quaternion conjugate, flipping the sign of each vector component.

        >>> Quaternion(1, 2, 3, 4).conjugate()
        Quaternion(1, -2, -3, -4)
        """
        w, x, y, z = self._q
        return Quaternion(w, -x, -y, -z)

    def abs2(self) -> Any:
        """
        Sum of the squares of the components, w^2 + x^2 + y^2 + z^2.

        Computed in T itself, so integer input gives an exact integer:

        >>> Quaternion(1, 2, 4, 10).abs2()
        121
        """
        w, x, y, z = self._q
        return w * w + x * x + y * y + z * z

    def abs2vec(self) -> Any:
        """Sum of the squares of the vector components, x^2 + y^2 + z^2."""
        _, x, y, z = self._q
        return x * x + y * y + z * z

    def absvec(self) -> Any:
        """Euclidean norm of the vector part."""
        return _sqrt(self.abs2vec(), self._dtype)

    def __abs__(self) -> Any:
        """
        Euclidean norm sqrt(w^2 + x^2 + y^2 + z^2).

        >>> abs(Quaternion(1, 2, 4, 10))
        11.0
        """
        return _sqrt(self.abs2(), self._dtype)

    def inverse(self) -> 'Quaternion':
        """
        Multiplicative inverse conj(q) / abs2(q).

        Raises
        ------
        ZeroNormError
            If abs2(q) is zero; the zero quaternion has no inverse.
        """
        norm_sq = self.abs2()
        if is_zero(norm_sq):
            raise ZeroNormError(
                f"Cannot invert {self!r}: the quaternion has zero norm."
            )
        return self.conjugate() / norm_sq

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    @staticmethod
    def _coerce(other: Any) -> Optional['Quaternion']:
        """Promote a bare real scalar to a Quaternion; None if impossible."""
        if isinstance(other, Quaternion):
            return other
        if isinstance(other, str):
            return None
        try:
            return Quaternion(other)
        except UnsupportedScalarError:
            return None

    def _promoted_with(self, other: 'Quaternion') -> Tuple[tuple, tuple]:
        T = promote_type(self._dtype, other._dtype)
        return self.astype(T)._q, other.astype(T)._q

    def _scaled(self, scalar: Any, divide: bool = False,
                reflected: bool = False) -> 'Quaternion':
        T = promote_type(self._dtype, scalar_type(scalar))
        s = convert(T, scalar)
        q = self.astype(T)._q
        if divide:
            return Quaternion(*(c / s for c in q))
        if reflected:
            return Quaternion(*(s * c for c in q))
        return Quaternion(*(c * s for c in q))

    @staticmethod
    def _is_scalar(value: Any) -> bool:
        if isinstance(value, (Quaternion, str)):
            return False
        try:
            scalar_type(value)
        except UnsupportedScalarError:
            return False
        return True

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def __add__(self, other: Any) -> 'Quaternion':
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        p, q = self._promoted_with(other)
        return Quaternion(*(a + b for a, b in zip(p, q)))

    def __radd__(self, other: Any) -> 'Quaternion':
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.__add__(self)

    def __sub__(self, other: Any) -> 'Quaternion':
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        p, q = self._promoted_with(other)
        return Quaternion(*(a - b for a, b in zip(p, q)))

    def __rsub__(self, other: Any) -> 'Quaternion':
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.__sub__(self)

    def __neg__(self) -> 'Quaternion':
        return Quaternion(*(-c for c in self._q))

    def __pos__(self) -> 'Quaternion':
        return self

    def __mul__(self, other: Any) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * scalar     -> component-wise scaling

        The Hamilton product, written in terms of scalar and vector parts:

            p*q = (p.w q.w - p.vec . q.vec,
                   p.w q.vec + q.w p.vec + p.vec x q.vec)

        It is associative but NOT commutative:

        >>> Quaternion(4, 3, 2, 1) * Quaternion(1, 2, 3, 4)
        Quaternion(-12, 16, 4, 22)
        >>> Quaternion(1, 2, 3, 4) * Quaternion(4, 3, 2, 1)
        Quaternion(-12, 6, 24, 12)
        """
        if self._is_scalar(other):
            return self._scaled(other)
        if not isinstance(other, Quaternion):
            return NotImplemented

        (pw, px, py, pz), (qw, qx, qy, qz) = self._promoted_with(other)

        # Scalar part: p.w q.w - p.vec . q.vec
        w = pw * qw - (px * qx + py * qy + pz * qz)

        # Vector part: p.w q.vec + q.w p.vec + p.vec x q.vec
        x = pw * qx + qw * px + (py * qz - pz * qy)
        y = pw * qy + qw * py + (pz * qx - px * qz)
        z = pw * qz + qw * pz + (px * qy - py * qx)

        return Quaternion(w, x, y, z)

    def __rmul__(self, other: Any) -> 'Quaternion':
        """Left-multiplication by a scalar: scalar * Quaternion."""
        if self._is_scalar(other):
            return self._scaled(other, reflected=True)
        return NotImplemented

    def __truediv__(self, other: Any) -> 'Quaternion':
        """
        Right division, q / p = q * inverse(p).

        Raises
        ------
        ZeroNormError
            If ``other`` is a zero scalar or a zero-norm quaternion.
        """
        if self._is_scalar(other):
            if is_zero(other):
                raise ZeroNormError(f"Cannot divide {self!r} by zero.")
            return self._scaled(other, divide=True)
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self * other.inverse()

    def __rtruediv__(self, other: Any) -> 'Quaternion':
        """Scalar divided by quaternion: scalar * inverse(q)."""
        if self._is_scalar(other):
            return self.inverse()._scaled(other, reflected=True)
        return NotImplemented

    def __pow__(self, exponent: Any) -> 'Quaternion':
        """Integer powers by repeated Hamilton products."""
        if not isinstance(exponent, numbers.Integral):
            return NotImplemented
        exponent = int(exponent)
        base = self
        if exponent < 0:
            base, exponent = self.inverse(), -exponent

        result = Quaternion(1, dtype=self._dtype)
        while exponent:
            if exponent & 1:
                result = result * base
            base = base * base
            exponent >>= 1
        return result

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        """
        Exact component-wise equality.

        A bare real scalar compares equal to the quaternion with that scalar
        part and zero vector part, regardless of the two scalar types.
        """
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return all(is_true(a == b) for a, b in zip(self._q, other._q))

    def __hash__(self) -> int:
        # consistent with equality against plain scalars
        if all(is_zero(c) for c in self._q[1:]):
            return hash(self._q[0])
        return hash(self._q)

    def __bool__(self) -> bool:
        return not all(is_zero(c) for c in self._q)

    def isapprox(self, other: Any, rtol: Optional[Any] = None,
                 atol: Any = 0) -> bool:
        """
        Approximate equality based on the norm of the difference.

            |q - p| <= max(atol, rtol * max(|q|, |p|))

        Parameters
        ----------
        other : Quaternion or real scalar
            Value to compare against.
        rtol : optional
            Relative tolerance. Defaults to sqrt(eps(T)) for floating types
            and 0 (exact comparison) for exact types such as int.
        atol : optional
            Absolute tolerance, 0 by default.

        Notes
        -----
        Symbolic quaternions are compared by simplifying each component of
        the difference, since symbolic norms cannot be ordered.
        """
        coerced = self._coerce(other)
        if coerced is None:
            raise UnsupportedScalarError(
                f"Cannot compare a quaternion with {type(other).__name__!r}"
            )
        other = coerced

        T = promote_type(self._dtype, other._dtype)
        difference = self - other
        if T is SYMBOLIC:
            return all(is_zero(c, simplify=True) for c in difference._q)

        if rtol is None:
            rtol = default_rtol(T)
        scale = max(abs(self), abs(other))
        return bool(abs(difference) <= max(atol, rtol * scale))

    # =========================================================================
    # REPRESENTATION
    # =========================================================================

    def __repr__(self) -> str:
        return f"Quaternion({', '.join(map(repr, self._q))})"


def _sqrt(value: Any, T: type) -> Any:
    FT = float_type(T)
    return math_for(FT).sqrt(convert(FT, value))


# =============================================================================
# FREE FUNCTIONS
# =============================================================================
# These accept anything exposing the corresponding methods, so they work on
# single quaternions and on quaternion arrays alike.

def conj(q):
    """Quaternion conjugate (vector part negated)."""
    return q.conjugate()


def abs2(q):
    """Squared norm w^2 + x^2 + y^2 + z^2."""
    return q.abs2()


def abs2vec(q):
    """Squared norm of the vector part."""
    return q.abs2vec()


def absvec(q):
    """Norm of the vector part."""
    return q.absvec()


def isapprox(q, p, rtol=None, atol=0) -> bool:
    """Approximate equality of two quaternions, see Quaternion.isapprox."""
    if not isinstance(q, Quaternion):
        q = Quaternion(q)
    return q.isapprox(p, rtol=rtol, atol=atol)


# =============================================================================
# NAMED UNITS AND CONSTRUCTOR SHORTCUTS
# =============================================================================

imx = Quaternion(False, True, False, False)
"""Quaternionic unit associated with rotation about the x axis."""

imy = Quaternion(False, False, True, False)
"""Quaternionic unit associated with rotation about the y axis."""

imz = Quaternion(False, False, False, True)
"""Quaternionic unit associated with rotation about the z axis."""

QuaternionF16 = partial(Quaternion, dtype=np.float16)
QuaternionF32 = partial(Quaternion, dtype=np.float32)
QuaternionF64 = partial(Quaternion, dtype=np.float64)
