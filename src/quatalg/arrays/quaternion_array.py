"""
===============================================================================
QUATALG - Quaternion Arrays
===============================================================================

A QuaternionArray is a thin wrapper around a numpy array whose leading axis
has size 4 and holds the components (w, x, y, z). The wrapper owns no data
of its own: slicing, component access and ``as_float_array`` all return
views of the same storage, so writes through any of them are visible
through the others.

Indexing with integers down to a single element returns an (immutable)
Quaternion; anything that leaves quaternion axes returns a QuaternionArray
view. Arithmetic is vectorized over the quaternion axes with numpy
broadcasting.
===============================================================================
"""

from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

import numpy as np

from ..core.constants import N_COMPONENTS
from ..core.errors import ShapeError, UnsupportedScalarError, ZeroNormError
from ..core.quaternion import Quaternion
from ..core.scalars import (as_scalar_type, convert, float_type, is_zero,
                            math_for, numpy_dtype, promote_type,
                            scalar_type)


class QuaternionArray:
    """
    Array of quaternions backed by a (4, ...) numpy array.

    Arrays this class allocates store each quaternion as 4 contiguous
    scalars (w, x, y, z); the (4, ...) component array is a strided view
    of that storage.

    Parameters
    ----------
    data : np.ndarray
        Component array with leading axis of size 4 ordered w, x, y, z.
        An ndarray is wrapped without copying.

    Raises
    ------
    ShapeError
        If ``data`` is 0-d or its leading axis does not have size 4.
    UnsupportedScalarError
        If ``data`` holds complex numbers.
    """

    __slots__ = ('_data',)

    __array_ufunc__ = None

    def __init__(self, data: Any) -> None:
        data = np.asarray(data)
        if data.ndim == 0 or data.shape[0] != N_COMPONENTS:
            raise ShapeError(
                f"Quaternion component data must have a leading axis of size "
                f"{N_COMPONENTS}, got shape {data.shape}"
            )
        if data.dtype.kind == 'c':
            raise UnsupportedScalarError(
                "Quaternion components must be real, got complex data"
            )
        self._data = data

    @classmethod
    def from_quaternions(cls, quaternions: Iterable[Quaternion],
                         shape: Optional[Tuple[int, ...]] = None,
                         dtype: Optional[Any] = None) -> 'QuaternionArray':
        """
        Build a new array (copying) from an iterable of Quaternions.

        Parameters
        ----------
        quaternions : iterable of Quaternion
            Elements in C order.
        shape : tuple of int, optional
            Output shape; defaults to a 1-D array.
        dtype : optional
            Scalar type; defaults to the promotion of the element types.
        """
        items = list(quaternions)
        if dtype is None:
            T = promote_type(*(q.dtype for q in items))
        else:
            T = as_scalar_type(dtype)

        if shape is None:
            shape = (len(items),)
        shape = tuple(shape)
        if int(np.prod(shape)) != len(items):
            raise ShapeError(
                f"Cannot arrange {len(items)} quaternions in shape {shape}"
            )

        storage = np.empty(shape + (N_COMPONENTS,), dtype=numpy_dtype(T))
        rows = storage.reshape(-1, N_COMPONENTS)
        for i, q in enumerate(items):
            q = q.astype(T)
            for k, component in enumerate((q.w, q.x, q.y, q.z)):
                rows[i, k] = component
        return cls(_components(storage))

    @classmethod
    def zeros(cls, shape: Tuple[int, ...], dtype: Any = float) -> 'QuaternionArray':
        if isinstance(shape, int):
            shape = (shape,)
        storage = np.zeros(tuple(shape) + (N_COMPONENTS,), dtype=dtype)
        return cls(_components(storage))

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def ndarray(self) -> np.ndarray:
        """The backing (4, ...) component array itself."""
        return self._data

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._data.shape[1:]

    @property
    def ndim(self) -> int:
        return self._data.ndim - 1

    @property
    def size(self) -> int:
        return self._data[0, ...].size

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def w(self) -> np.ndarray:
        return self._data[0, ...]

    @property
    def x(self) -> np.ndarray:
        return self._data[1, ...]

    @property
    def y(self) -> np.ndarray:
        return self._data[2, ...]

    @property
    def z(self) -> np.ndarray:
        return self._data[3, ...]

    re = w

    @property
    def vec(self) -> np.ndarray:
        """View of the (3, ...) vector components."""
        return self._data[1:, ...]

    im = vec

    # =========================================================================
    # CONTAINER PROTOCOL
    # =========================================================================

    def __len__(self) -> int:
        if self.ndim == 0:
            raise TypeError("len() of unsized quaternion array")
        return self.shape[0]

    def __iter__(self) -> Iterator[Any]:
        for i in range(len(self)):
            yield self[i]

    def _index(self, key: Any) -> tuple:
        if not isinstance(key, tuple):
            key = (key,)
        return (slice(None),) + key

    def __getitem__(self, key: Any) -> Any:
        sub = self._data[self._index(key)]
        if sub.ndim == 1:
            return Quaternion(*sub)
        return QuaternionArray(sub)

    def __setitem__(self, key: Any, value: Any) -> None:
        index = self._index(key)
        if isinstance(value, QuaternionArray):
            self._data[index] = value._data
            return
        if not isinstance(value, Quaternion):
            value = Quaternion(value)
        target_ndim = self._data[index].ndim
        self._data[index] = _column(value, target_ndim - 1)

    def copy(self) -> 'QuaternionArray':
        return QuaternionArray(_components(np.moveaxis(self._data, 0, -1).copy()))

    def astype(self, dtype: Any) -> 'QuaternionArray':
        return QuaternionArray(_packed(self._data.astype(dtype)))

    def apply(self, func: Callable[[Quaternion], Quaternion]) -> 'QuaternionArray':
        """New array holding ``func`` applied to every element."""
        results = [func(self[index]) for index in np.ndindex(*self.shape)]
        if not results:
            return QuaternionArray(_components(
                np.empty(self.shape + (N_COMPONENTS,), dtype=self.dtype)))
        return QuaternionArray.from_quaternions(results, shape=self.shape)

    def tolist(self) -> list:
        """Nested lists of Quaternion elements."""
        if self.ndim == 0:
            return self[()]
        return [item.tolist() if isinstance(item, QuaternionArray) else item
                for item in self]

    # =========================================================================
    # NORMS AND CONJUGATION
    # =========================================================================

    def conjugate(self) -> 'QuaternionArray':
        data = _components(np.empty(self.shape + (N_COMPONENTS,), dtype=self.dtype))
        data[0] = self._data[0]
        data[1:] = -self._data[1:]
        return QuaternionArray(data)

    def abs2(self) -> np.ndarray:
        return np.sum(self._data * self._data, axis=0)

    def abs2vec(self) -> np.ndarray:
        vec = self._data[1:]
        return np.sum(vec * vec, axis=0)

    def absvec(self) -> np.ndarray:
        return _elementwise_sqrt(self.abs2vec())

    def __abs__(self) -> np.ndarray:
        return _elementwise_sqrt(self.abs2())

    def inverse(self) -> 'QuaternionArray':
        """
        Elementwise multiplicative inverse.

        Raises
        ------
        ZeroNormError
            If any element has zero norm.
        """
        norm_sq = self.abs2()
        if np.any(norm_sq == 0):
            raise ZeroNormError(
                "Cannot invert a quaternion array containing zero-norm elements."
            )
        return QuaternionArray(_packed(self.conjugate()._data / norm_sq))

    # =========================================================================
    # ARITHMETIC
    # =========================================================================

    def _operand(self, other: Any) -> Optional[np.ndarray]:
        """Component data of a quaternion operand aligned for broadcasting."""
        if isinstance(other, QuaternionArray):
            return other._data
        if isinstance(other, Quaternion):
            return _column(other, self.ndim)
        return None

    @staticmethod
    def _is_scalar(value: Any) -> bool:
        if isinstance(value, (Quaternion, QuaternionArray, str)):
            return False
        try:
            scalar_type(value)
        except UnsupportedScalarError:
            return False
        return True

    def _with_scalar_part(self, w: np.ndarray, vec: np.ndarray) -> 'QuaternionArray':
        w = np.asarray(w)
        data = _components(np.empty(w.shape + (N_COMPONENTS,),
                                    dtype=np.result_type(w, vec)))
        data[0] = w
        data[1:] = vec
        return QuaternionArray(data)

    def __add__(self, other: Any) -> 'QuaternionArray':
        data = self._operand(other)
        if data is not None:
            return QuaternionArray(_packed(np.add(*_aligned(self._data, data))))
        if self._is_scalar(other):
            return self._with_scalar_part(self._data[0] + other, self._data[1:])
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: Any) -> 'QuaternionArray':
        data = self._operand(other)
        if data is not None:
            return QuaternionArray(_packed(np.subtract(*_aligned(self._data, data))))
        if self._is_scalar(other):
            return self._with_scalar_part(self._data[0] - other, self._data[1:])
        return NotImplemented

    def __rsub__(self, other: Any) -> 'QuaternionArray':
        data = self._operand(other)
        if data is not None:
            return QuaternionArray(_packed(np.subtract(*_aligned(data, self._data))))
        if self._is_scalar(other):
            return self._with_scalar_part(other - self._data[0], -self._data[1:])
        return NotImplemented

    def __neg__(self) -> 'QuaternionArray':
        return QuaternionArray(_packed(-self._data))

    def __mul__(self, other: Any) -> 'QuaternionArray':
        data = self._operand(other)
        if data is not None:
            return QuaternionArray(_packed(_hamilton(*_aligned(self._data, data))))
        if self._is_scalar(other):
            return QuaternionArray(_packed(self._data * other))
        return NotImplemented

    def __rmul__(self, other: Any) -> 'QuaternionArray':
        data = self._operand(other)
        if data is not None:
            return QuaternionArray(_packed(_hamilton(*_aligned(data, self._data))))
        if self._is_scalar(other):
            return QuaternionArray(_packed(other * self._data))
        return NotImplemented

    def __truediv__(self, other: Any) -> 'QuaternionArray':
        if isinstance(other, (Quaternion, QuaternionArray)):
            return self * other.inverse()
        if self._is_scalar(other):
            if is_zero(other):
                raise ZeroNormError("Cannot divide a quaternion array by zero.")
            return QuaternionArray(_packed(self._data / other))
        return NotImplemented

    def __rtruediv__(self, other: Any) -> 'QuaternionArray':
        if isinstance(other, Quaternion) or self._is_scalar(other):
            return other * self.inverse()
        return NotImplemented

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def __eq__(self, other: Any) -> np.ndarray:
        """Elementwise exact equality, returning a boolean array."""
        data = self._operand(other)
        if data is None:
            if not self._is_scalar(other):
                return NotImplemented
            data = _column(Quaternion(other), self.ndim)
        left, right = _aligned(self._data, data)
        return np.all(left == right, axis=0)

    def __ne__(self, other: Any) -> np.ndarray:
        equal = self.__eq__(other)
        if equal is NotImplemented:
            return equal
        return np.logical_not(equal)

    __hash__ = None

    def __repr__(self) -> str:
        return f"QuaternionArray(shape={self.shape}, dtype={self.dtype})"


# =============================================================================
# HELPERS
# =============================================================================

def _components(storage: np.ndarray) -> np.ndarray:
    """(4, ...) component view of (..., 4) storage."""
    return np.moveaxis(storage, -1, 0)


def _packed(data: np.ndarray) -> np.ndarray:
    """
    ``data`` itself when each quaternion is already 4 contiguous scalars,
    otherwise a copy laid out that way.
    """
    storage = np.moveaxis(data, 0, -1)
    if storage.flags.c_contiguous:
        return data
    return _components(np.ascontiguousarray(storage))


def _column(q: Quaternion, ndim: int) -> np.ndarray:
    """Components of ``q`` shaped (4, 1, ..., 1) to broadcast over ``ndim`` axes."""
    return q.components.reshape((N_COMPONENTS,) + (1,) * ndim)


def _aligned(a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Pad the quaternion axes (not the component axis) to equal rank."""
    if a.ndim < b.ndim:
        a = a.reshape((N_COMPONENTS,) + (1,) * (b.ndim - a.ndim) + a.shape[1:])
    elif b.ndim < a.ndim:
        b = b.reshape((N_COMPONENTS,) + (1,) * (a.ndim - b.ndim) + b.shape[1:])
    return a, b


def _hamilton(p: np.ndarray, q: np.ndarray) -> np.ndarray:
    """Vectorized Hamilton product of (4, ...) component arrays."""
    pw, px, py, pz = p
    qw, qx, qy, qz = q
    return np.stack([
        pw * qw - (px * qx + py * qy + pz * qz),
        pw * qx + qw * px + (py * qz - pz * qy),
        pw * qy + qw * py + (pz * qx - px * qz),
        pw * qz + qw * pz + (px * qy - py * qx),
    ])


def _elementwise_sqrt(values: np.ndarray) -> np.ndarray:
    values = np.asarray(values)
    if values.dtype != object:
        return np.sqrt(values)

    out = np.empty(values.shape, dtype=object)
    for index in np.ndindex(*values.shape):
        v = values[index]
        T = float_type(scalar_type(v))
        out[index] = math_for(T).sqrt(convert(T, v))
    return out
