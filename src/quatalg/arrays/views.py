"""
===============================================================================
QUATALG - Array Reinterpretation
===============================================================================

Zero-copy conversion between quaternion arrays and plain numpy arrays of
their scalar components.

    as_float_array : QuaternionArray of shape S   -> ndarray (4,) + S
    as_quat_array  : ndarray (4n,) + S            -> QuaternionArray (n,) + S
                     ndarray (4,) + S             -> QuaternionArray S

Both directions return views of the same memory; writes through either side
are visible through the other. The two functions are mutual inverses on
matching shapes.
===============================================================================
"""

import logging
from typing import Any, Union

import numpy as np

from ..core.constants import N_COMPONENTS
from ..core.errors import ShapeError, UnsupportedScalarError
from ..core.quaternion import Quaternion
from .quaternion_array import QuaternionArray

logger = logging.getLogger(__name__)


def as_float_array(A: Union[QuaternionArray, Quaternion]) -> np.ndarray:
    """
    View a quaternion array as scalars with a leading component axis of size 4.

    Parameters
    ----------
    A : QuaternionArray or Quaternion
        Quaternions to reinterpret. A single (immutable) Quaternion has no
        storage to share and yields a new 4-element array.

    Returns
    -------
    np.ndarray
        Array of shape (4,) + A.shape sharing memory with ``A``.

    Examples
    --------
    >>> A = QuaternionArray.zeros(3)
    >>> F = as_float_array(A)
    >>> F[0, :] = 1.0
    >>> float(A[2].w)
    1.0
    """
    if isinstance(A, QuaternionArray):
        return A.ndarray.view()
    if isinstance(A, Quaternion):
        return A.components
    raise TypeError(
        f"as_float_array expects a QuaternionArray or Quaternion, "
        f"got {type(A).__name__!r}"
    )


def as_quat_array(B: Any) -> QuaternionArray:
    """
    View a real array as quaternions by grouping its leading axis in fours.

    Parameters
    ----------
    B : array_like
        Real array whose leading axis has a length divisible by 4. Entries
        ``B[4k:4k+4]`` become the (w, x, y, z) components of element ``k``.
        A leading axis of exactly 4 is consumed entirely, so the result has
        shape ``B.shape[1:]``; a leading axis of ``4n`` (n != 1) gives shape
        ``(n,) + B.shape[1:]``.

    Returns
    -------
    QuaternionArray
        View sharing memory with ``B`` when ``B`` is an ndarray.

    Raises
    ------
    ShapeError
        If ``B`` is 0-d or its leading axis length is not divisible by 4.
    UnsupportedScalarError
        If ``B`` holds complex numbers.
    """
    B = np.asarray(B)
    if B.ndim == 0:
        raise ShapeError("Cannot reinterpret a 0-d array as quaternions")
    if B.shape[0] % N_COMPONENTS != 0:
        raise ShapeError(
            f"Leading axis of length {B.shape[0]} is not divisible by "
            f"{N_COMPONENTS}; cannot group it into quaternion components"
        )
    if B.dtype.kind == 'c':
        raise UnsupportedScalarError(
            "Quaternion components must be real, got complex data"
        )

    if B.shape[0] == N_COMPONENTS:
        logger.debug("Wrapping array of shape %s as quaternions", B.shape)
        return QuaternionArray(B)

    # (4n, ...) -> (n, 4, ...) by strides alone, then bring components first
    n = B.shape[0] // N_COMPONENTS
    step = B.strides[0]
    grouped = np.lib.stride_tricks.as_strided(
        B,
        shape=(n, N_COMPONENTS) + B.shape[1:],
        strides=(N_COMPONENTS * step, step) + B.strides[1:],
        writeable=B.flags.writeable,
    )
    logger.debug("Grouped leading axis of %s into %d quaternions", B.shape, n)
    return QuaternionArray(np.moveaxis(grouped, 1, 0))
