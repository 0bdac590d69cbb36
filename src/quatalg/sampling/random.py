"""
===============================================================================
QUATALG - Random Quaternions
===============================================================================

Spherically symmetric random quaternions.

randn draws each component independently from N(0, 1/4), so a sample has
mean squared norm 1 and its distribution is invariant under any rotation of
R^4. randn_rotor divides such samples by their norm, which gives rotors
uniformly distributed on the unit 3-sphere, i.e. uniformly random
rotations.

Random source
-------------
The source is always explicit. ``rng`` may be

    None                     a fresh np.random.default_rng()
    int or SeedSequence      seed for np.random.default_rng
    np.random.Generator      used as is
    any other object         must provide standard_normal(size=...)

No global random state is read or modified.

Precision
---------
numpy floating types are drawn directly. For mpmath.mpf the deviates are
drawn in double precision and converted, so their randomness is that of a
float64 while normalization in randn_rotor runs at the working precision.

Near-zero norms
---------------
randn_rotor redraws any sample whose norm falls below eps(dtype), at most
``rotor_max_resamples`` rounds (configuration), then raises
ResamplingError.
===============================================================================
"""

import logging
from typing import Any, Optional, Tuple, Union

import mpmath
import numpy as np

from ..arrays.quaternion_array import QuaternionArray
from ..config import get_config
from ..core.constants import COMPONENT_STD, N_COMPONENTS, RANDOM_DTYPES
from ..core.errors import ResamplingError, UnsupportedScalarError
from ..core.quaternion import Quaternion
from ..core.scalars import ScalarMath, convert, math_for

logger = logging.getLogger(__name__)

# dtypes np.random.Generator.standard_normal can produce directly
_NATIVE_DTYPES = (np.float32, np.float64)


# =============================================================================
# ARGUMENT HANDLING
# =============================================================================

def _as_generator(rng: Any) -> Any:
    if rng is None or isinstance(rng, (int, np.integer, np.random.SeedSequence)):
        return np.random.default_rng(rng)
    if isinstance(rng, np.random.Generator) or hasattr(rng, 'standard_normal'):
        return rng
    raise TypeError(
        f"rng must be None, a seed, a numpy Generator or provide "
        f"standard_normal(); got {type(rng).__name__!r}"
    )


def _resolve_dtype(dtype: Any) -> type:
    if dtype is None:
        return get_config().dtype
    if dtype is mpmath.mpf:
        return dtype
    try:
        t = np.dtype(dtype).type
    except TypeError as exc:
        raise UnsupportedScalarError(f"Unsupported random dtype {dtype!r}") from exc
    if t not in RANDOM_DTYPES:
        raise UnsupportedScalarError(
            f"Random quaternions need a numpy floating dtype or mpmath.mpf, "
            f"got {dtype!r}"
        )
    return t


def _resolve_shape(dims: Tuple[Any, ...]) -> Tuple[int, ...]:
    if len(dims) == 1 and not isinstance(dims[0], (int, np.integer)):
        dims = tuple(dims[0])
    shape = tuple(int(d) for d in dims)
    if any(d < 0 for d in shape):
        raise ValueError(f"Negative dimensions are not allowed: {shape}")
    return shape


def _standard_normal(gen: Any, shape: Tuple[int, ...], dtype: type) -> np.ndarray:
    if dtype is mpmath.mpf:
        draws = np.asarray(gen.standard_normal(size=shape), dtype=np.float64)
        out = np.empty(shape, dtype=object)
        for index in np.ndindex(*shape):
            out[index] = convert(dtype, draws[index])
        return out
    if isinstance(gen, np.random.Generator) and dtype in _NATIVE_DTYPES:
        return gen.standard_normal(shape, dtype=dtype)
    draws = np.asarray(gen.standard_normal(size=shape))
    return draws.astype(dtype)


def _norms(samples: np.ndarray, m: ScalarMath) -> np.ndarray:
    """Norms of the rows of an (n, 4) sample array."""
    squares = np.sum(samples * samples, axis=-1)
    if squares.dtype != object:
        return np.sqrt(squares)
    return np.array([m.sqrt(s) for s in squares], dtype=object)


def _wrap(data: np.ndarray, shape: Tuple[int, ...]) -> Union[Quaternion, QuaternionArray]:
    """Wrap (..., 4) samples; each quaternion stays 4 contiguous scalars."""
    if not shape:
        return Quaternion(*data)
    return QuaternionArray(np.moveaxis(data, -1, 0))


# =============================================================================
# GENERATORS
# =============================================================================

def randn(*dims: Any, rng: Any = None,
          dtype: Optional[Any] = None) -> Union[Quaternion, QuaternionArray]:
    """
    Quaternions with i.i.d. N(0, 1/4) components.

    Parameters
    ----------
    *dims : int, or one tuple of int
        Output shape. With no dimensions a single Quaternion is returned.
    rng : optional
        Random source, see the module notes.
    dtype : optional
        Component type, a numpy floating type or mpmath.mpf; defaults to
        the configured ``default_dtype``.

    Returns
    -------
    Quaternion or QuaternionArray

    Examples
    --------
    >>> q = randn(rng=1234)
    >>> A = randn(100, 3, rng=np.random.default_rng(5), dtype=np.float32)
    >>> A.shape, A.dtype
    ((100, 3), dtype('float32'))
    """
    shape = _resolve_shape(dims)
    T = _resolve_dtype(dtype)
    gen = _as_generator(rng)

    data = _standard_normal(gen, shape + (N_COMPONENTS,), T)
    data *= T(COMPONENT_STD)
    return _wrap(data, shape)


def randn_rotor(*dims: Any, rng: Any = None,
                dtype: Optional[Any] = None) -> Union[Quaternion, QuaternionArray]:
    """
    Uniformly random unit quaternions (rotors).

    Samples are drawn as in ``randn`` and divided by their norm. A sample
    whose norm is below eps(dtype) is redrawn.

    Parameters
    ----------
    *dims, rng, dtype
        As for ``randn``.

    Raises
    ------
    ResamplingError
        If near-zero samples remain after ``rotor_max_resamples`` rounds.
    """
    shape = _resolve_shape(dims)
    T = _resolve_dtype(dtype)
    gen = _as_generator(rng)
    max_rounds = get_config().rotor_max_resamples
    m = math_for(T)
    eps = m.eps

    samples = _standard_normal(gen, (int(np.prod(shape)), N_COMPONENTS), T)
    norms = _norms(samples, m)

    rounds = 0
    bad = np.asarray(norms < eps, dtype=bool)
    while np.any(bad):
        if rounds == max_rounds:
            raise ResamplingError(
                f"{int(np.count_nonzero(bad))} rotor sample(s) still had "
                f"norm below {eps} after {max_rounds} resampling rounds"
            )
        rounds += 1
        count = int(np.count_nonzero(bad))
        logger.debug("Resampling %d near-zero rotor sample(s), round %d",
                     count, rounds)
        samples[bad] = _standard_normal(gen, (count, N_COMPONENTS), T)
        norms[bad] = _norms(samples[bad], m)
        bad = np.asarray(norms < eps, dtype=bool)

    data = (samples / norms[:, np.newaxis]).reshape(shape + (N_COMPONENTS,))
    return _wrap(data, shape)
