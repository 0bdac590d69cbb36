"""
===============================================================================
QUATALG - Random Generation Test Suite
===============================================================================
Tests for randn and randn_rotor: shapes, dtypes, the accepted random
sources, reproducibility, the near-zero resampling policy, and statistical
checks of the distributions with scipy.stats.

Statistical tests use fixed seeds, so they are deterministic; the
thresholds are loose enough that a correct generator passes for any seed
with overwhelming probability.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging

import mpmath
import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import stats

from quatalg import (Quaternion, QuaternionArray, ResamplingError,
                     UnsupportedScalarError, as_float_array,
                     as_quat_array, from_euler_angles, randn, randn_rotor,
                     set_config)


class ConstantSource:
    """Random source returning a constant, to exercise the generic interface."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def standard_normal(self, size=None):
        self.calls += 1
        return np.full(size, self.value)


class ZeroThenNormal:
    """Random source whose first draw is all zeros."""

    def __init__(self, seed):
        self.generator = np.random.default_rng(seed)
        self.calls = 0

    def standard_normal(self, size=None):
        self.calls += 1
        if self.calls == 1:
            return np.zeros(size)
        return self.generator.standard_normal(size=size)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def default_config():
    """Restore the default configuration around every test."""
    set_config()
    yield
    set_config()


@pytest.fixture
def many_samples():
    """Return 200000 standard quaternionic normal samples as a (4, N) array."""
    return as_float_array(randn(200_000, rng=20240601))


# =============================================================================
# Test: randn
# =============================================================================

class TestRandn:
    """Tests for quaternions with N(0, 1/4) components."""

    def test_no_dims_gives_quaternion(self):
        q = randn(rng=1)
        assert isinstance(q, Quaternion)
        assert q.dtype is np.float64

    @pytest.mark.parametrize("dims,shape", [
        ((5,), (5,)),
        ((2, 3), (2, 3)),
        (((2, 3),), (2, 3)),
        ((0,), (0,)),
    ])
    def test_shapes(self, dims, shape):
        A = randn(*dims, rng=1)
        assert isinstance(A, QuaternionArray)
        assert A.shape == shape

    @pytest.mark.parametrize("dtype", [np.float16, np.float32, np.float64,
                                       np.longdouble])
    def test_dtypes(self, dtype):
        A = randn(10, rng=1, dtype=dtype)
        assert A.dtype == dtype

    def test_integer_dtype_rejected(self):
        with pytest.raises(UnsupportedScalarError):
            randn(3, rng=1, dtype=np.int32)

    def test_seed_reproducible(self):
        assert np.all(randn(6, rng=42) == randn(6, rng=42))

    def test_generator_consumed(self):
        gen = np.random.default_rng(5)
        first = randn(3, rng=gen)
        second = randn(3, rng=gen)
        assert not np.all(first == second)

    def test_seed_sequence(self):
        A = randn(3, rng=np.random.SeedSequence(11))
        assert A.shape == (3,)

    def test_generic_source(self):
        """Any object with standard_normal(size=...) is accepted."""
        source = ConstantSource(2.0)
        q = randn(rng=source)
        assert q == Quaternion(1.0, 1.0, 1.0, 1.0)
        assert source.calls == 1

    def test_legacy_random_state(self):
        A = randn(4, rng=np.random.RandomState(0))
        assert A.shape == (4,)

    def test_invalid_source(self):
        with pytest.raises(TypeError):
            randn(3, rng="not a generator")

    def test_negative_dimension(self):
        with pytest.raises(ValueError):
            randn(-1, rng=1)

    def test_default_dtype_from_config(self):
        set_config(default_dtype='float32')
        assert randn(3, rng=1).dtype == np.float32

    def test_multiprecision(self):
        q = randn(rng=4, dtype=mpmath.mpf)
        assert isinstance(q, Quaternion)
        assert q.dtype is mpmath.mpf
        A = randn(2, 3, rng=4, dtype=mpmath.mpf)
        assert A.dtype == object
        assert A.shape == (2, 3)
        assert A[1, 2].dtype is mpmath.mpf

    def test_multiprecision_matches_double_draws(self):
        """mpf samples are the float64 deviates converted exactly."""
        A = randn(5, rng=4, dtype=mpmath.mpf)
        B = randn(5, rng=4)
        assert_allclose(as_float_array(A).astype(np.float64), as_float_array(B),
                        rtol=0, atol=0)

    def test_quaternions_contiguous_in_memory(self):
        A = randn(3, rng=1)
        B = as_quat_array(as_float_array(A).ravel(order='K'))
        assert np.all(B == A)


# =============================================================================
# Test: randn statistics
# =============================================================================

class TestRandnStatistics:
    """Statistical properties of randn."""

    def test_mean_squared_norm_is_one(self, many_samples):
        squared_norms = np.sum(many_samples ** 2, axis=0)
        assert_allclose(np.mean(squared_norms), 1.0, atol=0.01)

    def test_component_variance(self, many_samples):
        assert_allclose(np.var(many_samples, axis=1), 0.25, rtol=0.02)
        assert_allclose(np.mean(many_samples, axis=1), 0.0, atol=0.005)

    def test_components_are_normal(self, many_samples):
        for component in many_samples:
            result = stats.kstest(2 * component, 'norm')
            assert result.pvalue > 1e-4

    def test_squared_norm_is_chi_squared(self, many_samples):
        """4 |q|^2 is chi-squared with 4 degrees of freedom."""
        squared_norms = np.sum(many_samples ** 2, axis=0)
        result = stats.kstest(4 * squared_norms, stats.chi2(4).cdf)
        assert result.pvalue > 1e-4

    def test_spherical_symmetry(self):
        """Rotating every sample leaves the component distribution unchanged."""
        R = from_euler_angles(0.7, 1.9, -2.3)
        rotated = as_float_array(R * randn(50_000, rng=77))
        for component in rotated:
            result = stats.kstest(2 * component, 'norm')
            assert result.pvalue > 1e-4

    def test_components_uncorrelated(self, many_samples):
        correlation = np.corrcoef(many_samples)
        assert_allclose(correlation, np.eye(4), atol=0.01)


# =============================================================================
# Test: randn_rotor
# =============================================================================

class TestRandnRotor:
    """Tests for uniformly random unit quaternions."""

    def test_single_rotor(self):
        R = randn_rotor(rng=3)
        assert isinstance(R, Quaternion)
        assert_allclose(abs(R), 1.0, rtol=1e-14)

    def test_unit_norms(self):
        R = randn_rotor(100, 7, rng=3)
        assert R.shape == (100, 7)
        assert_allclose(abs(R), 1.0, rtol=1e-14)

    def test_unit_norms_float32(self):
        R = randn_rotor(1000, rng=3, dtype=np.float32)
        assert R.dtype == np.float32
        assert_allclose(abs(R), 1.0, rtol=1e-6)

    def test_uniform_on_three_sphere(self):
        """Each squared component of a uniform rotor is Beta(1/2, 3/2)."""
        F = as_float_array(randn_rotor(100_000, rng=99))
        for component in F:
            result = stats.kstest(component ** 2, stats.beta(0.5, 1.5).cdf)
            assert result.pvalue > 1e-4

    def test_resamples_near_zero(self, caplog):
        caplog.set_level(logging.DEBUG, logger='quatalg.sampling')
        source = ZeroThenNormal(seed=1)
        R = randn_rotor(5, rng=source)
        assert source.calls == 2
        assert_allclose(abs(R), 1.0, rtol=1e-14)
        assert "Resampling 5 near-zero rotor sample(s)" in caplog.text

    def test_gives_up_after_budget(self):
        set_config(rotor_max_resamples=3)
        source = ConstantSource(0.0)
        with pytest.raises(ResamplingError):
            randn_rotor(2, rng=source)
        assert source.calls == 4

    def test_zero_budget(self):
        set_config(rotor_max_resamples=0)
        with pytest.raises(ResamplingError):
            randn_rotor(rng=ConstantSource(0.0))

    def test_multiprecision_rotors(self):
        with mpmath.workdps(50):
            R = randn_rotor(4, rng=3, dtype=mpmath.mpf)
            assert R.dtype == object
            for q in R:
                assert q.dtype is mpmath.mpf
                assert mpmath.almosteq(q.abs2(), 1, rel_eps=mpmath.mpf(10) ** -45)

    def test_single_multiprecision_rotor(self):
        R = randn_rotor(rng=3, dtype=mpmath.mpf)
        assert isinstance(R, Quaternion)
        assert mpmath.almosteq(abs(R), 1)

    def test_multiprecision_resampling(self):
        set_config(rotor_max_resamples=2)
        source = ConstantSource(0.0)
        with pytest.raises(ResamplingError):
            randn_rotor(3, rng=source, dtype=mpmath.mpf)
        assert source.calls == 3

    def test_rotors_contiguous_in_memory(self):
        R = randn_rotor(4, 2, rng=5)
        B = as_quat_array(as_float_array(R).ravel(order='K'))
        assert B.shape == (8,)
        for i, index in enumerate(np.ndindex(*R.shape)):
            assert B[i] == R[index]
