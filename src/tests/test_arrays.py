"""
===============================================================================
QUATALG - Quaternion Array Test Suite
===============================================================================
Tests for QuaternionArray (construction, indexing, vectorized arithmetic)
and the zero-copy views as_float_array / as_quat_array, including that
writes through one view are visible through the other.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging
from fractions import Fraction

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from quatalg import (Quaternion, QuaternionArray, ShapeError,
                     UnsupportedScalarError, ZeroNormError, as_float_array,
                     as_quat_array, imz, randn)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def pair():
    """Return a 1-D integer array of two quaternions."""
    return QuaternionArray.from_quaternions(
        [Quaternion(1, 2, 3, 4), Quaternion(5, 6, 7, 8)])


@pytest.fixture
def grid():
    """Return a (3, 2) float array of deterministic random quaternions."""
    return randn(3, 2, rng=7)


# =============================================================================
# Test: Construction and indexing
# =============================================================================

class TestQuaternionArray:
    """Tests for the QuaternionArray container."""

    def test_from_quaternions(self, pair):
        assert pair.shape == (2,)
        assert pair.dtype.kind == 'i'
        assert pair[1] == Quaternion(5, 6, 7, 8)

    def test_from_quaternions_with_shape(self):
        items = [Quaternion(float(i)) for i in range(6)]
        A = QuaternionArray.from_quaternions(items, shape=(2, 3))
        assert A.shape == (2, 3)
        assert A[1, 2] == 5

    def test_from_quaternions_promotes(self):
        A = QuaternionArray.from_quaternions([Quaternion(1, 0, 0, 0), 1.5 * imz])
        assert A.dtype == np.float64

    def test_zeros(self):
        A = QuaternionArray.zeros((2, 3))
        assert A.shape == (2, 3)
        assert A.ndim == 2
        assert A.size == 6
        assert np.all(A == 0)

    def test_rejects_bad_leading_axis(self):
        with pytest.raises(ShapeError):
            QuaternionArray(np.zeros((3, 2)))
        with pytest.raises(ShapeError):
            QuaternionArray(np.float64(1.0))

    def test_rejects_complex(self):
        with pytest.raises(UnsupportedScalarError):
            QuaternionArray(np.zeros(4, dtype=complex))

    def test_len_and_iteration(self, grid):
        assert len(grid) == 3
        rows = list(grid)
        assert all(isinstance(row, QuaternionArray) for row in rows)
        assert rows[0].shape == (2,)

    def test_slice_is_view(self, grid):
        part = grid[1:]
        part[0, 0] = Quaternion(9.0, 9.0, 9.0, 9.0)
        assert grid[1, 0] == Quaternion(9.0, 9.0, 9.0, 9.0)

    def test_setitem_scalar(self, grid):
        grid[2, 1] = 4.0
        assert grid[2, 1] == 4

    def test_setitem_broadcasts(self, grid):
        grid[0] = imz
        assert np.all(grid[0] == imz)

    def test_component_views(self, pair):
        assert_array_equal(pair.w, [1, 5])
        assert_array_equal(pair.z, [4, 8])
        assert pair.vec.shape == (3, 2)
        pair.x[0] = 20
        assert pair[0] == Quaternion(1, 20, 3, 4)

    def test_tolist(self, pair):
        assert pair.tolist() == [Quaternion(1, 2, 3, 4), Quaternion(5, 6, 7, 8)]

    def test_object_array_of_fractions(self):
        A = QuaternionArray.from_quaternions(
            [Quaternion(Fraction(1, 2), 0, 0, 0), Quaternion(Fraction(1, 3), 1, 0, 0)])
        assert A.dtype == object
        assert A.abs2()[1] == Fraction(10, 9)
        assert A[0].dtype is Fraction


# =============================================================================
# Test: Vectorized arithmetic
# =============================================================================

class TestArrayArithmetic:
    """Vectorized operations agree with the per-element Quaternion ones."""

    def test_hamilton_product(self, grid):
        other = randn(3, 2, rng=8)
        product = grid * other
        for index in np.ndindex(*grid.shape):
            assert product[index].isapprox(grid[index] * other[index])

    def test_product_with_single_quaternion(self, grid):
        q = Quaternion(0.5, -1.0, 2.0, 0.25)
        left = q * grid
        right = grid * q
        for index in np.ndindex(*grid.shape):
            assert left[index].isapprox(q * grid[index])
            assert right[index].isapprox(grid[index] * q)

    def test_broadcasting(self, grid):
        row = randn(2, rng=9)
        result = grid + row
        assert result.shape == (3, 2)
        assert result[2, 1].isapprox(grid[2, 1] + row[1])

    def test_scalar_operations(self, pair):
        assert np.all((pair + 1) == QuaternionArray.from_quaternions(
            [Quaternion(2, 2, 3, 4), Quaternion(6, 6, 7, 8)]))
        assert (1 - pair)[0] == Quaternion(0, -2, -3, -4)
        assert (2 * pair)[1] == Quaternion(10, 12, 14, 16)
        assert (np.float64(2) * pair)[1] == Quaternion(10, 12, 14, 16)
        assert (-pair)[0] == Quaternion(-1, -2, -3, -4)

    def test_division(self, grid):
        ratio = grid / grid
        assert_allclose(as_float_array(ratio)[0], 1.0, rtol=1e-14)
        assert_allclose(as_float_array(ratio)[1:], 0.0, atol=1e-14)

    def test_divide_by_zero(self, pair):
        with pytest.raises(ZeroNormError):
            pair / 0
        with pytest.raises(ZeroNormError):
            QuaternionArray.zeros(2).inverse()

    def test_norms(self, pair):
        assert_array_equal(pair.abs2(), [30, 174])
        assert_allclose(abs(pair), np.sqrt([30, 174]))
        assert_array_equal(pair.abs2vec(), [29, 149])

    def test_conjugate(self, pair):
        assert pair.conjugate()[1] == Quaternion(5, -6, -7, -8)

    def test_elementwise_equality(self, pair):
        other = pair.copy()
        other[1] = Quaternion(0, 0, 0, 0)
        assert_array_equal(pair == other, [True, False])
        assert_array_equal(pair != other, [False, True])


# =============================================================================
# Test: as_float_array
# =============================================================================

class TestAsFloatArray:
    """Tests for viewing quaternion arrays as component arrays."""

    def test_shape_and_values(self, pair):
        F = as_float_array(pair)
        assert F.shape == (4, 2)
        assert_array_equal(F[:, 0], [1, 2, 3, 4])

    def test_shares_memory(self, grid):
        F = as_float_array(grid)
        assert np.shares_memory(F, grid.ndarray)

    def test_writes_visible_in_quaternions(self, grid):
        F = as_float_array(grid)
        F[3, 1, 0] = 42.0
        assert grid[1, 0].z == 42.0

    def test_single_quaternion(self):
        assert_array_equal(as_float_array(Quaternion(1, 2, 3, 4)), [1, 2, 3, 4])

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_float_array(np.zeros(4))


# =============================================================================
# Test: as_quat_array
# =============================================================================

class TestAsQuatArray:
    """Tests for viewing component arrays as quaternion arrays."""

    def test_leading_four_is_consumed(self):
        A = as_quat_array(np.arange(4.0))
        assert A.shape == ()
        assert A[()] == Quaternion(0, 1, 2, 3)

    def test_groups_consecutive_fours(self):
        A = as_quat_array(np.arange(8.0))
        assert A.shape == (2,)
        assert A[0] == Quaternion(0, 1, 2, 3)
        assert A[1] == Quaternion(4, 5, 6, 7)

    def test_trailing_axes_kept(self):
        B = np.arange(24.0).reshape(8, 3)
        A = as_quat_array(B)
        assert A.shape == (2, 3)
        assert A[1, 2] == Quaternion(*B[4:8, 2])

    def test_no_copy(self):
        B = np.arange(12.0)
        A = as_quat_array(B)
        assert np.shares_memory(A.ndarray, B)
        A[1] = Quaternion(-1.0, -1.0, -1.0, -1.0)
        assert_array_equal(B[4:8], -1.0)

    def test_writes_visible_in_quaternions(self):
        B = np.zeros((4, 5))
        A = as_quat_array(B)
        B[2, 3] = 7.0
        assert A[3].y == 7.0

    @pytest.mark.parametrize("shape", [(5,), (6, 2), (3,)])
    def test_rejects_indivisible_length(self, shape):
        with pytest.raises(ShapeError):
            as_quat_array(np.zeros(shape))

    def test_shape_error_is_value_error(self):
        with pytest.raises(ValueError):
            as_quat_array(np.zeros(7))

    def test_rejects_zero_dimensional(self):
        with pytest.raises(ShapeError):
            as_quat_array(np.float64(1.0))

    def test_rejects_complex(self):
        with pytest.raises(UnsupportedScalarError):
            as_quat_array(np.zeros(8, dtype=complex))

    def test_logs_reinterpretation(self, caplog):
        caplog.set_level(logging.DEBUG, logger='quatalg.arrays.views')
        as_quat_array(np.zeros(8))
        assert "2 quaternions" in caplog.text


# =============================================================================
# Test: Round trips
# =============================================================================

class TestRoundTrip:
    """as_float_array and as_quat_array are mutual inverses."""

    def test_quaternions_to_floats_and_back(self, grid):
        A = as_quat_array(as_float_array(grid))
        assert A.shape == grid.shape
        assert np.all(A == grid)

    @pytest.mark.parametrize("shape", [(4,), (4, 3), (4, 2, 5)])
    def test_floats_to_quaternions_and_back(self, shape):
        B = np.random.default_rng(0).standard_normal(shape)
        F = as_float_array(as_quat_array(B))
        assert_array_equal(F, B)
        assert np.shares_memory(F, B)

    def test_grouped_floats_round_trip(self):
        """A leading axis of 4n comes back grouped as (4, n, ...)."""
        B = np.arange(24.0).reshape(8, 3)
        F = as_float_array(as_quat_array(B))
        assert F.shape == (4, 2, 3)
        assert_array_equal(np.moveaxis(F, 0, 1).reshape(B.shape), B)

    def test_integer_storage(self):
        B = np.arange(8)
        A = as_quat_array(B)
        assert A[1] == Quaternion(4, 5, 6, 7)
        assert issubclass(A[1].dtype, np.integer)


# =============================================================================
# Test: Memory layout
# =============================================================================

class TestMemoryLayout:
    """Each allocated quaternion is stored as 4 contiguous scalars w, x, y, z."""

    @staticmethod
    def _from_memory(A):
        """Quaternions read back from the raw storage order of A."""
        return as_quat_array(as_float_array(A).ravel(order='K'))

    def test_randn(self):
        A = randn(3, rng=1)
        assert np.all(self._from_memory(A) == A)

    def test_randn_multidimensional(self, grid):
        B = self._from_memory(grid)
        assert B.shape == (6,)
        for i, index in enumerate(np.ndindex(*grid.shape)):
            assert B[i] == grid[index]

    def test_from_quaternions(self, pair):
        assert_array_equal(as_float_array(pair).ravel(order='K'),
                           [1, 2, 3, 4, 5, 6, 7, 8])

    def test_zeros_strides(self):
        A = QuaternionArray.zeros((2, 3))
        itemsize = A.dtype.itemsize
        assert A.ndarray.strides == (itemsize, 12 * itemsize, 4 * itemsize)

    @pytest.mark.parametrize("operation", [
        lambda A, B: A * B,
        lambda A, B: A + B,
        lambda A, B: A - B,
        lambda A, B: 2.0 * A,
        lambda A, B: A / B,
        lambda A, B: A.conjugate(),
        lambda A, B: A.copy(),
    ])
    def test_operation_results(self, operation):
        A = randn(5, rng=2)
        B = randn(5, rng=3)
        result = operation(A, B)
        assert np.all(self._from_memory(result) == result)

    def test_copy_of_component_major_input(self):
        """Copies pack quaternions even when the wrapped input was (4, n) C-ordered."""
        B = np.arange(12.0).reshape(4, 3)
        A = as_quat_array(B).copy()
        assert_array_equal(as_float_array(A).ravel(order='K'),
                           [0, 3, 6, 9, 1, 4, 7, 10, 2, 5, 8, 11])
