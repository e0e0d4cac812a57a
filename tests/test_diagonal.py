"""Tests for the diagonal matrix type."""

import math

import numpy as np
import pytest

from cmat_lab.algorithms.dense import CDense
from cmat_lab.algorithms.diagonal import DiagCDense, new_diagonal
from cmat_lab.data.errors import (
    IndexOutOfRangeError,
    InvalidDimensionError,
    NormOrderError,
    ShapeMismatchError,
    UnsupportedOperandError,
    ZeroLengthError,
)
from cmat_lab.data.storage import Vector


class TestConstruction:
    """Tests for DiagCDense construction."""

    def test_empty(self) -> None:
        """No arguments give an empty diagonal."""
        d = DiagCDense()
        assert d.is_empty()
        assert d.dims() == (0, 0)

    def test_zero_filled(self) -> None:
        """Size without data gives a zero diagonal."""
        d = DiagCDense(3)
        assert d.diag() == 3
        np.testing.assert_array_equal(d.to_numpy(), np.zeros((3, 3)))

    def test_empty_data_means_zeros(self) -> None:
        """Empty data is treated like no data."""
        d = DiagCDense(2, [])
        np.testing.assert_array_equal(d.to_numpy(), np.zeros((2, 2)))

    @pytest.mark.parametrize("n,kind", [(0, "zero"), (-2, "negative")])
    def test_non_positive_size(self, n: int, kind: str) -> None:
        """Sizes that are not positive are rejected."""
        with pytest.raises(InvalidDimensionError, match=kind):
            DiagCDense(n)

    def test_data_length_mismatch(self) -> None:
        """Non-empty data must have length n."""
        with pytest.raises(ShapeMismatchError):
            DiagCDense(3, [1, 2])

    def test_new_diagonal(self) -> None:
        """new_diagonal builds the matrix with the given entries."""
        d = new_diagonal(2, [1j, 2])
        np.testing.assert_array_equal(d.to_numpy(), [[1j, 0], [0, 2]])


class TestElementAccess:
    """Tests for at(), set() and set_diag()."""

    def test_off_diagonal_reads_zero(self) -> None:
        """Entries off the diagonal are zero."""
        d = DiagCDense(3, [1, 2, 3])
        assert d.at(0, 2) == 0
        assert d.at(1, 1) == 2

    def test_set_diagonal_entry(self) -> None:
        """set() on the diagonal stores the value."""
        d = DiagCDense(2)
        d.set(1, 1, 4j)
        assert d.at(1, 1) == 4j

    def test_set_off_diagonal_zero(self) -> None:
        """Writing zero off the diagonal is accepted and ignored."""
        d = DiagCDense(2, [1, 1])
        d.set(0, 1, 0)
        np.testing.assert_array_equal(d.to_numpy(), np.eye(2))

    def test_set_off_diagonal_nonzero(self) -> None:
        """Writing a non-zero value off the diagonal is rejected."""
        with pytest.raises(UnsupportedOperandError):
            DiagCDense(2).set(0, 1, 1)

    def test_set_diag_out_of_range(self) -> None:
        """set_diag checks the index."""
        with pytest.raises(IndexOutOfRangeError):
            DiagCDense(2).set_diag(2, 1)

    def test_at_out_of_range(self) -> None:
        """at() checks both indices."""
        with pytest.raises(IndexOutOfRangeError):
            DiagCDense(2).at(0, 3)


class TestViews:
    """Tests for transposes and raw descriptors."""

    def test_transpose_is_self(self) -> None:
        """A diagonal matrix is its own transpose."""
        d = DiagCDense(2)
        assert d.T() is d

    def test_conjugate_transpose(self) -> None:
        """H() conjugates the diagonal."""
        d = DiagCDense(2, [1 + 1j, 2j])
        h = d.H()
        assert h.at(0, 0) == 1 - 1j
        assert h.at(1, 1) == -2j

    def test_band_descriptor(self) -> None:
        """The band view has no sub- or super-diagonals."""
        d = DiagCDense(3)
        band = d.raw_band()
        assert (band.rows, band.cols, band.kl, band.ku) == (3, 3, 0, 0)
        assert band.data is d.raw_vector().data
        assert d.bandwidth() == (0, 0)

    def test_diag_view_shares_storage(self) -> None:
        """The diagonal view writes through to the receiver."""
        d = DiagCDense(2)
        d.diag_view().set_diag(0, 5)
        assert d.at(0, 0) == 5


class TestState:
    """Tests for reset and reuse."""

    def test_reset(self) -> None:
        """reset() empties the diagonal."""
        d = DiagCDense(3, [1, 2, 3])
        d.reset()
        assert d.is_empty()
        assert d.diag() == 0

    def test_reuse_resizes_empty(self) -> None:
        """An empty diagonal is sized by reuse_as_non_zeroed()."""
        d = DiagCDense(2)
        d.reset()
        d.reuse_as_non_zeroed(4)
        assert d.dims() == (4, 4)

    def test_reuse_zero_length(self) -> None:
        """A diagonal of size zero cannot be requested."""
        with pytest.raises(ZeroLengthError):
            DiagCDense().reuse_as_non_zeroed(0)

    def test_reuse_mismatch(self) -> None:
        """A non-empty diagonal must already have the requested size."""
        with pytest.raises(ShapeMismatchError):
            DiagCDense(2).reuse_as_non_zeroed(3)

    def test_zero(self) -> None:
        """zero() clears the diagonal."""
        d = DiagCDense(2, [1, 2])
        d.zero()
        assert d.trace() == 0


class TestDiagFrom:
    """Tests for diag_from."""

    def test_from_dense(self, engine, random_dense) -> None:
        """The diagonal of a rectangular matrix has min(rows, cols) entries."""
        m = random_dense(2, 3)
        d = DiagCDense()
        d.diag_from(m)
        assert d.diag() == 2
        np.testing.assert_array_equal(np.diag(d.to_numpy()), np.diag(m.to_numpy()))

    def test_from_diagonal(self, engine) -> None:
        """Copying from another diagonal uses its entries."""
        src = DiagCDense(3, [1, 2j, 3])
        d = DiagCDense()
        d.diag_from(src)
        np.testing.assert_array_equal(d.to_numpy(), src.to_numpy())

    def test_from_self(self, engine) -> None:
        """Copying a diagonal onto itself leaves it unchanged."""
        d = DiagCDense(3, [1, 2, 3])
        d.diag_from(d)
        np.testing.assert_array_equal(np.diag(d.to_numpy()), [1, 2, 3])

    def test_from_dense_sharing_buffer(self, engine) -> None:
        """A diagonal stored over a dense matrix's buffer reads the old values."""
        arr = np.array([1, 2, 3, 4], dtype=np.complex128)
        m = CDense(2, 2, arr)
        d = DiagCDense(2, arr[:2])
        d.diag_from(m)
        np.testing.assert_array_equal(np.diag(d.to_numpy()), [1, 4])

    def test_from_zero_sized(self) -> None:
        """A zero-sized source has no diagonal."""
        with pytest.raises(ZeroLengthError):
            DiagCDense().diag_from(CDense(0, 3))

    def test_size_mismatch(self, random_dense) -> None:
        """A non-empty receiver must match the source's diagonal length."""
        with pytest.raises(ShapeMismatchError):
            DiagCDense(3).diag_from(random_dense(2, 2))


class TestScale:
    """Tests for diagonal scaling."""

    def test_scale(self) -> None:
        """Every entry is multiplied by the factor."""
        d = DiagCDense()
        d.scale(2j, DiagCDense(2, [1, 1j]))
        np.testing.assert_array_equal(np.diag(d.to_numpy()), [2j, -2])

    def test_scale_self(self) -> None:
        """Scaling in place is allowed."""
        d = DiagCDense(2, [1, 2])
        d.scale(-1, d)
        np.testing.assert_array_equal(np.diag(d.to_numpy()), [-1, -2])

    def test_scale_conjugate_transpose(self) -> None:
        """A conjugate-transposed source is conjugated."""
        src = DiagCDense(2, [1j, 1 + 1j])
        d = DiagCDense()
        d.scale(1, src.H())
        np.testing.assert_array_equal(np.diag(d.to_numpy()), [-1j, 1 - 1j])

    def test_dense_operand(self, random_dense) -> None:
        """Only diagonal operands can be scaled into a diagonal."""
        with pytest.raises(UnsupportedOperandError):
            DiagCDense().scale(2, random_dense(2, 2))


class TestReductions:
    """Tests for trace and norm."""

    def test_trace(self) -> None:
        """Trace sums the diagonal."""
        assert DiagCDense(3, [1, 2j, -3]).trace() == -2 + 2j

    @pytest.mark.parametrize(
        "order,expected",
        [(1, 5.0), (math.inf, 5.0), (2, math.sqrt(1 + 25 + 4))],
    )
    def test_norm(self, order: float, expected: float) -> None:
        """Supported orders of the diagonal's norm."""
        d = DiagCDense(3, [1, 3 + 4j, -2])
        assert d.norm(order) == pytest.approx(expected)

    def test_norm_default_order(self) -> None:
        """The default order is 2."""
        d = DiagCDense(2, [3, 4])
        assert d.norm() == pytest.approx(5.0)

    def test_unknown_order(self) -> None:
        """Orders other than 1, 2 and inf are rejected."""
        with pytest.raises(NormOrderError, match="Unknown norm order"):
            DiagCDense(2).norm(3)

    def test_empty(self) -> None:
        """Reductions of an empty diagonal fail."""
        d = DiagCDense()
        with pytest.raises(ZeroLengthError):
            d.trace()
        with pytest.raises(ZeroLengthError):
            d.norm()


class TestStridedDiagonal:
    """Diagonals whose entries are spaced more than one element apart."""

    def test_from_vector_zero(self) -> None:
        """zero() clears only the entries on the increment."""
        data = np.arange(1, 8, dtype=np.complex128)
        d = DiagCDense.from_vector(Vector(n=4, inc=2, data=data))
        assert d.dims() == (4, 4)
        assert d.at(3, 3) == 7
        d.zero()
        np.testing.assert_array_equal(data, [0, 2, 0, 4, 0, 6, 0])

    def test_dense_diagonal_zero(self, random_array) -> None:
        """Zeroing the diagonal view of a dense matrix leaves the rest alone."""
        values = random_array(3, 3)
        m = CDense.from_array(values.copy())
        m.diag_view().zero()
        expected = values.copy()
        np.fill_diagonal(expected, 0)
        np.testing.assert_array_equal(m.to_numpy(), expected)

    @pytest.mark.parametrize(
        "n,inc,length,error",
        [
            (0, 1, 4, InvalidDimensionError),
            (2, 0, 4, InvalidDimensionError),
            (3, 2, 4, ShapeMismatchError),
        ],
    )
    def test_from_vector_validation(self, n: int, inc: int, length: int, error: type) -> None:
        """Empty vectors, zero increments and short buffers are rejected."""
        vec = Vector(n=n, inc=inc, data=np.zeros(length, dtype=np.complex128))
        with pytest.raises(error):
            DiagCDense.from_vector(vec)

    def test_reductions(self, random_array) -> None:
        """trace and norm read through the stride."""
        values = random_array(3, 3)
        d = CDense.from_array(values).diag_view()
        assert d.trace() == pytest.approx(np.trace(values))
        assert d.norm() == pytest.approx(np.linalg.norm(np.diag(values)))

    def test_diag_from_view(self, engine, random_array) -> None:
        """Copying out of a strided diagonal gathers the dense diagonal."""
        values = random_array(3, 3)
        d = DiagCDense()
        d.diag_from(CDense.from_array(values).diag_view())
        np.testing.assert_allclose(np.diag(d.to_numpy()), np.diag(values))

    def test_diag_from_into_view(self, engine, random_array) -> None:
        """Copying into a strided diagonal writes the dense diagonal only."""
        values = random_array(3, 3)
        m = CDense.from_array(values.copy())
        m.diag_view().diag_from(DiagCDense(3, [1, 2j, 3]))
        expected = values.copy()
        np.fill_diagonal(expected, [1, 2j, 3])
        np.testing.assert_allclose(m.to_numpy(), expected)

    def test_diag_from_own_matrix(self, engine, random_array) -> None:
        """A view refilled from the matrix it sits on keeps its values."""
        values = random_array(3, 3)
        m = CDense.from_array(values.copy())
        m.diag_view().diag_from(m)
        np.testing.assert_allclose(m.to_numpy(), values)

    def test_scale_in_place(self, random_array) -> None:
        """Scaling a view by itself doubles the dense diagonal only."""
        values = random_array(3, 3)
        m = CDense.from_array(values.copy())
        d = m.diag_view()
        d.scale(2, d)
        expected = values.copy()
        np.fill_diagonal(expected, 2 * np.diag(values))
        np.testing.assert_allclose(m.to_numpy(), expected)

    def test_add_own_diagonal(self, engine, random_array) -> None:
        """m.add(m, m.diag_view()) adds the old diagonal once."""
        values = random_array(3, 3)
        m = CDense.from_array(values.copy())
        m.add(m, m.diag_view())
        np.testing.assert_allclose(m.to_numpy(), values + np.diag(np.diag(values)))
