"""Diagonal complex matrix stored as a single strided vector.

DiagCDense represents an n x n matrix whose off-diagonal entries are
implicitly zero. Only the diagonal is stored, in a Vector descriptor
(n, inc, data); entry i lives at data[i * inc]. Diagonals built by this module
are unit-stride; CDense.diag_view() and from_vector() give strided ones that
share another matrix's storage.

Empty state: n == 0 and inc == 0, always together. An empty diagonal is
sized by the next operation writing into it (diag_from, scale).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from cmat_lab.algorithms import kernels
from cmat_lab.algorithms.aliasing import Operand, Path, operand_of, resolve
from cmat_lab.algorithms.matrix import (
    CMatrix,
    RawBander,
    check_index,
    check_matrix,
    strip_views,
)
from cmat_lab.data.config import get_config
from cmat_lab.data.errors import (
    IndexOutOfRangeError,
    InvalidDimensionError,
    NormOrderError,
    ShapeMismatchError,
    UnsupportedOperandError,
    ZeroLengthError,
)
from cmat_lab.data.storage import Band, Vector, as_buffer, zeros

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class DiagCDense(RawBander, CMatrix):
    """Diagonal complex128 matrix.

    Args:
        n: Number of rows and columns (omit for an empty diagonal).
        data: Optional diagonal entries of length n; zeros when absent or empty.

    Raises:
        InvalidDimensionError: If n is not positive.
        ShapeMismatchError: If data is non-empty and its length is not n.
    """

    def __init__(self, n: int | None = None, data: ArrayLike | None = None) -> None:
        if n is None:
            self._buf = zeros(0)
            self._mat = Vector(n=0, inc=0, data=self._buf)
            return

        if n <= 0:
            kind = "zero" if n == 0 else "negative"
            msg = f"{kind} diagonal size: {n}"
            raise InvalidDimensionError(msg)

        if data is None or np.size(data) == 0:
            self._buf = zeros(n)
        else:
            self._buf = as_buffer(data, n)
        self._mat = Vector(n=n, inc=1, data=self._buf)

    @classmethod
    def from_vector(cls, vec: Vector) -> DiagCDense:
        """Build a diagonal over an existing strided vector, sharing its data.

        Raises:
            InvalidDimensionError: If the vector is empty or its increment is
                not positive.
            ShapeMismatchError: If the data is too short for n and inc.
        """
        if vec.n <= 0 or vec.inc <= 0:
            msg = f"diagonal vector needs positive n and inc, got n={vec.n} inc={vec.inc}"
            raise InvalidDimensionError(msg)
        if len(vec.data) < vec.span:
            msg = f"buffer of length {len(vec.data)} too short for n={vec.n} inc={vec.inc}"
            raise ShapeMismatchError(msg)
        d = cls.__new__(cls)
        d._buf = vec.data
        d._mat = vec
        return d

    # ------------------------------------------------------------------
    # CMatrix
    # ------------------------------------------------------------------

    def diag(self) -> int:
        """Number of rows/columns."""
        return self._mat.n

    def dims(self) -> tuple[int, int]:
        return self._mat.n, self._mat.n

    def at(self, r: int, c: int) -> complex:
        check_index(r, c, self._mat.n, self._mat.n)
        if r != c:
            return 0j
        return complex(self._mat.data[r * self._mat.inc])

    def set(self, r: int, c: int, v: complex) -> None:
        """Set a diagonal entry; off-diagonal entries only accept zero."""
        check_index(r, c, self._mat.n, self._mat.n)
        if r == c:
            self._mat.data[r * self._mat.inc] = v
            return
        if v != 0:
            msg = f"cannot set off-diagonal element ({r}, {c}) of a diagonal matrix"
            raise UnsupportedOperandError(msg)

    def set_diag(self, i: int, v: complex) -> None:
        """Set diagonal entry i."""
        if not 0 <= i < self._mat.n:
            msg = f"diagonal index {i} out of range for size {self._mat.n}"
            raise IndexOutOfRangeError(msg)
        self._mat.data[i * self._mat.inc] = v

    def T(self) -> CMatrix:  # noqa: N802
        return self

    def bandwidth(self) -> tuple[int, int]:
        """Lower and upper bandwidths, always (0, 0)."""
        return 0, 0

    def raw_band(self) -> Band:
        n = self._mat.n
        return Band(rows=n, cols=n, kl=0, ku=0, stride=self._mat.inc, data=self._mat.data)

    def raw_vector(self) -> Vector:
        """Return the diagonal's vector descriptor, sharing storage."""
        return self._mat

    def diag_view(self) -> DiagCDense:
        """Return the diagonal as a matrix backed by the receiver's data."""
        return self

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        """Whether the receiver can be sized by the next operation writing into it."""
        # n is 0 whenever inc is; reset() changes both.
        return self._mat.inc == 0

    def reset(self) -> None:
        """Empty the receiver so it can be reused as a destination.

        A reset diagonal is resized with unit stride inside its old buffer;
        do not reset one that shares storage with another matrix.
        """
        self._mat = Vector(n=0, inc=0, data=self._buf[:0])

    def zero(self) -> None:
        """Set every diagonal entry to zero."""
        self._mat.as_array()[...] = 0

    def reuse_as_non_zeroed(self, n: int) -> None:
        """Size an empty receiver to n x n, or check a non-empty one is n x n.

        Raises:
            ZeroLengthError: If n is zero.
            ShapeMismatchError: If the receiver is not empty and not n x n.
        """
        if n == 0:
            msg = "diagonal must have positive size"
            raise ZeroLengthError(msg)
        if self.is_empty():
            if self._buf.size < n:
                self._buf = zeros(n)
            self._mat = Vector(n=n, inc=1, data=self._buf[:n])
            return
        if n != self._mat.n:
            msg = f"diagonal has size {self._mat.n}, result has size {n}"
            raise ShapeMismatchError(msg)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def diag_from(self, m: CMatrix) -> None:
        """Copy the diagonal of m into the receiver.

        The receiver must be empty or of size min(rows, cols) of m.

        Raises:
            ZeroLengthError: If m has a zero dimension.
            ShapeMismatchError: If the receiver has a different size.
        """
        check_matrix(m, "m")
        n = min(m.dims())
        self.reuse_as_non_zeroed(n)

        path = resolve(self._mat, [operand_of(m)], elementwise=True)
        if isinstance(m, DiagCDense) and get_config().fast_paths:
            if path is Path.ISOLATED:
                self._mat.as_array()[...] = m._mat.as_array().copy()
                return
            kernels.copy(m._mat, self._mat)
            return

        values = [m.at(i, i) for i in range(n)] if path is Path.ISOLATED else None
        for i in range(n):
            self.set_diag(i, m.at(i, i) if values is None else values[i])

    def scale(self, f: complex, a: CMatrix) -> None:
        """Store f * a in the receiver; a must be a DiagCDense, possibly behind views.

        Raises:
            UnsupportedOperandError: If a is not diagonal.
            ShapeMismatchError: If the receiver is not empty and differs in size.
        """
        check_matrix(a, "a")
        root, _, conjugated = strip_views(a)
        if not isinstance(root, DiagCDense):
            msg = f"diagonal scale needs a diagonal operand, got {type(a).__name__}"
            raise UnsupportedOperandError(msg)
        f = complex(f)
        self.reuse_as_non_zeroed(root.diag())

        src = root._mat.as_array()
        if conjugated:
            src = src.conj()
        out = self._mat.as_array()
        path = resolve(self._mat, [Operand(root._mat)], elementwise=True)
        if path is Path.ISOLATED:
            out[...] = src * f
            return
        np.multiply(src, f, out=out)

    def trace(self) -> complex:
        """Sum of the diagonal entries.

        Raises:
            ZeroLengthError: If the receiver is empty.
        """
        if self.is_empty():
            msg = "trace of an empty diagonal"
            raise ZeroLengthError(msg)
        return complex(self._mat.as_array().sum())

    def norm(self, ord: float = 2) -> float:  # noqa: A002
        """Matrix norm of the receiver.

        Valid orders:
            1 or inf - maximum diagonal element magnitude
            2        - Frobenius norm of the diagonal

        Raises:
            ZeroLengthError: If the receiver is empty.
            NormOrderError: If ord is not 1, 2 or inf.
        """
        if self.is_empty():
            msg = "norm of an empty diagonal"
            raise ZeroLengthError(msg)
        values = self._mat.as_array()
        if ord == 1 or ord == math.inf:
            return float(np.max(np.abs(values)))
        if ord == 2:
            return float(np.linalg.norm(values))
        msg = f"Unknown norm order: {ord}. Valid: [1, 2, inf]"
        raise NormOrderError(msg)

    def to_numpy(self) -> NDArray[np.complex128]:
        """Return the full n x n matrix as a 2-D numpy array."""
        return np.diag(self._mat.as_array())

    def __repr__(self) -> str:
        return f"DiagCDense({self._mat.n})"


def new_diagonal(n: int, data: ArrayLike | None = None) -> DiagCDense:
    """Create an n x n diagonal matrix, zero-filled unless data is given."""
    return DiagCDense(n, data)


__all__ = ["DiagCDense", "new_diagonal"]
