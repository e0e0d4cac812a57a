"""Dense complex matrix with row-major strided storage.

CDense is the receiver of the arithmetic operations: `c.add(a, b)` writes
a + b into c. A receiver in the UNINITIALIZED state is sized by the
operation; any other receiver must already have the result's shape.

Storage is shared, never copied, by:
- slice(), which returns a sub-matrix view onto the same buffer
- diag_view(), which returns the main diagonal as a strided DiagCDense
- T() and H(), which return transposition views
- construction from a contiguous complex128 numpy array

Example:
    >>> a = CDense(2, 2, [1 + 1j, 0, 1, 2j])
    >>> b = CDense(2, 2, [0, 1j, 0, 3 + 2j])
    >>> c = CDense()
    >>> c.add(a, b)
    >>> c.at(1, 1)
    (3+4j)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import numpy as np

from cmat_lab.algorithms import arithmetic
from cmat_lab.algorithms.aliasing import Path, operand_of, resolve
from cmat_lab.algorithms.diagonal import DiagCDense
from cmat_lab.algorithms.matrix import (
    CMatrix,
    RawMatrixer,
    check_index,
    check_matrix,
    untranspose_extract,
)
from cmat_lab.data.config import get_config
from cmat_lab.data.errors import (
    IndexOutOfRangeError,
    InvalidDimensionError,
    ShapeMismatchError,
    ZeroLengthError,
)
from cmat_lab.data.storage import (
    BlasTranspose,
    General,
    StorageState,
    Vector,
    as_buffer,
    zeros,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class CDense(RawMatrixer, CMatrix):
    """Dense complex128 matrix.

    Args:
        rows: Number of rows (omit together with cols for an empty matrix).
        cols: Number of columns.
        data: Optional row-major data of length rows * cols. A contiguous
            complex128 array is adopted without copying.

    Raises:
        InvalidDimensionError: If a dimension is negative or only one is given.
        ShapeMismatchError: If data does not hold rows * cols elements.
    """

    def __init__(
        self,
        rows: int | None = None,
        cols: int | None = None,
        data: ArrayLike | None = None,
    ) -> None:
        if rows is None and cols is None:
            if data is not None:
                msg = "data given without dimensions"
                raise ShapeMismatchError(msg)
            self._buf = zeros(0)
            self._mat = General(rows=0, cols=0, stride=0, data=self._buf)
            self._state = StorageState.UNINITIALIZED
            return

        if rows is None or cols is None:
            msg = "rows and cols must be given together"
            raise InvalidDimensionError(msg)
        if rows < 0 or cols < 0:
            msg = f"negative dimension: {rows}x{cols}"
            raise InvalidDimensionError(msg)

        size = rows * cols
        self._buf = zeros(size) if data is None else as_buffer(data, size)
        self._mat = General(rows=rows, cols=cols, stride=max(1, cols), data=self._buf)
        self._state = StorageState.ZERO_SIZED if size == 0 else StorageState.POPULATED

    @classmethod
    def from_array(cls, array: ArrayLike) -> CDense:
        """Build a matrix from a 2-D array-like (shares a contiguous complex128 array)."""
        arr = np.asarray(array)
        if arr.ndim != 2:
            msg = f"expected a 2-D array, got {arr.ndim} dimensions"
            raise ShapeMismatchError(msg)
        return cls(arr.shape[0], arr.shape[1], arr)

    # ------------------------------------------------------------------
    # CMatrix
    # ------------------------------------------------------------------

    def dims(self) -> tuple[int, int]:
        return self._mat.rows, self._mat.cols

    def at(self, r: int, c: int) -> complex:
        check_index(r, c, self._mat.rows, self._mat.cols)
        return complex(self._mat.data[r * self._mat.stride + c])

    def set(self, r: int, c: int, v: complex) -> None:
        check_index(r, c, self._mat.rows, self._mat.cols)
        self._mat.data[r * self._mat.stride + c] = v

    def raw_matrix(self) -> General:
        return self._mat

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> StorageState:
        """Allocation state of the receiver."""
        return self._state

    def is_empty(self) -> bool:
        """Whether the receiver can be sized by the next operation writing into it."""
        return self._state is StorageState.UNINITIALIZED

    def reset(self) -> None:
        """Return the receiver to the empty state, keeping its buffer for reuse.

        Reset must not be used while other matrices share the receiver's
        storage; they would see it overwritten once it is reused.
        """
        self._mat = General(rows=0, cols=0, stride=0, data=self._buf[:0])
        self._state = StorageState.UNINITIALIZED

    def zero(self) -> None:
        """Set every element to zero."""
        self._mat.as_array()[...] = 0

    def reuse_as_non_zeroed(self, r: int, c: int) -> None:
        """Size an empty receiver to r x c, or check a non-empty one is r x c.

        Newly sized storage may hold stale values from an earlier use.

        Raises:
            ShapeMismatchError: If the receiver is not empty and not r x c.
        """
        if self._state is not StorageState.UNINITIALIZED:
            if (r, c) != self.dims():
                msg = f"destination is {self._mat.rows}x{self._mat.cols}, result is {r}x{c}"
                raise ShapeMismatchError(msg)
            return

        size = r * c
        if self._buf.size < size:
            self._buf = zeros(size)
        self._mat = General(rows=r, cols=c, stride=max(1, c), data=self._buf[:size])
        self._state = StorageState.ZERO_SIZED if size == 0 else StorageState.POPULATED

    @contextmanager
    def isolated_workspace(self, rows: int, cols: int) -> Iterator[CDense]:
        """Yield a private rows x cols workspace, copied into the receiver on success.

        If the body raises, the receiver is left untouched.
        """
        workspace = CDense(rows, cols)
        yield workspace
        self.copy_from(workspace)

    # ------------------------------------------------------------------
    # Views and copies
    # ------------------------------------------------------------------

    def slice(self, i: int, k: int, j: int, l: int) -> CDense:  # noqa: E741
        """Return rows [i, k) and columns [j, l) as a matrix sharing storage.

        Raises:
            IndexOutOfRangeError: If the bounds fall outside the receiver.
            ZeroLengthError: If the slice would be empty.
        """
        rows, cols = self.dims()
        if i < 0 or k > rows or k < i or j < 0 or l > cols or l < j:
            msg = f"slice [{i}:{k}, {j}:{l}] out of range for {rows}x{cols}"
            raise IndexOutOfRangeError(msg)
        if i == k or j == l:
            msg = f"slice [{i}:{k}, {j}:{l}] is empty"
            raise ZeroLengthError(msg)

        stride = self._mat.stride
        offset = i * stride + j
        span = (k - i - 1) * stride + (l - j)
        view = CDense.__new__(CDense)
        view._buf = self._mat.data[offset : offset + span]
        view._mat = General(rows=k - i, cols=l - j, stride=stride, data=view._buf)
        view._state = StorageState.POPULATED
        return view

    def diag_view(self) -> DiagCDense:
        """Return the main diagonal as a DiagCDense sharing the receiver's storage.

        The diagonal has min(rows, cols) entries spaced stride + 1 apart.

        Raises:
            ZeroLengthError: If the receiver has no elements.
        """
        n = min(self.dims())
        if n == 0:
            msg = f"diagonal view of an empty {self._mat.rows}x{self._mat.cols} matrix"
            raise ZeroLengthError(msg)
        inc = self._mat.stride + 1
        vec = Vector(n=n, inc=inc, data=self._mat.data[: (n - 1) * inc + 1])
        return DiagCDense.from_vector(vec)

    def copy_from(self, a: CMatrix) -> tuple[int, int]:
        """Copy as much of `a` as fits into the receiver.

        Copies min(rows) x min(cols) elements. Overlapping source and
        receiver storage is handled.

        Returns:
            The (rows, cols) copied.
        """
        check_matrix(a)
        ar, ac = a.dims()
        mr, mc = self.dims()
        r, c = min(ar, mr), min(ac, mc)
        if r == 0 or c == 0:
            return 0, 0

        dst = self._mat.as_array()[:r, :c]
        root, trans = untranspose_extract(a)
        if isinstance(root, RawMatrixer) and get_config().fast_paths:
            src = root.raw_matrix().as_array()
            if trans is BlasTranspose.TRANS:
                src = src.T
            elif trans is BlasTranspose.CONJ_TRANS:
                src = src.conj().T
            # numpy buffers overlapping assignments itself.
            dst[...] = src[:r, :c]
            return r, c

        values: NDArray[np.complex128] | None = None
        if resolve(self._mat, [operand_of(a)], elementwise=True) is Path.ISOLATED:
            values = np.array([[a.at(i, j) for j in range(c)] for i in range(r)])
        for i in range(r):
            for j in range(c):
                dst[i, j] = a.at(i, j) if values is None else values[i, j]
        return r, c

    def to_numpy(self) -> NDArray[np.complex128]:
        """Return a copy of the matrix as a 2-D numpy array."""
        return self._mat.as_array().copy()

    # ------------------------------------------------------------------
    # Arithmetic (receiver is the destination)
    # ------------------------------------------------------------------

    def add(self, a: CMatrix, b: CMatrix) -> None:
        """Store a + b in the receiver."""
        arithmetic.add(self, a, b)

    def sub(self, a: CMatrix, b: CMatrix) -> None:
        """Store a - b in the receiver."""
        arithmetic.sub(self, a, b)

    def mul(self, a: CMatrix, b: CMatrix) -> None:
        """Store the matrix product a @ b in the receiver."""
        arithmetic.mul(self, a, b)

    def scale(self, f: complex, a: CMatrix) -> None:
        """Store f * a in the receiver."""
        arithmetic.scale(self, f, a)

    def __repr__(self) -> str:
        r, c = self.dims()
        return f"CDense({r}x{c}, state={self._state.value})"


def new_dense(rows: int, cols: int, data: ArrayLike | None = None) -> CDense:
    """Create a rows x cols dense matrix, zero-filled unless data is given."""
    return CDense(rows, cols, data)


__all__ = ["CDense", "new_dense"]
