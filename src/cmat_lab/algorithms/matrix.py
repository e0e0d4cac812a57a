"""Matrix abstraction and transposition views.

Every matrix-like value implements CMatrix: dims() and at(r, c), plus
transpose views T() and H(). Mutable matrices also implement set(r, c, v).

Optional capabilities are expressed as separate abstract bases so that
operations can query them locally with isinstance():
- RawMatrixer: exposes row-major strided storage (General)
- RawBander: exposes band storage (Band)

Transposed and conjugated views are lightweight wrappers that hold a
reference to the underlying matrix and redirect every access; nothing is
materialised. Taking T() or H() of a view composes with it, so a view never
wraps another view.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from cmat_lab.data.errors import IndexOutOfRangeError, UnsupportedOperandError
from cmat_lab.data.storage import BlasTranspose

if TYPE_CHECKING:
    from cmat_lab.data.storage import Band, General


class CMatrix(ABC):
    """Complex double-precision matrix interface."""

    @abstractmethod
    def dims(self) -> tuple[int, int]:
        """Return (rows, cols)."""

    @abstractmethod
    def at(self, r: int, c: int) -> complex:
        """Return the element at row r, column c."""

    def set(self, r: int, c: int, v: complex) -> None:
        """Set the element at row r, column c."""
        msg = f"{type(self).__name__} is read-only"
        raise UnsupportedOperandError(msg)

    def T(self) -> CMatrix:  # noqa: N802
        """Return the transpose as a view sharing this matrix's storage."""
        return Transpose(self)

    def H(self) -> CMatrix:  # noqa: N802
        """Return the conjugate transpose as a view."""
        return ConjTranspose(self)

    @property
    def shape(self) -> tuple[int, int]:
        """Alias of dims() for numpy-style callers."""
        return self.dims()

    def __repr__(self) -> str:
        r, c = self.dims()
        return f"{self.__class__.__name__}({r}x{c})"


class RawMatrixer(ABC):
    """Capability: the matrix is backed by row-major strided storage."""

    @abstractmethod
    def raw_matrix(self) -> General:
        """Return the storage descriptor, sharing data with the matrix."""


class RawBander(ABC):
    """Capability: the matrix is backed by band storage."""

    @abstractmethod
    def raw_band(self) -> Band:
        """Return the band descriptor, sharing data with the matrix."""


class Transpose(CMatrix):
    """Transposed view of a matrix."""

    __slots__ = ("matrix",)

    def __init__(self, matrix: CMatrix) -> None:
        self.matrix = matrix

    def dims(self) -> tuple[int, int]:
        r, c = self.matrix.dims()
        return c, r

    def at(self, r: int, c: int) -> complex:
        return self.matrix.at(c, r)

    def set(self, r: int, c: int, v: complex) -> None:
        self.matrix.set(c, r, v)

    def T(self) -> CMatrix:  # noqa: N802
        return self.matrix

    def H(self) -> CMatrix:  # noqa: N802
        return Conj(self.matrix)

    def untranspose(self) -> CMatrix:
        """Return the underlying matrix."""
        return self.matrix

    def __repr__(self) -> str:
        return f"Transpose({self.matrix!r})"


class ConjTranspose(CMatrix):
    """Conjugate-transposed view of a matrix."""

    __slots__ = ("matrix",)

    def __init__(self, matrix: CMatrix) -> None:
        self.matrix = matrix

    def dims(self) -> tuple[int, int]:
        r, c = self.matrix.dims()
        return c, r

    def at(self, r: int, c: int) -> complex:
        return self.matrix.at(c, r).conjugate()

    def set(self, r: int, c: int, v: complex) -> None:
        self.matrix.set(c, r, complex(v).conjugate())

    def T(self) -> CMatrix:  # noqa: N802
        return Conj(self.matrix)

    def H(self) -> CMatrix:  # noqa: N802
        return self.matrix

    def untranspose(self) -> CMatrix:
        """Return the underlying matrix."""
        return self.matrix

    def __repr__(self) -> str:
        return f"ConjTranspose({self.matrix!r})"


class Conj(CMatrix):
    """Element-wise complex conjugate view of a matrix (no transposition)."""

    __slots__ = ("matrix",)

    def __init__(self, matrix: CMatrix) -> None:
        self.matrix = matrix

    def dims(self) -> tuple[int, int]:
        return self.matrix.dims()

    def at(self, r: int, c: int) -> complex:
        return self.matrix.at(r, c).conjugate()

    def set(self, r: int, c: int, v: complex) -> None:
        self.matrix.set(r, c, complex(v).conjugate())

    def T(self) -> CMatrix:  # noqa: N802
        return ConjTranspose(self.matrix)

    def H(self) -> CMatrix:  # noqa: N802
        return Transpose(self.matrix)

    def __repr__(self) -> str:
        return f"Conj({self.matrix!r})"


def strip_views(m: CMatrix) -> tuple[CMatrix, bool, bool]:
    """Unwrap every Transpose, ConjTranspose and Conj layer around a matrix.

    Returns:
        (root, transposed, conjugated): the innermost matrix and whether `m`
        reads it with rows and columns swapped and/or conjugated.
    """
    transposed = conjugated = False
    while isinstance(m, Transpose | ConjTranspose | Conj):
        if not isinstance(m, Conj):
            transposed = not transposed
        if not isinstance(m, Transpose):
            conjugated = not conjugated
        m = m.matrix
    return m, transposed, conjugated


def untranspose_extract(m: CMatrix) -> tuple[CMatrix, BlasTranspose]:
    """Strip all transposition views down to a root and one kernel flag.

    Nested views are composed. A composition that only conjugates has no
    kernel flag; it is returned as a single Conj view with NO_TRANS.

    Returns:
        (root, flag): the matrix the kernel should read and the flag
        describing how `m` relates to it.
    """
    root, transposed, conjugated = strip_views(m)
    if not transposed:
        return (Conj(root) if conjugated else root), BlasTranspose.NO_TRANS
    if conjugated:
        return root, BlasTranspose.CONJ_TRANS
    return root, BlasTranspose.TRANS


def check_matrix(m: object, name: str = "operand") -> CMatrix:
    """Return `m` if it implements CMatrix.

    Raises:
        UnsupportedOperandError: If it does not.
    """
    if not isinstance(m, CMatrix):
        msg = f"{name} of type {type(m).__name__} does not implement CMatrix"
        raise UnsupportedOperandError(msg)
    return m


def check_index(r: int, c: int, rows: int, cols: int) -> None:
    """Raise IndexOutOfRangeError unless 0 <= r < rows and 0 <= c < cols."""
    if not 0 <= r < rows:
        msg = f"row index {r} out of range for {rows} rows"
        raise IndexOutOfRangeError(msg)
    if not 0 <= c < cols:
        msg = f"column index {c} out of range for {cols} columns"
        raise IndexOutOfRangeError(msg)


__all__ = [
    "CMatrix",
    "Conj",
    "ConjTranspose",
    "RawBander",
    "RawMatrixer",
    "Transpose",
    "check_index",
    "check_matrix",
    "strip_views",
    "untranspose_extract",
]
