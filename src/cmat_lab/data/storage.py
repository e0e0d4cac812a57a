"""
Storage Descriptors - Strided Complex Buffers

This module defines how matrix and vector storage is described to the kernel
layer: a 1-D complex128 numpy buffer plus the geometry (rows, columns, stride
or increment) needed to address it. Descriptors never copy; they are views
onto storage owned by a matrix.

Layout conventions:
    - General: row-major, element (r, c) lives at data[r * stride + c]
    - Vector: element i lives at data[i * inc]
    - Band: diagonal-ordered band storage, element (i, i) at data[i * stride + kl]

References:
    - BLAS Technical Forum Standard, Chapter 2 (storage conventions)
    - Golub & Van Loan: "Matrix Computations" (4th ed.), Section 1.2
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

from cmat_lab.data.errors import InvalidDimensionError, ShapeMismatchError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


DTYPE = np.complex128
"""Element type of every buffer handled by the engine."""


class BlasTranspose(Enum):
    """Operand transposition flag passed to the kernel layer."""

    NO_TRANS = "N"
    TRANS = "T"
    CONJ_TRANS = "C"

    @property
    def transposed(self) -> bool:
        """Whether rows and columns are swapped."""
        return self is not BlasTranspose.NO_TRANS


class StorageState(Enum):
    """Allocation state of a dense matrix.

    UNINITIALIZED matrices have never been allocated (or were reset) and may
    be resized by any operation writing into them. ZERO_SIZED matrices were
    deliberately built with a zero dimension and keep that shape.
    """

    UNINITIALIZED = "uninitialized"
    ZERO_SIZED = "zero_sized"
    POPULATED = "populated"


@dataclass(frozen=True, slots=True)
class General:
    """Row-major strided matrix storage."""

    rows: int
    cols: int
    stride: int
    data: NDArray[np.complex128]

    def __post_init__(self) -> None:
        _check_unit_stride(self.data)
        if self.rows < 0 or self.cols < 0:
            msg = f"negative dimension: {self.rows}x{self.cols}"
            raise InvalidDimensionError(msg)
        if self.rows > 0 and self.cols > 0 and len(self.data) < self.span:
            msg = f"buffer of length {len(self.data)} too short for {self.rows}x{self.cols} stride {self.stride}"
            raise ShapeMismatchError(msg)

    @property
    def span(self) -> int:
        """Number of buffer elements from the first to the last entry, inclusive."""
        if self.rows == 0 or self.cols == 0:
            return 0
        return (self.rows - 1) * self.stride + self.cols

    def as_array(self) -> NDArray[np.complex128]:
        """Return a writable 2-D numpy view of the storage (no copy)."""
        itemsize = self.data.itemsize
        return np.lib.stride_tricks.as_strided(
            self.data,
            shape=(self.rows, self.cols),
            strides=(self.stride * itemsize, itemsize),
        )


@dataclass(frozen=True, slots=True)
class Vector:
    """Strided vector storage."""

    n: int
    inc: int
    data: NDArray[np.complex128]

    def __post_init__(self) -> None:
        _check_unit_stride(self.data)

    @property
    def span(self) -> int:
        """Number of buffer elements from the first to the last entry, inclusive."""
        if self.n == 0:
            return 0
        return (self.n - 1) * self.inc + 1

    def as_array(self) -> NDArray[np.complex128]:
        """Return a writable 1-D numpy view of the storage (no copy)."""
        if self.n == 0:
            return self.data[:0]
        return self.data[: self.span : self.inc]


@dataclass(frozen=True, slots=True)
class Band:
    """Band storage with kl sub-diagonals and ku super-diagonals."""

    rows: int
    cols: int
    kl: int
    ku: int
    stride: int
    data: NDArray[np.complex128]


def as_buffer(data: ArrayLike, length: int) -> NDArray[np.complex128]:
    """Adopt caller data as a flat complex128 buffer of exactly `length` elements.

    A C-contiguous complex128 numpy array is used as-is, so matrices built
    over the same array share storage. Anything else, including strided or
    reversed views, is converted to a fresh contiguous copy.

    Raises:
        ShapeMismatchError: If the data does not hold `length` elements.
    """
    buf = np.ascontiguousarray(data, dtype=DTYPE)
    if buf.ndim != 1:
        buf = buf.reshape(-1)
    if buf.size != length:
        msg = f"data length {buf.size} does not match required length {length}"
        raise ShapeMismatchError(msg)
    return buf


def zeros(length: int) -> NDArray[np.complex128]:
    """Allocate a zero-filled buffer."""
    return np.zeros(length, dtype=DTYPE)


def _check_unit_stride(data: NDArray[Any]) -> None:
    """Descriptors address data by element offset, so it must be 1-D and unit-stride."""
    if data.ndim != 1 or (data.size > 1 and data.strides[0] != data.itemsize):
        msg = f"buffer must be a 1-D unit-stride array, got shape {data.shape} strides {data.strides}"
        raise ShapeMismatchError(msg)


def buffer_origin(data: NDArray[Any]) -> tuple[int, int]:
    """Locate a buffer inside the allocation that owns it.

    Returns:
        (owner, offset): an identifier of the owning numpy allocation and the
        element offset of data[0] within it. Two buffers can only alias when
        their owners are equal.
    """
    root = data
    while isinstance(root.base, np.ndarray):
        root = root.base
    start = data.__array_interface__["data"][0]
    root_start = root.__array_interface__["data"][0]
    return id(root), (start - root_start) // data.itemsize


__all__ = [
    "DTYPE",
    "BlasTranspose",
    "StorageState",
    "General",
    "Vector",
    "Band",
    "as_buffer",
    "zeros",
    "buffer_origin",
]
