"""Aliasing and overlap resolution for in-place matrix operations.

A destination may share backing storage with an operand: `a.scale(2, a)` or
`a.sub(a, b)` are ordinary calls, and sub-matrix views make partial sharing
easy to create. Before writing, every operation asks `resolve()` whether it
can compute straight into the destination or must compute into an isolated
workspace and copy back.

Two storage regions are compared by their Extent: the owning numpy
allocation, the element offset of the first entry and the row-major geometry.

- identical: same allocation, offset, rows, cols and stride
- overlapping: at least one element in common, without being identical

Decision policy:
    identical, untransposed, elementwise op  -> DIRECT (index read before written)
    identical, transposed traversal          -> ISOLATED
    identical, non-elementwise op (GEMM)     -> ISOLATED
    overlapping                              -> ISOLATED
    disjoint                                 -> DIRECT
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from cmat_lab.algorithms.matrix import (
    CMatrix,
    RawBander,
    RawMatrixer,
    strip_views,
)
from cmat_lab.data.storage import Band, BlasTranspose, General, Vector, buffer_origin

logger = logging.getLogger(__name__)

Storage = General | Vector | Band


class Path(Enum):
    """How an operation must write its result."""

    DIRECT = "direct"
    ISOLATED = "isolated"


@dataclass(frozen=True, slots=True)
class Extent:
    """Location of a strided region inside its owning allocation."""

    owner: int
    """Identifier of the owning numpy allocation."""

    start: int
    """Element offset of the first entry."""

    rows: int
    cols: int
    stride: int

    @property
    def end(self) -> int:
        """One past the offset of the last entry."""
        return self.start + (self.rows - 1) * self.stride + self.cols


@dataclass(frozen=True, slots=True)
class Operand:
    """An operation input as seen by the resolver."""

    storage: Storage | None
    """Raw storage of the untransposed matrix, or None if it exposes none."""

    trans: BlasTranspose = BlasTranspose.NO_TRANS
    """How the operation traverses that storage."""


def extent_of(storage: Storage) -> Extent | None:
    """Return the Extent of a storage descriptor, or None if it holds no elements."""
    if isinstance(storage, General):
        rows, cols, stride = storage.rows, storage.cols, storage.stride
    elif isinstance(storage, Vector):
        rows, cols, stride = storage.n, 1, storage.inc
    else:
        rows, cols, stride = storage.rows, storage.kl + storage.ku + 1, storage.stride
    if rows == 0 or cols == 0:
        return None
    owner, start = buffer_origin(storage.data)
    return Extent(owner=owner, start=start, rows=rows, cols=cols, stride=stride)


def storage_of(m: CMatrix) -> Storage | None:
    """Return the raw storage exposed by a matrix, if any."""
    if isinstance(m, RawMatrixer):
        return m.raw_matrix()
    if isinstance(m, RawBander):
        return m.raw_band()
    return None


def operand_of(m: CMatrix) -> Operand:
    """Describe a matrix, through any stack of views, for the resolver.

    A conjugate-only view reads its root element by element in place, so it
    is traversed like NO_TRANS.
    """
    root, transposed, conjugated = strip_views(m)
    trans = BlasTranspose.NO_TRANS
    if transposed:
        trans = BlasTranspose.CONJ_TRANS if conjugated else BlasTranspose.TRANS
    return Operand(storage=storage_of(root), trans=trans)


def identical(a: Extent, b: Extent) -> bool:
    """Whether two extents describe exactly the same region."""
    return (
        a.owner == b.owner
        and a.start == b.start
        and a.rows == b.rows
        and a.cols == b.cols
        and a.stride == b.stride
    )


def overlaps(a: Extent, b: Extent) -> bool:
    """Whether two extents share at least one element.

    Identical extents overlap. Extents with different strides whose address
    ranges intersect are reported as overlapping without further analysis.
    """
    if a.owner != b.owner:
        return False
    if a.start > b.start:
        a, b = b, a
    if b.start >= a.end:
        return False

    # A single row is contiguous and fits any stride.
    stride_a = b.stride if a.rows == 1 else a.stride
    stride_b = a.stride if b.rows == 1 else b.stride
    if a.rows == 1 and b.rows == 1:
        return True
    if stride_a != stride_b:
        return True

    return _rectangles_overlap(b.start - a.start, a.cols, b.cols, stride_a)


def resolve(
    dest: Storage,
    operands: Iterable[Operand],
    *,
    elementwise: bool,
) -> Path:
    """Decide whether an operation may write directly into `dest`.

    Args:
        dest: Destination storage, already sized for the result.
        operands: The operation's inputs.
        elementwise: True when result (r, c) depends only on operand (r, c)
            of untransposed inputs, so an identical input is safe to read
            while writing.

    Returns:
        Path.DIRECT or Path.ISOLATED. Never raises.
    """
    dest_extent = extent_of(dest)
    if dest_extent is None:
        return Path.DIRECT

    for operand in operands:
        if operand.storage is None:
            continue
        extent = extent_of(operand.storage)
        if extent is None or not overlaps(dest_extent, extent):
            continue
        if (
            elementwise
            and operand.trans is BlasTranspose.NO_TRANS
            and identical(dest_extent, extent)
        ):
            continue
        logger.debug(
            "destination %s aliases operand %s (trans=%s), isolating",
            dest_extent,
            extent,
            operand.trans.value,
        )
        return Path.ISOLATED

    return Path.DIRECT


def _rectangles_overlap(off: int, a_cols: int, b_cols: int, stride: int) -> bool:
    """Row-major rectangles sharing `stride`, b starting `off` elements after a.

    The caller guarantees the address ranges intersect, so the rectangles
    share an element exactly when their column ranges, taken modulo the
    stride, intersect.
    """
    if stride == 1:
        return True
    b_from = off % stride
    b_to = b_from + b_cols
    if b_to > stride:
        # b wraps into the next row and so covers column 0.
        return True
    return b_from < a_cols


__all__ = [
    "Extent",
    "Operand",
    "Path",
    "extent_of",
    "identical",
    "operand_of",
    "overlaps",
    "resolve",
    "storage_of",
]
