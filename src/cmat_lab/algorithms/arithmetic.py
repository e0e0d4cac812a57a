"""Arithmetic operations on complex matrices.

Each operation writes into a destination CDense:
- add(dst, a, b):   dst = a + b
- sub(dst, a, b):   dst = a - b
- mul(dst, a, b):   dst = a @ b
- scale(dst, f, a): dst = f * a

Operation structure:
    1. Validate operand shapes (nothing is modified on failure)
    2. Size an empty destination, or check a non-empty one
    3. Resolve aliasing between the destination and the operands
    4. Take the fast path when the operands expose raw dense storage,
       otherwise the generic at()/set() loop that accepts any CMatrix

Fast paths never materialise a transpose: Mul hands the transposition to
the GEMM kernel as a flag, Scale walks the source through a stride-swapped
view.

References:
- Golub & Van Loan: "Matrix Computations" (4th ed.), §1.1 and §1.5
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from cmat_lab.algorithms import kernels
from cmat_lab.algorithms.aliasing import Path, operand_of, resolve
from cmat_lab.algorithms.matrix import (
    CMatrix,
    RawMatrixer,
    check_matrix,
    untranspose_extract,
)
from cmat_lab.data.config import get_config
from cmat_lab.data.errors import ShapeMismatchError
from cmat_lab.data.storage import BlasTranspose

if TYPE_CHECKING:
    from cmat_lab.algorithms.dense import CDense

logger = logging.getLogger(__name__)


def add(dst: CDense, a: CMatrix, b: CMatrix) -> None:
    """Store the element-wise sum a + b in dst.

    Raises:
        ShapeMismatchError: If a and b differ in shape, or dst is not empty
            and has a different shape.
    """
    _elementwise(dst, a, b, np.add, operator.add, "add")


def sub(dst: CDense, a: CMatrix, b: CMatrix) -> None:
    """Store the element-wise difference a - b in dst.

    Raises:
        ShapeMismatchError: If a and b differ in shape, or dst is not empty
            and has a different shape.
    """
    _elementwise(dst, a, b, np.subtract, operator.sub, "sub")


def mul(dst: CDense, a: CMatrix, b: CMatrix) -> None:
    """Store the matrix product a @ b in dst.

    Raw dense operands, transposed or not, go to the GEMM kernel with
    alpha = 1 and beta = 0. Anything else uses the triple loop
    dst[r, c] = sum_k a[r, k] * b[k, c].

    Raises:
        ShapeMismatchError: If the inner dimensions differ, or dst is not
            empty and is not rows(a) x cols(b).
    """
    check_matrix(a, "a")
    check_matrix(b, "b")
    ar, ac = a.dims()
    br, bc = b.dims()
    if ac != br:
        msg = f"mul: a is {ar}x{ac}, b is {br}x{bc}"
        raise ShapeMismatchError(msg)

    dst.reuse_as_non_zeroed(ar, bc)

    a_root = untranspose_extract(a)[0]
    b_root = untranspose_extract(b)[0]
    path = resolve(dst.raw_matrix(), [operand_of(a), operand_of(b)], elementwise=False)
    fast = (
        get_config().fast_paths
        and isinstance(a_root, RawMatrixer)
        and isinstance(b_root, RawMatrixer)
    )
    logger.debug(
        "mul %dx%d @ %dx%d: %s, %s",
        ar,
        ac,
        br,
        bc,
        "kernel" if fast else "generic",
        path.value,
    )

    if path is Path.ISOLATED:
        with dst.isolated_workspace(ar, bc) as workspace:
            _mul_into(workspace, a, b, fast)
        return
    _mul_into(dst, a, b, fast)


def scale(dst: CDense, f: complex, a: CMatrix) -> None:
    """Store f * a in dst.

    Raises:
        ShapeMismatchError: If dst is not empty and differs in shape from a.
    """
    check_matrix(a, "a")
    f = complex(f)
    ar, ac = a.dims()

    dst.reuse_as_non_zeroed(ar, ac)

    root = untranspose_extract(a)[0]
    path = resolve(dst.raw_matrix(), [operand_of(a)], elementwise=True)
    fast = get_config().fast_paths and isinstance(root, RawMatrixer)

    if path is Path.ISOLATED:
        with dst.isolated_workspace(ar, ac) as workspace:
            _scale_into(workspace, f, a, fast)
        return
    _scale_into(dst, f, a, fast)


# =============================================================================
# INTERNAL HELPERS
# =============================================================================


def _elementwise(
    dst: CDense,
    a: CMatrix,
    b: CMatrix,
    ufunc: np.ufunc,
    op: Callable[[complex, complex], complex],
    name: str,
) -> None:
    """Shared body of add and sub."""
    check_matrix(a, "a")
    check_matrix(b, "b")
    ar, ac = a.dims()
    br, bc = b.dims()
    if ar != br or ac != bc:
        msg = f"{name}: a is {ar}x{ac}, b is {br}x{bc}"
        raise ShapeMismatchError(msg)

    dst.reuse_as_non_zeroed(ar, ac)

    path = resolve(dst.raw_matrix(), [operand_of(a), operand_of(b)], elementwise=True)
    fast = (
        get_config().fast_paths
        and isinstance(a, RawMatrixer)
        and isinstance(b, RawMatrixer)
    )

    if path is Path.ISOLATED:
        with dst.isolated_workspace(ar, ac) as workspace:
            _elementwise_into(workspace, a, b, ufunc, op, fast)
        return
    _elementwise_into(dst, a, b, ufunc, op, fast)


def _elementwise_into(
    dst: CDense,
    a: CMatrix,
    b: CMatrix,
    ufunc: np.ufunc,
    op: Callable[[complex, complex], complex],
    fast: bool,
) -> None:
    if fast:
        assert isinstance(a, RawMatrixer) and isinstance(b, RawMatrixer)
        ufunc(
            a.raw_matrix().as_array(),
            b.raw_matrix().as_array(),
            out=dst.raw_matrix().as_array(),
        )
        return

    rows, cols = a.dims()
    for r in range(rows):
        for c in range(cols):
            dst.set(r, c, op(a.at(r, c), b.at(r, c)))


def _mul_into(dst: CDense, a: CMatrix, b: CMatrix, fast: bool) -> None:
    if fast:
        a_root, a_trans = untranspose_extract(a)
        b_root, b_trans = untranspose_extract(b)
        assert isinstance(a_root, RawMatrixer) and isinstance(b_root, RawMatrixer)
        kernels.gemm(
            a_trans,
            b_trans,
            1,
            a_root.raw_matrix(),
            b_root.raw_matrix(),
            0,
            dst.raw_matrix(),
        )
        return

    rows, inner = a.dims()
    cols = b.dims()[1]
    for r in range(rows):
        for c in range(cols):
            total = 0j
            for k in range(inner):
                total += a.at(r, k) * b.at(k, c)
            dst.set(r, c, total)


def _scale_into(dst: CDense, f: complex, a: CMatrix, fast: bool) -> None:
    if fast:
        root, trans = untranspose_extract(a)
        assert isinstance(root, RawMatrixer)
        src = root.raw_matrix().as_array()
        out = dst.raw_matrix().as_array()
        if trans is BlasTranspose.NO_TRANS:
            np.multiply(src, f, out=out)
        elif trans is BlasTranspose.TRANS:
            np.multiply(src.T, f, out=out)
        else:
            np.conjugate(src.T, out=out)
            out *= f
        return

    rows, cols = a.dims()
    for r in range(rows):
        for c in range(cols):
            dst.set(r, c, f * a.at(r, c))


__all__ = ["add", "mul", "scale", "sub"]
