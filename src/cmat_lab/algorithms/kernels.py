"""Complex double-precision kernel layer.

Thin BLAS-equivalent routines over strided storage descriptors:
- gemm: C := alpha * op(A) @ op(B) + beta * C
- copy: y := x for strided vectors

Both routines dispatch on the configured KernelBackend. The BLAS backend
calls the reference-interface zgemm/zcopy shipped with scipy; the NumPy
backend performs the same computation with matmul and strided assignment.
Storage is row-major, so the results are written back through the
descriptor's 2-D view rather than relying on Fortran-ordered output.

References:
- Dongarra et al., "A Set of Level 3 Basic Linear Algebra Subprograms" (1990)
- scipy.linalg.blas low-level interface documentation
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from scipy.linalg.blas import get_blas_funcs

from cmat_lab.data.config import KernelBackend, get_config
from cmat_lab.data.errors import ShapeMismatchError
from cmat_lab.data.storage import DTYPE, BlasTranspose, General, Vector

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

_zgemm, _zcopy = get_blas_funcs(("gemm", "copy"), dtype=DTYPE)

_TRANS_CODES: dict[BlasTranspose, int] = {
    BlasTranspose.NO_TRANS: 0,
    BlasTranspose.TRANS: 1,
    BlasTranspose.CONJ_TRANS: 2,
}


def op_dims(g: General, trans: BlasTranspose) -> tuple[int, int]:
    """Dimensions of op(G) for the given transposition flag."""
    if trans.transposed:
        return g.cols, g.rows
    return g.rows, g.cols


def gemm(
    trans_a: BlasTranspose,
    trans_b: BlasTranspose,
    alpha: complex,
    a: General,
    b: General,
    beta: complex,
    c: General,
) -> None:
    """General matrix multiply, C := alpha * op(A) @ op(B) + beta * C.

    Args:
        trans_a: Transposition applied to A.
        trans_b: Transposition applied to B.
        alpha: Scalar multiplier of the product.
        a: Left operand storage.
        b: Right operand storage.
        beta: Scalar multiplier of the existing C (0 ignores C's contents).
        c: Destination storage, written in place.

    Raises:
        ShapeMismatchError: If op(A), op(B) and C are not conformant.
    """
    m, k = op_dims(a, trans_a)
    kb, n = op_dims(b, trans_b)
    if k != kb or c.rows != m or c.cols != n:
        msg = f"gemm shape mismatch: op(A) {m}x{k}, op(B) {kb}x{n}, C {c.rows}x{c.cols}"
        raise ShapeMismatchError(msg)

    out = c.as_array()
    if m == 0 or n == 0:
        return
    if k == 0:
        if beta == 0:
            out[...] = 0
        else:
            out *= beta
        return

    backend = get_config().backend
    logger.debug(
        "gemm %s%s %dx%dx%d via %s",
        trans_a.value,
        trans_b.value,
        m,
        k,
        n,
        backend.value,
    )
    if backend is KernelBackend.BLAS:
        if beta == 0:
            result = _zgemm(
                alpha,
                a.as_array(),
                b.as_array(),
                trans_a=_TRANS_CODES[trans_a],
                trans_b=_TRANS_CODES[trans_b],
            )
        else:
            result = _zgemm(
                alpha,
                a.as_array(),
                b.as_array(),
                beta=beta,
                c=out,
                trans_a=_TRANS_CODES[trans_a],
                trans_b=_TRANS_CODES[trans_b],
            )
        out[...] = result
        return

    product = _apply(a.as_array(), trans_a) @ _apply(b.as_array(), trans_b)
    if alpha != 1:
        product *= alpha
    if beta == 0:
        out[...] = product
    else:
        out[...] = product + beta * out


def copy(x: Vector, y: Vector) -> None:
    """Strided vector copy, y := x.

    Raises:
        ShapeMismatchError: If the vectors differ in length.
    """
    if x.n != y.n:
        msg = f"copy length mismatch: {x.n} != {y.n}"
        raise ShapeMismatchError(msg)
    if x.n == 0:
        return

    if get_config().backend is KernelBackend.BLAS:
        result = _zcopy(x.data, y.data, n=x.n, incx=x.inc, incy=y.inc)
        if result is not y.data:
            y.data[: len(result)] = result
        return

    y.as_array()[...] = x.as_array()


def _apply(arr: NDArray[np.complex128], trans: BlasTranspose) -> NDArray[np.complex128]:
    """Return op(arr) as a numpy view (conjugation allocates)."""
    if trans is BlasTranspose.TRANS:
        return arr.T
    if trans is BlasTranspose.CONJ_TRANS:
        return arr.conj().T
    return arr


__all__ = ["copy", "gemm", "op_dims"]
