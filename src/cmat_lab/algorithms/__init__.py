"""Numerical algorithms module.

This module contains implementations of:
- Complex kernel layer (GEMM, strided copy)
- Dense and diagonal complex matrices with transposition views
- Aliasing resolution for in-place arithmetic
- Add, Sub, Mul and Scale with fast kernel paths and generic fallbacks
- Paton's fundamental cycle enumeration for undirected graphs
"""

from cmat_lab.algorithms.aliasing import Extent, Operand, Path, resolve
from cmat_lab.algorithms.arithmetic import add, mul, scale, sub
from cmat_lab.algorithms.cycles import (
    canonical_cycles,
    canonicalise,
    symmetrise,
    undirected_cycles_in,
)
from cmat_lab.algorithms.dense import CDense, new_dense
from cmat_lab.algorithms.diagonal import DiagCDense, new_diagonal
from cmat_lab.algorithms.kernels import copy, gemm
from cmat_lab.algorithms.matrix import (
    CMatrix,
    Conj,
    ConjTranspose,
    RawBander,
    RawMatrixer,
    Transpose,
    strip_views,
    untranspose_extract,
)

__all__ = [
    # Aliasing
    "Extent",
    "Operand",
    "Path",
    "resolve",
    # Arithmetic
    "add",
    "mul",
    "scale",
    "sub",
    # Cycles
    "canonical_cycles",
    "canonicalise",
    "symmetrise",
    "undirected_cycles_in",
    # Matrices
    "CDense",
    "CMatrix",
    "Conj",
    "ConjTranspose",
    "DiagCDense",
    "RawBander",
    "RawMatrixer",
    "Transpose",
    "new_dense",
    "new_diagonal",
    "strip_views",
    "untranspose_extract",
    # Kernels
    "copy",
    "gemm",
]
