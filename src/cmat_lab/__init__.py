"""cmat-lab: complex dense and diagonal matrix arithmetic with aliasing-safe in-place operations."""

import logging as _logging

__version__ = "0.1.0"

from cmat_lab.algorithms.dense import CDense, new_dense
from cmat_lab.algorithms.diagonal import DiagCDense, new_diagonal
from cmat_lab.algorithms.matrix import CMatrix, Conj, ConjTranspose, Transpose
from cmat_lab.data.errors import MatrixError, ShapeMismatchError

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

__all__ = [
    "__version__",
    "CDense",
    "CMatrix",
    "Conj",
    "ConjTranspose",
    "DiagCDense",
    "MatrixError",
    "ShapeMismatchError",
    "Transpose",
    "new_dense",
    "new_diagonal",
]
