"""Error taxonomy for the matrix engine.

Every failure is synchronous and deterministic: the engine does no I/O, so
nothing here is ever worth retrying. Each error also derives from the builtin
exception a Python caller would naturally catch for the same condition.
"""

from __future__ import annotations


class MatrixError(Exception):
    """Base class for all matrix engine errors."""


class ShapeMismatchError(MatrixError, ValueError):
    """Operand, destination or data dimensions are incompatible."""


class InvalidDimensionError(MatrixError, ValueError):
    """A negative size, or a non-positive size where a positive one is required."""


class ZeroLengthError(MatrixError, ValueError):
    """A zero-sized matrix was used where a positive size is mandatory."""


class UnsupportedOperandError(MatrixError, TypeError):
    """An operand does not implement the matrix interface."""


class IndexOutOfRangeError(MatrixError, IndexError):
    """Element access outside the matrix bounds."""


class NormOrderError(MatrixError, ValueError):
    """Unknown norm order requested."""


__all__ = [
    "MatrixError",
    "ShapeMismatchError",
    "InvalidDimensionError",
    "ZeroLengthError",
    "UnsupportedOperandError",
    "IndexOutOfRangeError",
    "NormOrderError",
]
