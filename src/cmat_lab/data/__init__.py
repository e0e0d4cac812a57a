"""Data module for storage descriptors, engine configuration and errors."""

from cmat_lab.data.config import (
    EngineConfig,
    KernelBackend,
    configured,
    get_config,
    load_config_from_env,
    set_config,
)
from cmat_lab.data.errors import (
    IndexOutOfRangeError,
    InvalidDimensionError,
    MatrixError,
    NormOrderError,
    ShapeMismatchError,
    UnsupportedOperandError,
    ZeroLengthError,
)
from cmat_lab.data.storage import (
    DTYPE,
    Band,
    BlasTranspose,
    General,
    StorageState,
    Vector,
)

__all__ = [
    # Configuration
    "EngineConfig",
    "KernelBackend",
    "configured",
    "get_config",
    "load_config_from_env",
    "set_config",
    # Errors
    "IndexOutOfRangeError",
    "InvalidDimensionError",
    "MatrixError",
    "NormOrderError",
    "ShapeMismatchError",
    "UnsupportedOperandError",
    "ZeroLengthError",
    # Storage
    "DTYPE",
    "Band",
    "BlasTranspose",
    "General",
    "StorageState",
    "Vector",
]
