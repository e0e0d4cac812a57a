"""
Engine Configuration - Kernel Backend and Dispatch Policy

This module is the single place where the engine's runtime behaviour is
chosen: which kernel backend performs GEMM and strided copies, and whether the
arithmetic operations may take their vectorised fast paths at all.

The configuration is process-global. Changing it is not thread-safe; set it
once at start-up or inside a `configured()` block on a single thread.

Environment variables (read by `load_config_from_env`):
    CMAT_LAB_BACKEND      'blas' (default) or 'numpy'
    CMAT_LAB_FAST_PATHS   '1' (default) or '0' to force generic element loops
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class KernelBackend(Enum):
    """Implementations available for the kernel layer."""

    BLAS = "blas"  # scipy.linalg.blas zgemm / zcopy
    NUMPY = "numpy"  # numpy matmul / strided assignment


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Runtime options for the matrix engine."""

    backend: KernelBackend = KernelBackend.BLAS
    """Kernel implementation used by the fast paths."""

    fast_paths: bool = True
    """When False every operation uses its generic at/set loop."""


# =============================================================================
# ENVIRONMENT
# =============================================================================

ENV_BACKEND = "CMAT_LAB_BACKEND"
ENV_FAST_PATHS = "CMAT_LAB_FAST_PATHS"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def load_config_from_env(environ: Mapping[str, str] | None = None) -> EngineConfig:
    """
    Build a configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        EngineConfig with unset variables left at their defaults

    Raises:
        ValueError: If a variable holds an unrecognised value

    Example:
        >>> load_config_from_env({"CMAT_LAB_BACKEND": "numpy"}).backend
        <KernelBackend.NUMPY: 'numpy'>
    """
    if environ is None:
        environ = os.environ

    config = EngineConfig()
    if ENV_BACKEND in environ:
        config = replace(config, backend=_parse_backend(environ[ENV_BACKEND]))
    if ENV_FAST_PATHS in environ:
        config = replace(config, fast_paths=_parse_flag(environ[ENV_FAST_PATHS]))
    return config


# =============================================================================
# PUBLIC API
# =============================================================================

_config: EngineConfig = load_config_from_env()


def get_config() -> EngineConfig:
    """Return the active engine configuration."""
    return _config


def set_config(config: EngineConfig | None = None, **overrides: Any) -> EngineConfig:
    """
    Replace the active configuration.

    Args:
        config: New configuration (defaults to the active one)
        **overrides: Field overrides; `backend` may be given as a string

    Returns:
        The previously active configuration

    Example:
        >>> previous = set_config(backend="numpy")
        >>> get_config().backend
        <KernelBackend.NUMPY: 'numpy'>
        >>> _ = set_config(previous)
    """
    global _config

    base = _config if config is None else config
    if isinstance(overrides.get("backend"), str):
        overrides["backend"] = _parse_backend(overrides["backend"])

    previous = _config
    _config = replace(base, **overrides)
    logger.debug("engine config set to %s", _config)
    return previous


@contextmanager
def configured(**overrides: Any) -> Iterator[EngineConfig]:
    """Temporarily override configuration fields inside a `with` block."""
    previous = set_config(**overrides)
    try:
        yield _config
    finally:
        set_config(previous)


# =============================================================================
# INTERNAL HELPERS
# =============================================================================


def _parse_backend(name: str) -> KernelBackend:
    """Parse a string into a KernelBackend enum."""
    normalized = name.strip().lower().replace("-", "_")

    for backend in KernelBackend:
        if backend.value == normalized:
            return backend

    valid = [b.value for b in KernelBackend]
    raise ValueError(f"Unknown kernel backend: '{name}'. Valid: {valid}")


def _parse_flag(value: str) -> bool:
    """Parse a boolean environment flag."""
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"Unknown flag value: '{value}'. Valid: {sorted(_TRUTHY | _FALSY)}")


__all__ = [
    "ENV_BACKEND",
    "ENV_FAST_PATHS",
    "EngineConfig",
    "KernelBackend",
    "configured",
    "get_config",
    "load_config_from_env",
    "set_config",
]
