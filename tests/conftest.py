"""Shared fixtures for the matrix engine tests."""

from collections.abc import Callable

import numpy as np
import pytest

from cmat_lab.algorithms.dense import CDense
from cmat_lab.data.config import configured

DEFAULT_SEED = 42


@pytest.fixture(
    params=[("blas", True), ("numpy", True), ("blas", False)],
    ids=["blas", "numpy", "generic"],
)
def engine(request):
    """Run a test under each kernel backend and with fast paths disabled."""
    backend, fast_paths = request.param
    with configured(backend=backend, fast_paths=fast_paths) as config:
        yield config


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator for reproducible matrices."""
    return np.random.default_rng(DEFAULT_SEED)


@pytest.fixture
def random_array(rng: np.random.Generator) -> Callable[[int, int], np.ndarray]:
    """Factory for random complex128 arrays."""

    def make(rows: int, cols: int) -> np.ndarray:
        return rng.standard_normal((rows, cols)) + 1j * rng.standard_normal((rows, cols))

    return make


@pytest.fixture
def random_dense(random_array) -> Callable[[int, int], CDense]:
    """Factory for random dense matrices, each backed by its own buffer."""

    def make(rows: int, cols: int) -> CDense:
        return CDense.from_array(random_array(rows, cols))

    return make
