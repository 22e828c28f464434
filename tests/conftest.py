"""Pytest configuration and shared fixtures for gradient_descent tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A shared least-squares problem with a known minimizer
"""

import os

import numpy as np
import pytest
import torch


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic CPU torch RNG for tests."""
    generator = torch.Generator(device="cpu")
    generator.manual_seed(_seed())
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture
def least_squares(rng: np.random.Generator):
    """Well-conditioned ``||A x - b||^2`` problem with its exact minimizer."""
    A = rng.standard_normal((20, 3)) + 2.0 * np.eye(20, 3)
    b = rng.standard_normal(20)

    def fun(x: np.ndarray) -> float:
        r = A @ x - b
        return float(r @ r)

    def grad(x: np.ndarray) -> np.ndarray:
        return 2 * A.T @ (A @ x - b)

    expected = np.linalg.lstsq(A, b, rcond=None)[0]
    return A, fun, grad, expected
