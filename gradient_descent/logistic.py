"""
Logistic regression fitted by gradient descent.

The negative log-likelihood of a logistic model with design matrix ``X`` and
binary responses ``y`` is

    f(b) = sum_i ( -y_i * x_i.b + log(1 + exp(x_i.b)) )

with gradient ``X^T (sigmoid(X b) - y)``. Its gradient is Lipschitz with
constant at most ``0.25 * sigma_max(X^T X)``, which gives a safe fixed step.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .core import (
    DEFAULT_MAX_BACKTRACKS,
    Array,
    Gradient,
    InvalidArgumentError,
    Objective,
    OptimizeResult,
)
from .gradient import optimize
from .logging import get_logger
from .utils import lipschitz_step_size

logger = get_logger(__name__)


def sigmoid(z: Array) -> Array:
    """Numerically stable logistic function."""
    z = np.asarray(z, dtype=float)
    return np.exp(-np.logaddexp(0.0, -z))


def _validate_data(design: Array, response: Array) -> tuple[Array, Array]:
    design = np.asarray(design, dtype=float)
    response = np.asarray(response, dtype=float).reshape(-1)
    if design.ndim != 2:
        raise InvalidArgumentError(
            f"design matrix must be 2D, got shape {design.shape}"
        )
    if response.shape[0] != design.shape[0]:
        raise InvalidArgumentError(
            f"response has {response.shape[0]} entries, design has "
            f"{design.shape[0]} rows"
        )
    if not np.all((response == 0.0) | (response == 1.0)):
        raise InvalidArgumentError("response must contain only 0 and 1")
    return design, response


def logistic_objective(design: Array, response: Array) -> Objective:
    """Return the negative log-likelihood as a function of the coefficients."""
    design, response = _validate_data(design, response)

    def f(beta: Array) -> float:
        z = design @ np.asarray(beta, dtype=float).reshape(-1)
        return float(np.sum(np.logaddexp(0.0, z) - response * z))

    return f


def logistic_gradient(design: Array, response: Array) -> Gradient:
    """Return the gradient of :func:`logistic_objective`.

    The returned array has the shape of the coefficient vector it is given,
    so a ``(d, 1)`` column in gives a ``(d, 1)`` column out.
    """
    design, response = _validate_data(design, response)

    def gradf(beta: Array) -> Array:
        beta = np.asarray(beta, dtype=float)
        p = sigmoid(design @ beta.reshape(-1))
        return (design.T @ (p - response)).reshape(beta.shape)

    return gradf


def fit_logistic_regression(
    design: Array,
    response: Array,
    t: Optional[float] = None,
    backtrack: bool = True,
    tol: float = 1e-6,
    max_iter: int = 10_000,
    x0: Optional[Array] = None,
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS,
) -> OptimizeResult:
    """
    Estimate logistic regression coefficients.

    Parameters
    ----------
    design:
        ``(n, d)`` design matrix. Add a column of ones for an intercept.
    response:
        ``n`` binary responses.
    t:
        Step size, or initial trial step with ``backtrack``. Defaults to the
        inverse Lipschitz constant of the gradient.
    backtrack:
        Use the Armijo line search.
    tol, max_iter:
        Stopping parameters passed to :func:`optimize`.
    x0:
        Starting coefficients; zeros by default.
    """
    design, response = _validate_data(design, response)
    if t is None:
        t = lipschitz_step_size(design, scale=0.25)
        logger.debug("using Lipschitz step size %.3e", t)
    if x0 is None:
        x0 = np.zeros(design.shape[1])
    return optimize(
        x0,
        t,
        max_iter=max_iter,
        tol=tol,
        backtrack=backtrack,
        f=logistic_objective(design, response),
        gradf=logistic_gradient(design, response),
        max_backtracks=max_backtracks,
    )


def make_logistic_data(
    n: int, beta: Array, rng: Optional[np.random.Generator] = None
) -> tuple[Array, Array]:
    """Draw a standard normal design and responses from ``sigmoid(X beta)``."""
    if n < 1:
        raise InvalidArgumentError(f"n must be >= 1, got {n}")
    if rng is None:
        rng = np.random.default_rng()
    beta = np.asarray(beta, dtype=float).reshape(-1)
    design = rng.standard_normal((n, beta.size))
    prob = sigmoid(design @ beta)
    response = (rng.uniform(size=n) < prob).astype(float)
    return design, response


__all__ = [
    "fit_logistic_regression",
    "logistic_gradient",
    "logistic_objective",
    "make_logistic_data",
    "sigmoid",
]
