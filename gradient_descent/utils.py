"""Finite-difference gradient checks and step-size helpers.

Pure NumPy; the singular value decomposition comes from ``numpy.linalg``.
"""

from __future__ import annotations

import numpy as np

from .core import Array, Gradient, InvalidArgumentError, Objective


def approx_grad(fun: Objective, x: Array, eps: float = 1e-6) -> Array:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated. Any shape is accepted; the
        result has the same shape.
    eps:
        Perturbation size for finite differences.
    """
    if eps <= 0:
        raise InvalidArgumentError("eps must be positive")
    x = np.asarray(x, dtype=float)
    grad = np.zeros(x.shape)
    flat = grad.reshape(-1)
    for i in range(x.size):
        ei = np.zeros(x.size)
        ei[i] = eps
        ei = ei.reshape(x.shape)
        f_plus = np.asarray(fun(x + ei), dtype=float).item()
        f_minus = np.asarray(fun(x - ei), dtype=float).item()
        flat[i] = (f_plus - f_minus) / (2.0 * eps)
    return grad


def check_gradient(
    fun: Objective,
    grad: Gradient,
    x: Array,
    eps: float = 1e-6,
    atol: float = 1e-5,
    rtol: float = 1e-4,
) -> float:
    """Compare an analytic gradient against central differences at ``x``.

    Returns the largest absolute deviation.

    Raises:
        InvalidArgumentError: If the two disagree beyond ``atol + rtol * |numeric|``
            or the analytic gradient has the wrong shape.
    """
    x = np.asarray(x, dtype=float)
    analytic = np.asarray(grad(x), dtype=float)
    if analytic.shape != x.shape:
        raise InvalidArgumentError(
            f"gradient shape {analytic.shape} does not match parameter shape {x.shape}"
        )
    numeric = approx_grad(fun, x, eps=eps)
    max_err = float(np.max(np.abs(analytic - numeric))) if x.size else 0.0
    if not np.allclose(analytic, numeric, atol=atol, rtol=rtol):
        raise InvalidArgumentError(
            f"analytic gradient differs from finite differences by {max_err:.3e}"
        )
    return max_err


def lipschitz_step_size(design: Array, scale: float = 0.25) -> float:
    """Step size ``1 / L`` for a gradient with Lipschitz constant ``L``.

    ``L = scale * sigma_max(X^T X)``; ``scale = 0.25`` bounds the curvature of
    the logistic log-likelihood, ``scale = 2`` that of ``||X b - y||^2``.
    """
    design = np.asarray(design, dtype=float)
    if design.ndim != 2:
        raise InvalidArgumentError(
            f"design matrix must be 2D, got shape {design.shape}"
        )
    if scale <= 0:
        raise InvalidArgumentError(f"scale must be > 0, got {scale}")
    singular_values = np.linalg.svd(design.T @ design, compute_uv=False)
    lipschitz = scale * float(singular_values.max())
    if lipschitz <= 0:
        raise InvalidArgumentError("design matrix has no nonzero singular value")
    return 1.0 / lipschitz


__all__ = ["approx_grad", "check_gradient", "lipschitz_step_size"]
