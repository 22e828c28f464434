"""PyTorch autograd adapters.

Lets an objective written with torch operations be handed to the NumPy
optimizer without deriving its gradient by hand.

Example:
    >>> import numpy as np
    >>> import torch
    >>> from gradient_descent import optimize
    >>> from gradient_descent.autograd import torch_gradient, torch_objective
    >>> def loss(b):
    ...     return torch.sum((b - 3.0) ** 2)
    >>> res = optimize(np.zeros(2), 1.0, tol=1e-10,
    ...                f=torch_objective(loss), gradf=torch_gradient(loss))
    >>> np.allclose(res.solution, 3.0, atol=1e-3)
    True
"""

from __future__ import annotations

from typing import Callable

import numpy as np
import torch

from .core import Array, Gradient, InvalidArgumentError, Objective

TorchObjective = Callable[[torch.Tensor], torch.Tensor]


def _to_tensor(x: Array, dtype: torch.dtype, requires_grad: bool) -> torch.Tensor:
    arr = np.asarray(x, dtype=float)
    tensor = torch.tensor(arr, dtype=dtype, device=torch.device("cpu"))
    if requires_grad:
        tensor.requires_grad_(True)
    return tensor


def torch_objective(
    fun: TorchObjective, dtype: torch.dtype = torch.float64
) -> Objective:
    """Wrap a torch objective into a NumPy array -> float callable."""

    def f(x: Array) -> float:
        with torch.no_grad():
            value = fun(_to_tensor(x, dtype, requires_grad=False))
        if value.numel() != 1:
            raise InvalidArgumentError(
                f"objective must return a scalar, got shape {tuple(value.shape)}"
            )
        return float(value.item())

    return f


def torch_gradient(
    fun: TorchObjective, dtype: torch.dtype = torch.float64
) -> Gradient:
    """Build a NumPy gradient callable from a torch objective via autograd.

    Args:
        fun: Function mapping a parameter tensor to a scalar tensor, built
            from differentiable torch operations.
        dtype: Floating dtype the parameters are converted to.

    Returns:
        Callable mapping a NumPy array to a NumPy array of the same shape.
    """

    def gradf(x: Array) -> Array:
        params = _to_tensor(x, dtype, requires_grad=True)
        value = fun(params)
        if value.numel() != 1:
            raise InvalidArgumentError(
                f"objective must return a scalar, got shape {tuple(value.shape)}"
            )
        if not value.requires_grad:
            return np.zeros(params.shape)
        (grad,) = torch.autograd.grad(value.reshape(()), params, allow_unused=True)
        if grad is None:
            return np.zeros(params.shape)
        return grad.detach().cpu().numpy().astype(float)

    return gradf


__all__ = ["torch_gradient", "torch_objective"]
