"""Armijo backtracking line search along the negative gradient."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .core import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    DEFAULT_MAX_BACKTRACKS,
    Array,
    LineSearchFailedError,
    Objective,
    validate_line_search,
    validate_step,
)
from .logging import get_logger

logger = get_logger(__name__)


def backtrack(
    f: Objective,
    x: Array,
    grad_at_x: Array,
    t0: float,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS,
    fx: Optional[float] = None,
) -> tuple[float, int]:
    """
    Shrink a trial step until it gives sufficient decrease.

    Starting from ``s = t0``, the step is multiplied by ``beta`` until

        f(x - s * g) <= f(x) - alpha * s * ||g||^2

    holds. ``f(x)`` is evaluated once, or taken from ``fx`` when the caller
    already has it.

    Parameters
    ----------
    f:
        Objective function.
    x:
        Current point.
    grad_at_x:
        Gradient of ``f`` evaluated at ``x``.
    t0:
        Initial trial step, must be positive.
    alpha:
        Sufficient-decrease coefficient in (0, 1).
    beta:
        Shrink multiplier in (0, 1).
    max_backtracks:
        Number of shrinks allowed before giving up.
    fx:
        Cached value of ``f(x)``.

    Returns
    -------
    tuple[float, int]
        The accepted step ``0 < s <= t0`` and the number of objective
        evaluations spent.

    Raises
    ------
    LineSearchFailedError
        If the condition still fails after ``max_backtracks`` shrinks.
    """
    validate_step(t0)
    validate_line_search(alpha, beta, max_backtracks)

    nfev = 0
    if fx is None:
        fx = float(f(x))
        nfev += 1
    grad_sq = float(np.vdot(grad_at_x, grad_at_x))

    s = float(t0)
    for shrinks in range(max_backtracks + 1):
        f_trial = f(x - s * grad_at_x)
        nfev += 1
        if f_trial <= fx - alpha * s * grad_sq:
            if shrinks:
                logger.debug(
                    "line search accepted step %.3e after %d shrinks", s, shrinks
                )
            return s, nfev
        if shrinks < max_backtracks:
            s *= beta
    raise LineSearchFailedError(step=s, attempts=max_backtracks)


__all__ = ["backtrack"]
