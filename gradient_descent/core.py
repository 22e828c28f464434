"""Core interfaces shared by the gradient descent routines."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Callable, Tuple

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]

DEFAULT_MAX_ITER = 100_000
DEFAULT_TOL = 1e-3
DEFAULT_ALPHA = 0.5
DEFAULT_BETA = 0.9
DEFAULT_MAX_BACKTRACKS = 100


class GradientDescentError(Exception):
    """Base class for errors raised by the optimizer."""


class InvalidArgumentError(GradientDescentError, ValueError):
    """Raised when an option or a callable's output is unusable."""


class LineSearchFailedError(GradientDescentError, RuntimeError):
    """Raised when backtracking cannot satisfy the Armijo condition."""

    def __init__(self, step: float, attempts: int, message: str | None = None) -> None:
        if message is None:
            message = (
                f"Backtracking line search found no sufficient decrease after "
                f"{attempts} shrinks (last trial step {step:.3e})."
            )
        super().__init__(message)
        self.step = step
        self.attempts = attempts


@dataclass(frozen=True)
class OptimizeResult:
    """Result record returned by every descent routine.

    ``solution`` and the ``history`` snapshots are read-only arrays.
    """

    solution: Array
    value: float
    optimal: bool
    iterations: int
    relative_error: float
    message: str = ""
    nfev: int = 0
    njev: int = 0
    history: Tuple[Array, ...] = ()


@dataclass(frozen=True)
class GradientDescentConfig:
    """
    Options for a gradient descent run.

    Args:
        t: Step size for fixed-step descent, or the initial trial step that
            every backtracking search starts from. Must be positive.
        max_iter: Iteration budget. Zero returns the starting point untouched.
        tol: Relative-error threshold below which the run counts as converged.
        backtrack: Use the Armijo line search instead of a fixed step.
        alpha: Sufficient-decrease coefficient in (0, 1).
        beta: Step shrink multiplier in (0, 1).
        max_backtracks: Number of shrinks allowed per line search.
        history: Record every iterate in the result.
    """

    t: float
    max_iter: int = DEFAULT_MAX_ITER
    tol: float = DEFAULT_TOL
    backtrack: bool = True
    alpha: float = DEFAULT_ALPHA
    beta: float = DEFAULT_BETA
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS
    history: bool = False

    def validate(self) -> "GradientDescentConfig":
        """Raise InvalidArgumentError for the first bad option; return self."""
        validate_step(self.t)
        if not _is_integer(self.max_iter):
            raise InvalidArgumentError(
                f"max_iter must be an integer, got {self.max_iter!r}"
            )
        if self.max_iter < 0:
            raise InvalidArgumentError(f"max_iter must be >= 0, got {self.max_iter}")
        if not _is_positive_real(self.tol):
            raise InvalidArgumentError(f"tol must be > 0, got {self.tol!r}")
        validate_line_search(self.alpha, self.beta, self.max_backtracks)
        return self


def _is_integer(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_positive_real(value: object) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def validate_step(t: float) -> None:
    if not _is_positive_real(t):
        raise InvalidArgumentError(f"step size t must be > 0, got {t!r}")


def validate_line_search(alpha: float, beta: float, max_backtracks: int) -> None:
    if not (0 < alpha < 1):
        raise InvalidArgumentError(f"alpha must lie in (0, 1), got {alpha}")
    if not (0 < beta < 1):
        raise InvalidArgumentError(f"beta must lie in (0, 1), got {beta}")
    if not _is_integer(max_backtracks):
        raise InvalidArgumentError(
            f"max_backtracks must be an integer, got {max_backtracks!r}"
        )
    if max_backtracks < 1:
        raise InvalidArgumentError(
            f"max_backtracks must be >= 1, got {max_backtracks}"
        )


def relative_error(f_new: float, f_old: float) -> float:
    """Change in objective value normalized by ``|f_old| + 1``."""
    return abs(f_new - f_old) / (abs(f_old) + 1.0)


def check_convergence(rel_error: float, tol: float) -> bool:
    """Return True if the relative error is strictly below tolerance.

    NaN never converges.
    """
    return rel_error < tol


__all__ = [
    "Array",
    "Objective",
    "Gradient",
    "DEFAULT_ALPHA",
    "DEFAULT_BETA",
    "DEFAULT_MAX_BACKTRACKS",
    "DEFAULT_MAX_ITER",
    "DEFAULT_TOL",
    "GradientDescentConfig",
    "GradientDescentError",
    "InvalidArgumentError",
    "LineSearchFailedError",
    "OptimizeResult",
    "check_convergence",
    "relative_error",
    "validate_line_search",
    "validate_step",
]
