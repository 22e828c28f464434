"""Fixed-step and backtracking gradient descent."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

import numpy as np

from .core import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    DEFAULT_MAX_BACKTRACKS,
    DEFAULT_MAX_ITER,
    DEFAULT_TOL,
    Array,
    GradientDescentConfig,
    Gradient,
    InvalidArgumentError,
    Objective,
    OptimizeResult,
    check_convergence,
    relative_error,
)
from .line_search import backtrack as armijo_backtrack
from .logging import get_logger

logger = get_logger(__name__)

# (x, grad_at_x, f_at_x) -> (step, objective evaluations spent)
StepRule = Callable[[Array, Array, float], Tuple[float, int]]


def gradient_step(x: Array, grad: Array, t: float) -> Array:
    """Move from ``x`` a distance ``t`` along ``-grad``."""
    return x - t * grad


def _as_scalar(value: object) -> float:
    arr = np.asarray(value, dtype=float)
    if arr.size != 1:
        raise InvalidArgumentError(
            f"objective must return a scalar, got shape {arr.shape}"
        )
    return float(arr.item())


def _compute_gradient(gradf: Gradient, x: Array) -> Array:
    """Evaluate the gradient and check it matches the shape of ``x``."""
    grad = np.asarray(gradf(x), dtype=float)
    if grad.shape != x.shape:
        raise InvalidArgumentError(
            f"gradient shape {grad.shape} does not match parameter shape {x.shape}"
        )
    return grad


def _check_callables(f: Optional[Objective], gradf: Optional[Gradient]) -> None:
    if not callable(f):
        raise InvalidArgumentError("objective f must be callable")
    if not callable(gradf):
        raise InvalidArgumentError("gradient gradf must be callable")


def _frozen(x: Array) -> Array:
    x.setflags(write=False)
    return x


def _descend(
    fun: Objective,
    gradf: Gradient,
    x0: Array,
    config: GradientDescentConfig,
    step_rule: StepRule,
) -> OptimizeResult:
    x_old = np.asarray(x0, dtype=float).copy()
    f_old = fun(x_old)
    nfev = 1
    grad = _compute_gradient(gradf, x_old)
    njev = 1
    hist: list[Array] = []
    if config.history:
        hist.append(_frozen(x_old.copy()))

    x_new = x_old
    f_new = f_old
    rel_error = float("inf")
    optimal = False
    message = "Maximum iterations reached."
    nit = 0

    if config.max_iter == 0:
        message = "No iterations requested."

    while nit < config.max_iter:
        if nit > 0:
            grad = _compute_gradient(gradf, x_old)
            njev += 1
        t, ls_fev = step_rule(x_old, grad, f_old)
        nfev += ls_fev

        x_new = gradient_step(x_old, grad, t)
        f_new = fun(x_new)
        nfev += 1
        nit += 1
        if config.history:
            hist.append(_frozen(x_new.copy()))

        rel_error = relative_error(f_new, f_old)
        logger.debug(
            "iter %d: step=%.3e f=%.6e rel_error=%.3e", nit, t, f_new, rel_error
        )
        if check_convergence(rel_error, config.tol):
            optimal = True
            message = "Relative error tolerance satisfied."
            break

        x_old = x_new
        f_old = f_new

    logger.info("%s iterations=%d value=%.6e", message, nit, f_new)
    return OptimizeResult(
        solution=_frozen(x_new),
        value=float(f_new),
        optimal=optimal,
        iterations=nit,
        relative_error=float(rel_error),
        message=message,
        nfev=nfev,
        njev=njev,
        history=tuple(hist),
    )


def _run(
    config: GradientDescentConfig,
    x0: Array,
    f: Optional[Objective],
    gradf: Optional[Gradient],
) -> OptimizeResult:
    """Dispatch on ``config.backtrack``; ``config`` must already be validated."""
    _check_callables(f, gradf)

    def fun(x: Array) -> float:
        return _as_scalar(f(x))

    if config.backtrack:

        def step_rule(x: Array, grad: Array, fx: float) -> tuple[float, int]:
            return armijo_backtrack(
                fun,
                x,
                grad,
                config.t,
                alpha=config.alpha,
                beta=config.beta,
                max_backtracks=config.max_backtracks,
                fx=fx,
            )

    else:

        def step_rule(x: Array, grad: Array, fx: float) -> tuple[float, int]:
            return config.t, 0

    return _descend(fun, gradf, x0, config, step_rule)


def gradient_descent_fixed(
    f: Objective,
    gradf: Gradient,
    x0: Array,
    t: float,
    max_iter: int = DEFAULT_MAX_ITER,
    tol: float = DEFAULT_TOL,
    history: bool = False,
) -> OptimizeResult:
    """Gradient descent with a constant step size ``t``."""
    config = GradientDescentConfig(
        t=t, max_iter=max_iter, tol=tol, backtrack=False, history=history
    ).validate()
    return _run(config, x0, f, gradf)


def gradient_descent_backtrack(
    f: Objective,
    gradf: Gradient,
    x0: Array,
    t: float,
    max_iter: int = DEFAULT_MAX_ITER,
    tol: float = DEFAULT_TOL,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS,
    history: bool = False,
) -> OptimizeResult:
    """
    Gradient descent with an Armijo backtracking line search.

    Every iteration restarts the search from the initial step ``t`` rather
    than from the step accepted in the previous iteration.
    """
    config = GradientDescentConfig(
        t=t,
        max_iter=max_iter,
        tol=tol,
        backtrack=True,
        alpha=alpha,
        beta=beta,
        max_backtracks=max_backtracks,
        history=history,
    ).validate()
    return _run(config, x0, f, gradf)


def optimize_with_config(
    config: GradientDescentConfig,
    x0: Array,
    f: Objective,
    gradf: Gradient,
) -> OptimizeResult:
    """Run the descent variant selected by ``config.backtrack``."""
    config.validate()
    logger.info(
        "gradient descent: backtrack=%s t=%.3e max_iter=%d tol=%.1e",
        config.backtrack,
        config.t,
        config.max_iter,
        config.tol,
    )
    return _run(config, x0, f, gradf)


def optimize(
    x0: Array,
    t: float,
    max_iter: int = DEFAULT_MAX_ITER,
    tol: float = DEFAULT_TOL,
    backtrack: bool = True,
    f: Optional[Objective] = None,
    gradf: Optional[Gradient] = None,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS,
    history: bool = False,
) -> OptimizeResult:
    """
    Minimize ``f`` starting from ``x0``.

    ``backtrack`` selects the line-search variant; otherwise ``t`` is used as
    a fixed step. Running out of iterations is reported through
    ``result.optimal`` rather than an exception.

    Raises:
        InvalidArgumentError: On bad options, missing callables or a gradient
            whose shape differs from ``x0``.
        LineSearchFailedError: If a backtracking search exceeds
            ``max_backtracks`` shrinks.
    """
    _check_callables(f, gradf)
    config = GradientDescentConfig(
        t=t,
        max_iter=max_iter,
        tol=tol,
        backtrack=backtrack,
        alpha=alpha,
        beta=beta,
        max_backtracks=max_backtracks,
        history=history,
    )
    return optimize_with_config(config, x0, f, gradf)


__all__ = [
    "gradient_descent_backtrack",
    "gradient_descent_fixed",
    "gradient_step",
    "optimize",
    "optimize_with_config",
]
