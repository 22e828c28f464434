"""Gradient descent with fixed steps or backtracking line search.

Example
-------
>>> import numpy as np
>>> from gradient_descent import optimize
>>> res = optimize(
...     np.array([10.0]),
...     0.1,
...     tol=1e-6,
...     max_iter=1000,
...     backtrack=False,
...     f=lambda x: float(x @ x),
...     gradf=lambda x: 2 * x,
... )
>>> res.optimal
True
>>> abs(res.solution[0]) < 1e-2
True
"""

from .core import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    DEFAULT_MAX_BACKTRACKS,
    DEFAULT_MAX_ITER,
    DEFAULT_TOL,
    GradientDescentConfig,
    GradientDescentError,
    InvalidArgumentError,
    LineSearchFailedError,
    OptimizeResult,
    check_convergence,
    relative_error,
)
from .gradient import (
    gradient_descent_backtrack,
    gradient_descent_fixed,
    gradient_step,
    optimize,
    optimize_with_config,
)
from .line_search import backtrack
from .logging import configure_logging, get_logger, set_log_level, trace_descent
from .logistic import (
    fit_logistic_regression,
    logistic_gradient,
    logistic_objective,
    make_logistic_data,
    sigmoid,
)
from .utils import approx_grad, check_gradient, lipschitz_step_size

__version__ = "0.1.0"

__all__ = [
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
    "approx_grad",
    "backtrack",
    "check_convergence",
    "check_gradient",
    "configure_logging",
    "fit_logistic_regression",
    "get_logger",
    "gradient_descent_backtrack",
    "gradient_descent_fixed",
    "gradient_step",
    "lipschitz_step_size",
    "logistic_gradient",
    "logistic_objective",
    "make_logistic_data",
    "optimize",
    "optimize_with_config",
    "relative_error",
    "set_log_level",
    "sigmoid",
    "trace_descent",
]
