"""
Example: Logistic Regression by Gradient Descent

Simulates a logistic regression data set with four standard normal predictors,
then estimates the coefficients twice: once with a fixed step equal to the
inverse Lipschitz constant of the gradient, and once with backtracking line
search started from the same step.
"""

import time

import numpy as np

from gradient_descent import (
    fit_logistic_regression,
    lipschitz_step_size,
    make_logistic_data,
)


def main() -> None:
    rng = np.random.default_rng(2016)
    true_beta = np.array([3.0, 5.0, -2.0, 2.0])
    X, y = make_logistic_data(1000, true_beta, rng)

    step_size = lipschitz_step_size(X, scale=0.25)

    print("=" * 60)
    print("(1) Gradient descent without backtracking")
    print("=" * 60)
    print(f"Step size: {step_size:.6e}")
    start = time.perf_counter()
    fixed = fit_logistic_regression(X, y, t=step_size, backtrack=False)
    elapsed = time.perf_counter() - start
    print(f"Number of iterations: {fixed.iterations}")
    print(f"Converged: {fixed.optimal}")
    print(f"Estimated optimum: {np.round(fixed.solution, 4)}")
    print(f"Time: {elapsed:.3f}s")
    print()

    print("=" * 60)
    print("(2) Gradient descent with backtracking")
    print("=" * 60)
    start = time.perf_counter()
    searched = fit_logistic_regression(X, y, t=step_size, backtrack=True)
    elapsed = time.perf_counter() - start
    print(f"Number of iterations: {searched.iterations}")
    print(f"Converged: {searched.optimal}")
    print(f"Estimated optimum: {np.round(searched.solution, 4)}")
    print(f"Time: {elapsed:.3f}s")
    print()

    print(f"True coefficients: {true_beta}")


if __name__ == "__main__":
    main()
