import dataclasses

import numpy as np
import pytest

from gradient_descent import (
    InvalidArgumentError,
    LineSearchFailedError,
    gradient_descent_backtrack,
    gradient_descent_fixed,
    gradient_step,
    optimize,
)


def square(x: np.ndarray) -> float:
    return float(np.sum(x**2))


def square_grad(x: np.ndarray) -> np.ndarray:
    return 2 * x


def test_gradient_step_moves_against_gradient():
    x = np.array([1.0, 2.0])
    g = np.array([0.5, -1.0])
    assert np.allclose(gradient_step(x, g, 0.2), [0.9, 2.2])


def test_fixed_step_converges_on_square():
    res = optimize(
        np.array([10.0]),
        0.1,
        max_iter=1000,
        tol=1e-6,
        backtrack=False,
        f=square,
        gradf=square_grad,
    )
    assert res.optimal
    assert res.iterations < 1000
    assert abs(res.solution[0]) < 1e-2
    assert res.value < 1e-4
    assert res.relative_error < 1e-6
    assert res.message == "Relative error tolerance satisfied."


def test_backtracking_converges_from_large_step():
    res = optimize(
        np.array([10.0]),
        1.0,
        tol=1e-6,
        backtrack=True,
        f=square,
        gradf=square_grad,
    )
    assert res.optimal
    assert abs(res.solution[0]) < 1e-3
    # every search shrinks 1.0 -> 0.9**7, which scales x by ~0.0434 per step
    assert res.iterations == 4


def test_backtracking_reseeds_each_iteration_from_initial_step():
    res = gradient_descent_backtrack(
        square, square_grad, np.array([10.0]), 1.0, tol=1e-6
    )
    # 8 trial evaluations per search plus one at the new point, plus f(x0)
    assert res.nfev == 1 + 9 * res.iterations
    assert res.njev == res.iterations


def test_fixed_step_of_one_oscillates_on_square():
    res = gradient_descent_fixed(square, square_grad, np.array([10.0]), 1.0, tol=1e-6)
    assert res.optimal
    assert res.iterations == 1
    assert res.solution[0] == pytest.approx(-10.0)


def test_budget_exhaustion_is_not_an_error():
    res = optimize(
        np.array([10.0]),
        0.1,
        max_iter=1,
        tol=1e-12,
        backtrack=False,
        f=square,
        gradf=square_grad,
    )
    assert not res.optimal
    assert res.iterations == 1
    assert np.allclose(res.solution, [8.0])
    assert res.value == pytest.approx(64.0)
    assert res.relative_error == pytest.approx(36.0 / 101.0)
    assert res.message == "Maximum iterations reached."


@pytest.mark.parametrize("backtrack", [False, True])
@pytest.mark.parametrize("max_iter", [1, 2, 5, 50])
def test_result_invariants(backtrack, max_iter):
    x0 = np.array([3.0, -4.0])
    res = optimize(
        x0,
        0.05,
        max_iter=max_iter,
        tol=1e-8,
        backtrack=backtrack,
        f=square,
        gradf=square_grad,
    )
    assert 0 <= res.iterations <= max_iter
    assert res.solution.shape == x0.shape
    if res.optimal:
        assert res.relative_error < 1e-8
    else:
        assert res.iterations == max_iter
    assert res.value == pytest.approx(square(res.solution))


def test_zero_iterations_returns_start():
    x0 = np.array([10.0])
    res = optimize(x0, 0.1, max_iter=0, f=square, gradf=square_grad)
    assert not res.optimal
    assert res.iterations == 0
    assert res.relative_error == float("inf")
    assert res.value == pytest.approx(100.0)
    assert np.array_equal(res.solution, x0)
    assert res.solution is not x0


def test_start_point_is_not_mutated():
    x0 = np.array([1.0, -1.0])
    optimize(x0, 0.1, max_iter=20, backtrack=False, f=square, gradf=square_grad)
    assert np.array_equal(x0, [1.0, -1.0])


def test_result_is_frozen():
    res = optimize(np.array([1.0]), 0.1, max_iter=5, f=square, gradf=square_grad)
    with pytest.raises(dataclasses.FrozenInstanceError):
        res.value = 0.0


def test_history_records_every_iterate():
    x0 = np.array([2.0, 1.0])
    res = optimize(
        x0, 0.1, max_iter=30, backtrack=False, f=square, gradf=square_grad, history=True
    )
    assert len(res.history) == res.iterations + 1
    assert np.array_equal(res.history[0], x0)
    assert np.array_equal(res.history[-1], res.solution)


def test_repeated_runs_are_bit_identical():
    x0 = np.array([0.5, -0.25, 3.0])
    runs = [
        optimize(x0, 1.0, tol=1e-9, f=square, gradf=square_grad) for _ in range(2)
    ]
    assert np.array_equal(runs[0].solution, runs[1].solution)
    assert runs[0].value == runs[1].value
    assert runs[0].iterations == runs[1].iterations
    assert runs[0].relative_error == runs[1].relative_error


def test_column_vector_start_keeps_shape():
    x0 = np.full((3, 1), 2.0)
    res = optimize(x0, 1.0, tol=1e-9, f=square, gradf=square_grad)
    assert res.solution.shape == (3, 1)
    assert res.optimal


def test_objective_returning_one_element_array_is_accepted():
    res = optimize(
        np.array([4.0]),
        0.25,
        backtrack=False,
        tol=1e-9,
        f=lambda x: x**2,
        gradf=square_grad,
    )
    assert res.optimal
    assert isinstance(res.value, float)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"t": 0.0},
        {"t": -1.0},
        {"t": float("nan")},
        {"tol": 0.0},
        {"tol": -1e-3},
        {"max_iter": -1},
        {"max_iter": 2.5},
        {"alpha": 1.0},
        {"beta": 0.0},
        {"max_backtracks": 0},
        {"max_backtracks": 2.5},
        {"t": True},
        {"tol": True},
    ],
)
def test_invalid_options_raise(kwargs):
    options = {"t": 0.1, "f": square, "gradf": square_grad}
    options.update(kwargs)
    with pytest.raises(InvalidArgumentError):
        optimize(np.array([1.0]), **options)


def test_invalid_argument_is_a_value_error():
    with pytest.raises(ValueError):
        optimize(np.array([1.0]), -0.1, f=square, gradf=square_grad)


def test_missing_callables_raise():
    with pytest.raises(InvalidArgumentError):
        optimize(np.array([1.0]), 0.1, gradf=square_grad)
    with pytest.raises(InvalidArgumentError):
        optimize(np.array([1.0]), 0.1, f=square)


def test_gradient_shape_mismatch_detected_before_stepping():
    calls = []

    def bad_grad(x: np.ndarray) -> np.ndarray:
        calls.append(x)
        return np.zeros(x.size + 1)

    with pytest.raises(InvalidArgumentError, match="gradient shape"):
        optimize(np.array([1.0, 2.0]), 0.1, f=square, gradf=bad_grad)
    assert len(calls) == 1


def test_non_descent_gradient_fails_line_search():
    def ascent(x: np.ndarray) -> np.ndarray:
        return -2 * x

    with pytest.raises(LineSearchFailedError) as excinfo:
        optimize(np.array([1.0]), 1.0, f=square, gradf=ascent, max_backtracks=20)
    assert excinfo.value.attempts == 20
    assert 0 < excinfo.value.step < 1.0


def test_fractional_shrink_cap_rejected_before_evaluating():
    calls = []

    def counted(x: np.ndarray) -> float:
        calls.append(x)
        return square(x)

    with pytest.raises(InvalidArgumentError, match="max_backtracks"):
        optimize(
            np.array([10.0]), 1.0, f=counted, gradf=square_grad, max_backtracks=2.5
        )
    assert calls == []


def test_solution_and_history_are_read_only():
    res = optimize(
        np.array([2.0, 1.0]), 0.1, max_iter=5, f=square, gradf=square_grad, history=True
    )
    assert isinstance(res.history, tuple)
    assert not res.solution.flags.writeable
    assert all(not snap.flags.writeable for snap in res.history)
    with pytest.raises(ValueError):
        res.solution[0] = 0.0


@pytest.mark.parametrize("backtrack", [False, True])
def test_objective_calls_match_reported_count(backtrack):
    calls = []

    def counted(x: np.ndarray) -> float:
        calls.append(x)
        return square(x)

    res = optimize(
        np.array([10.0]),
        1.0 if backtrack else 0.1,
        max_iter=10,
        tol=1e-12,
        backtrack=backtrack,
        f=counted,
        gradf=square_grad,
    )
    assert len(calls) == res.nfev
