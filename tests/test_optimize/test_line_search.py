import numpy as np
import pytest

from numcore.core import CallableGradientFunction
from numcore.optimize import Problem
from numcore.optimize.line_search import backtracking_armijo, wolfe_line_search


def quadratic_fun(x: np.ndarray) -> float:
    return float(x.T @ x)


def quadratic_grad(x: np.ndarray) -> np.ndarray:
    return 2 * x


QUADRATIC = Problem(fun=quadratic_fun, grad=quadratic_grad)


def test_backtracking_armijo_monotone():
    x = np.array([1.0, -2.0])
    grad = quadratic_grad(x)
    direction = -grad
    res = backtracking_armijo(QUADRATIC, x, direction, quadratic_fun(x), grad)
    assert res.success
    assert 0 < res.alpha <= 1.0
    assert res.fval <= quadratic_fun(x)
    np.testing.assert_allclose(res.grad, quadratic_grad(x + res.alpha * direction))
    assert res.nfev > 0
    assert res.njev == 1


def rosen(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosen_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


ROSEN = Problem(fun=rosen, grad=rosen_grad, dim=2)


def test_wolfe_conditions_rosenbrock():
    x = np.array([-1.2, 1.0])
    grad = rosen_grad(x)
    direction = -grad
    res = wolfe_line_search(ROSEN, x, direction, rosen(x), grad, alpha0=1e-3)
    assert res.success
    alpha = res.alpha
    phi0 = rosen(x)
    phi_alpha = rosen(x + alpha * direction)
    directional_derivative = rosen_grad(x + alpha * direction) @ direction
    assert phi_alpha <= phi0 + 1e-4 * alpha * (grad @ direction)
    assert abs(directional_derivative) <= 0.9 * abs(grad @ direction)
    assert res.fval == pytest.approx(phi_alpha)


def test_backtracking_armijo_raises_on_invalid_params():
    x = np.array([1.0])
    grad = quadratic_grad(x)
    with pytest.raises(ValueError):
        backtracking_armijo(QUADRATIC, x, -grad, quadratic_fun(x), grad, c=1.5)
    with pytest.raises(ValueError):
        backtracking_armijo(QUADRATIC, x, -grad, quadratic_fun(x), grad, rho=1.1)


def test_ascent_direction_rejected():
    x = np.array([1.0])
    grad = quadratic_grad(x)
    with pytest.raises(ValueError):
        backtracking_armijo(QUADRATIC, x, grad, quadratic_fun(x), grad)
    with pytest.raises(ValueError):
        wolfe_line_search(QUADRATIC, x, grad, quadratic_fun(x), grad)


def test_wolfe_invalid_constants():
    x = np.array([1.0])
    grad = quadratic_grad(x)
    with pytest.raises(ValueError):
        wolfe_line_search(QUADRATIC, x, -grad, quadratic_fun(x), grad, c1=0.5, c2=0.4)


def test_wolfe_zoom_phase_triggered():
    x = np.array([-1.2, 1.0])
    grad = rosen_grad(x)
    direction = -grad
    res = wolfe_line_search(ROSEN, x, direction, rosen(x), grad, alpha0=5.0)
    assert res.success
    assert res.alpha < 1.0


def test_wolfe_expands_short_initial_step():
    x = np.array([4.0])
    grad = quadratic_grad(x)
    res = wolfe_line_search(QUADRATIC, x, -grad, quadratic_fun(x), grad, alpha0=1e-3)
    assert res.success
    assert res.alpha > 1e-2


def test_wolfe_shrinks_past_non_finite_values():
    def fg(x):
        if abs(x[0]) >= 1.0:
            return np.inf, np.array([np.nan])
        return float(x[0] ** 2), 2 * x

    f = CallableGradientFunction(fg)
    x = np.array([0.9])
    res = wolfe_line_search(f, x, np.array([-1.0]), 0.81, np.array([1.8]), alpha0=4.0)
    assert res.success
    assert np.isfinite(res.fval)
    assert abs(x[0] - res.alpha) < 1.0


def test_wolfe_reports_failure_on_unbounded_linear_function():
    f = Problem(fun=lambda x: -float(x[0]), grad=lambda x: np.array([-1.0]))
    res = wolfe_line_search(f, np.zeros(1), np.ones(1), 0.0, np.array([-1.0]), max_iter=10)
    assert not res.success
    assert res.fval is None
    assert res.nfev == 10


def test_armijo_reports_failure():
    f = CallableGradientFunction(
        lambda x: (0.0, np.array([-1.0])) if x[0] == 0.0 else (np.nan, np.array([np.nan]))
    )
    res = backtracking_armijo(f, np.zeros(1), np.ones(1), 0.0, np.array([-1.0]), max_iter=5)
    assert not res.success
    assert res.nfev == 5
