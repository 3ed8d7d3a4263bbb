import numpy as np
import pytest

from numcore.optimize.utils import approx_grad, gradient_error


def test_approx_grad_matches_linear_function():
    def fun(x: np.ndarray) -> float:
        return float(3 * x[0] - 2 * x[1])

    grad = approx_grad(fun, np.array([0.2, -0.1]))
    assert np.allclose(grad, np.array([3.0, -2.0]), atol=1e-6)


def test_approx_grad_matches_quadratic():
    def fun(x: np.ndarray) -> float:
        return float(x[0] ** 2 + 3 * x[1] ** 2)

    grad = approx_grad(fun, np.array([0.5, -1.5]))
    assert np.allclose(grad, np.array([1.0, -9.0]), atol=1e-6)


def test_approx_grad_invalid_eps():
    with pytest.raises(ValueError):
        approx_grad(lambda x: float(x[0]), np.array([0.0]), eps=0.0)


def test_gradient_error_flags_wrong_gradient():
    def fun(x: np.ndarray) -> float:
        return float(np.sum(np.sin(x)))

    x = np.array([0.3, 1.1, -0.7])
    assert gradient_error(fun, np.cos, x) < 1e-8
    assert gradient_error(fun, lambda x: -np.cos(x), x) > 0.5
