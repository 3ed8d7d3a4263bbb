import numpy as np
import pytest

from numcore.optimize import CurvatureHistory


def _pair(i: int, dim: int = 3):
    s = np.full(dim, float(i + 1))
    return s, 2.0 * s


def test_oldest_pair_is_overwritten():
    history = CurvatureHistory(capacity=3, dim=3)
    for i in range(5):
        history.append(*_pair(i))
    assert len(history) == 3
    firsts = [s[0] for s, _ in history]
    assert firsts == [3.0, 4.0, 5.0]


def test_iteration_order_before_wraparound():
    history = CurvatureHistory(capacity=4, dim=3)
    for i in range(2):
        history.append(*_pair(i))
    assert [s[0] for s, _ in history] == [1.0, 2.0]


def test_empty_history_is_identity():
    history = CurvatureHistory(capacity=2, dim=3)
    g = np.array([1.0, -2.0, 0.5])
    out = history.inverse_hessian_product(g)
    np.testing.assert_array_equal(out, g)
    assert out is not g


def test_secant_equation_for_newest_pair(rng):
    dim = 6
    a = rng.normal(size=(dim, dim))
    spd = a @ a.T + dim * np.eye(dim)
    history = CurvatureHistory(capacity=4, dim=dim)
    for _ in range(7):
        s = rng.normal(size=dim)
        history.append(s, spd @ s)
    s_last, y_last = list(history)[-1]
    np.testing.assert_allclose(history.inverse_hessian_product(y_last), s_last, rtol=1e-10)


def test_product_is_descent_direction(rng):
    dim = 5
    history = CurvatureHistory(capacity=3, dim=dim)
    for _ in range(3):
        s = rng.normal(size=dim)
        history.append(s, s * rng.uniform(0.5, 2.0, size=dim))
    g = rng.normal(size=dim)
    assert np.dot(history.inverse_hessian_product(g), g) > 0


def test_clear_and_invalid_capacity():
    history = CurvatureHistory(capacity=2, dim=2)
    history.append(np.ones(2), np.ones(2))
    history.clear()
    assert len(history) == 0
    with pytest.raises(ValueError):
        CurvatureHistory(capacity=0, dim=2)
