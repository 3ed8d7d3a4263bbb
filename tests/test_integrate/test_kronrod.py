import numpy as np
import pytest

from numcore.core import as_scalar_function
from numcore.integrate import SUPPORTED_ORDERS, get_rule


@pytest.mark.parametrize("order", SUPPORTED_ORDERS)
def test_weights_sum_to_interval_length(order):
    rule = get_rule(order)
    assert rule.order == order
    assert rule.kronrod_weights.sum() == pytest.approx(2.0, abs=1e-14)
    assert rule.gauss_weights.sum() == pytest.approx(2.0, abs=1e-14)


@pytest.mark.parametrize("order", SUPPORTED_ORDERS)
def test_nodes_are_symmetric_and_increasing(order):
    rule = get_rule(order)
    assert np.all(np.diff(rule.nodes) > 0)
    np.testing.assert_allclose(rule.nodes, -rule.nodes[::-1], atol=0.0)
    np.testing.assert_allclose(rule.kronrod_weights, rule.kronrod_weights[::-1], atol=0.0)
    assert -1.0 < rule.nodes[0] and rule.nodes[-1] < 1.0


@pytest.mark.parametrize("order", SUPPORTED_ORDERS)
def test_embedded_gauss_rule_matches_legendre(order):
    rule = get_rule(order)
    n = (order - 1) // 2
    assert rule.gauss_points == n
    ref_nodes, ref_weights = np.polynomial.legendre.leggauss(n)
    mask = rule.gauss_weights != 0
    np.testing.assert_allclose(rule.nodes[mask], ref_nodes, atol=1e-12)
    np.testing.assert_allclose(rule.gauss_weights[mask], ref_weights, atol=1e-12)


def test_k41_is_exact_for_high_degree_polynomials():
    rule = get_rule(41)
    for degree in (0, 1, 7, 20, 39, 55):
        f = as_scalar_function(lambda x, k=degree: x**k, vectorized=True)
        kronrod, _, _ = rule.estimate(f, 0.0, 1.0)
        assert kronrod == pytest.approx(1.0 / (degree + 1), rel=1e-13)


def test_error_vanishes_within_gauss_degree():
    rule = get_rule(21)
    f = as_scalar_function(lambda x: 3 * x**19 - x**4 + 2.0, vectorized=True)
    kronrod, gauss, error = rule.estimate(f, -1.0, 3.0)
    assert error == pytest.approx(0.0, abs=1e-8 * abs(kronrod))
    assert gauss == pytest.approx(kronrod, rel=1e-12)


def test_estimate_uses_single_batched_call():
    calls = []

    def f(xs):
        calls.append(xs.size)
        return np.ones_like(xs)

    kronrod, _, _ = get_rule(15).estimate(as_scalar_function(f, vectorized=True), 2.0, 5.0)
    assert calls == [15]
    assert kronrod == pytest.approx(3.0)


def test_rule_tables_are_read_only():
    rule = get_rule(41)
    with pytest.raises(ValueError):
        rule.nodes[0] = 0.0


def test_unsupported_order_raises():
    with pytest.raises(ValueError, match="Unsupported"):
        get_rule(17)
