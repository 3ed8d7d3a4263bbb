import math

import numpy as np
import pytest

from numcore import integrate
from numcore.integrate import MAX_SUBDIVISIONS, IntegrationStatus, QuadConfig, QuadTolerances


def test_finite_bounds():
    res = integrate(math.exp, 0.0, 1.0)
    assert res.status is IntegrationStatus.OK
    assert res.value == pytest.approx(math.e - 1.0, rel=1e-12)
    assert res.intervals[0].low == 0.0


def test_infinite_bounds_use_transformed_variable():
    res = integrate(lambda x: math.exp(-x), 0.0, math.inf)
    assert res.status is IntegrationStatus.OK
    assert res.value == pytest.approx(1.0, rel=1e-10)
    assert all(0.0 <= leaf.low < leaf.high <= 1.0 for leaf in res.intervals)


def test_vectorized_callable_receives_node_arrays():
    sizes = []

    def f(xs):
        sizes.append(np.shape(xs))
        return np.exp(-xs * xs)

    res = integrate(f, -math.inf, math.inf, vectorized=True)
    assert res.value == pytest.approx(math.sqrt(math.pi), rel=1e-9)
    assert set(sizes) == {(82,)}


def test_config_overrides_arguments():
    config = QuadConfig(tolerances=QuadTolerances(eps_abs=0.0, eps_rel=1e-14),
                        rule_order=15, max_subdivisions=4)
    res = integrate(lambda x: math.cos(40.0 * x), 0.0, 10.0, max_subdivisions=500, config=config)
    assert res.status is IntegrationStatus.MAX_SUBDIVISIONS
    assert res.subdivisions == 4
    assert res.neval % 15 == 0


@pytest.mark.parametrize("budget", [{}, {"max_subdivisions": 200}])
def test_pi_regression_through_public_entry(budget):
    res = integrate(lambda x: 1.0 / ((x + 1.0) * np.sqrt(x)), 0.0, np.inf,
                    vectorized=True, **budget)
    assert res.status is IntegrationStatus.OK
    assert abs(res.value - math.pi) <= 1e-7
    assert len(res.intervals) <= budget.get("max_subdivisions", MAX_SUBDIVISIONS)


@pytest.mark.parametrize(
    "lower,upper",
    [
        (math.nan, 1.0),
        (0.0, math.nan),
        (1.0, 0.0),
        (math.inf, math.inf),
        (-math.inf, -math.inf),
        (math.inf, 0.0),
        (0.0, -math.inf),
        (math.inf, -math.inf),
    ],
)
def test_malformed_bounds_are_invalid(lower, upper):
    res = integrate(math.exp, lower, upper)
    assert res.status is IntegrationStatus.INVALID_INPUT
    assert not res.success


def test_equal_finite_bounds_integrate_to_zero():
    res = integrate(math.exp, 3.0, 3.0)
    assert res.status is IntegrationStatus.OK
    assert res.value == 0.0


def test_unsupported_rule_order_raises():
    with pytest.raises(ValueError):
        integrate(math.exp, 0.0, math.inf, rule_order=10)


def test_invalid_stall_limit_in_config_raises():
    with pytest.raises(ValueError):
        QuadConfig(stall_limit=0)


def test_negative_tolerances_raise_in_dataclass():
    with pytest.raises(ValueError):
        QuadTolerances(eps_abs=-1.0)
