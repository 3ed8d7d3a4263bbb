import math

import numpy as np
import pytest

from numcore.core import ScalarFunction
from numcore.integrate import (
    InfiniteDomainTransform,
    IntegrationStatus,
    integrate_infinite,
)


class CountingGaussian(ScalarFunction):
    def __init__(self):
        self.batches = []

    def evaluate(self, x):
        return math.exp(-x * x)

    def evaluate_many(self, xs):
        self.batches.append(np.asarray(xs).size)
        return np.exp(-np.asarray(xs) ** 2)


@pytest.mark.parametrize(
    "lower,upper,kind",
    [(-math.inf, math.inf, "both"), (1.0, math.inf, "upper"), (-math.inf, 1.0, "lower")],
)
def test_kind_follows_bounds(lower, upper, kind):
    assert InfiniteDomainTransform(math.exp, lower, upper).kind == kind


@pytest.mark.parametrize(
    "lower,upper",
    [(0.0, 1.0), (math.inf, math.inf), (-math.inf, -math.inf), (math.nan, math.inf), (math.inf, 0.0)],
)
def test_invalid_bounds_raise(lower, upper):
    with pytest.raises(ValueError):
        InfiniteDomainTransform(math.exp, lower, upper)


@pytest.mark.parametrize(
    "lower,upper", [(-math.inf, math.inf), (0.5, math.inf), (-math.inf, -0.5)]
)
def test_batched_matches_pointwise(lower, upper):
    transform = InfiniteDomainTransform(lambda x: math.exp(-x * x), lower, upper)
    ts = np.linspace(0.05, 0.95, 7)
    expected = [transform.evaluate(float(t)) for t in ts]
    np.testing.assert_allclose(transform.evaluate_many(ts), expected, rtol=1e-14)


def test_doubly_infinite_evaluates_both_branches_in_one_call():
    f = CountingGaussian()
    transform = InfiniteDomainTransform(f, -math.inf, math.inf)
    transform.evaluate_many(np.linspace(0.1, 0.9, 5))
    assert f.batches == [10]


def test_gaussian_over_real_line():
    res = integrate_infinite(lambda x: math.exp(-x * x), -math.inf, math.inf)
    assert res.status is IntegrationStatus.OK
    assert res.value == pytest.approx(math.sqrt(math.pi), rel=1e-9)


def test_upper_tail():
    res = integrate_infinite(lambda x: 1.0 / (x * x), 2.0, math.inf)
    assert res.status is IntegrationStatus.OK
    assert res.value == pytest.approx(0.5, rel=1e-9)


def test_lower_tail():
    res = integrate_infinite(math.exp, -math.inf, 0.0)
    assert res.status is IntegrationStatus.OK
    assert res.value == pytest.approx(1.0, rel=1e-9)


@pytest.mark.parametrize("budget", [{}, {"max_subdivisions": 200}])
def test_pi_from_endpoint_singular_integrand(budget):
    res = integrate_infinite(lambda x: 1.0 / ((x + 1.0) * math.sqrt(x)), 0.0, math.inf, **budget)
    assert res.status is IntegrationStatus.OK
    assert abs(res.value - math.pi) <= 1e-7


def test_finite_bounds_rejected():
    res = integrate_infinite(math.exp, 0.0, 1.0)
    assert res.status is IntegrationStatus.INVALID_INPUT


def test_even_function_over_real_line_is_twice_half_line():
    f = lambda x: 1.0 / (1.0 + x**4)  # noqa: E731
    full = integrate_infinite(f, -math.inf, math.inf)
    half = integrate_infinite(f, 0.0, math.inf)
    assert full.status is IntegrationStatus.OK
    assert half.status is IntegrationStatus.OK
    assert full.value == pytest.approx(2.0 * half.value, rel=1e-9)
    assert half.value == pytest.approx(math.pi / (2.0 * math.sqrt(2.0)), rel=1e-9)
