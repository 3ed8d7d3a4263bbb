"""
Example: Adaptive Quadrature in numcore

This example walks through the integration engines: adaptive Gauss-Kronrod
quadrature on finite intervals, the infinite-domain transform, box
integration, and how non-OK outcomes are reported through the status enum.
"""

import math

import numpy as np

from numcore import IntegrationStatus, QuadTolerances, integrate, integrate_box


def example_finite_interval():
    """Example: Smooth and endpoint-singular integrands on [a, b]."""
    print("=" * 60)
    print("Example 1: Finite Interval")
    print("=" * 60)

    result = integrate(math.sin, 0.0, math.pi)
    print(f"int_0^pi sin(x) dx = {result.value:.15f} (error {result.error:.1e})")
    print(f"Status: {result.status.value}, intervals: {result.subdivisions}")

    result = integrate(np.sqrt, 0.0, 1.0, vectorized=True,
                       tolerances=QuadTolerances(eps_abs=0.0, eps_rel=1e-12))
    print(f"int_0^1 sqrt(x) dx = {result.value:.15f} (exact 2/3)")
    print(f"Intervals used near the singular endpoint: {result.subdivisions}")
    print()


def example_infinite_domain():
    """Example: Semi- and doubly-infinite domains."""
    print("=" * 60)
    print("Example 2: Infinite Domains")
    print("=" * 60)

    result = integrate(lambda x: np.exp(-x * x), -np.inf, np.inf, vectorized=True)
    print(f"Gaussian integral: {result.value:.12f} (sqrt(pi) = {math.sqrt(math.pi):.12f})")

    result = integrate(lambda x: 1.0 / ((x + 1.0) * np.sqrt(x)), 0.0, np.inf,
                       vectorized=True)
    print(f"int_0^inf dx / ((x+1) sqrt(x)) = {result.value:.12f} (pi = {math.pi:.12f})")
    print(f"Status: {result.status.value}, evaluations: {result.neval}")
    print()


def example_failure_modes():
    """Example: Divergent integrals and exhausted budgets."""
    print("=" * 60)
    print("Example 3: Failure Reporting")
    print("=" * 60)

    result = integrate(lambda x: 1.0 / x, 0.0, 1.0)
    print(f"int_0^1 dx / x -> {result.status.value}: {result.message}")

    result = integrate(lambda x: math.cos(500.0 * x), 0.0, 10.0, max_subdivisions=4)
    print(f"Rapid oscillation, 4 intervals -> {result.status.value}")
    print(f"Best estimate {result.value:.6f} with error {result.error:.2e}")

    result = integrate(math.exp, 1.0, 0.0)
    print(f"Reversed bounds -> {result.status.value}")
    print()


def example_box():
    """Example: Integration over a 3-D box."""
    print("=" * 60)
    print("Example 4: Box Integration")
    print("=" * 60)

    result = integrate_box(
        lambda x: np.exp(-np.sum(x * x, axis=1)),
        [-1.0, -1.0, -1.0],
        [1.0, 1.0, 1.0],
        tolerances=(1e-8, 1e-6),
        max_evals=200000,
        vectorized=True,
    )
    exact = (math.sqrt(math.pi) * math.erf(1.0)) ** 3
    print(f"Gaussian over [-1, 1]^3 = {result.value:.10f} (exact {exact:.10f})")
    print(f"Status: {result.status.value}, evaluations: {result.neval}")
    if result.status is not IntegrationStatus.OK:
        print("Increase max_evals to reach the requested tolerance.")
    print()


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("numcore - Integration Examples")
    print("=" * 60 + "\n")

    example_finite_interval()
    example_infinite_domain()
    example_failure_modes()
    example_box()

    print("=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
