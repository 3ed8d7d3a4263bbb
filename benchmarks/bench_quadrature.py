"""Benchmark adaptive quadrature and L-BFGS throughput."""

import math
import time
from typing import Dict

import numpy as np

from numcore import integrate, minimize


def benchmark_quadrature(vectorized: bool, repeats: int = 20) -> Dict[str, float]:
    """Time the pi regression integral with scalar or batched evaluation.

    Args:
        vectorized: Whether the integrand receives whole node arrays.
        repeats: Number of timed runs.

    Returns:
        Dictionary with timing results.
    """
    if vectorized:
        f = lambda x: 1.0 / ((x + 1.0) * np.sqrt(x))  # noqa: E731
    else:
        f = lambda x: 1.0 / ((x + 1.0) * math.sqrt(x))  # noqa: E731

    # Warmup
    result = integrate(f, 0.0, math.inf, vectorized=vectorized)

    start = time.perf_counter()
    for _ in range(repeats):
        integrate(f, 0.0, math.inf, vectorized=vectorized)
    end = time.perf_counter()

    total_time = end - start
    return {
        "neval": result.neval,
        "total_time_sec": total_time,
        "time_per_call_sec": total_time / repeats,
        "evals_per_sec": result.neval * repeats / total_time,
    }


def benchmark_lbfgs(dim: int, history_depth: int = 10) -> Dict[str, float]:
    """Time L-BFGS on an ill-conditioned quadratic of dimension ``dim``."""
    scales = np.logspace(0, 3, dim)

    def fg(x):
        return float(np.sum(scales * x * x)), 2 * scales * x

    start = time.perf_counter()
    result = minimize(fg, np.ones(dim), history_depth=history_depth, max_iterations=5000)
    end = time.perf_counter()

    return {
        "dim": dim,
        "nit": result.nit,
        "total_time_sec": end - start,
        "time_per_iter_sec": (end - start) / max(result.nit, 1),
    }


if __name__ == "__main__":
    print("Benchmarking quadrature...")
    for vectorized in (False, True):
        results = benchmark_quadrature(vectorized)
        label = "batched" if vectorized else "scalar"
        print(f"pi integral ({label}, {results['neval']} evaluations):")
        print(f"  Time per call: {results['time_per_call_sec']*1e3:.2f} ms")
        print(f"  Evaluations per second: {results['evals_per_sec']:.0f}")

    print("Benchmarking L-BFGS...")
    for dim in (10, 100, 1000):
        results = benchmark_lbfgs(dim)
        print(f"Quadratic (dim={dim}): {results['nit']} iterations, "
              f"{results['time_per_iter_sec']*1e6:.1f} us per iteration")
