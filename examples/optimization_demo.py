"""
Example: L-BFGS Minimization in numcore

Minimizes the Rosenbrock function with analytic, finite-difference and
autograd gradients, then shows how the iteration history and the
termination status can be inspected.
"""

import numpy as np
import torch

from numcore import OptimizeStatus, Problem, TorchObjective, minimize


def rosenbrock(x: np.ndarray) -> float:
    return float((1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2)


def rosenbrock_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def example_analytic_gradient():
    """Example: Rosenbrock with an analytic gradient."""
    print("=" * 60)
    print("Example 1: Analytic Gradient")
    print("=" * 60)

    problem = Problem(fun=rosenbrock, grad=rosenbrock_grad, dim=2)
    result = minimize(problem, np.array([-1.2, 1.0]), record_history=True)
    print(f"Status: {result.status.value}")
    print(f"Minimizer: {result.x}")
    print(f"f(x*) = {result.fun:.3e}, |grad| = {result.grad_norm:.3e}")
    print(f"Iterations: {result.nit}, function evaluations: {result.nfev}")
    print(f"First iterates: {[np.round(x, 3).tolist() for x in result.history[:3]]}")
    print()


def example_finite_differences():
    """Example: No gradient supplied, central differences are used."""
    print("=" * 60)
    print("Example 2: Finite-Difference Gradient")
    print("=" * 60)

    result = minimize(Problem(fun=rosenbrock, dim=2), np.array([-1.2, 1.0]))
    print(f"Status: {result.status.value}")
    print(f"Minimizer: {result.x}")
    print()


def example_autograd():
    """Example: Gradient from PyTorch autograd."""
    print("=" * 60)
    print("Example 3: Autograd Objective")
    print("=" * 60)

    def objective(p: torch.Tensor) -> torch.Tensor:
        return (1 - p[0]) ** 2 + 100 * (p[1] - p[0] ** 2) ** 2

    result = minimize(TorchObjective(objective), np.array([-1.2, 1.0]), line_search="armijo",
                      max_iterations=1000)
    print(f"Status: {result.status.value} (Armijo backtracking)")
    print(f"Minimizer: {result.x}")
    print(f"Rejected curvature pairs: {result.rejected_updates}")
    print()


def example_budget():
    """Example: Stopping on the iteration budget."""
    print("=" * 60)
    print("Example 4: Iteration Budget")
    print("=" * 60)

    result = minimize(rosenbrock, np.array([-1.2, 1.0]), grad=rosenbrock_grad, max_iterations=5)
    if result.status is OptimizeStatus.MAX_ITERATIONS:
        print(f"Stopped after {result.nit} iterations at f = {result.fun:.4f}")
    print()


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("numcore - Optimization Examples")
    print("=" * 60 + "\n")

    example_analytic_gradient()
    example_finite_differences()
    example_autograd()
    example_budget()

    print("=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
