"""Finite-difference helpers for objectives without an analytic gradient.

These utilities are pure NumPy and deterministic.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]


def approx_grad(fun: Objective, x: Array, eps: float = 1e-6) -> Array:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    eps:
        Perturbation size for finite differences.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float).copy()
    grad = np.zeros_like(x, dtype=float)
    for i in range(x.size):
        ei = np.zeros_like(x)
        ei[i] = eps
        grad[i] = (fun(x + ei) - fun(x - ei)) / (2.0 * eps)
    return grad


def gradient_error(
    fun: Objective, grad: Callable[[Array], Array], x: Array, eps: float = 1e-6
) -> float:
    """Relative discrepancy between ``grad(x)`` and a finite-difference estimate.

    Useful as a sanity check before handing an analytic gradient to the
    optimizer; values around ``1e-6`` or below indicate a correct gradient.
    """
    analytic = np.asarray(grad(np.asarray(x, dtype=float)), dtype=float)
    numeric = approx_grad(fun, x, eps=eps)
    scale = max(1.0, float(np.linalg.norm(numeric)))
    return float(np.linalg.norm(analytic - numeric)) / scale


__all__ = ["Array", "Objective", "approx_grad", "gradient_error"]
