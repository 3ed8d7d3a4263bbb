"""Deterministic line-search routines following Nocedal & Wright.

Both searches evaluate the objective through :class:`GradientFunction` and
hand back the value and gradient at the accepted point so the caller does not
re-evaluate it. A search that cannot find an acceptable step returns a result
with ``success=False`` instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from ..core.functions import Array, GradientFunction

# alpha -> (phi(alpha), gradient at x + alpha p, phi'(alpha))
_Trial = Callable[[float], tuple[float, Array, float]]


@dataclass
class LineSearchResult:
    """Outcome of a line search.

    Attributes:
        alpha: Accepted step length (last trial on failure).
        fval: Objective value at ``x + alpha * p`` (None on failure).
        grad: Gradient at ``x + alpha * p`` (None on failure).
        nfev: Objective evaluations spent.
        njev: Gradient evaluations spent.
        success: Whether the acceptance conditions were met.
    """

    alpha: float
    fval: Optional[float]
    grad: Optional[Array]
    nfev: int
    njev: int
    success: bool


def backtracking_armijo(
    f: GradientFunction,
    x: Array,
    p: Array,
    fx: float,
    grad_fx: Array,
    alpha0: float = 1.0,
    rho: float = 0.5,
    c: float = 1e-4,
    max_iter: int = 50,
) -> LineSearchResult:
    """Classic Armijo backtracking line search.

    Only the sufficient-decrease condition is enforced, so the accepted step
    may violate the curvature condition.
    """
    if not (0 < c < 1):
        raise ValueError("Armijo constant c must lie in (0, 1)")
    if not (0 < rho < 1):
        raise ValueError("rho must lie in (0, 1)")
    grad_dot = float(np.dot(grad_fx, p))
    if not grad_dot < 0:
        raise ValueError("Search direction must be a descent direction.")
    alpha = float(alpha0)
    nfev = 0
    for _ in range(max_iter):
        candidate = x + alpha * p
        f_new = float(f.evaluate(candidate))
        nfev += 1
        if math.isfinite(f_new) and f_new <= fx + c * alpha * grad_dot:
            f_new, g_new = f.evaluate_with_gradient(candidate)
            return LineSearchResult(
                alpha=alpha,
                fval=float(f_new),
                grad=np.asarray(g_new, dtype=float),
                nfev=nfev + 1,
                njev=1,
                success=True,
            )
        alpha *= rho
    return LineSearchResult(alpha=alpha, fval=None, grad=None, nfev=nfev, njev=0, success=False)


def wolfe_line_search(
    f: GradientFunction,
    x: Array,
    p: Array,
    fx: float,
    grad_fx: Array,
    alpha0: float = 1.0,
    c1: float = 1e-4,
    c2: float = 0.9,
    max_iter: int = 40,
    max_zoom: int = 32,
) -> LineSearchResult:
    """Perform a strong Wolfe line search using bracketing and zoom.

    The bracketing phase doubles the trial step until the sufficient-decrease
    condition fails, the objective stops decreasing, or the directional
    derivative turns non-negative; the zoom phase then bisects the bracket.
    Non-finite objective values are treated as a failed decrease, which
    shrinks the step.
    """
    if not (0 < c1 < c2 < 1):
        raise ValueError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")

    der0 = float(np.dot(grad_fx, p))
    if not der0 < 0:
        raise ValueError("Search direction must be a descent direction.")

    nfev = 0

    def trial(alpha: float) -> tuple[float, Array, float]:
        nonlocal nfev
        nfev += 1
        value, grad = f.evaluate_with_gradient(x + alpha * p)
        grad = np.asarray(grad, dtype=float)
        return float(value), grad, float(np.dot(grad, p))

    def done(outcome: Optional[tuple[float, float, Array]], last_alpha: float) -> LineSearchResult:
        if outcome is None:
            return LineSearchResult(
                alpha=last_alpha, fval=None, grad=None, nfev=nfev, njev=nfev, success=False
            )
        alpha, value, grad = outcome
        return LineSearchResult(
            alpha=alpha, fval=value, grad=grad, nfev=nfev, njev=nfev, success=True
        )

    alpha_prev = 0.0
    phi_prev = fx
    alpha = float(alpha0)

    for iteration in range(max_iter):
        phi_alpha, grad_alpha, der_alpha = trial(alpha)
        if (
            not math.isfinite(phi_alpha)
            or phi_alpha > fx + c1 * alpha * der0
            or (iteration > 0 and phi_alpha >= phi_prev)
        ):
            outcome = _zoom(trial, alpha_prev, phi_prev, alpha, fx, der0, c1, c2, max_zoom)
            return done(outcome, alpha)
        if abs(der_alpha) <= -c2 * der0:
            return done((alpha, phi_alpha, grad_alpha), alpha)
        if der_alpha >= 0:
            outcome = _zoom(trial, alpha, phi_alpha, alpha_prev, fx, der0, c1, c2, max_zoom)
            return done(outcome, alpha)
        alpha_prev = alpha
        phi_prev = phi_alpha
        alpha *= 2.0
    return done(None, alpha)


def _zoom(
    trial: _Trial,
    alo: float,
    phi_alo: float,
    ahi: float,
    phi0: float,
    der0: float,
    c1: float,
    c2: float,
    max_iter: int,
) -> Optional[tuple[float, float, Array]]:
    """Zoom stage enforcing strong Wolfe conditions.

    ``alo`` always satisfies sufficient decrease with the lowest value seen;
    the bracket ``[alo, ahi]`` (in either order) contains an acceptable step.
    """
    for _ in range(max_iter):
        alpha = 0.5 * (alo + ahi)
        phi_alpha, grad_alpha, der_alpha = trial(alpha)
        if (
            not math.isfinite(phi_alpha)
            or phi_alpha > phi0 + c1 * alpha * der0
            or phi_alpha >= phi_alo
        ):
            ahi = alpha
        else:
            if abs(der_alpha) <= -c2 * der0:
                return alpha, phi_alpha, grad_alpha
            if der_alpha * (ahi - alo) >= 0:
                ahi = alo
            alo = alpha
            phi_alo = phi_alpha
        if abs(ahi - alo) <= 1e-12 * max(1.0, abs(alo)):
            break
    return None


LINE_SEARCH_FUNCTIONS = {
    "wolfe": wolfe_line_search,
    "armijo": backtracking_armijo,
}


__all__ = ["LINE_SEARCH_FUNCTIONS", "LineSearchResult", "backtracking_armijo", "wolfe_line_search"]
