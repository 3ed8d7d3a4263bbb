"""Limited-memory BFGS using the two-loop recursion.

Each iteration moves through the same phases:

* ComputeDirection - ``p = -H g`` from the curvature history; steepest
  descent when the history is empty or ``p`` is not a descent direction.
* LineSearch - strong Wolfe (default) or Armijo backtracking along ``p``.
* UpdateHistory - store ``(s, y)`` unless ``s.y`` is not safely positive.
* CheckConvergence - gradient norm, relative decrease of ``f`` and the
  iteration budget.

The run is deterministic: identical inputs give bit-identical iterates.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional

import numpy as np

from ..core.functions import Array, GradientFunction, as_gradient_function
from ..logging import get_logger
from .core import (
    HISTORY_DEPTH,
    MAX_ITERATIONS,
    CurvatureHistory,
    LBFGSConfig,
    MinimizeTolerances,
    OptimizeResult,
    OptimizeStatus,
    OptimizerState,
    Problem,
    check_convergence,
    decrease_converged,
)
from .line_search import LINE_SEARCH_FUNCTIONS, LineSearchResult

logger = get_logger(__name__)

CURVATURE_EPS = 1e-12

Callback = Callable[[Array, float, Array], None]


def _invalid(x: Array, message: str, nfev: int = 0, njev: int = 0) -> OptimizeResult:
    logger.info("minimization rejected: %s", message)
    return OptimizeResult(
        x=x,
        fun=float("nan"),
        nit=0,
        status=OptimizeStatus.INVALID_INPUT,
        message=message,
        grad_norm=float("nan"),
        nfev=nfev,
        njev=njev,
    )


def _search(
    config: LBFGSConfig,
    objective: GradientFunction,
    state: OptimizerState,
    direction: Array,
    alpha0: float,
) -> LineSearchResult:
    search = LINE_SEARCH_FUNCTIONS[config.line_search]
    if config.line_search == "wolfe":
        return search(
            objective,
            state.position,
            direction,
            state.value,
            state.gradient,
            alpha0=alpha0,
            c1=config.c1,
            c2=config.c2,
            max_iter=config.max_line_search,
        )
    return search(
        objective,
        state.position,
        direction,
        state.value,
        state.gradient,
        alpha0=alpha0,
        c=config.c1,
        max_iter=config.max_line_search,
    )


def lbfgs(
    f: GradientFunction | Callable[..., Any],
    x0: Any,
    config: Optional[LBFGSConfig] = None,
    record_history: bool = False,
    callback: Optional[Callback] = None,
) -> OptimizeResult:
    """Limited-memory BFGS minimization.

    Args:
        f: Objective as a :class:`GradientFunction` (for example
            :class:`Problem`) or a callable returning ``(value, gradient)``.
        x0: Start point, non-empty 1-D array-like of finite values.
        config: Tolerances, budgets and line-search settings.
        record_history: Keep every accepted iterate in ``result.history``.
        callback: Called as ``callback(x, fx, grad)`` after each accepted step.

    Returns:
        OptimizeResult. A malformed start point, or a non-finite value or
        gradient there, gives ``INVALID_INPUT``.
    """
    if config is None:
        config = LBFGSConfig()
    objective = as_gradient_function(f)
    tol = config.tolerances

    x = np.array(x0, dtype=float, copy=True)
    if x.ndim != 1 or x.size == 0 or not np.all(np.isfinite(x)):
        return _invalid(x, "Start point must be a non-empty 1-D array of finite values.")
    if isinstance(objective, Problem) and objective.dim is not None and objective.dim != x.size:
        return _invalid(x, f"Start point has {x.size} entries, problem expects {objective.dim}.")

    fx, grad = objective.evaluate_with_gradient(x)
    fx = float(fx)
    grad = np.asarray(grad, dtype=float)
    nfev = 1
    njev = 1
    if grad.shape != x.shape:
        return _invalid(
            x, f"Gradient shape {grad.shape} does not match start point shape {x.shape}.", nfev, njev
        )
    if not (np.isfinite(fx) and np.all(np.isfinite(grad))):
        return _invalid(x, "Objective or gradient is not finite at the start point.", nfev, njev)

    state = OptimizerState(
        position=x,
        value=fx,
        gradient=grad,
        history=CurvatureHistory(config.history_depth, x.size),
    )
    hist: List[Array] = [x.copy()] if record_history else []
    nit = 0
    rejected = 0
    status = OptimizeStatus.MAX_ITERATIONS
    message = "Maximum iterations reached."

    if check_convergence(state.grad_norm, tol.eps_g):
        status = OptimizeStatus.CONVERGED
        message = "Gradient tolerance satisfied."

    while status is OptimizeStatus.MAX_ITERATIONS and nit < config.max_iterations:
        direction = -state.history.inverse_hessian_product(state.gradient)
        slope = float(np.dot(direction, state.gradient))
        if not (np.isfinite(slope) and slope < 0):
            if len(state.history):
                logger.debug("iteration %d: not a descent direction, resetting history", nit)
                state.history.clear()
            direction = -state.gradient
        alpha0 = 1.0 if len(state.history) else min(1.0, 1.0 / state.grad_norm)

        ls = _search(config, objective, state, direction, alpha0)
        nfev += ls.nfev
        njev += ls.njev
        if not ls.success or not np.all(np.isfinite(ls.grad)):
            status = OptimizeStatus.LINE_SEARCH_FAILED
            message = "Line search could not find an acceptable step."
            logger.info("iteration %d: %s (f=%r)", nit, message, state.value)
            break

        x_new = state.position + ls.alpha * direction
        s = x_new - state.position
        y = ls.grad - state.gradient
        sy = float(np.dot(s, y))
        if sy > CURVATURE_EPS * float(np.linalg.norm(s)) * float(np.linalg.norm(y)):
            state.history.append(s, y)
        else:
            rejected += 1
            logger.debug("iteration %d: rejected curvature pair with s.y=%r", nit, sy)

        f_old = state.value
        state.position = x_new
        state.value = float(ls.fval)
        state.gradient = ls.grad
        nit += 1
        if record_history:
            hist.append(x_new.copy())
        if callback is not None:
            callback(x_new.copy(), state.value, ls.grad.copy())
        logger.debug(
            "iteration %d: f=%r |g|=%.3e alpha=%.3e", nit, state.value, state.grad_norm, ls.alpha
        )

        if check_convergence(state.grad_norm, tol.eps_g):
            status = OptimizeStatus.CONVERGED
            message = "Gradient tolerance satisfied."
        elif decrease_converged(f_old, state.value, tol.eps_f):
            status = OptimizeStatus.CONVERGED
            message = "Relative reduction of the objective below tolerance."

    if status is OptimizeStatus.MAX_ITERATIONS:
        logger.info("stopped after %d iterations (f=%r)", nit, state.value)

    return OptimizeResult(
        x=state.position,
        fun=state.value,
        nit=nit,
        status=status,
        message=message,
        grad_norm=state.grad_norm,
        nfev=nfev,
        njev=njev,
        rejected_updates=rejected,
        history=hist,
    )


def minimize(
    f: GradientFunction | Callable[..., Any],
    start: Any,
    tolerances: Optional[MinimizeTolerances | tuple[float, float]] = None,
    max_iterations: int = MAX_ITERATIONS,
    history_depth: int = HISTORY_DEPTH,
    line_search: str = "wolfe",
    grad: Optional[Callable[[Array], Array]] = None,
    record_history: bool = False,
    callback: Optional[Callback] = None,
) -> OptimizeResult:
    """Minimize a differentiable function with L-BFGS.

    Args:
        f: :class:`GradientFunction`, a callable returning
            ``(value, gradient)``, or a value-only callable when ``grad`` is
            given.
        start: Initial point.
        tolerances: :class:`MinimizeTolerances` or ``(eps_f, eps_g)``.
        max_iterations: Maximum number of accepted steps.
        history_depth: Number of curvature pairs kept.
        line_search: ``"wolfe"`` or ``"armijo"``.
        grad: Gradient callable paired with a value-only ``f``.
        record_history: Keep every iterate in ``result.history``.
        callback: Called as ``callback(x, fx, grad)`` after each step.

    Raises:
        ValueError: For an invalid ``history_depth``, ``max_iterations`` or
            ``line_search``.

    Example:
        >>> import numpy as np
        >>> from numcore import minimize
        >>> c = np.array([1.0, -2.0])
        >>> res = minimize(lambda x: (float(np.sum((x - c) ** 2)), 2 * (x - c)), np.zeros(2))
        >>> res.success
        True
    """
    if grad is not None:
        f = Problem(fun=f, grad=grad)
    if tolerances is None:
        tolerances = MinimizeTolerances()
    elif not isinstance(tolerances, MinimizeTolerances):
        eps_f, eps_g = tolerances
        try:
            tolerances = MinimizeTolerances(eps_f=float(eps_f), eps_g=float(eps_g))
        except ValueError as exc:
            return _invalid(np.array(start, dtype=float, copy=True), str(exc))
    config = LBFGSConfig(
        tolerances=tolerances,
        max_iterations=max_iterations,
        history_depth=history_depth,
        line_search=line_search,
    )
    return lbfgs(f, start, config, record_history=record_history, callback=callback)


__all__ = ["CURVATURE_EPS", "lbfgs", "minimize"]
