"""
Multi-dimensional integration over an axis-aligned box.

The cubature algorithm itself is delegated to an oracle. This module only
validates the box, forwards the function's batched evaluator and the
tolerances unchanged, refuses batches past the evaluation budget and maps
whatever the oracle reports onto :class:`IntegrationStatus`. The default
oracle is :func:`scipy.integrate.cubature`.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

from ..core.functions import VectorFunction, as_vector_function
from ..logging import get_logger
from .core import (
    IntegrationResult,
    IntegrationStatus,
    QuadTolerances,
    invalid_input,
    resolve_tolerances,
)

try:
    from scipy.integrate import cubature

    HAS_SCIPY_CUBATURE = True
except ImportError:
    HAS_SCIPY_CUBATURE = False

logger = get_logger(__name__)

MAX_EVALS = 1000

BatchedIntegrand = Callable[[np.ndarray], np.ndarray]


class EvaluationBudgetExceeded(RuntimeError):
    """Raised by the counting integrand when a batch would exceed ``max_evals``."""


@dataclass(frozen=True)
class OracleResult:
    """Raw outcome reported by a box oracle."""

    value: float
    error: float
    converged: bool
    subdivisions: int = 0


class BoxOracle(ABC):
    """Interface of an external box-integration routine.

    ``func`` refuses any batch that would take the evaluation count past
    ``max_evals`` by raising :class:`EvaluationBudgetExceeded`. An oracle may
    catch it and report its last complete estimate as not converged, or let it
    propagate when it has no estimate at all.
    """

    @abstractmethod
    def integrate(
        self,
        func: BatchedIntegrand,
        lower: np.ndarray,
        upper: np.ndarray,
        max_evals: int,
        eps_abs: float,
        eps_rel: float,
    ) -> OracleResult:
        """Integrate ``func`` (``(k, n) -> (k,)``) over ``[lower, upper]``."""


class ScipyCubatureOracle(BoxOracle):
    """
    Box oracle backed by :func:`scipy.integrate.cubature`.

    One-dimensional boxes use the ``gk21`` rule, higher dimensions the
    ``genz-malik`` rule. The budget is spent in two passes:

    1. the whole box is estimated once with an infinite absolute tolerance,
       which measures what a single region costs;
    2. if that estimate misses the tolerance, cubature is rerun with the
       largest subdivision cap whose measured cost, ``cost * (1 + cap *
       2**ndim)``, fits in what is left of ``max_evals``.

    When no subdivision fits, or the rerun is refused by the budget, the
    first-pass estimate is returned as not converged.

    Raises:
        RuntimeError: If SciPy's ``cubature`` is not available.
    """

    def __init__(self) -> None:
        if not HAS_SCIPY_CUBATURE:
            raise RuntimeError(
                "scipy.integrate.cubature is required for box integration. "
                "Install scipy>=1.15."
            )

    @staticmethod
    def rule_for(ndim: int) -> str:
        return "gk21" if ndim == 1 else "genz-malik"

    @staticmethod
    def points_per_region(ndim: int) -> int:
        """Node count of the rule, a lower bound on evaluations per region."""
        if ndim == 1:
            return 21
        return 2**ndim + 2 * ndim * ndim + 2 * ndim + 1

    @staticmethod
    def max_subdivisions(ndim: int, remaining: int, region_cost: int) -> int:
        """Largest cap whose rerun costs at most ``remaining`` evaluations."""
        if region_cost <= 0:
            return 0
        return max(0, (remaining // region_cost - 1) // 2**ndim)

    def integrate(
        self,
        func: BatchedIntegrand,
        lower: np.ndarray,
        upper: np.ndarray,
        max_evals: int,
        eps_abs: float,
        eps_rel: float,
    ) -> OracleResult:
        ndim = lower.size
        if max_evals < self.points_per_region(ndim):
            raise EvaluationBudgetExceeded(
                f"max_evals={max_evals} is below the {self.points_per_region(ndim)} "
                "points of a single region."
            )
        rule = self.rule_for(ndim)
        used = 0

        def counted(points: np.ndarray) -> np.ndarray:
            nonlocal used
            values = func(points)
            used += np.atleast_2d(points).shape[0]
            return values

        first = cubature(counted, lower, upper, rule=rule, rtol=eps_rel, atol=np.inf)
        value = float(first.estimate)
        error = float(first.error)
        region_cost = used
        coarse = OracleResult(value=value, error=error, converged=False)
        if not (math.isfinite(value) and math.isfinite(error)):
            return coarse
        if error <= eps_abs + eps_rel * abs(value):
            return OracleResult(value=value, error=error, converged=True)

        cap = self.max_subdivisions(ndim, max_evals - used, region_cost)
        if cap < 1:
            return coarse
        try:
            res = cubature(
                counted,
                lower,
                upper,
                rule=rule,
                rtol=eps_rel,
                atol=eps_abs,
                max_subdivisions=cap,
            )
        except EvaluationBudgetExceeded:
            return coarse
        return OracleResult(
            value=float(res.estimate),
            error=float(res.error),
            converged=res.status == "converged",
            subdivisions=int(res.subdivisions),
        )


def integrate_box(
    f: VectorFunction | Callable[..., Any],
    lower: Any,
    upper: Any,
    tolerances: Optional[QuadTolerances | tuple[float, float]] = None,
    max_evals: int = MAX_EVALS,
    oracle: Optional[BoxOracle] = None,
    vectorized: bool = False,
) -> IntegrationResult:
    """
    Integrate a scalar function of a vector argument over a box.

    Args:
        f: :class:`VectorFunction` or callable of one point.
        lower: Lower corner, 1-D array-like.
        upper: Upper corner, same length as ``lower``.
        tolerances: :class:`QuadTolerances` or ``(eps_abs, eps_rel)``.
        max_evals: Hard cap on integrand evaluations. Batches that would
            exceed it are refused before ``f`` sees them.
        oracle: Box oracle; defaults to :class:`ScipyCubatureOracle`.
        vectorized: When ``f`` is a plain callable, pass it ``(k, n)`` arrays.

    Returns:
        IntegrationResult with ``neval`` counted at the function boundary,
        never above ``max_evals``. A budget too small for a single region
        gives ``MAX_SUBDIVISIONS`` with a NaN value.
        Mismatched or empty corners, NaN entries or ``lower[i] > upper[i]``
        give ``INVALID_INPUT``.

    Example:
        >>> import numpy as np
        >>> from numcore import integrate_box
        >>> res = integrate_box(lambda x: x[:, 0] * x[:, 1], [0, 0], [1, 2], vectorized=True)
        >>> round(res.value, 10)
        1.0
    """
    try:
        tol = resolve_tolerances(tolerances)
    except ValueError as exc:
        return invalid_input(str(exc))
    lo = np.asarray(lower, dtype=float)
    hi = np.asarray(upper, dtype=float)
    if lo.ndim != 1 or hi.ndim != 1 or lo.size == 0:
        return invalid_input("Box corners must be non-empty 1-D arrays.")
    if lo.shape != hi.shape:
        return invalid_input(
            f"Box corners differ in length: {lo.size} != {hi.size}."
        )
    if np.any(np.isnan(lo)) or np.any(np.isnan(hi)):
        return invalid_input("Box corners must not contain NaN.")
    if np.any(lo > hi):
        return invalid_input("Every lower[i] must be <= upper[i].")
    if max_evals < 1:
        return invalid_input("max_evals must be at least 1.")
    if np.any(lo == hi):
        return IntegrationResult(
            value=0.0,
            error=0.0,
            status=IntegrationStatus.OK,
            message="Box has zero volume.",
        )

    vf = as_vector_function(f, vectorized=vectorized)
    neval = 0

    def batched(points: np.ndarray) -> np.ndarray:
        nonlocal neval
        points = np.atleast_2d(points)
        if neval + points.shape[0] > max_evals:
            raise EvaluationBudgetExceeded(
                f"Batch of {points.shape[0]} points would exceed max_evals={max_evals} "
                f"after {neval} evaluations."
            )
        neval += points.shape[0]
        return vf.evaluate_many(points)

    if oracle is None:
        oracle = ScipyCubatureOracle()
    try:
        raw = oracle.integrate(batched, lo, hi, max_evals, tol.eps_abs, tol.eps_rel)
    except EvaluationBudgetExceeded as exc:
        logger.info("box integration stopped: %s", exc)
        return IntegrationResult(
            value=math.nan,
            error=math.inf,
            status=IntegrationStatus.MAX_SUBDIVISIONS,
            message="Evaluation budget is smaller than the cost of a single region.",
            neval=neval,
        )

    if not (math.isfinite(raw.value) and math.isfinite(raw.error)):
        status = IntegrationStatus.DIVERGENT
        message = "Integrand produced non-finite values."
    elif raw.converged:
        status = IntegrationStatus.OK
        message = "Requested tolerance satisfied."
    else:
        status = IntegrationStatus.MAX_SUBDIVISIONS
        message = "Evaluation budget exhausted before reaching the tolerance."
    if status is not IntegrationStatus.OK:
        logger.info("box integration stopped: %s (value=%r, error=%r)", message, raw.value, raw.error)

    return IntegrationResult(
        value=raw.value,
        error=raw.error,
        status=status,
        message=message,
        neval=neval,
        subdivisions=raw.subdivisions,
    )


__all__ = [
    "BoxOracle",
    "EvaluationBudgetExceeded",
    "HAS_SCIPY_CUBATURE",
    "MAX_EVALS",
    "OracleResult",
    "ScipyCubatureOracle",
    "integrate_box",
]
