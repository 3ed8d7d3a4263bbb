"""
Globally adaptive Gauss-Kronrod integration on a finite interval.

The worklist is a binary heap of leaf intervals keyed by ``(-error, low)`` so
the interval with the largest local error is always refined next, with the
leftmost one winning ties. Each refinement bisects that interval and
re-evaluates both halves with the same rule.

Termination, in the order it is checked after every refinement:

1. the accumulated value or error is not finite -> ``DIVERGENT``;
2. ``error <= max(eps_abs, eps_rel * |value|)`` -> ``OK``;
3. ``stall_limit`` consecutive stalled refinements -> ``ROUNDOFF`` or
   ``DIVERGENT`` (see below);
4. the worklist holds ``max_subdivisions`` intervals -> ``MAX_SUBDIVISIONS``;
5. the selected interval cannot be bisected in floating point -> ``ROUNDOFF``.

A refinement stalls when the two children together do not bring the error
below ``0.99`` of the parent's. If the children also reproduce the parent's
estimate to ``1e-5`` relative, the remaining error is numerical noise and the
stall counts towards ``ROUNDOFF``. If the estimate keeps moving while the
same shrinking region is refined over and over, the stall counts towards
``DIVERGENT``. A productive refinement resets both counters.

The returned value and error are the lowest-error pair seen during the run,
so a larger subdivision budget never yields a larger error estimate.
"""

from __future__ import annotations

import heapq
import math
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from ..core.functions import ScalarFunction, as_scalar_function
from ..logging import get_logger
from .core import (
    DEFAULT_RULE_ORDER,
    MAX_SUBDIVISIONS,
    STALL_LIMIT,
    IntegrationResult,
    IntegrationStatus,
    Interval,
    QuadTolerances,
    invalid_input,
    resolve_tolerances,
)
from .kronrod import GaussKronrodRule, get_rule

logger = get_logger(__name__)

STALL_RATIO = 0.99
ROUNDOFF_AGREEMENT = 1e-5

# Heap entry: (-error, low, high, estimate)
_Entry = Tuple[float, float, float, float]


def _total(terms: List[float]) -> float:
    if all(math.isfinite(t) for t in terms):
        return math.fsum(terms)
    # fsum refuses inf - inf; let numpy produce nan instead
    return float(np.sum(terms))


class AdaptiveSubdivider:
    """
    Single-use driver for one adaptive integration over ``[a, b]``.

    Args:
        f: Integrand.
        rule: Gauss-Kronrod rule applied to every interval.
        tolerances: Requested accuracy.
        max_subdivisions: Cap on the number of leaf intervals.
        stall_limit: Consecutive stalled refinements tolerated.
    """

    def __init__(
        self,
        f: ScalarFunction,
        rule: GaussKronrodRule,
        tolerances: QuadTolerances,
        max_subdivisions: int = MAX_SUBDIVISIONS,
        stall_limit: int = STALL_LIMIT,
    ) -> None:
        self.f = f
        self.rule = rule
        self.tolerances = tolerances
        self.max_subdivisions = max_subdivisions
        self.stall_limit = stall_limit
        self.heap: List[_Entry] = []
        self.neval = 0

    def _push(self, low: float, high: float) -> Tuple[float, float]:
        estimate, _, error = self.rule.estimate(self.f, low, high)
        self.neval += self.rule.order
        heapq.heappush(self.heap, (-error, low, high, estimate))
        return estimate, error

    def _totals(self) -> Tuple[float, float]:
        value = _total([entry[3] for entry in self.heap])
        error = _total([-entry[0] for entry in self.heap])
        return value, error

    def intervals(self) -> List[Interval]:
        """Current leaves sorted by their left endpoint."""
        return [
            Interval(low=low, high=high, estimate=est, error=-neg_err)
            for neg_err, low, high, est in sorted(self.heap, key=lambda e: e[1])
        ]

    def _result(
        self, value: float, error: float, status: IntegrationStatus, message: str
    ) -> IntegrationResult:
        if status is not IntegrationStatus.OK:
            logger.info(
                "adaptive integration stopped: %s (value=%r, error=%r, intervals=%d)",
                message,
                value,
                error,
                len(self.heap),
            )
        return IntegrationResult(
            value=value,
            error=error,
            status=status,
            message=message,
            neval=self.neval,
            subdivisions=len(self.heap),
            intervals=self.intervals(),
        )

    def run(self, a: float, b: float) -> IntegrationResult:
        """Integrate over ``[a, b]`` with ``a < b``."""
        value, error = self._push(a, b)
        best_value, best_error = value, error
        roundoff_stalls = 0
        divergent_stalls = 0
        last_children: Tuple[Tuple[float, float], ...] = ()

        while True:
            if not (math.isfinite(value) and math.isfinite(error)):
                return self._result(
                    value,
                    error,
                    IntegrationStatus.DIVERGENT,
                    "Integrand produced non-finite values.",
                )
            if error <= self.tolerances.target(value):
                return self._result(
                    value, error, IntegrationStatus.OK, "Requested tolerance satisfied."
                )
            if roundoff_stalls >= self.stall_limit:
                return self._result(
                    best_value,
                    best_error,
                    IntegrationStatus.ROUNDOFF,
                    "Roundoff error prevents reaching the requested tolerance.",
                )
            if divergent_stalls >= self.stall_limit:
                return self._result(
                    best_value,
                    best_error,
                    IntegrationStatus.DIVERGENT,
                    "Integral is probably divergent or converges too slowly.",
                )
            if len(self.heap) >= self.max_subdivisions:
                return self._result(
                    best_value,
                    best_error,
                    IntegrationStatus.MAX_SUBDIVISIONS,
                    "Maximum number of subdivisions reached.",
                )

            neg_error, low, high, parent_estimate = heapq.heappop(self.heap)
            parent_error = -neg_error
            mid = 0.5 * (low + high)
            if not (low < mid < high):
                heapq.heappush(self.heap, (neg_error, low, high, parent_estimate))
                return self._result(
                    best_value,
                    best_error,
                    IntegrationStatus.ROUNDOFF,
                    f"Interval [{low!r}, {high!r}] is too narrow to subdivide.",
                )

            nested = (low, high) in last_children
            left_estimate, left_error = self._push(low, mid)
            right_estimate, right_error = self._push(mid, high)
            last_children = ((low, mid), (mid, high))
            value, error = self._totals()

            child_estimate = left_estimate + right_estimate
            child_error = left_error + right_error
            logger.debug(
                "bisected [%r, %r]: error %.3e -> %.3e, total error %.3e",
                low,
                high,
                parent_error,
                child_error,
                error,
            )

            if child_error >= STALL_RATIO * parent_error:
                if abs(child_estimate - parent_estimate) <= ROUNDOFF_AGREEMENT * abs(
                    child_estimate
                ):
                    roundoff_stalls += 1
                    divergent_stalls = 0
                elif nested:
                    divergent_stalls += 1
                    roundoff_stalls = 0
                else:
                    roundoff_stalls = 0
                    divergent_stalls = 0
            else:
                roundoff_stalls = 0
                divergent_stalls = 0

            if error < best_error:
                best_value, best_error = value, error


def adaptive_integrate(
    f: ScalarFunction | Callable[..., Any],
    a: float,
    b: float,
    tolerances: Optional[QuadTolerances | tuple[float, float]] = None,
    rule_order: int = DEFAULT_RULE_ORDER,
    max_subdivisions: int = MAX_SUBDIVISIONS,
    stall_limit: int = STALL_LIMIT,
) -> IntegrationResult:
    """
    Integrate ``f`` over the finite interval ``[a, b]``.

    ``a == b`` integrates to exactly zero. ``a > b`` is rejected with
    ``INVALID_INPUT`` rather than integrated with a flipped sign.

    Args:
        f: Integrand; plain callables are wrapped element-wise.
        a: Finite lower bound.
        b: Finite upper bound.
        tolerances: :class:`QuadTolerances` or ``(eps_abs, eps_rel)``.
        rule_order: Kronrod point count of the rule (15, 21 or 41).
        max_subdivisions: Maximum number of leaf intervals.
        stall_limit: Consecutive stalled refinements tolerated.

    Returns:
        IntegrationResult with the value, error estimate and status.

    Raises:
        ValueError: If ``rule_order`` is not supported.
    """
    rule = get_rule(rule_order)
    try:
        tol = resolve_tolerances(tolerances)
    except ValueError as exc:
        return invalid_input(str(exc))
    a = float(a)
    b = float(b)
    if not (math.isfinite(a) and math.isfinite(b)):
        return invalid_input(f"Bounds must be finite, got [{a!r}, {b!r}].")
    if max_subdivisions < 1:
        return invalid_input("max_subdivisions must be at least 1.")
    if a > b:
        return invalid_input(f"Lower bound {a!r} exceeds upper bound {b!r}.")
    if a == b:
        return IntegrationResult(
            value=0.0,
            error=0.0,
            status=IntegrationStatus.OK,
            message="Empty interval.",
        )
    subdivider = AdaptiveSubdivider(
        as_scalar_function(f),
        rule,
        tol,
        max_subdivisions=max_subdivisions,
        stall_limit=stall_limit,
    )
    return subdivider.run(a, b)


__all__ = [
    "AdaptiveSubdivider",
    "ROUNDOFF_AGREEMENT",
    "STALL_RATIO",
    "adaptive_integrate",
]
