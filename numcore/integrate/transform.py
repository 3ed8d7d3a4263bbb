"""
Variable substitutions mapping infinite integration domains onto ``(0, 1)``.

With ``u(t) = (1 - t) / t`` (so ``du/dt = -1 / t^2``):

* ``(-inf, inf)``: ``x = u``; ``g(t) = (f(u) + f(-u)) / t^2``
* ``[a, inf)``: ``x = a + u``; ``g(t) = f(a + u) / t^2``
* ``(-inf, b]``: ``x = b - u``; ``g(t) = f(b - u) / t^2``

The transformed integrand is singular-looking at ``t = 0``. The Kronrod nodes
never touch the interval endpoints, so neither ``t = 0`` nor ``t = 1`` is
ever evaluated.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional

import numpy as np

from ..core.functions import ScalarFunction, as_scalar_function
from .adaptive import adaptive_integrate
from .core import (
    DEFAULT_RULE_ORDER,
    MAX_SUBDIVISIONS,
    STALL_LIMIT,
    IntegrationResult,
    QuadTolerances,
    invalid_input,
)


class InfiniteDomainTransform(ScalarFunction):
    """
    Integrand on ``(0, 1)`` equivalent to ``f`` on an infinite domain.

    The wrapped function can be any :class:`ScalarFunction`; the batched form
    forwards all mapped nodes to its ``evaluate_many`` in a single call.

    Args:
        f: Integrand on the original domain.
        lower: Finite value or ``-inf``.
        upper: Finite value or ``+inf``.

    Raises:
        ValueError: If both bounds are finite or a bound points the wrong way.
    """

    def __init__(self, f: ScalarFunction | Callable[..., Any], lower: float, upper: float) -> None:
        lower = float(lower)
        upper = float(upper)
        if math.isnan(lower) or math.isnan(upper):
            raise ValueError("Bounds must not be NaN.")
        if math.isfinite(lower) and math.isfinite(upper):
            raise ValueError(
                "InfiniteDomainTransform requires at least one infinite bound; "
                f"got [{lower!r}, {upper!r}]."
            )
        if lower == math.inf or upper == -math.inf:
            raise ValueError(f"Invalid infinite bounds [{lower!r}, {upper!r}].")
        self.f = as_scalar_function(f)
        self.lower = lower
        self.upper = upper

    @property
    def kind(self) -> str:
        """``"both"``, ``"upper"`` (``[a, inf)``) or ``"lower"`` (``(-inf, b]``)."""
        if math.isinf(self.lower) and math.isinf(self.upper):
            return "both"
        if math.isinf(self.upper):
            return "upper"
        return "lower"

    def evaluate(self, t: float) -> float:
        u = (1.0 - t) / t
        jacobian = 1.0 / (t * t)
        kind = self.kind
        if kind == "both":
            return (self.f.evaluate(u) + self.f.evaluate(-u)) * jacobian
        if kind == "upper":
            return self.f.evaluate(self.lower + u) * jacobian
        return self.f.evaluate(self.upper - u) * jacobian

    def evaluate_many(self, ts: np.ndarray) -> np.ndarray:
        ts = np.asarray(ts, dtype=float)
        u = (1.0 - ts) / ts
        jacobian = 1.0 / (ts * ts)
        kind = self.kind
        if kind == "both":
            values = np.asarray(self.f.evaluate_many(np.concatenate([u, -u])), dtype=float)
            n = u.size
            return (values[:n] + values[n:]) * jacobian
        if kind == "upper":
            return np.asarray(self.f.evaluate_many(self.lower + u), dtype=float) * jacobian
        return np.asarray(self.f.evaluate_many(self.upper - u), dtype=float) * jacobian

    def __repr__(self) -> str:
        return f"InfiniteDomainTransform({self.f!r}, {self.lower!r}, {self.upper!r})"


def integrate_infinite(
    f: ScalarFunction | Callable[..., Any],
    lower: float,
    upper: float,
    tolerances: Optional[QuadTolerances | tuple[float, float]] = None,
    rule_order: int = DEFAULT_RULE_ORDER,
    max_subdivisions: int = MAX_SUBDIVISIONS,
    stall_limit: int = STALL_LIMIT,
) -> IntegrationResult:
    """
    Integrate ``f`` over a semi- or doubly-infinite interval.

    The integrand is wrapped in :class:`InfiniteDomainTransform` and handed to
    :func:`adaptive_integrate` on ``(0, 1)``. Both bounds finite, NaN bounds
    or reversed infinities yield ``INVALID_INPUT``.
    """
    try:
        transformed = InfiniteDomainTransform(f, lower, upper)
    except ValueError as exc:
        return invalid_input(str(exc))
    return adaptive_integrate(
        transformed,
        0.0,
        1.0,
        tolerances=tolerances,
        rule_order=rule_order,
        max_subdivisions=max_subdivisions,
        stall_limit=stall_limit,
    )


__all__ = ["InfiniteDomainTransform", "integrate_infinite"]
