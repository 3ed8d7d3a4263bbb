"""Public 1-D integration entry point dispatching on the kind of bounds."""

from __future__ import annotations

import math
from typing import Any, Callable, Optional

from ..core.functions import ScalarFunction, as_scalar_function
from .adaptive import adaptive_integrate
from .core import (
    DEFAULT_RULE_ORDER,
    MAX_SUBDIVISIONS,
    IntegrationResult,
    QuadConfig,
    QuadTolerances,
    invalid_input,
)
from .transform import integrate_infinite


def integrate(
    f: ScalarFunction | Callable[..., Any],
    lower: float,
    upper: float,
    tolerances: Optional[QuadTolerances | tuple[float, float]] = None,
    rule_order: int = DEFAULT_RULE_ORDER,
    max_subdivisions: int = MAX_SUBDIVISIONS,
    vectorized: bool = False,
    config: Optional[QuadConfig] = None,
) -> IntegrationResult:
    """
    Integrate a scalar function over ``[lower, upper]``.

    Finite bounds go straight to the adaptive subdivider. If either bound is
    ``-inf``/``+inf`` the integrand is first mapped onto ``(0, 1)``; in that
    case ``result.intervals`` lives in the transformed variable. The result
    has the same shape on both paths.

    Args:
        f: Integrand, either a :class:`ScalarFunction` or a callable.
        lower: Lower bound, finite or ``-inf``.
        upper: Upper bound, finite or ``+inf``.
        tolerances: :class:`QuadTolerances` or ``(eps_abs, eps_rel)``.
        rule_order: Kronrod point count (15, 21 or 41).
        max_subdivisions: Maximum number of leaf intervals.
        vectorized: When ``f`` is a plain callable, pass it whole node arrays.
        config: Optional :class:`QuadConfig`; overrides ``tolerances``,
            ``rule_order`` and ``max_subdivisions`` when given.

    Returns:
        IntegrationResult. Malformed bounds (NaN, ``lower > upper``,
        ``lower = +inf``, ``upper = -inf``) give ``INVALID_INPUT``.

    Raises:
        ValueError: If ``rule_order`` is not supported.

    Example:
        >>> import numpy as np
        >>> from numcore import integrate
        >>> res = integrate(lambda x: np.exp(-x * x), -np.inf, np.inf)
        >>> round(res.value, 8)
        1.77245385
    """
    stall_limit = QuadConfig().stall_limit
    if config is not None:
        tolerances = config.tolerances
        rule_order = config.rule_order
        max_subdivisions = config.max_subdivisions
        stall_limit = config.stall_limit

    lower = float(lower)
    upper = float(upper)
    if math.isnan(lower) or math.isnan(upper):
        return invalid_input("Bounds must not be NaN.")

    f = as_scalar_function(f, vectorized=vectorized)
    if math.isfinite(lower) and math.isfinite(upper):
        return adaptive_integrate(
            f,
            lower,
            upper,
            tolerances=tolerances,
            rule_order=rule_order,
            max_subdivisions=max_subdivisions,
            stall_limit=stall_limit,
        )
    if lower >= upper:
        return invalid_input(f"Lower bound {lower!r} is not below upper bound {upper!r}.")
    return integrate_infinite(
        f,
        lower,
        upper,
        tolerances=tolerances,
        rule_order=rule_order,
        max_subdivisions=max_subdivisions,
        stall_limit=stall_limit,
    )


__all__ = ["integrate"]
