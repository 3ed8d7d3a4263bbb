"""
Shared result, status and configuration types for the integration engines.

Every integration entry point, whether it runs the adaptive 1-D subdivider,
the infinite-domain transform or the box oracle, returns the same
:class:`IntegrationResult`. Failures are reported through
:class:`IntegrationStatus` alongside the best value computed so far instead of
being raised.

References:
    - Piessens, de Doncker-Kapenga, Ueberhuber, Kahaner. *QUADPACK: A
      Subroutine Package for Automatic Integration* (1983)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

EPS_ABS = 1.49e-8
EPS_REL = 1.49e-8
MAX_SUBDIVISIONS = 100
DEFAULT_RULE_ORDER = 41
STALL_LIMIT = 6


class IntegrationStatus(Enum):
    """Termination status of an integration call."""

    OK = "ok"
    MAX_SUBDIVISIONS = "max_subdivisions"
    ROUNDOFF = "roundoff"
    DIVERGENT = "divergent"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class Interval:
    """Leaf of the adaptive subdivision worklist.

    Attributes:
        low: Left endpoint.
        high: Right endpoint, strictly greater than ``low``.
        estimate: Integral estimate over ``[low, high]``.
        error: Non-negative local error estimate.
    """

    low: float
    high: float
    estimate: float
    error: float

    @property
    def width(self) -> float:
        return self.high - self.low


@dataclass
class IntegrationResult:
    """
    Result container shared across all integrators.

    Attributes:
        value: Integral estimate (best available on non-OK termination).
        error: Absolute error estimate for ``value``.
        status: Enumeration describing how the integrator stopped.
        message: Human-readable explanation of ``status``.
        neval: Number of integrand evaluations performed.
        subdivisions: Number of leaf intervals (or regions) at termination.
        intervals: Final leaf intervals of the 1-D subdivider, sorted by
            ``low``. Empty for the box integrator.
    """

    value: float
    error: float
    status: IntegrationStatus
    message: str
    neval: int = 0
    subdivisions: int = 0
    intervals: List[Interval] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is IntegrationStatus.OK


def invalid_input(message: str) -> IntegrationResult:
    """Build the result returned for malformed bounds or dimensions."""
    return IntegrationResult(
        value=float("nan"),
        error=float("nan"),
        status=IntegrationStatus.INVALID_INPUT,
        message=message,
    )


@dataclass(frozen=True)
class QuadTolerances:
    """
    Absolute and relative accuracy requested from an integrator.

    A result is accepted once ``error <= max(eps_abs, eps_rel * |value|)``.
    """

    eps_abs: float = EPS_ABS
    eps_rel: float = EPS_REL

    def __post_init__(self) -> None:
        if not (self.eps_abs >= 0.0 and self.eps_rel >= 0.0):
            raise ValueError(
                f"Tolerances must be non-negative, got eps_abs={self.eps_abs}, "
                f"eps_rel={self.eps_rel}"
            )

    def target(self, value: float) -> float:
        """Error level at which ``value`` is accepted."""
        return max(self.eps_abs, self.eps_rel * abs(value))


@dataclass(frozen=True)
class QuadConfig:
    """
    Configuration of the adaptive 1-D integrator.

    Args:
        tolerances: Requested accuracy.
        rule_order: Number of Kronrod points (15, 21 or 41).
        max_subdivisions: Maximum number of leaf intervals.
        stall_limit: Consecutive non-improving refinements tolerated before
            the run is classified as roundoff-limited or divergent.
    """

    tolerances: QuadTolerances = field(default_factory=QuadTolerances)
    rule_order: int = DEFAULT_RULE_ORDER
    max_subdivisions: int = MAX_SUBDIVISIONS
    stall_limit: int = STALL_LIMIT

    def __post_init__(self) -> None:
        if self.stall_limit < 1:
            raise ValueError("stall_limit must be at least 1.")


def resolve_tolerances(tolerances: Optional[QuadTolerances | tuple[float, float]]) -> QuadTolerances:
    """Accept ``None``, a :class:`QuadTolerances` or an ``(eps_abs, eps_rel)`` pair."""
    if tolerances is None:
        return QuadTolerances()
    if isinstance(tolerances, QuadTolerances):
        return tolerances
    eps_abs, eps_rel = tolerances
    return QuadTolerances(eps_abs=float(eps_abs), eps_rel=float(eps_rel))


__all__ = [
    "DEFAULT_RULE_ORDER",
    "EPS_ABS",
    "EPS_REL",
    "IntegrationResult",
    "IntegrationStatus",
    "Interval",
    "MAX_SUBDIVISIONS",
    "QuadConfig",
    "QuadTolerances",
    "STALL_LIMIT",
    "invalid_input",
    "resolve_tolerances",
]
