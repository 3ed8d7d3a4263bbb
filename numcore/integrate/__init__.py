"""Adaptive quadrature and box integration.

Example
-------
>>> import numpy as np
>>> from numcore.integrate import integrate
>>> res = integrate(lambda x: 1.0 / ((x + 1.0) * np.sqrt(x)), 0.0, np.inf, vectorized=True)
>>> res.status
<IntegrationStatus.OK: 'ok'>
>>> abs(res.value - np.pi) < 1e-7
True
"""

from .adaptive import AdaptiveSubdivider, adaptive_integrate
from .box import (
    MAX_EVALS,
    BoxOracle,
    EvaluationBudgetExceeded,
    OracleResult,
    ScipyCubatureOracle,
    integrate_box,
)
from .core import (
    DEFAULT_RULE_ORDER,
    EPS_ABS,
    EPS_REL,
    MAX_SUBDIVISIONS,
    IntegrationResult,
    IntegrationStatus,
    Interval,
    QuadConfig,
    QuadTolerances,
)
from .kronrod import SUPPORTED_ORDERS, GaussKronrodRule, get_rule
from .quad import integrate
from .transform import InfiniteDomainTransform, integrate_infinite

__all__ = [
    "AdaptiveSubdivider",
    "BoxOracle",
    "DEFAULT_RULE_ORDER",
    "EPS_ABS",
    "EPS_REL",
    "EvaluationBudgetExceeded",
    "GaussKronrodRule",
    "InfiniteDomainTransform",
    "IntegrationResult",
    "IntegrationStatus",
    "Interval",
    "MAX_EVALS",
    "MAX_SUBDIVISIONS",
    "OracleResult",
    "QuadConfig",
    "QuadTolerances",
    "SUPPORTED_ORDERS",
    "ScipyCubatureOracle",
    "adaptive_integrate",
    "get_rule",
    "integrate",
    "integrate_box",
    "integrate_infinite",
]
