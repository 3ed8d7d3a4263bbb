"""numcore - adaptive quadrature, box integration and L-BFGS minimization."""

__version__ = "0.1.0"

# Function abstractions
from .core import (
    GradientFunction,
    ScalarFunction,
    VectorFunction,
    as_gradient_function,
    as_scalar_function,
    as_vector_function,
)

# Integration
from .integrate import (
    InfiniteDomainTransform,
    IntegrationResult,
    IntegrationStatus,
    Interval,
    QuadConfig,
    QuadTolerances,
    integrate,
    integrate_box,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Optimization
from .optimize import (
    LBFGSConfig,
    MinimizeTolerances,
    OptimizeResult,
    OptimizeStatus,
    Problem,
    TorchObjective,
    lbfgs,
    minimize,
)

__all__ = [
    "GradientFunction",
    "InfiniteDomainTransform",
    "IntegrationResult",
    "IntegrationStatus",
    "Interval",
    "LBFGSConfig",
    "MinimizeTolerances",
    "OptimizeResult",
    "OptimizeStatus",
    "Problem",
    "QuadConfig",
    "QuadTolerances",
    "ScalarFunction",
    "TorchObjective",
    "VectorFunction",
    "__version__",
    "as_gradient_function",
    "as_scalar_function",
    "as_vector_function",
    "configure_logging",
    "get_logger",
    "integrate",
    "integrate_box",
    "lbfgs",
    "minimize",
    "set_log_level",
]
