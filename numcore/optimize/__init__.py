"""Deterministic limited-memory quasi-Newton minimization for numcore.

Example
-------
>>> import numpy as np
>>> from numcore.optimize import Problem, minimize
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> def rosen_grad(x):
...     return np.array([
...         -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
...         200 * (x[1] - x[0] ** 2),
...     ])
>>> res = minimize(Problem(fun=rosen, grad=rosen_grad, dim=2), np.array([-1.2, 1.0]))
>>> round(res.fun, 6)
0.0
"""

from .autograd import TorchObjective
from .core import (
    EPS_F,
    EPS_G,
    CurvatureHistory,
    LBFGSConfig,
    MinimizeTolerances,
    OptimizeResult,
    OptimizerState,
    OptimizeStatus,
    Problem,
    check_convergence,
)
from .lbfgs import lbfgs, minimize
from .line_search import LineSearchResult, backtracking_armijo, wolfe_line_search
from .utils import approx_grad, gradient_error

__all__ = [
    "CurvatureHistory",
    "EPS_F",
    "EPS_G",
    "LBFGSConfig",
    "LineSearchResult",
    "MinimizeTolerances",
    "OptimizeResult",
    "OptimizeStatus",
    "OptimizerState",
    "Problem",
    "TorchObjective",
    "approx_grad",
    "backtracking_armijo",
    "check_convergence",
    "gradient_error",
    "lbfgs",
    "minimize",
    "wolfe_line_search",
]
