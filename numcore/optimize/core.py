"""Core types shared by the quasi-Newton optimizer and its line searches."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional

import numpy as np

from ..core.functions import Array, GradientFunction
from .utils import approx_grad

Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]

EPS_F = 1e-12
EPS_G = 1e-8
MAX_ITERATIONS = 300
HISTORY_DEPTH = 10
LINE_SEARCHES = ("wolfe", "armijo")


class OptimizeStatus(Enum):
    """Termination status of a minimization call."""

    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    LINE_SEARCH_FAILED = "line_search_failed"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class Problem(GradientFunction):
    """Objective described by separate value and gradient callables.

    When ``grad`` is omitted the gradient is approximated with central
    differences, costing ``2 * n`` extra objective evaluations per call.
    ``dim``, when set, is the expected length of the start point; a start
    point of another length is rejected as invalid input.
    """

    fun: Objective
    grad: Optional[Gradient] = None
    dim: Optional[int] = None

    def evaluate(self, x: Array) -> float:
        return float(self.fun(x))

    def evaluate_with_gradient(self, x: Array) -> tuple[float, Array]:
        value = float(self.fun(x))
        if self.grad is not None:
            return value, np.asarray(self.grad(x), dtype=float)
        return value, approx_grad(self.fun, x)


@dataclass
class OptimizeResult:
    """Standard result object returned by the optimizer.

    Attributes:
        x: Final position (best accepted iterate).
        fun: Objective value at ``x``.
        nit: Number of accepted steps.
        status: Enumeration describing why the optimizer stopped.
        message: Human-readable explanation of ``status``.
        grad_norm: Euclidean norm of the gradient at ``x``.
        nfev: Objective value evaluations.
        njev: Gradient evaluations.
        rejected_updates: Curvature pairs discarded because ``s.y <= 0``.
        history: Iterates, when requested.
    """

    x: Array
    fun: float
    nit: int
    status: OptimizeStatus
    message: str
    grad_norm: float
    nfev: int = 0
    njev: int = 0
    rejected_updates: int = 0
    history: List[Array] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is OptimizeStatus.CONVERGED


@dataclass(frozen=True)
class MinimizeTolerances:
    """Stopping tolerances.

    Converged when ``|f_old - f_new| <= eps_f * max(1, |f_old|)`` or when the
    gradient norm drops to ``eps_g``.
    """

    eps_f: float = EPS_F
    eps_g: float = EPS_G

    def __post_init__(self) -> None:
        if not (self.eps_f >= 0.0 and self.eps_g >= 0.0):
            raise ValueError(
                f"Tolerances must be non-negative, got eps_f={self.eps_f}, eps_g={self.eps_g}"
            )


@dataclass(frozen=True)
class LBFGSConfig:
    """
    Configuration for :func:`numcore.optimize.lbfgs`.

    Args:
        tolerances: Stopping tolerances.
        max_iterations: Maximum number of accepted steps.
        history_depth: Number of curvature pairs kept (``m``).
        line_search: ``"wolfe"`` (strong Wolfe) or ``"armijo"`` (backtracking).
        c1: Sufficient-decrease constant.
        c2: Curvature constant for the Wolfe search.
        max_line_search: Trial budget of one line search.
    """

    tolerances: MinimizeTolerances = field(default_factory=MinimizeTolerances)
    max_iterations: int = MAX_ITERATIONS
    history_depth: int = HISTORY_DEPTH
    line_search: str = "wolfe"
    c1: float = 1e-4
    c2: float = 0.9
    max_line_search: int = 40

    def __post_init__(self) -> None:
        if self.history_depth <= 0:
            raise ValueError("Memory parameter history_depth must be positive.")
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative.")
        if self.line_search not in LINE_SEARCHES:
            raise ValueError(
                f"Unsupported line search '{self.line_search}'. "
                f"Supported names: {list(LINE_SEARCHES)}"
            )
        if not (0 < self.c1 < self.c2 < 1):
            raise ValueError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")
        if self.max_line_search < 1:
            raise ValueError("max_line_search must be at least 1.")


class CurvatureHistory:
    """
    Fixed-capacity FIFO of ``(s, y)`` pairs stored in a ring buffer.

    Inserting into a full buffer overwrites the oldest pair in O(1).
    :meth:`inverse_hessian_product` runs the two-loop recursion in O(m n).
    """

    def __init__(self, capacity: int, dim: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive.")
        self.capacity = capacity
        self.dim = dim
        self._s = np.zeros((capacity, dim), dtype=float)
        self._y = np.zeros((capacity, dim), dtype=float)
        self._rho = np.zeros(capacity, dtype=float)
        self._head = 0  # slot of the next insert
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def _slots(self) -> Iterator[int]:
        """Slots from oldest to newest."""
        start = (self._head - self._count) % self.capacity
        for k in range(self._count):
            yield (start + k) % self.capacity

    def __iter__(self) -> Iterator[tuple[Array, Array]]:
        for i in self._slots():
            yield self._s[i].copy(), self._y[i].copy()

    def append(self, s: Array, y: Array) -> None:
        """Store a pair; the caller guarantees ``s.y > 0``."""
        sy = float(np.dot(s, y))
        self._s[self._head] = s
        self._y[self._head] = y
        self._rho[self._head] = 1.0 / sy
        self._head = (self._head + 1) % self.capacity
        self._count = min(self._count + 1, self.capacity)

    def clear(self) -> None:
        self._head = 0
        self._count = 0

    def inverse_hessian_product(self, g: Array) -> Array:
        """Return ``H g`` for the implicit L-BFGS inverse Hessian ``H``.

        With an empty history ``H`` is the identity.
        """
        q = np.array(g, dtype=float, copy=True)
        if self._count == 0:
            return q
        slots = list(self._slots())
        alphas = np.zeros(self.capacity, dtype=float)
        for i in reversed(slots):
            alphas[i] = self._rho[i] * float(np.dot(self._s[i], q))
            q -= alphas[i] * self._y[i]
        newest = slots[-1]
        gamma = float(
            np.dot(self._s[newest], self._y[newest]) / np.dot(self._y[newest], self._y[newest])
        )
        r = gamma * q
        for i in slots:
            beta = self._rho[i] * float(np.dot(self._y[i], r))
            r += self._s[i] * (alphas[i] - beta)
        return r


@dataclass
class OptimizerState:
    """Mutable state of one optimization run."""

    position: Array
    value: float
    gradient: Array
    history: CurvatureHistory

    @property
    def grad_norm(self) -> float:
        return float(np.linalg.norm(self.gradient))


def check_convergence(grad_norm: float, tol: float) -> bool:
    """Return True if the gradient norm satisfies the tolerance."""
    return grad_norm <= tol


def decrease_converged(f_old: float, f_new: float, eps_f: float) -> bool:
    """Return True if the last step decreased ``f`` by a negligible amount."""
    return abs(f_old - f_new) <= eps_f * max(1.0, abs(f_old))


__all__ = [
    "CurvatureHistory",
    "EPS_F",
    "EPS_G",
    "Gradient",
    "HISTORY_DEPTH",
    "LBFGSConfig",
    "LINE_SEARCHES",
    "MAX_ITERATIONS",
    "MinimizeTolerances",
    "Objective",
    "OptimizeResult",
    "OptimizeStatus",
    "OptimizerState",
    "Problem",
    "check_convergence",
    "decrease_converged",
]
