"""Evaluation contracts for the functions handed to numcore engines.

Three capabilities are defined:

* :class:`ScalarFunction` - ``R -> R`` integrands for 1-D quadrature.
* :class:`VectorFunction` - ``R^n -> R`` integrands for box integration.
* :class:`GradientFunction` - ``R^n -> (R, R^n)`` objectives for minimization.

Only the single-point method is mandatory. The batched method defaults to
repeated single-point calls and can be overridden by callers who can evaluate
a whole array at once. None of the contracts raise on domain errors: a
function that cannot be evaluated should return ``nan`` or ``inf`` and let it
propagate into the result.

Example
-------
>>> import numpy as np
>>> from numcore.core import as_scalar_function
>>> f = as_scalar_function(np.exp, vectorized=True)
>>> f.evaluate_many(np.zeros(3))
array([1., 1., 1.])
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

import numpy as np

Array = np.ndarray


class ScalarFunction(ABC):
    """Function of one real variable."""

    @abstractmethod
    def evaluate(self, x: float) -> float:
        """Evaluate the function at ``x``."""

    def evaluate_many(self, xs: Array) -> Array:
        """Evaluate at every point of ``xs``; element-wise by default."""
        xs = np.asarray(xs, dtype=float)
        return np.array([self.evaluate(float(x)) for x in xs.ravel()], dtype=float).reshape(
            xs.shape
        )

    def __call__(self, x: float) -> float:
        return self.evaluate(x)


class CallableScalarFunction(ScalarFunction):
    """Adapt a plain callable to :class:`ScalarFunction`.

    With ``vectorized=True`` the callable receives the whole node array in a
    single call and must return an array of the same shape.
    """

    def __init__(self, func: Callable[..., Any], vectorized: bool = False) -> None:
        if not callable(func):
            raise TypeError(f"Expected a callable, got {type(func).__name__}")
        self.func = func
        self.vectorized = vectorized

    def evaluate(self, x: float) -> float:
        return float(self.func(x))

    def evaluate_many(self, xs: Array) -> Array:
        if not self.vectorized:
            return super().evaluate_many(xs)
        xs = np.asarray(xs, dtype=float)
        values = np.asarray(self.func(xs), dtype=float)
        return np.broadcast_to(values, xs.shape).copy()

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", type(self.func).__name__)
        return f"CallableScalarFunction({name}, vectorized={self.vectorized})"


class VectorFunction(ABC):
    """Scalar-valued function of a fixed-length real vector."""

    @abstractmethod
    def evaluate(self, x: Array) -> float:
        """Evaluate the function at the point ``x`` of shape ``(n,)``."""

    def evaluate_many(self, points: Array) -> Array:
        """Evaluate at each row of ``points`` (shape ``(k, n)``)."""
        points = np.atleast_2d(np.asarray(points, dtype=float))
        return np.array([self.evaluate(row) for row in points], dtype=float)

    def __call__(self, x: Array) -> float:
        return self.evaluate(x)


class CallableVectorFunction(VectorFunction):
    """Adapt a plain callable to :class:`VectorFunction`.

    With ``vectorized=True`` the callable receives a ``(k, n)`` array and must
    return ``k`` values.
    """

    def __init__(self, func: Callable[..., Any], vectorized: bool = False) -> None:
        if not callable(func):
            raise TypeError(f"Expected a callable, got {type(func).__name__}")
        self.func = func
        self.vectorized = vectorized

    def evaluate(self, x: Array) -> float:
        x = np.asarray(x, dtype=float)
        if self.vectorized:
            return float(self.evaluate_many(np.atleast_2d(x))[0])
        return float(self.func(x))

    def evaluate_many(self, points: Array) -> Array:
        if not self.vectorized:
            return super().evaluate_many(points)
        points = np.atleast_2d(np.asarray(points, dtype=float))
        return np.asarray(self.func(points), dtype=float).reshape(points.shape[0])


class GradientFunction(ABC):
    """Differentiable objective returning its value and gradient together.

    Callers must not read the gradient of a call that raised.
    """

    @abstractmethod
    def evaluate_with_gradient(self, x: Array) -> tuple[float, Array]:
        """Return ``(value, gradient)`` at ``x``; ``gradient.shape == x.shape``."""

    def evaluate(self, x: Array) -> float:
        value, _ = self.evaluate_with_gradient(x)
        return value

    def __call__(self, x: Array) -> float:
        return self.evaluate(x)


class CallableGradientFunction(GradientFunction):
    """Adapt a callable returning ``(value, gradient)``."""

    def __init__(self, func: Callable[[Array], tuple[float, Any]]) -> None:
        if not callable(func):
            raise TypeError(f"Expected a callable, got {type(func).__name__}")
        self.func = func

    def evaluate_with_gradient(self, x: Array) -> tuple[float, Array]:
        value, grad = self.func(x)
        return float(value), np.asarray(grad, dtype=float)


def as_scalar_function(func: ScalarFunction | Callable[..., Any], vectorized: bool = False) -> ScalarFunction:
    """Return ``func`` as a :class:`ScalarFunction`, wrapping callables."""
    if isinstance(func, ScalarFunction):
        return func
    return CallableScalarFunction(func, vectorized=vectorized)


def as_vector_function(func: VectorFunction | Callable[..., Any], vectorized: bool = False) -> VectorFunction:
    """Return ``func`` as a :class:`VectorFunction`, wrapping callables."""
    if isinstance(func, VectorFunction):
        return func
    return CallableVectorFunction(func, vectorized=vectorized)


def as_gradient_function(func: GradientFunction | Callable[..., Any]) -> GradientFunction:
    """Return ``func`` as a :class:`GradientFunction`.

    Plain callables must return a ``(value, gradient)`` pair. Objectives that
    only provide a value should be wrapped in
    :class:`numcore.optimize.Problem`, which falls back to finite differences.
    """
    if isinstance(func, GradientFunction):
        return func
    if callable(func):
        return CallableGradientFunction(func)
    raise TypeError(
        f"Cannot use object of type {type(func).__name__} as a gradient function"
    )


__all__ = [
    "Array",
    "CallableGradientFunction",
    "CallableScalarFunction",
    "CallableVectorFunction",
    "GradientFunction",
    "ScalarFunction",
    "VectorFunction",
    "as_gradient_function",
    "as_scalar_function",
    "as_vector_function",
]
