"""Function abstractions shared by the integration and optimization engines."""

from .functions import (
    Array,
    CallableGradientFunction,
    CallableScalarFunction,
    CallableVectorFunction,
    GradientFunction,
    ScalarFunction,
    VectorFunction,
    as_gradient_function,
    as_scalar_function,
    as_vector_function,
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
