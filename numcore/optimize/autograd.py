"""PyTorch-backed objectives whose gradients come from autograd."""

from __future__ import annotations

from typing import Callable

import numpy as np
import torch

from ..core.functions import Array, GradientFunction

TorchObjectiveFn = Callable[[torch.Tensor], torch.Tensor]


class TorchObjective(GradientFunction):
    """
    Wrap a scalar torch function as a :class:`GradientFunction`.

    The point is converted to a float64 tensor, the objective evaluated, and
    the gradient obtained with ``backward()``. Values and gradients are
    returned as NumPy data so the optimizer never sees tensors.

    Args:
        objective: Callable taking a 1D float64 tensor and returning a 0-D
            tensor.

    Example:
        >>> import torch
        >>> obj = TorchObjective(lambda p: (p ** 2).sum())
        >>> obj.evaluate_with_gradient(np.array([1.0, 2.0]))
        (5.0, array([2., 4.]))
    """

    def __init__(self, objective: TorchObjectiveFn) -> None:
        if not callable(objective):
            raise TypeError(f"Expected a callable, got {type(objective).__name__}")
        self.objective = objective

    @staticmethod
    def _as_tensor(x: Array) -> torch.Tensor:
        return torch.as_tensor(np.asarray(x, dtype=float), dtype=torch.float64)

    def _scalar(self, value: torch.Tensor) -> torch.Tensor:
        if value.ndim != 0:
            raise ValueError(
                f"objective must return a scalar tensor (0D), got shape {tuple(value.shape)} "
                f"with ndim={value.ndim}"
            )
        return value

    def evaluate(self, x: Array) -> float:
        with torch.no_grad():
            value = self._scalar(self.objective(self._as_tensor(x)))
        return float(value.item())

    def evaluate_with_gradient(self, x: Array) -> tuple[float, Array]:
        params = self._as_tensor(x).clone().detach().requires_grad_(True)
        value = self._scalar(self.objective(params))
        value.backward()
        grad = params.grad
        if grad is None:
            raise RuntimeError("Autograd did not produce gradients for params.")
        return float(value.detach().item()), grad.detach().cpu().numpy().astype(float)


__all__ = ["TorchObjective", "TorchObjectiveFn"]
