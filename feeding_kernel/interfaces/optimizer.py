"""Optimizer interface decoupling kernel fitting from any numerical library."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

import numpy as np

Objective = Callable[[np.ndarray], float]


@dataclass(frozen=True)
class OptimizerResult:
    x: np.ndarray
    fun: float
    converged: bool
    n_iterations: int = 0
    message: str = ""


class Optimizer(ABC):
    """Unconstrained minimizer taking an objective and an initial guess."""

    name: str = "optimizer"

    @abstractmethod
    def minimize(self, objective: Objective, x0: np.ndarray) -> OptimizerResult:
        """Minimize ``objective`` from ``x0``.

        Exceptions raised by the objective propagate to the caller; the optimizer
        never repairs or retries a failing evaluation.
        """
