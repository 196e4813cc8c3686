"""scipy.optimize-backed optimizers."""

from __future__ import annotations

import numpy as np
from scipy import optimize

from feeding_kernel.interfaces.optimizer import Objective, Optimizer, OptimizerResult

# scipy status code for "desired error not necessarily achieved due to precision loss".
_PRECISION_LOSS = 2


class BFGSOptimizer(Optimizer):
    """Quasi-Newton BFGS with a central finite-difference gradient.

    A run that stops on precision loss still counts as converged when either the
    final gradient is within ``10 * gtol`` or the objective has stalled: its
    relative change over the last ``ftol_window`` iterations is at most ``ftol``.
    Finite-difference noise around the minimum, or a parameter drifting along a
    flat direction, is what usually triggers that status.
    """

    name = "bfgs"

    def __init__(self, gtol: float = 1e-5, maxiter: int = 1000, ftol: float = 1e-5, ftol_window: int = 3) -> None:
        self.gtol = gtol
        self.maxiter = maxiter
        self.ftol = ftol
        self.ftol_window = ftol_window

    def _stalled(self, history: list[float]) -> bool:
        if len(history) < 2:
            return False
        recent = history[-(self.ftol_window + 1):]
        change = abs(recent[0] - recent[-1])
        return change <= self.ftol * max(1.0, abs(recent[-1]))

    def minimize(self, objective: Objective, x0: np.ndarray) -> OptimizerResult:
        history: list[float] = []

        def record(intermediate_result: optimize.OptimizeResult) -> None:
            history.append(float(intermediate_result.fun))

        res = optimize.minimize(
            objective,
            np.asarray(x0, dtype=float),
            method="BFGS",
            jac="3-point",
            callback=record,
            options={"gtol": self.gtol, "maxiter": self.maxiter},
        )
        history.append(float(res.fun))
        converged = bool(res.success)
        if not converged and res.status == _PRECISION_LOSS:
            small_gradient = res.jac is not None and bool(np.max(np.abs(res.jac)) <= 10 * self.gtol)
            converged = small_gradient or self._stalled(history)
        return OptimizerResult(
            x=np.asarray(res.x, dtype=float),
            fun=float(res.fun),
            converged=converged,
            n_iterations=int(res.nit),
            message=str(res.message),
        )


class NelderMeadOptimizer(Optimizer):
    """Derivative-free simplex search."""

    name = "nelder_mead"

    def __init__(self, xatol: float = 1e-6, fatol: float = 1e-9, maxiter: int = 1000) -> None:
        self.xatol = xatol
        self.fatol = fatol
        self.maxiter = maxiter

    def minimize(self, objective: Objective, x0: np.ndarray) -> OptimizerResult:
        res = optimize.minimize(
            objective,
            np.asarray(x0, dtype=float),
            method="Nelder-Mead",
            options={"xatol": self.xatol, "fatol": self.fatol, "maxiter": self.maxiter * 5},
        )
        return OptimizerResult(
            x=np.asarray(res.x, dtype=float),
            fun=float(res.fun),
            converged=bool(res.success),
            n_iterations=int(res.nit),
            message=str(res.message),
        )


__all__ = ["BFGSOptimizer", "NelderMeadOptimizer"]
