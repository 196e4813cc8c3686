"""Factory for optimizers."""

from __future__ import annotations

from feeding_kernel.config.factories import FactoryBase
from feeding_kernel.exceptions import ConfigValidationError
from feeding_kernel.interfaces.optimizer import Optimizer
from feeding_kernel.optimizers.scipy_optimizer import BFGSOptimizer, NelderMeadOptimizer
from feeding_kernel.schema.fit_config import FitConfig


def get_optimizer(name: str, config: FitConfig | None = None) -> Optimizer:
    config = config or FitConfig()
    name = name.lower()
    if name == "bfgs":
        return BFGSOptimizer(gtol=config.gtol, maxiter=config.maxiter, ftol=config.ftol)
    if name in {"nelder_mead", "nelder-mead", "simplex"}:
        return NelderMeadOptimizer(maxiter=config.maxiter)
    raise ConfigValidationError(f"Unknown optimizer: {name}")


def optimizer_factory(name: str, config: FitConfig | None = None) -> FactoryBase[Optimizer]:
    return FactoryBase(name=name, builder=lambda: get_optimizer(name, config))


__all__ = ["get_optimizer", "optimizer_factory"]
