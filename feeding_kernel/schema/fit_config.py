"""Fit configuration schema and validation."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Literal, Optional, Tuple

from feeding_kernel.exceptions import ConfigValidationError

OptimizerName = Literal["bfgs", "nelder_mead"]

# Log mass-ratio support used for normalization. Changing it shifts every
# derived kernel coefficient.
DEFAULT_SUPPORT: Tuple[float, float] = (0.0, 30.0)
DEFAULT_N_BINS = 30


@dataclass(slots=True)
class FitConfig:
    support_min: float = DEFAULT_SUPPORT[0]
    support_max: float = DEFAULT_SUPPORT[1]
    n_bins: int = DEFAULT_N_BINS
    initial_alpha: float = -0.5
    initial_u_left: float = 5.0
    initial_u_right: float = 5.0
    optimizer: OptimizerName = "bfgs"
    gtol: float = 1e-5
    ftol: float = 1e-5
    maxiter: int = 1000
    quad_epsabs: float = 1e-12
    quad_epsrel: float = 1e-10
    quad_limit: int = 200
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if not (math.isfinite(self.support_min) and math.isfinite(self.support_max)):
            raise ConfigValidationError("support bounds must be finite")
        if self.support_min >= self.support_max:
            raise ConfigValidationError("support_min must be < support_max")
        if self.n_bins < 2:
            raise ConfigValidationError("n_bins must be >= 2")
        if self.initial_u_left <= 0 or self.initial_u_right <= 0:
            raise ConfigValidationError("initial steepness values must be positive")
        if self.optimizer not in {"bfgs", "nelder_mead"}:
            raise ConfigValidationError(f"invalid optimizer: {self.optimizer}")
        if self.gtol <= 0:
            raise ConfigValidationError("gtol must be positive")
        if self.ftol <= 0:
            raise ConfigValidationError("ftol must be positive")
        if self.maxiter <= 0:
            raise ConfigValidationError("maxiter must be > 0")
        if self.quad_epsabs <= 0 or self.quad_epsrel <= 0:
            raise ConfigValidationError("quadrature tolerances must be positive")
        if self.quad_limit <= 0:
            raise ConfigValidationError("quad_limit must be > 0")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigValidationError("max_workers must be positive when set")

    @property
    def support(self) -> Tuple[float, float]:
        return (self.support_min, self.support_max)

    @classmethod
    def from_dict(cls, data: dict) -> "FitConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(f"Unknown config keys: {unknown}")
        return cls(**data)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


__all__ = ["DEFAULT_N_BINS", "DEFAULT_SUPPORT", "FitConfig", "OptimizerName"]
