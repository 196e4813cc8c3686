"""Shared data structures for feeding-kernel inference."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

PARAMETER_NAMES = ("alpha", "l_left", "u_left", "l_right", "u_right")
COEFFICIENT_NAMES = ("kernel_exp", "kernel_l_l", "kernel_u_l", "kernel_l_r", "kernel_u_r")


@dataclass(frozen=True)
class Observation:
    """One predator-prey feeding record."""

    species_id: str
    predator_mass: float
    prey_mass: float
    count: float = 1.0

    @property
    def l(self) -> float:
        return math.log(self.predator_mass / self.prey_mass)


def _frozen(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class WeightedSample:
    """Per-species log mass ratios with number and biomass weights (each summing to 1)."""

    species_id: str
    l: np.ndarray
    weight_by_number: np.ndarray
    weight_by_biomass: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "l", _frozen(self.l))
        object.__setattr__(self, "weight_by_number", _frozen(self.weight_by_number))
        object.__setattr__(self, "weight_by_biomass", _frozen(self.weight_by_biomass))

    def __len__(self) -> int:
        return int(self.l.size)


@dataclass(frozen=True)
class ShapeParameters:
    alpha: float
    l_left: float
    u_left: float
    l_right: float
    u_right: float

    @classmethod
    def from_vector(cls, vector) -> "ShapeParameters":
        values = [float(v) for v in vector]
        if len(values) != len(PARAMETER_NAMES):
            raise ValueError(f"expected {len(PARAMETER_NAMES)} parameters, got {len(values)}")
        return cls(*values)

    def to_vector(self) -> np.ndarray:
        return np.array([self.alpha, self.l_left, self.u_left, self.l_right, self.u_right], dtype=float)

    def to_dict(self) -> Dict[str, float]:
        return dict(zip(PARAMETER_NAMES, self.to_vector().tolist()))

    def is_valid(self) -> bool:
        """True when steepness values are positive and the bounds are ordered."""
        return self.u_left > 0 and self.u_right > 0 and self.l_left <= self.l_right

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_vector().tolist())


@dataclass(frozen=True)
class FitResult:
    species_id: str
    params: ShapeParameters
    neg_log_likelihood: float
    n_samples: int
    n_iterations: int = 0
    message: str = ""


@dataclass(frozen=True)
class KernelCoefficients:
    species_id: str
    kernel_exp: float
    kernel_l_l: float
    kernel_u_l: float
    kernel_l_r: float
    kernel_u_r: float

    def to_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in COEFFICIENT_NAMES}


@dataclass(frozen=True)
class Bin:
    range_start: float
    count_density: float
    biomass_density: float


@dataclass(frozen=True)
class SpeciesFailure:
    """Error details for a species that produced no kernel.

    ``params`` holds the point where the objective became undefined, when known.
    """

    species_id: str
    error_type: str
    error: str
    stage: str = "fit"
    warnings: Tuple[str, ...] = ()
    params: Optional[Dict[str, float]] = None


__all__ = [
    "Bin",
    "COEFFICIENT_NAMES",
    "FitResult",
    "KernelCoefficients",
    "Observation",
    "PARAMETER_NAMES",
    "ShapeParameters",
    "SpeciesFailure",
    "WeightedSample",
]
