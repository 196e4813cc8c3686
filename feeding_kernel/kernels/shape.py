"""Bounded exponential kernel shape and its normalization over the mass-ratio support.

The unnormalized shape is an exponential tilt ``exp(alpha * l)`` cut off on both
sides by logistic factors::

    shape(l) = exp(alpha * l)
               / (1 + exp(u_left * (l_left - l)))
               / (1 + exp(u_right * (l - l_right)))

It is evaluated in log space so the logistic factors never overflow for large
``|l|``. The normalizer integrates the shape over a fixed support (``[0, 30]`` by
default) and refuses to hand back a density that is non-positive or non-finite
at any point the caller evaluates it on.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np
from scipy import integrate

from feeding_kernel.exceptions import ComputationError
from feeding_kernel.kernels.models import ShapeParameters
from feeding_kernel.schema.fit_config import DEFAULT_SUPPORT

ArrayLike = Union[float, np.ndarray]


def log_shape(l: ArrayLike, alpha: float, l_left: float, u_left: float, l_right: float, u_right: float) -> np.ndarray:
    """Natural log of the unnormalized kernel shape."""
    l = np.asarray(l, dtype=float)
    return (
        alpha * l
        - np.logaddexp(0.0, u_left * (l_left - l))
        - np.logaddexp(0.0, u_right * (l - l_right))
    )


def shape(l: ArrayLike, alpha: float, l_left: float, u_left: float, l_right: float, u_right: float) -> np.ndarray:
    """Unnormalized kernel shape at ``l``."""
    return np.exp(log_shape(l, alpha, l_left, u_left, l_right, u_right))


def _breakpoints(params: ShapeParameters, support: Tuple[float, float]) -> list[float]:
    lo, hi = support
    return sorted({p for p in (params.l_left, params.l_right) if np.isfinite(p) and lo < p < hi})


def normalizing_constant(
    params: ShapeParameters,
    support: Tuple[float, float] = DEFAULT_SUPPORT,
    *,
    epsabs: float = 1e-12,
    epsrel: float = 1e-10,
    limit: int = 200,
) -> float:
    """Integrate the shape over ``support``; raises ComputationError if the result is unusable."""

    lo, hi = support
    values = tuple(params)
    if not all(math.isfinite(v) for v in values):
        raise ComputationError("non-finite shape parameters", params=values)

    with np.errstate(over="ignore", under="ignore"):
        z, _err = integrate.quad(
            lambda x: float(shape(x, *values)),
            lo,
            hi,
            points=_breakpoints(params, support) or None,
            epsabs=epsabs,
            epsrel=epsrel,
            limit=limit,
        )
    if not math.isfinite(z) or z <= 0:
        raise ComputationError(f"normalizing constant is not positive and finite: Z={z}", params=values)
    return float(z)


@dataclass(frozen=True)
class NormalizedDensity:
    """Shape divided by its integral over ``support``."""

    params: ShapeParameters
    z: float
    support: Tuple[float, float] = DEFAULT_SUPPORT

    def log_density(self, l: ArrayLike) -> np.ndarray:
        with np.errstate(over="ignore", under="ignore"):
            return log_shape(l, *self.params) - math.log(self.z)

    def evaluate(self, l: ArrayLike) -> np.ndarray:
        """Density at ``l``; raises ComputationError if any value is non-positive or non-finite."""
        with np.errstate(over="ignore", under="ignore"):
            values = np.exp(self.log_density(l))
        bad = ~np.isfinite(values) | (values <= 0)
        if np.any(bad):
            offending = np.asarray(l, dtype=float)[bad] if np.ndim(l) else np.asarray([l], dtype=float)
            raise ComputationError(
                f"density is not positive at l={offending[:5].tolist()}",
                params=self.params,
            )
        return values

    def __call__(self, l: ArrayLike) -> np.ndarray:
        return self.evaluate(l)


def normalize(
    params: ShapeParameters,
    support: Tuple[float, float] = DEFAULT_SUPPORT,
    *,
    epsabs: float = 1e-12,
    epsrel: float = 1e-10,
    limit: int = 200,
) -> NormalizedDensity:
    """Return the normalized density for ``params`` over ``support``."""
    z = normalizing_constant(params, support, epsabs=epsabs, epsrel=epsrel, limit=limit)
    return NormalizedDensity(params=params, z=z, support=support)


def biomass_parameters(params: ShapeParameters) -> ShapeParameters:
    """Shape parameters of the biomass-weighted kernel.

    Weighting by prey mass ``m_prey = m_pred * exp(-l)`` lowers the exponential
    tilt by one; the biomass kernel is derived this way, never fit separately.
    """
    return ShapeParameters(
        alpha=params.alpha - 1.0,
        l_left=params.l_left,
        u_left=params.u_left,
        l_right=params.l_right,
        u_right=params.u_right,
    )


def biomass_density(params: ShapeParameters, support: Tuple[float, float] = DEFAULT_SUPPORT) -> NormalizedDensity:
    return normalize(biomass_parameters(params), support)


__all__ = [
    "NormalizedDensity",
    "biomass_density",
    "biomass_parameters",
    "log_shape",
    "normalize",
    "normalizing_constant",
    "shape",
]
