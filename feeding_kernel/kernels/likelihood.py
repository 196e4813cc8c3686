"""Weighted negative log-likelihood of the normalized kernel density."""

from __future__ import annotations

import math
from typing import Callable, Tuple

import numpy as np

from feeding_kernel.kernels.models import ShapeParameters, WeightedSample
from feeding_kernel.kernels.shape import normalize
from feeding_kernel.schema.fit_config import DEFAULT_SUPPORT, FitConfig


def negative_log_likelihood(
    sample: WeightedSample,
    params: ShapeParameters,
    support: Tuple[float, float] = DEFAULT_SUPPORT,
    *,
    epsabs: float = 1e-12,
    epsrel: float = 1e-10,
    limit: int = 200,
) -> float:
    """Return ``-sum(w_i * log(density(l_i)))`` using number weights.

    ComputationError from the normalizer propagates unchanged.
    """

    density = normalize(params, support, epsabs=epsabs, epsrel=epsrel, limit=limit)
    values = density(sample.l)
    # math.fsum keeps the result independent of sample order.
    return -math.fsum((sample.weight_by_number * np.log(values)).tolist())


def make_objective(sample: WeightedSample, config: FitConfig | None = None) -> Callable[[np.ndarray], float]:
    """Objective over the parameter vector ``(alpha, l_left, u_left, l_right, u_right)``."""

    config = config or FitConfig()

    def objective(vector: np.ndarray) -> float:
        return negative_log_likelihood(
            sample,
            ShapeParameters.from_vector(vector),
            config.support,
            epsabs=config.quad_epsabs,
            epsrel=config.quad_epsrel,
            limit=config.quad_limit,
        )

    return objective


__all__ = ["make_objective", "negative_log_likelihood"]
