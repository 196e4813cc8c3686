"""Draw synthetic log mass ratios from a kernel density."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy.integrate import cumulative_trapezoid

from feeding_kernel.kernels.models import ShapeParameters
from feeding_kernel.kernels.shape import shape
from feeding_kernel.schema.fit_config import DEFAULT_SUPPORT


def sample_kernel(
    params: ShapeParameters,
    n: int,
    seed: int | None = None,
    *,
    support: Tuple[float, float] = DEFAULT_SUPPORT,
    grid_size: int = 20001,
) -> np.ndarray:
    """Inverse-CDF draws of ``l`` on a fine grid over ``support``."""
    if n <= 0:
        raise ValueError("n must be positive")
    grid = np.linspace(support[0], support[1], grid_size)
    with np.errstate(under="ignore"):
        pdf = shape(grid, *params)
    cdf = cumulative_trapezoid(pdf, grid, initial=0.0)
    cdf /= cdf[-1]
    rng = np.random.default_rng(seed)
    return np.interp(rng.random(n), cdf, grid)


__all__ = ["sample_kernel"]
