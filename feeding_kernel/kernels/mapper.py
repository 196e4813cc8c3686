"""Map fitted shape parameters onto ecosystem-model kernel coefficients."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from feeding_kernel.kernels.models import COEFFICIENT_NAMES, FitResult, KernelCoefficients

# Constant shift between the fitted tilt alpha and the model kernel exponent.
KERNEL_EXP_OFFSET = 4.0 / 3.0


def kernel_coefficients(fit: FitResult, lambda_: float) -> KernelCoefficients:
    """``kernel_exp = alpha + 4/3 - lambda``; the bounds and steepness pass through."""
    p = fit.params
    return KernelCoefficients(
        species_id=fit.species_id,
        kernel_exp=p.alpha + KERNEL_EXP_OFFSET - lambda_,
        kernel_l_l=p.l_left,
        kernel_u_l=p.u_left,
        kernel_l_r=p.l_right,
        kernel_u_r=p.u_right,
    )


def coefficients_table(fits: Iterable[FitResult], lambda_: float) -> pd.DataFrame:
    """Species-keyed coefficient table ready to merge into a species-parameter table."""
    rows = {}
    for fit in fits:
        rows[fit.species_id] = kernel_coefficients(fit, lambda_).to_dict()
    frame = pd.DataFrame.from_dict(rows, orient="index", columns=list(COEFFICIENT_NAMES))
    frame.index.name = "species_id"
    return frame.sort_index()


__all__ = ["KERNEL_EXP_OFFSET", "coefficients_table", "kernel_coefficients"]
