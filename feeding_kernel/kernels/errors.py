"""Failure records for species whose weighting or fit could not complete."""

from __future__ import annotations

from typing import Iterable, Optional

from feeding_kernel.exceptions import ComputationError
from feeding_kernel.kernels.models import PARAMETER_NAMES, SpeciesFailure
from feeding_kernel.utils.logging import get_logger

log = get_logger(__name__, component="kernel_errors")


def record_species_failure(
    species_id: str,
    *,
    error: Exception,
    stage: str = "fit",
    n_samples: Optional[int] = None,
    warnings: Optional[Iterable[str]] = None,
) -> SpeciesFailure:
    """Log diagnostics for a failed species and return its SpeciesFailure entry."""

    message = str(error)
    warning_list = list(warnings or [])
    if message not in warning_list:
        warning_list.append(message)

    params = None
    cause = error if isinstance(error, ComputationError) else error.__cause__
    if isinstance(cause, ComputationError) and cause.params is not None:
        params = dict(zip(PARAMETER_NAMES, cause.params))

    log.warning(
        "Species kernel failed",
        extra={
            "species_id": species_id,
            "stage": stage,
            "n_samples": n_samples,
            "status": "FAILED",
            "error": message,
        },
    )

    return SpeciesFailure(
        species_id=species_id,
        error_type=type(error).__name__,
        error=message,
        stage=stage,
        warnings=tuple(warning_list),
        params=params,
    )


__all__ = ["record_species_failure"]
