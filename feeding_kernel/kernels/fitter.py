"""Maximum-likelihood fitting of the bounded exponential kernel, per species and in batches.

Each species is fit independently from a deterministic starting point
(``alpha=-0.5``, bounds at the observed extremes, steepness 5). There is no
automatic retry: a species whose objective becomes undefined, or whose optimizer
runs out of iterations, is reported as a failure and the caller may re-invoke
``fit_species`` with a different ``initial`` guess.
"""

from __future__ import annotations

import math
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from feeding_kernel.data.observations import observations_from_frame
from feeding_kernel.exceptions import ComputationError, FeedingKernelError, OptimizationError
from feeding_kernel.interfaces.optimizer import Optimizer
from feeding_kernel.kernels.errors import record_species_failure
from feeding_kernel.kernels.likelihood import make_objective
from feeding_kernel.kernels.mapper import kernel_coefficients
from feeding_kernel.kernels.models import (
    COEFFICIENT_NAMES,
    PARAMETER_NAMES,
    FitResult,
    ShapeParameters,
    SpeciesFailure,
    WeightedSample,
)
from feeding_kernel.kernels.weighting import weight_frame
from feeding_kernel.optimizers.factory import get_optimizer
from feeding_kernel.schema.fit_config import FitConfig
from feeding_kernel.utils.logging import get_logger, log_duration

log = get_logger(__name__, component="fitter")

SampleEntry = Union[WeightedSample, Exception]


def initial_guess(sample: WeightedSample, config: FitConfig | None = None) -> ShapeParameters:
    config = config or FitConfig()
    return ShapeParameters(
        alpha=config.initial_alpha,
        l_left=float(np.min(sample.l)),
        u_left=config.initial_u_left,
        l_right=float(np.max(sample.l)),
        u_right=config.initial_u_right,
    )


def fit_species(
    sample: WeightedSample,
    *,
    config: FitConfig | None = None,
    optimizer: Optimizer | None = None,
    initial: ShapeParameters | None = None,
) -> FitResult:
    """Fit one species by minimizing the weighted negative log-likelihood.

    Raises
    ------
    ComputationError
        The objective is undefined at the initial guess.
    OptimizationError
        The objective became undefined during the search, the optimizer did not
        converge within its budget, or it converged to an invalid parameter set.
    """

    config = config or FitConfig()
    optimizer = optimizer or get_optimizer(config.optimizer, config)
    species_id = sample.species_id
    start = initial or initial_guess(sample, config)
    objective = make_objective(sample, config)

    try:
        objective(start.to_vector())
    except ComputationError as exc:
        raise exc.with_species(species_id)

    try:
        result = optimizer.minimize(objective, start.to_vector())
    except ComputationError as exc:
        raise OptimizationError(
            f"objective undefined during search: {exc}", species_id=species_id
        ) from exc

    if not result.converged or not math.isfinite(result.fun):
        raise OptimizationError(
            f"{optimizer.name} did not converge after {result.n_iterations} iterations: {result.message}",
            species_id=species_id,
        )

    params = ShapeParameters.from_vector(result.x)
    if not params.is_valid():
        raise OptimizationError(
            f"converged to invalid parameters {params.to_dict()}", species_id=species_id
        )

    log.debug(
        "Species fit converged",
        extra={
            "species_id": species_id,
            "n_samples": len(sample),
            "status": "ok",
            "nll": result.fun,
        },
    )
    return FitResult(
        species_id=species_id,
        params=params,
        neg_log_likelihood=float(result.fun),
        n_samples=len(sample),
        n_iterations=result.n_iterations,
        message=result.message,
    )


@dataclass
class FitBatchResult:
    """Species-keyed fits and failures from one batch run."""

    results: Dict[str, FitResult] = field(default_factory=dict)
    failures: Dict[str, SpeciesFailure] = field(default_factory=dict)

    @property
    def species_ids(self) -> list[str]:
        return sorted(set(self.results) | set(self.failures))

    @property
    def all_succeeded(self) -> bool:
        return not self.failures

    def to_frame(self, lambda_: Optional[float] = None) -> pd.DataFrame:
        """One row per species.

        Without ``lambda_`` the value columns are the fitted shape parameters;
        with it they are the kernel coefficients. Failed species keep NaN values
        and carry ``error_type``/``error``.
        """

        value_names = list(PARAMETER_NAMES if lambda_ is None else COEFFICIENT_NAMES)
        rows = []
        for species_id in self.species_ids:
            row: Dict[str, object] = {"species_id": species_id}
            fit = self.results.get(species_id)
            if fit is not None:
                values = fit.params.to_dict() if lambda_ is None else kernel_coefficients(fit, lambda_).to_dict()
                row.update(values)
                row.update(
                    status="ok",
                    neg_log_likelihood=fit.neg_log_likelihood,
                    n_samples=fit.n_samples,
                    error_type=None,
                    error=None,
                )
            else:
                failure = self.failures[species_id]
                row.update({name: float("nan") for name in value_names})
                row.update(
                    status="failed",
                    neg_log_likelihood=float("nan"),
                    n_samples=None,
                    error_type=failure.error_type,
                    error=failure.error,
                )
            rows.append(row)
        columns = ["species_id", *value_names, "status", "neg_log_likelihood", "n_samples", "error_type", "error"]
        return pd.DataFrame(rows, columns=columns).set_index("species_id")


def _clamp_workers(max_workers: int) -> int:
    return max(1, min(int(max_workers), 8))


def _stage_for(error: Exception) -> str:
    if isinstance(error, (ComputationError, OptimizationError)):
        return "fit"
    return "weighting"


def fit_all_species(
    samples: Mapping[str, SampleEntry],
    *,
    config: FitConfig | None = None,
    optimizer: Optimizer | None = None,
    initial_guesses: Mapping[str, ShapeParameters] | None = None,
    max_workers: int | None = None,
) -> FitBatchResult:
    """Fit every species independently; one species' failure never stops the others.

    ``samples`` values may be exceptions (as produced by ``weight_frame``); those
    species are recorded as failures without fitting.
    """

    config = config or FitConfig()
    optimizer = optimizer or get_optimizer(config.optimizer, config)
    initial_guesses = initial_guesses or {}
    workers = max_workers if max_workers is not None else config.max_workers
    batch = FitBatchResult()

    pending: Dict[str, WeightedSample] = {}
    for species_id, entry in samples.items():
        if isinstance(entry, WeightedSample):
            pending[species_id] = entry
        else:
            batch.failures[species_id] = record_species_failure(species_id, error=entry, stage=_stage_for(entry))

    def _record(species_id: str, exc: FeedingKernelError) -> None:
        exc.with_species(species_id)
        batch.failures[species_id] = record_species_failure(
            species_id, error=exc, stage="fit", n_samples=len(pending[species_id])
        )

    with log_duration(log, "Batch fit complete", n_samples=len(samples)) as summary:
        if workers is not None and _clamp_workers(workers) > 1 and len(pending) > 1:
            with ProcessPoolExecutor(max_workers=_clamp_workers(workers)) as executor:
                futures = {
                    executor.submit(
                        fit_species,
                        sample,
                        config=config,
                        optimizer=optimizer,
                        initial=initial_guesses.get(species_id),
                    ): species_id
                    for species_id, sample in pending.items()
                }
                for fut in as_completed(futures):
                    species_id = futures[fut]
                    try:
                        batch.results[species_id] = fut.result()
                    except FeedingKernelError as exc:
                        _record(species_id, exc)
        else:
            for species_id, sample in pending.items():
                try:
                    batch.results[species_id] = fit_species(
                        sample,
                        config=config,
                        optimizer=optimizer,
                        initial=initial_guesses.get(species_id),
                    )
                except FeedingKernelError as exc:
                    _record(species_id, exc)
        summary.update(status="ok" if batch.all_succeeded else "partial", error=sorted(batch.failures) or None)

    batch.results = dict(sorted(batch.results.items()))
    batch.failures = dict(sorted(batch.failures.items()))
    return batch


def fit_observations(
    frame: pd.DataFrame,
    *,
    species: Sequence[str] | None = None,
    config: FitConfig | None = None,
    optimizer: Optimizer | None = None,
    initial_guesses: Mapping[str, ShapeParameters] | None = None,
) -> FitBatchResult:
    """Stage, weight and fit an observation table in one call."""

    staged = observations_from_frame(frame)
    samples = weight_frame(staged, species=species)
    return fit_all_species(
        samples,
        config=config,
        optimizer=optimizer,
        initial_guesses=initial_guesses,
    )


__all__ = [
    "FitBatchResult",
    "fit_all_species",
    "fit_observations",
    "fit_species",
    "initial_guess",
]
