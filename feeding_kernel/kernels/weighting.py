"""Per-species number and biomass weights for log mass-ratio samples."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from feeding_kernel.exceptions import DataError
from feeding_kernel.kernels.models import Observation, WeightedSample
from feeding_kernel.utils.logging import get_logger

log = get_logger(__name__, component="weighting")


def _normalize(values: np.ndarray, label: str, species_id: str) -> np.ndarray:
    total = float(values.sum())
    if not np.isfinite(total) or total <= 0:
        raise DataError(f"total {label} weight must be positive, got {total}", species_id=species_id)
    return values / total


def weight_arrays(
    species_id: str,
    l: Sequence[float],
    prey_mass: Sequence[float],
    count: Optional[Sequence[float]] = None,
) -> WeightedSample:
    """Build a WeightedSample from aligned arrays for one species."""

    l_arr = np.asarray(l, dtype=float)
    prey_arr = np.asarray(prey_mass, dtype=float)
    count_arr = np.ones_like(l_arr) if count is None else np.asarray(count, dtype=float)
    if l_arr.size == 0:
        raise DataError("empty sample", species_id=species_id)
    if not (l_arr.shape == prey_arr.shape == count_arr.shape):
        raise DataError("l, prey_mass and count must have the same length", species_id=species_id)
    if not np.all(np.isfinite(prey_arr) & (prey_arr > 0)):
        raise DataError("prey_mass must be positive and numeric", species_id=species_id)
    if not np.all(np.isfinite(count_arr)):
        raise DataError("non-numeric counts in sample", species_id=species_id)
    if not np.all(np.isfinite(l_arr)):
        raise DataError("non-finite log mass ratio in sample", species_id=species_id)
    if np.any(l_arr <= 0):
        raise DataError(
            f"{int(np.sum(l_arr <= 0))} records with log mass ratio <= 0; filter them before weighting",
            species_id=species_id,
        )
    if np.any(count_arr < 0):
        raise DataError("negative counts in sample", species_id=species_id)

    by_number = _normalize(count_arr, "number", species_id)
    by_biomass = _normalize(count_arr * prey_arr, "biomass", species_id)
    return WeightedSample(
        species_id=species_id,
        l=l_arr,
        weight_by_number=by_number,
        weight_by_biomass=by_biomass,
    )


def weight_sample(species_id: str, observations: Iterable[Observation]) -> WeightedSample:
    """Weight a list of observations belonging to ``species_id``."""

    records = list(observations)
    foreign = {obs.species_id for obs in records} - {species_id}
    if foreign:
        raise DataError(f"observations for other species in group: {sorted(foreign)}", species_id=species_id)
    return weight_arrays(
        species_id,
        [obs.l for obs in records],
        [obs.prey_mass for obs in records],
        [obs.count for obs in records],
    )


def weight_frame(
    frame: pd.DataFrame,
    species: Optional[Sequence[str]] = None,
) -> Dict[str, Union[WeightedSample, DataError]]:
    """Weight every species group of a staged observation table.

    ``frame`` must carry ``species_id``, ``l`` and ``prey_mass`` columns (see
    ``observations_from_frame``). Each entry of the returned mapping is either a
    WeightedSample or the DataError raised for that species, so one bad group
    never hides the others. When ``species`` is given, only those groups are
    weighted and absent ones map to a DataError.
    """

    groups: Mapping[str, pd.DataFrame] = {
        str(key): group for key, group in frame.groupby("species_id", sort=True)
    }
    wanted = sorted(groups) if species is None else [str(s) for s in species]

    samples: Dict[str, Union[WeightedSample, DataError]] = {}
    for species_id in wanted:
        group = groups.get(species_id)
        try:
            if group is None:
                raise DataError("species missing from observation table", species_id=species_id)
            count = group["count"].to_numpy() if "count" in group.columns else None
            samples[species_id] = weight_arrays(
                species_id,
                group["l"].to_numpy(),
                group["prey_mass"].to_numpy(),
                count,
            )
        except DataError as exc:
            log.warning(
                "Sample weighting failed",
                extra={"species_id": species_id, "status": "FAILED", "error": str(exc)},
            )
            samples[species_id] = exc
    return samples


__all__ = ["weight_arrays", "weight_frame", "weight_sample"]
