"""Observation table staging: schema checks and log mass-ratio derivation."""

from __future__ import annotations

from typing import Iterable, List

import numpy as np
import pandas as pd

from feeding_kernel.exceptions import SchemaError
from feeding_kernel.kernels.models import Observation

REQUIRED_COLUMNS = ["species_id", "prey_mass"]
MASS_RATIO_COLUMNS = ["predator_mass", "l"]


def validate_observations(frame: pd.DataFrame) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise SchemaError(f"Missing required columns: {missing}")
    if not any(c in frame.columns for c in MASS_RATIO_COLUMNS):
        raise SchemaError(f"Observation table needs one of {MASS_RATIO_COLUMNS}")
    if frame["species_id"].isna().any():
        raise SchemaError("species_id contains missing values")


def observations_from_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with string ``species_id`` and an ``l`` column.

    ``l`` is computed as ``log(predator_mass / prey_mass)`` unless already
    present. Non-numeric cells become NaN. Rows are not filtered: positive
    masses and ``l > 0`` are enforced per species when the sample is weighted,
    so one bad species never blocks the others.
    """

    validate_observations(frame)
    staged = frame.copy()
    staged["species_id"] = staged["species_id"].astype(str)
    for column in ("prey_mass", "predator_mass", "l", "count"):
        if column in staged.columns:
            staged[column] = pd.to_numeric(staged[column], errors="coerce")
    if "l" not in staged.columns:
        with np.errstate(divide="ignore", invalid="ignore"):
            staged["l"] = np.log(staged["predator_mass"] / staged["prey_mass"])
    if "count" not in staged.columns:
        staged["count"] = 1.0
    return staged


def observations_from_records(records: Iterable[dict]) -> List[Observation]:
    """Build Observation objects from mappings with species/mass fields."""

    observations: List[Observation] = []
    for idx, record in enumerate(records):
        try:
            observations.append(
                Observation(
                    species_id=str(record["species_id"]),
                    predator_mass=float(record["predator_mass"]),
                    prey_mass=float(record["prey_mass"]),
                    count=float(record.get("count", 1.0)),
                )
            )
        except KeyError as exc:
            raise SchemaError(f"record {idx} missing field {exc}") from exc
    return observations


__all__ = ["observations_from_frame", "observations_from_records", "validate_observations"]
