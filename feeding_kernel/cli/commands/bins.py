"""Diagnostic binning CLI command."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer

from feeding_kernel.config.loader import load_fit_config
from feeding_kernel.data.observations import observations_from_frame
from feeding_kernel.exceptions import DataError
from feeding_kernel.kernels.binning import bins_frame
from feeding_kernel.kernels.errors import record_species_failure
from feeding_kernel.kernels.models import WeightedSample
from feeding_kernel.kernels.weighting import weight_frame
from feeding_kernel.utils.logging import get_logger

log = get_logger(__name__, component="cli_bins")


def bins(
    observations: Path = typer.Argument(..., help="CSV with species_id, prey_mass and predator_mass (or l)"),
    species: Optional[List[str]] = typer.Option(None, "--species", help="Species to bin (repeatable); default all"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON fit config"),
    n_bins: Optional[int] = typer.Option(None, "--n-bins", help="Number of equal-width bins (overrides config)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write bins to this CSV"),
) -> None:
    fit_config = load_fit_config(config, overrides={"n_bins": n_bins})
    staged = observations_from_frame(pd.read_csv(observations))
    samples = weight_frame(staged, species=species or None)

    frames = []
    failed = []
    for species_id, entry in samples.items():
        try:
            if not isinstance(entry, WeightedSample):
                raise entry
            frames.append(bins_frame(entry, fit_config.n_bins))
        except DataError as exc:
            record_species_failure(species_id, error=exc, stage="binning")
            failed.append(species_id)
    if not frames:
        raise DataError(f"no species could be binned: {failed}")

    table = pd.concat(frames, ignore_index=True)
    if output is not None:
        table.to_csv(output, index=False)
        log.info("Wrote bin table", extra={"source": str(output), "n_samples": len(table)})
    else:
        typer.echo(table.to_csv(index=False))
