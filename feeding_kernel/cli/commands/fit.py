"""Fit CLI command wiring."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from feeding_kernel.config.loader import load_fit_config
from feeding_kernel.exceptions import DataError
from feeding_kernel.kernels.fitter import FitBatchResult, fit_observations
from feeding_kernel.utils.logging import get_logger

console = Console(stderr=True)
log = get_logger(__name__, component="cli_fit")


def _render_summary(batch: FitBatchResult, table: pd.DataFrame) -> None:
    summary = Table(title="Feeding kernel fits")
    summary.add_column("species")
    summary.add_column("status")
    value_columns = [c for c in table.columns if c not in {"status", "neg_log_likelihood", "n_samples", "error_type", "error"}]
    for column in value_columns:
        summary.add_column(column, justify="right")
    summary.add_column("error")
    for species_id, row in table.iterrows():
        values = ["" if pd.isna(row[c]) else f"{row[c]:.4f}" for c in value_columns]
        summary.add_row(str(species_id), str(row["status"]), *values, str(row["error"] or ""))
    console.print(summary)
    if batch.failures:
        console.print(f"[yellow]{len(batch.failures)} species failed[/yellow]")


def fit(
    observations: Path = typer.Argument(..., help="CSV with species_id, prey_mass and predator_mass (or l)"),
    lambda_: Optional[float] = typer.Option(
        None, "--lambda", help="Spectral exponent; when set, output kernel coefficients instead of shape parameters"
    ),
    species: Optional[List[str]] = typer.Option(None, "--species", help="Species to fit (repeatable); default all"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON fit config"),
    optimizer: Optional[str] = typer.Option(None, "--optimizer", help="bfgs or nelder_mead"),
    max_workers: Optional[int] = typer.Option(None, "--max-workers", help="Fit species in parallel processes"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the species table to this CSV"),
    strict: bool = typer.Option(False, "--strict/--no-strict", help="Exit non-zero if any species failed"),
) -> None:
    fit_config = load_fit_config(config, overrides={"optimizer": optimizer, "max_workers": max_workers})
    frame = pd.read_csv(observations)
    batch = fit_observations(frame, species=species or None, config=fit_config)
    table = batch.to_frame(lambda_)

    if output is not None:
        table.to_csv(output)
        log.info("Wrote kernel table", extra={"source": str(output), "n_samples": len(table)})
    else:
        typer.echo(table.to_csv())
    _render_summary(batch, table)

    if strict and batch.failures:
        raise DataError(f"{len(batch.failures)} species failed: {sorted(batch.failures)}")
