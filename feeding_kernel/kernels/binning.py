"""Normalized histogram densities per species, for checking fits by eye."""

from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd

from feeding_kernel.exceptions import DataError
from feeding_kernel.kernels.models import Bin, WeightedSample
from feeding_kernel.schema.fit_config import DEFAULT_N_BINS


def bin_width(sample: WeightedSample, n_bins: int = DEFAULT_N_BINS) -> float:
    span = float(np.max(sample.l) - np.min(sample.l))
    if span <= 0:
        raise DataError("cannot bin a sample whose log mass ratios are all equal", species_id=sample.species_id)
    return span / (n_bins - 1)


def bin_sample(sample: WeightedSample, n_bins: int = DEFAULT_N_BINS) -> List[Bin]:
    """Equal-width bins centred on ``min(l) .. max(l)``.

    Both densities satisfy ``sum(density) * binwidth == 1``.
    """

    if n_bins < 2:
        raise ValueError("n_bins must be >= 2")
    width = bin_width(sample, n_bins)
    start = float(np.min(sample.l)) - width / 2
    edges = start + width * np.arange(n_bins + 1)

    idx = np.clip(np.floor((sample.l - start) / width).astype(int), 0, n_bins - 1)
    counts = np.bincount(idx, weights=sample.weight_by_number, minlength=n_bins)
    biomass = np.bincount(idx, weights=sample.weight_by_biomass, minlength=n_bins)
    counts = counts / (counts.sum() * width)
    biomass = biomass / (biomass.sum() * width)

    return [
        Bin(range_start=float(edges[i]), count_density=float(counts[i]), biomass_density=float(biomass[i]))
        for i in range(n_bins)
    ]


def bins_frame(sample: WeightedSample, n_bins: int = DEFAULT_N_BINS) -> pd.DataFrame:
    bins = bin_sample(sample, n_bins)
    frame = pd.DataFrame(
        {
            "species_id": sample.species_id,
            "range_start": [b.range_start for b in bins],
            "count_density": [b.count_density for b in bins],
            "biomass_density": [b.biomass_density for b in bins],
        }
    )
    frame["binwidth"] = bin_width(sample, n_bins)
    return frame


__all__ = ["bin_sample", "bin_width", "bins_frame"]
