"""Unit tests for diagnostic histogram densities."""

import numpy as np
import pytest

from feeding_kernel.exceptions import DataError
from feeding_kernel.kernels.binning import bin_sample, bin_width, bins_frame
from feeding_kernel.kernels.weighting import weight_arrays


def _sample():
    rng = np.random.default_rng(0)
    l = rng.uniform(0.5, 9.0, size=500)
    return weight_arrays("cod", l=l, prey_mass=rng.uniform(0.1, 5.0, size=500))


def test_densities_integrate_to_one() -> None:
    sample = _sample()
    bins = bin_sample(sample)
    width = bin_width(sample)
    assert len(bins) == 30
    assert sum(b.count_density for b in bins) * width == pytest.approx(1.0)
    assert sum(b.biomass_density for b in bins) * width == pytest.approx(1.0)


def test_bins_are_centred_on_observed_range() -> None:
    sample = _sample()
    bins = bin_sample(sample, n_bins=10)
    width = bin_width(sample, n_bins=10)
    assert bins[0].range_start == pytest.approx(sample.l.min() - width / 2)
    assert bins[-1].range_start + width == pytest.approx(sample.l.max() + width / 2)


def test_extreme_values_land_in_edge_bins() -> None:
    sample = weight_arrays("cod", l=[1.0, 2.0, 3.0], prey_mass=[1.0, 1.0, 1.0])
    bins = bin_sample(sample, n_bins=3)
    assert [b.count_density > 0 for b in bins] == [True, True, True]


def test_constant_sample_raises() -> None:
    sample = weight_arrays("cod", l=[2.0, 2.0], prey_mass=[1.0, 1.0])
    with pytest.raises(DataError):
        bin_sample(sample)


def test_bins_frame_columns() -> None:
    frame = bins_frame(_sample(), n_bins=5)
    assert list(frame.columns) == ["species_id", "range_start", "count_density", "biomass_density", "binwidth"]
    assert (frame["species_id"] == "cod").all()
