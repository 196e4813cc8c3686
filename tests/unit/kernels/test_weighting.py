"""Unit tests for per-species sample weighting."""

import numpy as np
import pandas as pd
import pytest

from feeding_kernel.data.observations import observations_from_frame
from feeding_kernel.exceptions import DataError
from feeding_kernel.kernels.models import Observation, WeightedSample
from feeding_kernel.kernels.weighting import weight_arrays, weight_frame, weight_sample


def test_weights_sum_to_one_and_follow_biomass() -> None:
    observations = [
        Observation("cod", predator_mass=1000.0, prey_mass=10.0),
        Observation("cod", predator_mass=1000.0, prey_mass=30.0),
        Observation("cod", predator_mass=500.0, prey_mass=60.0),
    ]
    sample = weight_sample("cod", observations)
    assert sample.weight_by_number.sum() == pytest.approx(1.0)
    assert sample.weight_by_biomass.sum() == pytest.approx(1.0)
    np.testing.assert_allclose(sample.weight_by_number, [1 / 3] * 3)
    np.testing.assert_allclose(sample.weight_by_biomass, [0.1, 0.3, 0.6])
    np.testing.assert_allclose(sample.l, np.log([100.0, 1000.0 / 30.0, 500.0 / 60.0]))


def test_counts_scale_weights() -> None:
    sample = weight_arrays("hake", l=[1.0, 2.0], prey_mass=[1.0, 1.0], count=[1.0, 3.0])
    np.testing.assert_allclose(sample.weight_by_number, [0.25, 0.75])


def test_sample_arrays_are_read_only() -> None:
    sample = weight_arrays("hake", l=[1.0, 2.0], prey_mass=[1.0, 1.0])
    with pytest.raises(ValueError):
        sample.l[0] = 5.0


def test_empty_group_raises() -> None:
    with pytest.raises(DataError) as excinfo:
        weight_sample("cod", [])
    assert excinfo.value.species_id == "cod"


def test_zero_total_count_raises() -> None:
    with pytest.raises(DataError, match="number"):
        weight_arrays("cod", l=[1.0, 2.0], prey_mass=[1.0, 1.0], count=[0.0, 0.0])


def test_non_positive_mass_ratio_raises() -> None:
    with pytest.raises(DataError, match="log mass ratio <= 0"):
        weight_arrays("cod", l=[1.0, -0.2], prey_mass=[1.0, 1.0])


def test_foreign_observation_raises() -> None:
    with pytest.raises(DataError, match="other species"):
        weight_sample("cod", [Observation("sprat", 10.0, 1.0)])


def test_weight_frame_isolates_missing_species() -> None:
    frame = observations_from_frame(
        pd.DataFrame(
            {
                "species_id": ["cod", "cod", "herring"],
                "predator_mass": [100.0, 200.0, 50.0],
                "prey_mass": [1.0, 2.0, 1.0],
            }
        )
    )
    samples = weight_frame(frame, species=["cod", "whiting"])
    assert isinstance(samples["cod"], WeightedSample)
    assert isinstance(samples["whiting"], DataError)
    assert "herring" not in samples


@pytest.mark.parametrize("prey_mass", [0.0, -1.0, float("nan")])
def test_bad_prey_mass_raises_with_species(prey_mass: float) -> None:
    with pytest.raises(DataError, match="prey_mass") as excinfo:
        weight_arrays("sprat", l=[1.0, 2.0], prey_mass=[1.0, prey_mass])
    assert excinfo.value.species_id == "sprat"


def test_weight_frame_isolates_species_with_bad_masses() -> None:
    frame = observations_from_frame(
        pd.DataFrame(
            {
                "species_id": ["cod", "cod", "sprat", "hake"],
                "predator_mass": [100.0, 200.0, 50.0, "n/a"],
                "prey_mass": [1.0, 2.0, 0.0, 1.0],
            }
        )
    )
    samples = weight_frame(frame)
    assert isinstance(samples["cod"], WeightedSample)
    assert isinstance(samples["sprat"], DataError)
    assert samples["sprat"].species_id == "sprat"
    assert isinstance(samples["hake"], DataError)
