"""Unit tests for observation table staging."""

import numpy as np
import pandas as pd
import pytest

from feeding_kernel.data.observations import observations_from_frame, observations_from_records
from feeding_kernel.exceptions import SchemaError


def test_computes_log_mass_ratio_and_default_count() -> None:
    frame = pd.DataFrame({"species_id": [1, 1], "predator_mass": [100.0, 50.0], "prey_mass": [1.0, 5.0]})
    staged = observations_from_frame(frame)
    np.testing.assert_allclose(staged["l"], np.log([100.0, 10.0]))
    assert (staged["count"] == 1.0).all()
    assert staged["species_id"].tolist() == ["1", "1"]
    assert "l" not in frame.columns


def test_precomputed_l_is_kept() -> None:
    frame = pd.DataFrame({"species_id": ["cod"], "l": [4.2], "prey_mass": [2.0]})
    assert observations_from_frame(frame)["l"].tolist() == [4.2]


def test_missing_columns_raise_schema_error() -> None:
    with pytest.raises(SchemaError, match="prey_mass"):
        observations_from_frame(pd.DataFrame({"species_id": ["cod"], "predator_mass": [1.0]}))
    with pytest.raises(SchemaError, match="one of"):
        observations_from_frame(pd.DataFrame({"species_id": ["cod"], "prey_mass": [1.0]}))


def test_bad_mass_cells_are_left_for_per_species_checks() -> None:
    frame = pd.DataFrame(
        {
            "species_id": ["cod", "sprat", "hake"],
            "predator_mass": [10.0, 10.0, "heavy"],
            "prey_mass": [1.0, 0.0, 1.0],
        }
    )
    staged = observations_from_frame(frame)
    assert staged.loc[0, "l"] == pytest.approx(np.log(10.0))
    assert np.isinf(staged.loc[1, "l"])
    assert np.isnan(staged.loc[2, "predator_mass"])
    assert np.isnan(staged.loc[2, "l"])


def test_records_to_observations() -> None:
    observations = observations_from_records(
        [{"species_id": "cod", "predator_mass": 10.0, "prey_mass": 1.0, "count": 2}]
    )
    assert observations[0].l == pytest.approx(np.log(10.0))
    assert observations[0].count == 2.0
    with pytest.raises(SchemaError, match="record 0"):
        observations_from_records([{"species_id": "cod", "prey_mass": 1.0}])
