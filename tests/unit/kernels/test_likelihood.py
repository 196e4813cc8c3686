"""Unit tests for the weighted negative log-likelihood."""

import math

import numpy as np
import pytest

from feeding_kernel.exceptions import ComputationError
from feeding_kernel.kernels.likelihood import make_objective, negative_log_likelihood
from feeding_kernel.kernels.models import ShapeParameters
from feeding_kernel.kernels.shape import normalize
from feeding_kernel.kernels.weighting import weight_arrays

PARAMS = ShapeParameters(alpha=-0.5, l_left=2.0, u_left=5.0, l_right=8.0, u_right=5.0)


def _sample(seed: int = 3, n: int = 200):
    rng = np.random.default_rng(seed)
    l = rng.uniform(1.0, 9.0, size=n)
    count = rng.integers(1, 5, size=n).astype(float)
    return weight_arrays("cod", l=l, prey_mass=np.ones(n), count=count)


def test_matches_direct_sum() -> None:
    sample = _sample()
    density = normalize(PARAMS)
    expected = -sum(w * math.log(float(density(x))) for x, w in zip(sample.l, sample.weight_by_number))
    assert negative_log_likelihood(sample, PARAMS) == pytest.approx(expected, rel=1e-12)


def test_invariant_under_reordering() -> None:
    sample = _sample()
    order = np.random.default_rng(11).permutation(len(sample))
    shuffled = weight_arrays(
        "cod",
        l=sample.l[order],
        prey_mass=np.ones(len(sample)),
        count=sample.weight_by_number[order],
    )
    assert negative_log_likelihood(shuffled, PARAMS) == pytest.approx(negative_log_likelihood(sample, PARAMS), rel=1e-12)


def test_objective_takes_parameter_vector() -> None:
    sample = _sample()
    objective = make_objective(sample)
    assert objective(PARAMS.to_vector()) == pytest.approx(negative_log_likelihood(sample, PARAMS))


def test_computation_error_propagates() -> None:
    sample = weight_arrays("cod", l=[1.0, 25.0], prey_mass=[1.0, 1.0])
    bad = ShapeParameters(alpha=-50.0, l_left=1.0, u_left=5.0, l_right=2.0, u_right=5.0)
    with pytest.raises(ComputationError) as excinfo:
        negative_log_likelihood(sample, bad)
    assert excinfo.value.params == tuple(bad)
