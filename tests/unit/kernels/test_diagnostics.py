"""Unit tests for fit-versus-histogram comparison tables."""

import numpy as np

from feeding_kernel.kernels.diagnostics import compare_fit_to_bins
from feeding_kernel.kernels.models import FitResult, ShapeParameters
from feeding_kernel.kernels.sampling import sample_kernel
from feeding_kernel.kernels.weighting import weight_arrays
from feeding_kernel.schema.fit_config import FitConfig


def test_compare_fit_to_bins_reports_model_densities() -> None:
    params = ShapeParameters(alpha=-0.5, l_left=2.0, u_left=4.0, l_right=8.0, u_right=4.0)
    l = sample_kernel(params, 5_000, seed=3)
    sample = weight_arrays("cod", l=l, prey_mass=np.exp(-l))
    fit = FitResult(species_id="cod", params=params, neg_log_likelihood=0.0, n_samples=len(sample))

    table = compare_fit_to_bins(fit, sample, config=FitConfig(n_bins=20))

    assert len(table) == 20
    assert (table["model_count_density"] > 0).all()
    assert (table["model_biomass_density"] > 0).all()
    # Biomass weighting shifts mass towards small l.
    mean_count = np.average(table["l"], weights=table["model_count_density"])
    mean_biomass = np.average(table["l"], weights=table["model_biomass_density"])
    assert mean_biomass < mean_count


def test_compare_fit_to_bins_normalizes_over_configured_support() -> None:
    params = ShapeParameters(alpha=-0.5, l_left=2.0, u_left=4.0, l_right=8.0, u_right=4.0)
    l = sample_kernel(params, 2_000, seed=7)
    sample = weight_arrays("cod", l=l, prey_mass=np.ones_like(l))
    fit = FitResult(species_id="cod", params=params, neg_log_likelihood=0.0, n_samples=len(sample))

    wide = compare_fit_to_bins(fit, sample)
    narrow = compare_fit_to_bins(fit, sample, config=FitConfig(support_min=0.0, support_max=4.0))

    assert len(wide) == FitConfig().n_bins
    # Truncating the support shrinks the normalizing constant by a common factor.
    ratio = (narrow["model_count_density"] / wide["model_count_density"]).to_numpy()
    assert (ratio > 1.2).all()
    assert np.allclose(ratio, ratio[0])
