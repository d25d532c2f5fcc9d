from __future__ import annotations

import numpy as np
import pytest

from speicher_sim.errors import DataValidityError, InvalidParameterError, LengthMismatchError
from speicher_sim.simulation.load_profiles import (
    BDEW_REFERENCE_TOTAL_KWH,
    StandardLoadProfile,
    scale_load_profile,
)


def test_scaled_profile_sums_to_annual_consumption(demo_weights: np.ndarray) -> None:
    load = scale_load_profile(demo_weights, annual_kwh=4000.0)
    assert load.shape == (8760,)
    assert load.sum() == pytest.approx(4000.0)
    # Shape is preserved: every hour is scaled by the same factor.
    np.testing.assert_allclose(load / demo_weights, 4000.0 / BDEW_REFERENCE_TOTAL_KWH)


def test_scale_uses_custom_reference_total() -> None:
    weights = np.full(8760, 2.0)
    load = scale_load_profile(weights, annual_kwh=1752.0, reference_total_kwh=17520.0)
    np.testing.assert_allclose(load, 0.2)


def test_scale_does_not_mutate_input_and_is_repeatable(demo_weights: np.ndarray) -> None:
    original = demo_weights.copy()
    first = scale_load_profile(demo_weights, 3500.0)
    second = scale_load_profile(demo_weights, 3500.0)
    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(demo_weights, original)
    assert first is not demo_weights


@pytest.mark.parametrize("length", [0, 8759, 8761, 8784])
def test_scale_rejects_wrong_length(length: int) -> None:
    with pytest.raises(LengthMismatchError) as excinfo:
        scale_load_profile(np.ones(length), 4000.0)
    assert excinfo.value.expected == 8760
    assert excinfo.value.actual == length
    assert excinfo.value.kind == "length_mismatch"


def test_scale_rejects_column_vector_with_shape_in_message() -> None:
    with pytest.raises(LengthMismatchError) as excinfo:
        scale_load_profile(np.ones((8760, 1)), 4000.0)
    assert "shape (8760, 1)" in str(excinfo.value)
    assert "expected a one-dimensional series" in str(excinfo.value)


@pytest.mark.parametrize("annual_kwh", [0.0, -100.0, float("nan"), float("inf")])
def test_scale_rejects_invalid_annual_consumption(demo_weights: np.ndarray, annual_kwh: float) -> None:
    with pytest.raises(InvalidParameterError):
        scale_load_profile(demo_weights, annual_kwh)


def test_scale_rejects_non_positive_reference_total(demo_weights: np.ndarray) -> None:
    with pytest.raises(InvalidParameterError):
        scale_load_profile(demo_weights, 4000.0, reference_total_kwh=0.0)


def test_scale_rejects_negative_weights() -> None:
    weights = np.ones(8760)
    weights[100] = -1.0
    with pytest.raises(DataValidityError):
        scale_load_profile(weights, 4000.0)


def test_standard_load_profile_validates_and_freezes(demo_weights: np.ndarray) -> None:
    profile = StandardLoadProfile(weights=demo_weights)
    assert profile.key == "H0"
    assert profile.weight_sum == pytest.approx(BDEW_REFERENCE_TOTAL_KWH)
    assert profile.scaled(2500.0).sum() == pytest.approx(2500.0)
    with pytest.raises(ValueError):
        profile.weights[0] = 1.0


def test_standard_load_profile_rejects_unknown_key(demo_weights: np.ndarray) -> None:
    with pytest.raises(InvalidParameterError):
        StandardLoadProfile(weights=demo_weights, key="G0")
