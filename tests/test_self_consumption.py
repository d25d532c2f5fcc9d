from __future__ import annotations

import numpy as np
import pytest

from speicher_sim.errors import DataValidityError, LengthMismatchError
from speicher_sim.simulation.self_consumption import calculate_eigenverbrauch, calculate_self_consumption


def test_self_consumption_is_hourly_minimum(flat_load: np.ndarray, first_day_pv: np.ndarray) -> None:
    assert calculate_self_consumption(flat_load, first_day_pv) == pytest.approx(8.0)


def test_self_consumption_without_pv_is_zero(flat_load: np.ndarray) -> None:
    assert calculate_self_consumption(flat_load, np.zeros(8760)) == 0.0


def test_self_consumption_is_bounded_by_both_totals(demo_weights, demo_pv_rows) -> None:
    from speicher_sim.simulation.load_profiles import scale_load_profile
    from speicher_sim.simulation.pv_series import normalize_pv_series

    load = scale_load_profile(demo_weights, 4000.0)
    pv = normalize_pv_series(demo_pv_rows)
    result = calculate_self_consumption(load, pv)
    assert 0.0 < result <= min(load.sum(), pv.sum())


def test_self_consumption_accepts_plain_lists() -> None:
    load = [0.5] * 8760
    pv = [1.0] * 8760
    assert calculate_self_consumption(load, pv) == pytest.approx(4380.0)


def test_german_alias_points_to_same_function() -> None:
    assert calculate_eigenverbrauch is calculate_self_consumption


def test_length_mismatch_is_reported_for_the_short_series(flat_load: np.ndarray) -> None:
    with pytest.raises(LengthMismatchError) as excinfo:
        calculate_self_consumption(flat_load, np.zeros(8759))
    assert excinfo.value.name == "pv"
    assert excinfo.value.actual == 8759


def test_negative_load_is_rejected(first_day_pv: np.ndarray) -> None:
    load = np.ones(8760)
    load[3] = -0.1
    with pytest.raises(DataValidityError):
        calculate_self_consumption(load, first_day_pv)


def test_nan_pv_is_rejected(flat_load: np.ndarray) -> None:
    pv = np.zeros(8760)
    pv[100] = np.nan
    with pytest.raises(DataValidityError):
        calculate_self_consumption(flat_load, pv)
