from __future__ import annotations

import math

import pytest

from speicher_sim.errors import InvalidParameterError
from speicher_sim.simulation.battery import BatterySpec, simulate_battery
from speicher_sim.simulation.lifecycle import calculate_lifecycle, js_round


def test_moderate_cycling_is_calendar_limited() -> None:
    result = calculate_lifecycle(10.0, 250.0)
    assert result.capacity_kwh == 10.0
    assert result.cycles_per_year == 250
    assert result.lifetime_by_cycles_years == 24.0
    assert result.lifetime_by_calendar_years == 15.0
    assert result.effective_lifetime_years == 15.0
    assert result.limiting_factor == "calendar"


def test_heavy_cycling_is_cycle_limited() -> None:
    result = calculate_lifecycle(5.0, 500.0)
    assert result.lifetime_by_cycles_years == 12.0
    assert result.effective_lifetime_years == 12.0
    assert result.limiting_factor == "cycles"


def test_unused_battery_ages_by_calendar_only() -> None:
    result = calculate_lifecycle(5.0, 0.0)
    assert result.cycles_per_year == 0
    assert result.effective_lifetime_years == 15.0
    assert result.limiting_factor == "calendar"


def test_tie_resolves_to_calendar() -> None:
    result = calculate_lifecycle(10.0, 400.0)
    assert result.lifetime_by_cycles_years == result.lifetime_by_calendar_years == 15.0
    assert result.limiting_factor == "calendar"


def test_results_are_rounded_half_up() -> None:
    spec = BatterySpec(cycle_life_80pct=49, calendar_life_years=20.0)
    result = calculate_lifecycle(5.0, 4.0, spec)
    # 49 / 4 = 12.25; half-up gives 12.3 where banker's rounding would give 12.2.
    assert result.lifetime_by_cycles_years == 12.3
    assert result.effective_lifetime_years == 12.3
    assert result.limiting_factor == "cycles"

    assert calculate_lifecycle(5.0, 2.5).cycles_per_year == 3


def test_lifecycle_from_simulation(flat_load, daily_pv) -> None:
    simulation = simulate_battery(flat_load, daily_pv, 5.0)
    result = calculate_lifecycle(5.0, simulation.cycles_per_year)
    assert result.cycles_per_year == 365
    # 6000 / 365 = 16.4 years of cycle life exceeds the 15-year calendar life.
    assert result.lifetime_by_cycles_years == 16.4
    assert result.effective_lifetime_years == 15.0
    assert result.limiting_factor == "calendar"


@pytest.mark.parametrize("capacity, cycles", [(-1.0, 100.0), (5.0, -1.0), (5.0, float("nan"))])
def test_invalid_inputs_are_rejected(capacity: float, cycles: float) -> None:
    with pytest.raises(InvalidParameterError):
        calculate_lifecycle(capacity, cycles)


def test_js_round() -> None:
    assert js_round(2.5) == 3.0
    assert js_round(-1.5) == -1.0
    assert js_round(1.25, 1) == 1.3
    assert js_round(16.438, 1) == 16.4
    assert js_round(math.inf) == math.inf
    assert math.isnan(js_round(math.nan))


def test_more_cycles_never_extend_the_lifetime() -> None:
    lifetimes = [calculate_lifecycle(10.0, cycles).effective_lifetime_years for cycles in range(0, 2001, 50)]
    assert all(later <= earlier for earlier, later in zip(lifetimes, lifetimes[1:]))
    assert lifetimes[0] == 15.0
    assert lifetimes[-1] == 3.0
