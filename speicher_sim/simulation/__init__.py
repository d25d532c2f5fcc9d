"""
Core energy-balance models.

This package collects the deterministic building blocks of the household
storage calculation:

* Load profile scaling from a standard reference shape (BDEW H0) and PV
  series normalization from raw generation rows.
* Self-consumption without storage and the hourly battery simulation.
* Battery lifetime (cycles vs. calendar ageing) and the multi-year contract.
* Storage scenario comparison with hourly/monthly balance tables.

Every function is pure: inputs are copied, results are immutable values and
nothing is cached between calls.
"""

from __future__ import annotations

from .battery import (
    BATTERY_PRESETS,
    DEFAULT_BATTERY_SPEC,
    BatteryChemistry,
    BatterySimulationResult,
    BatterySpec,
    calculate_cycles_per_year,
    estimate_annual_discharged_energy,
    get_battery_spec,
    simulate_battery,
    usable_capacity_kwh,
)
from .energy_balance import (
    STORAGE_SCENARIOS,
    StorageScenario,
    StorageScenarioResult,
    evaluate_storage_scenario,
    evaluate_storage_scenarios,
    hourly_energy_balance,
    monthly_energy_balance,
    soc_profile_by_month,
)
from .lifecycle import LifecycleResult, calculate_lifecycle, js_round
from .load_profiles import BDEW_REFERENCE_TOTAL_KWH, StandardLoadProfile, scale_load_profile
from .multi_year import (
    DEFAULT_ECONOMIC_PARAMETERS,
    PRICE_GROWTH_SCENARIOS,
    AnnualEnergyResult,
    ComparisonMode,
    EconomicParameters,
    MultiYearAggregationResult,
    MultiYearScenario,
    PriceGrowthScenario,
    aggregate_multi_year,
    horizon_as_whole_years,
    resolve_horizon_years,
)
from .pv_series import PVGISQuery, RawRow, normalize_pv_series, rows_from_pvgis_payload
from .self_consumption import calculate_eigenverbrauch, calculate_self_consumption

__all__ = [
    # Input series
    "BDEW_REFERENCE_TOTAL_KWH",
    "StandardLoadProfile",
    "scale_load_profile",
    "RawRow",
    "PVGISQuery",
    "normalize_pv_series",
    "rows_from_pvgis_payload",
    # Self-consumption + battery
    "calculate_self_consumption",
    "calculate_eigenverbrauch",
    "BatteryChemistry",
    "BatterySpec",
    "BatterySimulationResult",
    "BATTERY_PRESETS",
    "DEFAULT_BATTERY_SPEC",
    "get_battery_spec",
    "simulate_battery",
    "calculate_cycles_per_year",
    "usable_capacity_kwh",
    "estimate_annual_discharged_energy",
    # Lifecycle
    "LifecycleResult",
    "calculate_lifecycle",
    "js_round",
    # Multi-year
    "AnnualEnergyResult",
    "MultiYearScenario",
    "MultiYearAggregationResult",
    "ComparisonMode",
    "EconomicParameters",
    "DEFAULT_ECONOMIC_PARAMETERS",
    "PriceGrowthScenario",
    "PRICE_GROWTH_SCENARIOS",
    "aggregate_multi_year",
    "horizon_as_whole_years",
    "resolve_horizon_years",
    # Scenario comparison
    "StorageScenario",
    "StorageScenarioResult",
    "STORAGE_SCENARIOS",
    "evaluate_storage_scenario",
    "evaluate_storage_scenarios",
    "hourly_energy_balance",
    "monthly_energy_balance",
    "soc_profile_by_month",
]
