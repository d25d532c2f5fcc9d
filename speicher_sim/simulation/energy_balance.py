"""
Storage scenario evaluation and hourly/monthly energy-balance tables.

Composes self-consumption, battery simulation and lifecycle into one result
per storage size, and derives the tables used by reports and the API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..calendar_utils import build_hourly_calendar
from .battery import (
    DEFAULT_BATTERY_SPEC,
    BatterySimulationResult,
    BatterySpec,
    simulate_battery,
    usable_capacity_kwh,
)
from .lifecycle import LifecycleResult, calculate_lifecycle
from .multi_year import AnnualEnergyResult
from .self_consumption import calculate_self_consumption
from .series import as_hourly_series, ensure_finite_non_negative, require_non_negative


@dataclass(frozen=True)
class StorageScenario:
    """A battery size to compare; ``capacity_kwh == 0`` means no storage."""

    key: str
    capacity_kwh: float
    label: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "capacity_kwh", require_non_negative(self.capacity_kwh, "capacity_kwh"))
        if not self.label:
            label = "No storage" if self.capacity_kwh == 0.0 else f"Storage {self.capacity_kwh:g} kWh"
            object.__setattr__(self, "label", label)

    @property
    def has_battery(self) -> bool:
        return self.capacity_kwh > 0.0

    @classmethod
    def from_capacity(cls, capacity_kwh: float) -> "StorageScenario":
        capacity_kwh = require_non_negative(capacity_kwh, "capacity_kwh")
        key = "none" if capacity_kwh == 0.0 else f"{capacity_kwh:g}kwh"
        return cls(key=key, capacity_kwh=capacity_kwh)


STORAGE_SCENARIOS: Tuple[StorageScenario, ...] = (
    StorageScenario("none", 0.0, "No storage"),
    StorageScenario("5kwh", 5.0, "Storage 5 kWh"),
    StorageScenario("7.5kwh", 7.5, "Storage 7.5 kWh"),
    StorageScenario("10kwh", 10.0, "Storage 10 kWh"),
)


@dataclass(frozen=True)
class StorageScenarioResult:
    """
    Annual energy balance of one storage scenario.

    Attributes:
        scenario: Evaluated storage size.
        usable_capacity_kwh: Nominal capacity times depth of discharge.
        self_consumption_kwh: PV energy used on-site (direct + from battery).
        grid_import_kwh: Load not covered on-site.
        feed_in_kwh: PV energy exported to the grid.
        self_consumption_share: Self-consumption / PV production.
        autarky: Self-consumption / load.
        simulation: Hourly battery result, None without storage.
        lifecycle: Lifetime estimate, None without storage.
    """

    scenario: StorageScenario
    usable_capacity_kwh: float
    self_consumption_kwh: float
    grid_import_kwh: float
    feed_in_kwh: float
    self_consumption_share: float
    autarky: float
    simulation: Optional[BatterySimulationResult] = None
    lifecycle: Optional[LifecycleResult] = None

    @property
    def annual_energy(self) -> AnnualEnergyResult:
        return AnnualEnergyResult(
            self_consumption_kwh=self.self_consumption_kwh,
            grid_import_kwh=self.grid_import_kwh,
            feed_in_kwh=self.feed_in_kwh,
        )

    def to_summary(self) -> dict:
        """Flat JSON-safe view used by reports, persistence and the API."""
        summary = {
            "scenario": self.scenario.key,
            "label": self.scenario.label,
            "capacity_kwh": self.scenario.capacity_kwh,
            "usable_capacity_kwh": self.usable_capacity_kwh,
            "self_consumption_kwh": self.self_consumption_kwh,
            "grid_import_kwh": self.grid_import_kwh,
            "feed_in_kwh": self.feed_in_kwh,
            "self_consumption_share": self.self_consumption_share,
            "autarky": self.autarky,
            "total_charged_kwh": None,
            "total_discharged_kwh": None,
            "cycles_per_year": None,
            "effective_lifetime_years": None,
            "limiting_factor": None,
        }
        if self.simulation is not None:
            summary["total_charged_kwh"] = self.simulation.total_charged_kwh
            summary["total_discharged_kwh"] = self.simulation.total_discharged_kwh
        if self.lifecycle is not None:
            summary["cycles_per_year"] = self.lifecycle.cycles_per_year
            summary["effective_lifetime_years"] = self.lifecycle.effective_lifetime_years
            summary["limiting_factor"] = self.lifecycle.limiting_factor
        return summary


def _share(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0.0 else 0.0


def evaluate_storage_scenario(
    load_kwh: Sequence[float] | np.ndarray,
    pv_kwh: Sequence[float] | np.ndarray,
    scenario: StorageScenario,
    spec: BatterySpec = DEFAULT_BATTERY_SPEC,
    *,
    apply_roundtrip_losses: bool = False,
) -> StorageScenarioResult:
    """
    Evaluate one storage size against the household's load and PV series.

    Without storage only direct self-consumption is counted. With storage
    the usable capacity (nominal x depth of discharge) is simulated hour by
    hour and the resulting cycles feed the lifecycle estimate.

    Grid import is the load not covered on-site. Feed-in is the PV energy
    neither consumed nor drawn into the battery; energy still stored at the
    end of the year (or lost to round-trip losses) is not exported.

    Raises:
        LengthMismatchError: If either series is not 8760 values long.
        DataValidityError: If either series holds negative or non-finite values.
    """
    load = as_hourly_series(load_kwh, "load")
    pv = as_hourly_series(pv_kwh, "pv")
    ensure_finite_non_negative(load, "load")
    ensure_finite_non_negative(pv, "pv")

    total_load = float(load.sum())
    total_pv = float(pv.sum())

    simulation = None
    lifecycle = None
    usable = 0.0
    if scenario.has_battery:
        usable = usable_capacity_kwh(scenario.capacity_kwh, spec)
        simulation = simulate_battery(load, pv, usable, spec, apply_roundtrip_losses=apply_roundtrip_losses)
        lifecycle = calculate_lifecycle(scenario.capacity_kwh, simulation.cycles_per_year, spec)
        self_consumption = simulation.self_consumption_with_storage_kwh
        retained = simulation.total_charged_kwh - simulation.total_discharged_kwh
    else:
        self_consumption = calculate_self_consumption(load, pv)
        retained = 0.0

    return StorageScenarioResult(
        scenario=scenario,
        usable_capacity_kwh=usable,
        self_consumption_kwh=self_consumption,
        grid_import_kwh=max(0.0, total_load - self_consumption),
        feed_in_kwh=max(0.0, total_pv - self_consumption - retained),
        self_consumption_share=_share(self_consumption, total_pv),
        autarky=_share(self_consumption, total_load),
        simulation=simulation,
        lifecycle=lifecycle,
    )


def evaluate_storage_scenarios(
    load_kwh: Sequence[float] | np.ndarray,
    pv_kwh: Sequence[float] | np.ndarray,
    scenarios: Iterable[StorageScenario] = STORAGE_SCENARIOS,
    spec: BatterySpec = DEFAULT_BATTERY_SPEC,
    *,
    apply_roundtrip_losses: bool = False,
) -> Tuple[StorageScenarioResult, ...]:
    """Evaluate every scenario in order; see :func:`evaluate_storage_scenario`."""
    return tuple(
        evaluate_storage_scenario(load_kwh, pv_kwh, scenario, spec, apply_roundtrip_losses=apply_roundtrip_losses)
        for scenario in scenarios
    )


def hourly_energy_balance(
    load_kwh: Sequence[float] | np.ndarray,
    pv_kwh: Sequence[float] | np.ndarray,
    simulation: Optional[BatterySimulationResult] = None,
) -> pd.DataFrame:
    """
    Hour-by-hour balance table of the reference year.

    Columns: ``hour``, ``month``, ``day``, ``hour_of_day``, ``load_kwh``,
    ``pv_kwh``, ``direct_use_kwh``, ``surplus_kwh``, ``deficit_kwh`` and,
    when a simulation is given, ``soc``. ``month`` and ``day`` are 1-based.
    """
    load = as_hourly_series(load_kwh, "load")
    pv = as_hourly_series(pv_kwh, "pv")
    month_in_year, day_in_month, _, hour_in_day = build_hourly_calendar()

    df = pd.DataFrame(
        {
            "hour": np.arange(load.size),
            "month": month_in_year + 1,
            "day": day_in_month + 1,
            "hour_of_day": hour_in_day,
            "load_kwh": load,
            "pv_kwh": pv,
            "direct_use_kwh": np.minimum(pv, load),
            "surplus_kwh": np.maximum(0.0, pv - load),
            "deficit_kwh": np.maximum(0.0, load - pv),
        }
    )
    if simulation is not None:
        df["soc"] = np.asarray(simulation.soc_hourly, dtype=float)
    return df


def monthly_energy_balance(hourly_balance: pd.DataFrame) -> pd.DataFrame:
    """Sum the energy columns of :func:`hourly_energy_balance` per month (12 rows)."""
    columns = ["load_kwh", "pv_kwh", "direct_use_kwh", "surplus_kwh", "deficit_kwh"]
    monthly = hourly_balance.groupby("month")[columns].sum()
    return monthly.reset_index()


def soc_profile_by_month(simulation: BatterySimulationResult) -> pd.DataFrame:
    """
    Mean, minimum and maximum SoC per month and hour of day.

    Returns a long table of 12 x 24 rows with columns ``month_in_year``
    (0-based), ``hour``, ``soc_mean``, ``soc_min`` and ``soc_max``.
    """
    month_in_year, _, _, hour_in_day = build_hourly_calendar()
    df = pd.DataFrame(
        {
            "month_in_year": month_in_year,
            "hour": hour_in_day,
            "soc": np.asarray(simulation.soc_hourly, dtype=float),
        }
    )
    grouped = df.groupby(["month_in_year", "hour"])["soc"]
    profile = pd.DataFrame(
        {
            "soc_mean": grouped.mean(),
            "soc_min": grouped.min(),
            "soc_max": grouped.max(),
        }
    ).reset_index()
    return profile
