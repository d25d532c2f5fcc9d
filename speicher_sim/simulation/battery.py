"""
Battery specifications and the hourly storage simulation.

Contains the immutable :class:`BatterySpec` with its closed set of
chemistry presets, and :func:`simulate_battery`, which time-shifts PV
surplus into later load deficits subject to the usable capacity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from ..errors import InvalidParameterError
from .series import (
    as_hourly_series,
    ensure_finite_non_negative,
    require_fraction,
    require_non_negative,
    require_positive,
)


class BatteryChemistry(str, Enum):
    """Cell chemistries with a calculation preset."""

    LFP = "LiFePO4"
    NMC = "NMC"


@dataclass(frozen=True)
class BatterySpec:
    """
    Manufacturer-independent battery model used by the simulator.

    The spec is constructed once and read-only afterwards; a simulation
    never mutates it. Values are a calculation baseline, not a warranty.

    Attributes:
        manufacturer: Display name of the model (e.g. ``"Generic LFP"``).
        chemistry: Cell chemistry, one of :class:`BatteryChemistry`.
            Plain strings (``"LiFePO4"``, ``"lfp"``) are coerced.
        roundtrip_efficiency: Energy recovered on discharge relative to the
            energy put in on charge, within (0, 1].
        cycle_life_80pct: Full-equivalent cycles until 80 % of the initial
            capacity remains (positive integer).
        calendar_life_years: Upper bound of the lifetime from calendar
            ageing alone (years, > 0).
        depth_of_discharge: Usable fraction of the nameplate capacity,
            within (0, 1].

    Example:
        ```python
        spec = BatterySpec(cycle_life_80pct=8000, calendar_life_years=20)
        usable = usable_capacity_kwh(10.0, spec)  # 9.0 kWh with DoD 0.9
        ```
    """

    manufacturer: str = "Generic LFP"
    chemistry: BatteryChemistry = BatteryChemistry.LFP
    roundtrip_efficiency: float = 0.94
    cycle_life_80pct: int = 6000
    calendar_life_years: float = 15.0
    depth_of_discharge: float = 0.9

    def __post_init__(self) -> None:
        object.__setattr__(self, "chemistry", _coerce_chemistry(self.chemistry))
        require_fraction(self.roundtrip_efficiency, "roundtrip_efficiency")
        require_fraction(self.depth_of_discharge, "depth_of_discharge")
        require_positive(self.calendar_life_years, "calendar_life_years")
        cycles = self.cycle_life_80pct
        if isinstance(cycles, float) and cycles.is_integer():
            cycles = int(cycles)
        if isinstance(cycles, bool) or not isinstance(cycles, (int, np.integer)) or cycles <= 0:
            raise InvalidParameterError("cycle_life_80pct", f"must be a positive integer, got {cycles!r}")
        object.__setattr__(self, "cycle_life_80pct", int(cycles))


def _coerce_chemistry(value: BatteryChemistry | str) -> BatteryChemistry:
    if isinstance(value, BatteryChemistry):
        return value
    try:
        return BatteryChemistry(value)
    except ValueError:
        pass
    try:
        return BatteryChemistry[str(value).upper()]
    except KeyError:
        raise InvalidParameterError("chemistry", f"unsupported battery chemistry {value!r}") from None


DEFAULT_BATTERY_SPEC = BatterySpec()
"""Generic LiFePO4 reference model (conservative 2024-2025 market data)."""

BATTERY_PRESETS: Mapping[BatteryChemistry, BatterySpec] = MappingProxyType(
    {
        BatteryChemistry.LFP: DEFAULT_BATTERY_SPEC,
        BatteryChemistry.NMC: BatterySpec(
            manufacturer="Generic NMC",
            chemistry=BatteryChemistry.NMC,
            roundtrip_efficiency=0.95,
            cycle_life_80pct=4000,
            calendar_life_years=12.0,
            depth_of_discharge=0.9,
        ),
    }
)


def get_battery_spec(chemistry: BatteryChemistry | str = BatteryChemistry.LFP) -> BatterySpec:
    """
    Return the preset for ``chemistry``.

    Raises:
        InvalidParameterError: If the chemistry has no preset.
    """
    return BATTERY_PRESETS[_coerce_chemistry(chemistry)]


@dataclass(frozen=True, eq=False)
class BatterySimulationResult:
    """
    Outcome of one hourly battery simulation over the reference year.

    Attributes:
        soc_hourly: State of charge after each hour as a fraction of the
            usable capacity (read-only array of 8760 values in [0, 1]).
        total_charged_kwh: PV energy drawn into the battery over the year.
        total_discharged_kwh: Energy delivered from the battery to the load.
        cycles_per_year: Full-equivalent cycles (discharged / usable capacity).
        self_consumption_with_storage_kwh: Direct use plus battery discharge.
    """

    soc_hourly: np.ndarray = field(repr=False)
    total_charged_kwh: float
    total_discharged_kwh: float
    cycles_per_year: float
    self_consumption_with_storage_kwh: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BatterySimulationResult):
            return NotImplemented
        return (
            np.array_equal(self.soc_hourly, other.soc_hourly)
            and self.total_charged_kwh == other.total_charged_kwh
            and self.total_discharged_kwh == other.total_discharged_kwh
            and self.cycles_per_year == other.cycles_per_year
            and self.self_consumption_with_storage_kwh == other.self_consumption_with_storage_kwh
        )

    __hash__ = None  # type: ignore[assignment]


def simulate_battery(
    load_kwh: Sequence[float] | np.ndarray,
    pv_kwh: Sequence[float] | np.ndarray,
    usable_capacity_kwh: float,
    spec: BatterySpec = DEFAULT_BATTERY_SPEC,
    *,
    apply_roundtrip_losses: bool = False,
) -> BatterySimulationResult:
    """
    Run the hour-by-hour charge/discharge simulation over 8760 hours.

    For each hour, in ascending order and without look-ahead:
        1. ``direct = min(pv, load)``
        2. ``surplus = max(0, pv - load)``, ``deficit = max(0, load - pv)``
        3. Surplus charges up to the remaining headroom ``(1 - soc) * C``.
        4. Deficit discharges up to the stored energy ``soc * C``.
        5. Self-consumption accumulates ``direct + discharge``.
        6. ``soc`` is clamped to [0, 1] and recorded.

    The battery starts empty (``soc = 0``). By default the state of charge
    is a lossless energy count. With ``apply_roundtrip_losses`` the battery's
    round-trip efficiency is applied once, at the charge step: only
    ``surplus * eta`` can be stored and ``total_charged_kwh`` counts the PV
    energy drawn (``stored / eta``).

    Args:
        load_kwh: Hourly consumption (kWh), 8760 values.
        pv_kwh: Hourly PV production (kWh), 8760 values.
        usable_capacity_kwh: Usable storage capacity ``C`` in kWh (> 0).
        spec: Battery model; only its efficiency is read, and only when
            ``apply_roundtrip_losses`` is set.
        apply_roundtrip_losses: Apply the round-trip efficiency at charge.

    Returns:
        BatterySimulationResult with the SoC trajectory and annual totals.

    Raises:
        LengthMismatchError: If either series is not 8760 values long.
        InvalidParameterError: If ``usable_capacity_kwh`` is not positive.
        DataValidityError: If either series holds negative or non-finite values.

    Example:
        ```python
        load = np.full(8760, 1.0)
        pv = np.zeros(8760)
        pv[8:16] = 2.0  # first day only
        result = simulate_battery(load, pv, usable_capacity_kwh=5.0)
        result.self_consumption_with_storage_kwh  # 8 direct + 5 from storage
        ```
    """
    load = as_hourly_series(load_kwh, "load")
    pv = as_hourly_series(pv_kwh, "pv")
    capacity = require_positive(usable_capacity_kwh, "usable_capacity_kwh")
    ensure_finite_non_negative(load, "load")
    ensure_finite_non_negative(pv, "pv")

    eta = spec.roundtrip_efficiency if apply_roundtrip_losses else 1.0

    soc_hourly = np.empty(load.size, dtype=float)
    soc = 0.0
    total_charged = 0.0
    total_discharged = 0.0
    self_consumption = 0.0

    for h, (p, l) in enumerate(zip(pv.tolist(), load.tolist())):
        direct = min(p, l)
        surplus = max(0.0, p - l)
        deficit = max(0.0, l - p)

        if surplus > 0.0:
            headroom = (1.0 - soc) * capacity
            stored = min(surplus * eta, headroom)
            soc += stored / capacity
            total_charged += stored / eta

        from_battery = 0.0
        if deficit > 0.0 and soc > 0.0:
            from_battery = min(deficit, soc * capacity)
            soc -= from_battery / capacity
            total_discharged += from_battery

        self_consumption += direct + from_battery
        soc = min(1.0, max(0.0, soc))
        soc_hourly[h] = soc

    soc_hourly.setflags(write=False)
    return BatterySimulationResult(
        soc_hourly=soc_hourly,
        total_charged_kwh=total_charged,
        total_discharged_kwh=total_discharged,
        cycles_per_year=calculate_cycles_per_year(total_discharged, capacity),
        self_consumption_with_storage_kwh=self_consumption,
    )


def calculate_cycles_per_year(total_discharged_kwh: float, usable_capacity_kwh: float) -> float:
    """
    Full-equivalent cycles per year from the discharged energy.

    Returns 0 for a non-positive capacity (no battery, no cycles).
    """
    if usable_capacity_kwh <= 0.0:
        return 0.0
    return total_discharged_kwh / usable_capacity_kwh


def usable_capacity_kwh(nominal_capacity_kwh: float, spec: BatterySpec = DEFAULT_BATTERY_SPEC) -> float:
    """Usable capacity of a battery: nameplate capacity times depth of discharge."""
    nominal = require_non_negative(nominal_capacity_kwh, "nominal_capacity_kwh")
    return nominal * spec.depth_of_discharge


def estimate_annual_discharged_energy(
    self_consumption_increase_kwh: float,
    roundtrip_efficiency: float = DEFAULT_BATTERY_SPEC.roundtrip_efficiency,
) -> float:
    """
    Rough discharged-energy estimate from the self-consumption gain of a battery.

    Used when no hourly simulation is available: the battery has to deliver
    the gain, and losses mean more energy cycles through it than arrives.
    """
    increase = require_non_negative(self_consumption_increase_kwh, "self_consumption_increase_kwh")
    eta = require_fraction(roundtrip_efficiency, "roundtrip_efficiency")
    return increase / eta
