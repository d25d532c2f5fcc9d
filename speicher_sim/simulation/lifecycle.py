"""
Battery lifetime from cycling behaviour and calendar ageing.

Dual-limit model: a battery reaches end of life either when its rated
full-equivalent cycles are used up or when its calendar life expires,
whichever comes first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from .battery import DEFAULT_BATTERY_SPEC, BatterySpec
from .series import require_non_negative

LimitingFactor = Literal["cycles", "calendar"]


def js_round(value: float, digits: int = 0) -> float:
    """
    Round half up (towards +inf), like JavaScript's ``Math.round``.

    Python's :func:`round` uses banker's rounding; existing reports were
    produced with half-up rounding, so results must match it exactly.
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


@dataclass(frozen=True)
class LifecycleResult:
    """
    Effective lifetime of one storage scenario.

    Attributes:
        capacity_kwh: Capacity the result refers to (as passed in).
        cycles_per_year: Full-equivalent cycles per year, rounded to integer.
        lifetime_by_cycles_years: Cycle life / cycles per year (1 decimal).
        lifetime_by_calendar_years: Calendar life from the battery specs.
        effective_lifetime_years: Minimum of both limits (1 decimal).
        limiting_factor: ``"cycles"`` if the cycle limit is strictly shorter,
            otherwise ``"calendar"``.
    """

    capacity_kwh: float
    cycles_per_year: int
    lifetime_by_cycles_years: float
    lifetime_by_calendar_years: float
    effective_lifetime_years: float
    limiting_factor: LimitingFactor


def calculate_lifecycle(
    capacity_kwh: float,
    cycles_per_year: float,
    spec: BatterySpec = DEFAULT_BATTERY_SPEC,
) -> LifecycleResult:
    """
    Derive the effective battery lifetime.

    ``lifetime_by_cycles = cycle_life_80pct / cycles_per_year``; a battery
    that is never cycled is limited by calendar ageing alone. Ties resolve
    to ``"calendar"``. The comparison uses unrounded values; only the
    returned numbers are rounded.

    Args:
        capacity_kwh: Battery capacity the cycles refer to (kWh, >= 0).
        cycles_per_year: Full-equivalent cycles per year (>= 0), usually
            ``BatterySimulationResult.cycles_per_year``.
        spec: Battery model providing cycle and calendar life.

    Returns:
        LifecycleResult.

    Raises:
        InvalidParameterError: For negative or non-finite inputs.
    """
    capacity_kwh = require_non_negative(capacity_kwh, "capacity_kwh")
    cycles_per_year = require_non_negative(cycles_per_year, "cycles_per_year")

    lifetime_by_calendar = float(spec.calendar_life_years)
    if cycles_per_year > 0.0:
        lifetime_by_cycles = spec.cycle_life_80pct / cycles_per_year
    else:
        lifetime_by_cycles = lifetime_by_calendar

    effective = min(lifetime_by_calendar, lifetime_by_cycles)
    limiting: LimitingFactor = "cycles" if lifetime_by_cycles < lifetime_by_calendar else "calendar"

    return LifecycleResult(
        capacity_kwh=capacity_kwh,
        cycles_per_year=int(js_round(cycles_per_year)),
        lifetime_by_cycles_years=js_round(lifetime_by_cycles, 1),
        lifetime_by_calendar_years=lifetime_by_calendar,
        effective_lifetime_years=js_round(effective, 1),
        limiting_factor=limiting,
    )
