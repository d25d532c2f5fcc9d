"""
Synthetic default inputs for demos and tests.

Real calculations use the published BDEW H0 table and PVGIS hourly output.
The builders here produce inputs with the same structure and a plausible
shape (German household, south-facing roof) so the whole pipeline can run
without external data.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import List

import numpy as np

from .calendar_utils import HOURS_PER_DAY, build_hourly_calendar
from .simulation.load_profiles import BDEW_REFERENCE_TOTAL_KWH
from .simulation.pv_series import RawRow

# Typical monthly yield of a south-facing system in Germany (kWh per kWp), ~910 kWh/kWp/a.
DEMO_MONTHLY_PV_KWH_PER_KWP = [20.0, 35.0, 70.0, 105.0, 125.0, 130.0, 130.0, 115.0, 85.0, 55.0, 25.0, 15.0]

# Relative household demand per hour of day: night base, morning and evening peaks.
DEMO_DAILY_LOAD_SHAPE = np.array(
    [
        0.55, 0.45, 0.40, 0.38, 0.38, 0.42, 0.65, 0.95,
        1.00, 0.90, 0.85, 0.95, 1.10, 1.00, 0.85, 0.80,
        0.90, 1.15, 1.45, 1.60, 1.50, 1.30, 1.00, 0.75,
    ]
)


def _daylight_shape(month_in_year: int) -> np.ndarray:
    """Gaussian production shape around solar noon, wider in summer."""
    hours = np.arange(HOURS_PER_DAY) + 0.5
    width = 2.2 + 1.2 * np.sin(np.pi * month_in_year / 11.0)
    shape = np.exp(-0.5 * ((hours - 13.0) / width) ** 2)
    shape[hours < 13.0 - 2.6 * width] = 0.0
    shape[hours > 13.0 + 2.6 * width] = 0.0
    return shape / shape.sum()


def build_demo_reference_weights() -> np.ndarray:
    """
    8760 load-shape weights normalized to the BDEW reference total (1 GWh).

    Winter demand is about 25 % above summer demand.
    """
    month_in_year, _, day_of_year, hour_in_day = build_hourly_calendar()
    seasonal = 1.0 + 0.125 * np.cos(2.0 * np.pi * (day_of_year - 15) / 365.0)
    weights = DEMO_DAILY_LOAD_SHAPE[hour_in_day] * seasonal
    return weights * (BDEW_REFERENCE_TOTAL_KWH / weights.sum())


def build_demo_pv_rows(system_size_kwp: float = 8.0, year: int = 2018) -> List[RawRow]:
    """
    Hourly PV rows in PVGIS ``seriescalc`` layout for one calendar year.

    Timestamps use the PVGIS format (``YYYYMMDD:HH10``); leap years yield
    8784 rows including February 29, like the real service.

    Args:
        system_size_kwp: Installed peak power.
        year: Calendar year of the timestamps.
    """
    rows: List[RawRow] = []
    day = date(year, 1, 1)
    while day.year == year:
        month = day.month - 1
        days_in_month = calendar.monthrange(year, day.month)[1]
        daily_kwh = system_size_kwp * DEMO_MONTHLY_PV_KWH_PER_KWP[month] / days_in_month
        hourly_kwh = daily_kwh * _daylight_shape(month)
        for hour, energy in enumerate(hourly_kwh):
            rows.append(RawRow(timestamp=f"{day:%Y%m%d}:{hour:02d}10", power_watts=float(energy) * 1000.0))
        day += timedelta(days=1)
    return rows
