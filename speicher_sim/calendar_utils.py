from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Tuple

import numpy as np

MONTH_LENGTHS: List[int] = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
"""Number of days in each month (January through December) of the reference year."""

HOURS_PER_DAY = 24
HOURS_PER_YEAR = 8760
"""Length of every hourly series handled by the engine (365 * 24)."""

HOURS_PER_LEAP_YEAR = 8784
"""Raw row count delivered by generation sources for a leap year (366 * 24)."""

_TIMESTAMP_FORMATS = ("%Y%m%d:%H%M", "%Y%m%d%H%M", "%Y-%m-%d %H:%M")


def build_hourly_calendar() -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Returns arrays describing the non-leap reference year at hourly resolution.

    Outputs (each of length 8760):
      - month_in_year_for_hour: month index 0..11
      - day_in_month_for_hour: day number within the month (0-based)
      - day_of_year_for_hour: day index 0..364
      - hour_in_day_for_hour: hour of day 0..23
    """
    month_in_year = []
    day_in_month = []
    for m, days in enumerate(MONTH_LENGTHS):
        for day in range(days):
            month_in_year.append(m)
            day_in_month.append(day)

    month_for_day = np.array(month_in_year, dtype=int)
    day_for_day = np.array(day_in_month, dtype=int)
    n_days = month_for_day.size

    return (
        np.repeat(month_for_day, HOURS_PER_DAY),
        np.repeat(day_for_day, HOURS_PER_DAY),
        np.repeat(np.arange(n_days, dtype=int), HOURS_PER_DAY),
        np.tile(np.arange(HOURS_PER_DAY, dtype=int), n_days),
    )


def parse_timestamp(value: str) -> datetime:
    """
    Parse a generation-source timestamp into a naive UTC datetime.

    Accepts the PVGIS ``seriescalc`` format (``20180101:0010``) as well as
    ISO-8601 strings with or without offset (a trailing ``Z`` means UTC).
    Aware values are converted to UTC so that mixed inputs stay comparable.

    Raises:
        ValueError: If the string matches none of the supported formats.
    """
    text = value.strip()
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def is_leap_day(moment: datetime) -> bool:
    """True when ``moment`` falls on February 29."""
    return moment.month == 2 and moment.day == 29
