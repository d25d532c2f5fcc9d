"""
Annual self-consumption without storage.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .series import as_hourly_series, ensure_finite_non_negative


def calculate_self_consumption(
    load_kwh: Sequence[float] | np.ndarray,
    pv_kwh: Sequence[float] | np.ndarray,
) -> float:
    """
    Sum over 8760 hours of ``min(pv[h], load[h])``.

    The accumulation runs index-ascending in double precision, matching
    the per-hour bookkeeping of :func:`simulate_battery`.

    Args:
        load_kwh: Hourly household consumption (kWh), 8760 values.
        pv_kwh: Hourly PV production (kWh), 8760 values.

    Returns:
        Directly self-consumed PV energy over the year (kWh).

    Raises:
        LengthMismatchError: If either series is not 8760 values long.
        DataValidityError: If either series holds negative or non-finite values.
    """
    load = as_hourly_series(load_kwh, "load")
    pv = as_hourly_series(pv_kwh, "pv")
    ensure_finite_non_negative(load, "load")
    ensure_finite_non_negative(pv, "pv")

    total = 0.0
    for direct in np.minimum(pv, load).tolist():
        total += direct
    return total


calculate_eigenverbrauch = calculate_self_consumption
