"""
Validation helpers shared by the hourly simulation modules.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ..calendar_utils import HOURS_PER_YEAR
from ..errors import DataValidityError, InvalidParameterError, LengthMismatchError


def as_hourly_series(values: Sequence[float] | np.ndarray, name: str) -> np.ndarray:
    """
    Convert ``values`` into a float64 copy and enforce the 8760-hour length.

    Args:
        values: Any one-dimensional sequence of numbers.
        name: Series name used in the error message.

    Returns:
        New one-dimensional ``np.ndarray`` of dtype float64.

    Raises:
        LengthMismatchError: If the series is not exactly 8760 values long
            (or is not one-dimensional).
    """
    series = np.array(values, dtype=float, copy=True)
    if series.ndim != 1:
        raise LengthMismatchError(
            name,
            HOURS_PER_YEAR,
            int(series.size),
            detail=f"expected a one-dimensional series, got shape {series.shape}",
        )
    if series.size != HOURS_PER_YEAR:
        raise LengthMismatchError(name, HOURS_PER_YEAR, int(series.size))
    return series


def ensure_finite_non_negative(series: np.ndarray, name: str) -> None:
    """Raise DataValidityError if ``series`` holds NaN/inf or negative values."""
    if not np.all(np.isfinite(series)):
        raise DataValidityError(f"{name} contains non-finite values")
    if np.any(series < 0.0):
        raise DataValidityError(f"{name} contains negative values")


def require_positive(value: float, name: str) -> float:
    """Return ``value`` as float if finite and strictly positive."""
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidParameterError(name, f"must be a positive finite number, got {value!r}")
    return value


def require_non_negative(value: float, name: str) -> float:
    """Return ``value`` as float if finite and >= 0."""
    value = float(value)
    if not math.isfinite(value) or value < 0.0:
        raise InvalidParameterError(name, f"must be a non-negative finite number, got {value!r}")
    return value


def require_fraction(value: float, name: str) -> float:
    """Return ``value`` as float if it lies in the half-open interval (0, 1]."""
    value = float(value)
    if not math.isfinite(value) or not 0.0 < value <= 1.0:
        raise InvalidParameterError(name, f"must be within (0, 1], got {value!r}")
    return value
