"""
Normalization of raw hourly PV generation into a clean 8760-hour kWh series.

Raw rows come from an external irradiance/yield model such as the PVGIS
``seriescalc`` service. Depending on the source year the model reports 8760
or 8784 (leap year) rows, possibly out of order. The normalizer sorts,
removes February 29 and validates the result; it never fetches anything
itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence
from urllib.parse import urlencode

import numpy as np

from ..calendar_utils import (
    HOURS_PER_DAY,
    HOURS_PER_LEAP_YEAR,
    HOURS_PER_YEAR,
    MONTH_LENGTHS,
    is_leap_day,
    parse_timestamp,
)
from ..errors import DataValidityError, LengthMismatchError
from .series import ensure_finite_non_negative

PVGIS_SERIESCALC_URL = "https://re.jrc.ec.europa.eu/api/v5_2/seriescalc"

# Hours of February 29 in a positional (timestamp-less) leap-year series.
_LEAP_DAY_START_HOUR = (MONTH_LENGTHS[0] + MONTH_LENGTHS[1]) * HOURS_PER_DAY
_LEAP_DAY_END_HOUR = _LEAP_DAY_START_HOUR + HOURS_PER_DAY


@dataclass(frozen=True)
class RawRow:
    """
    One hourly row as delivered by a generation source.

    Attributes:
        timestamp: Source timestamp (PVGIS ``YYYYMMDD:HHMM`` or ISO-8601),
            or None when the source only delivers positional rows.
        power_watts: Mean AC power over the hour in W (= Wh for the hour).
    """

    timestamp: str | None = None
    power_watts: float = 0.0


RawRowLike = RawRow | Mapping[str, Any]

_TIMESTAMP_KEYS = ("timestamp", "time", "ts")
_POWER_KEYS = ("power_watts", "P")


def _first_present(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
    """Value of the first key in ``keys`` that is set to something other than None."""
    return next((row[key] for key in keys if row.get(key) is not None), None)


def _coerce_row(row: RawRowLike) -> RawRow:
    if isinstance(row, RawRow):
        return row
    if not isinstance(row, Mapping):
        raise DataValidityError(f"unsupported raw row type: {type(row)!r}")

    timestamp = _first_present(row, _TIMESTAMP_KEYS)
    power = _first_present(row, _POWER_KEYS)
    if power is None:
        power = 0.0
    try:
        power_watts = float(power)
    except (TypeError, ValueError) as exc:
        raise DataValidityError(f"power value {power!r} is not numeric") from exc
    return RawRow(timestamp=str(timestamp) if timestamp else None, power_watts=power_watts)


def _parse_all(rows: Sequence[RawRow]) -> List:
    parsed = []
    for row in rows:
        try:
            parsed.append(parse_timestamp(row.timestamp))
        except ValueError as exc:
            raise DataValidityError(f"unparsable timestamp {row.timestamp!r}") from exc
    return parsed


def normalize_pv_series(raw_rows: Iterable[RawRowLike]) -> np.ndarray:
    """
    Turn raw generation rows into a sorted, validated 8760-hour kWh series.

    Processing order:
        1. Convert W to kWh per hour.
        2. If every row carries a timestamp, sort ascending (stable).
        3. For 8784 rows, drop the 24 rows dated February 29. Rows without
           timestamp are positional: hours 1416-1439 of a series starting
           on January 1 are dropped when no row has a timestamp.
        4. Require exactly 8760 rows.
        5. Require every value to be finite and non-negative.

    Args:
        raw_rows: ``RawRow`` instances or mappings with ``timestamp``/``time``
            and ``power_watts``/``P`` keys.

    Returns:
        New float64 array of hourly PV production in kWh.

    Raises:
        LengthMismatchError: If the count is not 8760 after leap-day removal.
        DataValidityError: For non-finite or negative values, non-numeric
            power values or unparsable timestamps.
    """
    rows = [_coerce_row(row) for row in raw_rows]
    values = np.array([row.power_watts for row in rows], dtype=float) / 1000.0

    has_timestamps = [row.timestamp is not None for row in rows]
    leap_mask = np.zeros(len(rows), dtype=bool)

    if rows and all(has_timestamps):
        parsed = _parse_all(rows)
        order = sorted(range(len(rows)), key=parsed.__getitem__)
        values = values[order]
        leap_mask = np.array([is_leap_day(parsed[i]) for i in order], dtype=bool)
    elif any(has_timestamps):
        for idx, row in enumerate(rows):
            if row.timestamp is not None:
                try:
                    leap_mask[idx] = is_leap_day(parse_timestamp(row.timestamp))
                except ValueError as exc:
                    raise DataValidityError(f"unparsable timestamp {row.timestamp!r}") from exc
    elif len(rows) == HOURS_PER_LEAP_YEAR:
        leap_mask[_LEAP_DAY_START_HOUR:_LEAP_DAY_END_HOUR] = True

    if len(rows) == HOURS_PER_LEAP_YEAR:
        values = values[~leap_mask]

    if values.size != HOURS_PER_YEAR:
        raise LengthMismatchError("pv", HOURS_PER_YEAR, int(values.size))

    ensure_finite_non_negative(values, "pv")
    return values


def rows_from_pvgis_payload(payload: Mapping[str, Any]) -> List[RawRow]:
    """
    Extract raw rows from a decoded PVGIS ``seriescalc`` JSON document.

    Looks at ``outputs.hourly``, then ``outputs.hourly_fixed``, then
    ``outputs.time_series.data``. A row without numeric ``P`` counts as 0 W.

    Raises:
        DataValidityError: If the document has none of the hourly arrays.
    """
    outputs = payload.get("outputs") if isinstance(payload, Mapping) else None
    if not isinstance(outputs, Mapping):
        raise DataValidityError("PVGIS response does not contain usable hourly data")

    hourly = outputs.get("hourly")
    if not isinstance(hourly, list):
        hourly = outputs.get("hourly_fixed")
    if not isinstance(hourly, list):
        time_series = outputs.get("time_series")
        hourly = time_series.get("data") if isinstance(time_series, Mapping) else None
    if not isinstance(hourly, list):
        raise DataValidityError("PVGIS response does not contain usable hourly data")

    rows = []
    for entry in hourly:
        entry = entry if isinstance(entry, Mapping) else {}
        power = entry.get("P")
        if isinstance(power, bool) or not isinstance(power, (int, float)):
            power = 0.0
        rows.append(RawRow(timestamp=entry.get("time") or None, power_watts=float(power)))
    return rows


@dataclass(frozen=True)
class PVGISQuery:
    """
    Parameters of a PVGIS hourly production request.

    Only builds the request; performing it belongs to the caller.
    """

    latitude: float
    longitude: float
    system_size_kwp: float
    tilt_deg: float
    azimuth_deg: float

    def to_params(self) -> Dict[str, str]:
        return {
            "lat": str(self.latitude),
            "lon": str(self.longitude),
            "peakpower": str(self.system_size_kwp),
            "angle": str(self.tilt_deg),
            "aspect": str(self.azimuth_deg),
            "loss": "14",
            "outputformat": "json",
            "hourly": "1",
            "startyear": "2018",
            "endyear": "2018",
            "pvcalculation": "1",
            "pvtechchoice": "crystSi",
            "raddatabase": "PVGIS-SARAH2",
        }

    @property
    def url(self) -> str:
        return f"{PVGIS_SERIESCALC_URL}?{urlencode(self.to_params())}"
