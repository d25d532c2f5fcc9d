"""
Multi-year economic comparison of storage scenarios.

Only the contract is fixed so far: inputs, horizon resolution and the
result shape. The savings formula (price growth, degradation, discounting)
has not been settled, so :func:`aggregate_multi_year` returns an empty
aggregation after validating its inputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..errors import InvalidParameterError
from .lifecycle import LifecycleResult
from .series import require_fraction, require_non_negative, require_positive


@dataclass(frozen=True)
class AnnualEnergyResult:
    """Energy flows of one simulated year (kWh)."""

    self_consumption_kwh: float
    grid_import_kwh: float
    feed_in_kwh: float

    def __post_init__(self) -> None:
        for name in ("self_consumption_kwh", "grid_import_kwh", "feed_in_kwh"):
            object.__setattr__(self, name, require_non_negative(getattr(self, name), name))


@dataclass(frozen=True)
class MultiYearScenario:
    year: int
    self_consumption_kwh: float
    grid_import_kwh: float
    feed_in_kwh: float
    savings_eur: float


@dataclass(frozen=True)
class MultiYearAggregationResult:
    scenarios: Tuple[MultiYearScenario, ...] = ()
    total_savings_eur: float = 0.0
    npv_eur: float = 0.0


class ComparisonMode(str, Enum):
    """Horizon over which scenarios are compared."""

    TEN_YEARS = "10"
    FIFTEEN_YEARS = "15"
    TECHNICAL_LIFETIME = "technicalLifetime"


def resolve_horizon_years(mode: ComparisonMode | str, lifecycle: Optional[LifecycleResult] = None) -> float:
    """
    Number of years a scenario is evaluated over.

    Fixed modes give every scenario the same horizon. In technical-lifetime
    mode each scenario uses its own effective lifetime, so ``lifecycle`` is
    required.

    Raises:
        InvalidParameterError: For an unknown mode, or technical-lifetime
            mode without a lifecycle result.
    """
    try:
        mode = ComparisonMode(mode)
    except ValueError:
        raise InvalidParameterError("mode", f"unsupported comparison mode {mode!r}") from None

    if mode is ComparisonMode.TECHNICAL_LIFETIME:
        if lifecycle is None:
            raise InvalidParameterError("lifecycle", "required for technical-lifetime comparison")
        return lifecycle.effective_lifetime_years
    return float(mode.value)


@dataclass(frozen=True)
class PriceGrowthScenario:
    """
    Named tariff growth path for the economic comparison.

    Input of the per-year savings calculation that :func:`aggregate_multi_year`
    does not perform yet; defined now so callers can select a path.
    """

    key: str
    label: str
    annual_rate: float


PRICE_GROWTH_SCENARIOS: Tuple[PriceGrowthScenario, ...] = (
    PriceGrowthScenario("0", "0 % per year", 0.0),
    PriceGrowthScenario("3", "+3 % per year", 0.03),
    PriceGrowthScenario("6", "+6 % per year", 0.06),
)
"""Selectable tariff growth paths; unused until the savings formula lands."""


@dataclass(frozen=True)
class EconomicParameters:
    """
    Market assumptions for the economic comparison.

    These are the inputs the pending savings formula of
    :func:`aggregate_multi_year` will read. Construction validates the
    values, but no calculation consumes them yet.

    Attributes:
        electricity_price_eur_kwh: Current household tariff.
        feed_in_tariff_eur_kwh: Remuneration for exported energy.
        annual_price_increase: Yearly tariff growth (fraction).
        annual_degradation: Yearly battery capacity loss (fraction).
        battery_lifetime_years: Default comparison horizon.
        discount_rate: Rate used for the net present value.
    """

    electricity_price_eur_kwh: float = 0.32
    feed_in_tariff_eur_kwh: float = 0.082
    annual_price_increase: float = 0.03
    annual_degradation: float = 0.02
    battery_lifetime_years: int = 15
    discount_rate: float = 0.03

    def __post_init__(self) -> None:
        require_non_negative(self.electricity_price_eur_kwh, "electricity_price_eur_kwh")
        require_non_negative(self.feed_in_tariff_eur_kwh, "feed_in_tariff_eur_kwh")
        require_non_negative(self.annual_price_increase, "annual_price_increase")
        require_non_negative(self.annual_degradation, "annual_degradation")
        require_positive(self.battery_lifetime_years, "battery_lifetime_years")
        if self.discount_rate != 0.0:
            require_fraction(self.discount_rate, "discount_rate")


DEFAULT_ECONOMIC_PARAMETERS = EconomicParameters()


def aggregate_multi_year(annual_result: AnnualEnergyResult, years: int = 15) -> MultiYearAggregationResult:
    """
    Aggregate one simulated year over a multi-year horizon.

    The aggregation formula is not defined yet: the result is always empty
    (no per-year rows, zero savings, zero NPV). Inputs are still validated
    so callers depend on the final contract.

    Args:
        annual_result: Energy flows of the simulated reference year.
        years: Horizon in whole years (>= 1).

    Raises:
        InvalidParameterError: If ``years`` is not a positive integer or
            ``annual_result`` is not an :class:`AnnualEnergyResult`.
    """
    if not isinstance(annual_result, AnnualEnergyResult):
        raise InvalidParameterError("annual_result", f"expected AnnualEnergyResult, got {type(annual_result).__name__}")
    if isinstance(years, bool) or not isinstance(years, int) or years < 1:
        raise InvalidParameterError("years", f"must be an integer >= 1, got {years!r}")

    # TODO: per-year savings with price growth, degradation and discounting
    # once EconomicParameters are agreed on.
    return MultiYearAggregationResult(scenarios=(), total_savings_eur=0.0, npv_eur=0.0)


def horizon_as_whole_years(horizon_years: float) -> int:
    """Round a (possibly fractional) lifetime horizon up to whole years, at least 1."""
    horizon_years = require_non_negative(horizon_years, "horizon_years")
    return max(1, int(math.ceil(horizon_years)))
