"""
Calculation endpoints.

Endpoints:
- POST /self-consumption: Direct self-consumption without storage
- POST /lifecycle: Battery lifetime from cycles per year
- POST /multi-year: Multi-year aggregation of one simulated year
- POST /calculation: Full household comparison of storage sizes

Calculation errors raised by the core (length mismatch, invalid parameter,
data validity) are turned into HTTP 422 by the application-wide handler.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...application import SpeicherApplication
from ...simulation.lifecycle import calculate_lifecycle
from ...simulation.multi_year import AnnualEnergyResult, aggregate_multi_year
from ...simulation.self_consumption import calculate_self_consumption
from .. import dependencies
from ..schemas import calculation as calc_schemas
from ..schemas.common import ErrorResponse, resolve_battery_spec

router = APIRouter(
    prefix="/api",
    tags=["calculation"],
    responses={422: {"model": ErrorResponse, "description": "Calculation input rejected"}},
)


@router.post("/self-consumption", response_model=calc_schemas.SelfConsumptionResponse)
def self_consumption(payload: calc_schemas.SelfConsumptionRequest) -> calc_schemas.SelfConsumptionResponse:
    """
    Sum of ``min(pv, load)`` over the 8760 hours of the reference year.
    """
    value = calculate_self_consumption(payload.load_kwh, payload.pv_kwh)
    return calc_schemas.SelfConsumptionResponse(self_consumption_kwh=value)


@router.post("/lifecycle", response_model=calc_schemas.LifecycleResponse)
def lifecycle(payload: calc_schemas.LifecycleRequest) -> calc_schemas.LifecycleResponse:
    """
    Effective lifetime: ``min(calendar life, cycle life / cycles per year)``.

    Uses the explicit ``battery`` payload if given, otherwise the preset of
    ``chemistry`` (LiFePO4 by default).
    """
    spec = resolve_battery_spec(payload.battery, payload.chemistry)
    result = calculate_lifecycle(payload.capacity_kwh, payload.cycles_per_year, spec)
    return calc_schemas.LifecycleResponse.model_validate(result)


@router.post("/multi-year", response_model=calc_schemas.MultiYearResponse)
def multi_year(payload: calc_schemas.MultiYearRequest) -> calc_schemas.MultiYearResponse:
    """
    Aggregate one year of energy flows over ``years`` years.

    The aggregation formula is still open: the response is an empty
    aggregation (no rows, zero savings, zero NPV) for any valid input.
    """
    annual = AnnualEnergyResult(
        self_consumption_kwh=payload.self_consumption_kwh,
        grid_import_kwh=payload.grid_import_kwh,
        feed_in_kwh=payload.feed_in_kwh,
    )
    result = aggregate_multi_year(annual, years=payload.years)
    return calc_schemas.MultiYearResponse(
        scenarios=[calc_schemas.MultiYearScenarioResponse.model_validate(s) for s in result.scenarios],
        total_savings_eur=result.total_savings_eur,
        npv_eur=result.npv_eur,
    )


@router.post("/calculation", response_model=calc_schemas.CalculationResponse)
def run_calculation(
    payload: calc_schemas.CalculationRequest,
    app_service: SpeicherApplication = Depends(dependencies.get_application_service),
) -> calc_schemas.CalculationResponse:
    """
    Compare storage sizes for one household.

    Scales the reference load shape to ``annual_consumption_kwh``, normalizes
    the PV rows (or the PVGIS response) and evaluates every capacity. The
    run is stored when persistence is enabled; ``run_id`` refers to it.

    Example:
        ```python
        # POST /api/calculation
        {
            "annual_consumption_kwh": 4000,
            "reference_weights": [...],          # 8760 BDEW H0 weights
            "pv_rows": [{"time": "20180101:0010", "P": 0.0}, ...],
            "chemistry": "LiFePO4",
            "capacities_kwh": [0, 5, 7.5, 10]
        }
        ```
    """
    summary = app_service.run_household_calculation(
        annual_consumption_kwh=payload.annual_consumption_kwh,
        reference_weights=payload.reference_weights,
        pv_rows=payload.pv_rows,
        pv_payload=payload.pv_payload,
        chemistry=payload.chemistry,
        capacities_kwh=payload.capacities_kwh,
        apply_roundtrip_losses=payload.apply_roundtrip_losses,
        comparison_mode=payload.comparison_mode,
        scenario_name=payload.scenario_name,
    )
    return calc_schemas.CalculationResponse(**summary)
