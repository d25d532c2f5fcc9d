"""
Battery endpoints: hourly simulation and presets.
"""

from __future__ import annotations

from fastapi import APIRouter

from ...simulation.battery import BATTERY_PRESETS, simulate_battery
from ..schemas import calculation as calc_schemas
from ..schemas.common import ErrorResponse, resolve_battery_spec

router = APIRouter(
    prefix="/api/battery",
    tags=["battery"],
    responses={422: {"model": ErrorResponse, "description": "Calculation input rejected"}},
)


@router.post("/simulate", response_model=calc_schemas.BatterySimulationResponse)
def simulate(payload: calc_schemas.BatterySimulationRequest) -> calc_schemas.BatterySimulationResponse:
    """
    Run the hour-by-hour storage simulation for one usable capacity.

    The SoC trajectory (8760 values) is only returned with ``include_soc``.
    """
    spec = resolve_battery_spec(payload.battery, payload.chemistry)
    result = simulate_battery(
        payload.load_kwh,
        payload.pv_kwh,
        payload.usable_capacity_kwh,
        spec,
        apply_roundtrip_losses=payload.apply_roundtrip_losses,
    )
    return calc_schemas.BatterySimulationResponse(
        total_charged_kwh=result.total_charged_kwh,
        total_discharged_kwh=result.total_discharged_kwh,
        cycles_per_year=result.cycles_per_year,
        self_consumption_with_storage_kwh=result.self_consumption_with_storage_kwh,
        soc_hourly=result.soc_hourly.tolist() if payload.include_soc else None,
    )


@router.get("/presets", response_model=list[calc_schemas.BatteryPresetResponse])
def list_presets() -> list[calc_schemas.BatteryPresetResponse]:
    """List the battery presets, one per supported chemistry."""
    return [calc_schemas.BatteryPresetResponse.model_validate(spec) for spec in BATTERY_PRESETS.values()]
