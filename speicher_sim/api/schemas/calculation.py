"""
Request/response schemas of the calculation endpoints.

Hourly series are plain JSON arrays of 8760 numbers; their length and
values are validated by the simulation core so that every endpoint reports
the same error kinds.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...simulation.battery import BatteryChemistry
from ...simulation.multi_year import ComparisonMode
from .common import BatterySpecPayload


class SelfConsumptionRequest(BaseModel):
    load_kwh: List[float] = Field(..., description="Hourly consumption, 8760 values")
    pv_kwh: List[float] = Field(..., description="Hourly PV production, 8760 values")


class SelfConsumptionResponse(BaseModel):
    self_consumption_kwh: float


class BatterySimulationRequest(BaseModel):
    """
    Hourly battery simulation for one usable capacity.

    Attributes:
        load_kwh: Hourly consumption (8760 values).
        pv_kwh: Hourly PV production (8760 values).
        usable_capacity_kwh: Usable capacity C (> 0).
        chemistry: Preset used when ``battery`` is omitted.
        battery: Explicit battery model.
        apply_roundtrip_losses: Apply the round-trip efficiency at charge.
        include_soc: Return the 8760 SoC values.
    """

    load_kwh: List[float]
    pv_kwh: List[float]
    usable_capacity_kwh: float
    chemistry: Optional[BatteryChemistry] = None
    battery: Optional[BatterySpecPayload] = None
    apply_roundtrip_losses: bool = False
    include_soc: bool = False


class BatterySimulationResponse(BaseModel):
    total_charged_kwh: float
    total_discharged_kwh: float
    cycles_per_year: float
    self_consumption_with_storage_kwh: float
    soc_hourly: Optional[List[float]] = None


class LifecycleRequest(BaseModel):
    capacity_kwh: float
    cycles_per_year: float
    chemistry: Optional[BatteryChemistry] = None
    battery: Optional[BatterySpecPayload] = None


class LifecycleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    capacity_kwh: float
    cycles_per_year: int
    lifetime_by_cycles_years: float
    lifetime_by_calendar_years: float
    effective_lifetime_years: float
    limiting_factor: str


class MultiYearRequest(BaseModel):
    self_consumption_kwh: float
    grid_import_kwh: float
    feed_in_kwh: float
    years: int = 15


class MultiYearScenarioResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    self_consumption_kwh: float
    grid_import_kwh: float
    feed_in_kwh: float
    savings_eur: float


class MultiYearResponse(BaseModel):
    scenarios: List[MultiYearScenarioResponse] = Field(default_factory=list)
    total_savings_eur: float
    npv_eur: float


class CalculationRequest(BaseModel):
    """
    Full household comparison: load scaling, PV normalization and storage sizes.

    Either ``pv_rows`` (raw rows with ``timestamp``/``time`` and
    ``power_watts``/``P``) or ``pv_payload`` (a PVGIS ``seriescalc``
    response) must be given.
    """

    annual_consumption_kwh: float
    reference_weights: List[float]
    pv_rows: Optional[List[Dict[str, Any]]] = None
    pv_payload: Optional[Dict[str, Any]] = None
    chemistry: BatteryChemistry = BatteryChemistry.LFP
    capacities_kwh: Optional[List[float]] = None
    apply_roundtrip_losses: bool = False
    comparison_mode: ComparisonMode = ComparisonMode.FIFTEEN_YEARS
    scenario_name: str = "household"


class ScenarioSummary(BaseModel):
    scenario: str
    label: str
    capacity_kwh: float
    usable_capacity_kwh: float
    self_consumption_kwh: float
    grid_import_kwh: float
    feed_in_kwh: float
    self_consumption_share: float
    autarky: float
    total_charged_kwh: Optional[float] = None
    total_discharged_kwh: Optional[float] = None
    cycles_per_year: Optional[int] = None
    effective_lifetime_years: Optional[float] = None
    limiting_factor: Optional[str] = None
    multi_year: Dict[str, Any] = Field(default_factory=dict)


class CalculationResponse(BaseModel):
    scenario_name: str
    chemistry: str
    battery: Dict[str, Any]
    apply_roundtrip_losses: bool
    comparison_mode: str
    annual_consumption_kwh: float
    annual_pv_kwh: float
    scenarios: List[ScenarioSummary]
    plots_data: Optional[Dict[str, Any]] = None
    output_dir: Optional[str] = None
    run_id: Optional[int] = None


class BatteryPresetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    manufacturer: str
    chemistry: BatteryChemistry
    roundtrip_efficiency: float
    cycle_life_80pct: int
    calendar_life_years: float
    depth_of_discharge: float


class RunResult(BaseModel):
    """
    Stored calculation run, as returned by ``GET /api/runs``.

    Runs are ordered by ``created_at`` descending (newest first).
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    result_type: str = Field(..., description="Type of run, e.g. 'household'")
    summary: Dict[str, Any] = Field(..., description="Scenario metrics of the run")
    calculation_id: Optional[int] = Field(None, description="Link to the calculation inputs")
    output_dir: Optional[str] = None
    created_at: datetime
