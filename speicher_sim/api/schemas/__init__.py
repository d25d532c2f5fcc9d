"""
Pydantic schemas for API request/response validation.

- common: battery specification payload and error body
- calculation: self-consumption, battery, lifecycle, multi-year and
  household calculation schemas

All schemas are re-exported from this module.
"""

from __future__ import annotations

from .calculation import (
    BatteryPresetResponse,
    BatterySimulationRequest,
    BatterySimulationResponse,
    CalculationRequest,
    CalculationResponse,
    LifecycleRequest,
    LifecycleResponse,
    MultiYearRequest,
    MultiYearResponse,
    MultiYearScenarioResponse,
    RunResult,
    ScenarioSummary,
    SelfConsumptionRequest,
    SelfConsumptionResponse,
)
from .common import BatterySpecPayload, ErrorResponse, resolve_battery_spec

__all__ = [
    "BatterySpecPayload",
    "ErrorResponse",
    "resolve_battery_spec",
    "SelfConsumptionRequest",
    "SelfConsumptionResponse",
    "BatterySimulationRequest",
    "BatterySimulationResponse",
    "LifecycleRequest",
    "LifecycleResponse",
    "MultiYearRequest",
    "MultiYearResponse",
    "MultiYearScenarioResponse",
    "CalculationRequest",
    "CalculationResponse",
    "ScenarioSummary",
    "BatteryPresetResponse",
    "RunResult",
]
