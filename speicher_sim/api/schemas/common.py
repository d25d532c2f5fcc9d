"""
Shared schema pieces: battery specification payloads and error bodies.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...simulation.battery import BatteryChemistry, BatterySpec, get_battery_spec


class BatterySpecPayload(BaseModel):
    """
    Battery model sent by clients that do not want a preset.

    Range checks are left to :class:`BatterySpec`, whose errors are mapped
    to HTTP 422 with ``kind="invalid_parameter"``.
    """

    model_config = ConfigDict(from_attributes=True)

    manufacturer: str = "Custom"
    chemistry: BatteryChemistry = BatteryChemistry.LFP
    roundtrip_efficiency: float = 0.94
    cycle_life_80pct: int = 6000
    calendar_life_years: float = 15.0
    depth_of_discharge: float = 0.9

    def to_spec(self) -> BatterySpec:
        return BatterySpec(**self.model_dump())


def resolve_battery_spec(
    battery: Optional[BatterySpecPayload],
    chemistry: Optional[BatteryChemistry],
) -> BatterySpec:
    """Explicit battery payload wins; otherwise the chemistry preset (LiFePO4 by default)."""
    if battery is not None:
        return battery.to_spec()
    return get_battery_spec(chemistry or BatteryChemistry.LFP)


class ErrorResponse(BaseModel):
    """Body returned with HTTP 422 for calculation errors."""

    detail: str
    kind: str = Field(..., description="length_mismatch, invalid_parameter or data_validity")
