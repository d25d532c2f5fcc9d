"""
API route modules, organized by domain:
- calculation: self-consumption, lifecycle, multi-year and household calculation
- battery: hourly simulation and presets
- runs: stored calculation results

All routers are prefixed with /api.
"""

from __future__ import annotations

from .battery import router as battery_router
from .calculation import router as calculation_router
from .runs import router as runs_router

__all__ = [
    "calculation_router",
    "battery_router",
    "runs_router",
]
