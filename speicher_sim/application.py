from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

import numpy as np

from .errors import InvalidParameterError
from .persistence import PersistenceService
from .result_builder import ResultBuilder
from .simulation.battery import BatteryChemistry, get_battery_spec
from .simulation.energy_balance import (
    STORAGE_SCENARIOS,
    StorageScenario,
    StorageScenarioResult,
    evaluate_storage_scenarios,
    hourly_energy_balance,
    monthly_energy_balance,
    soc_profile_by_month,
)
from .simulation.load_profiles import BDEW_REFERENCE_TOTAL_KWH, scale_load_profile
from .simulation.multi_year import (
    ComparisonMode,
    aggregate_multi_year,
    horizon_as_whole_years,
    resolve_horizon_years,
)
from .simulation.pv_series import RawRowLike, normalize_pv_series, rows_from_pvgis_payload


def resolve_scenarios(capacities_kwh: Optional[Iterable[float]]) -> tuple[StorageScenario, ...]:
    """
    Map nominal capacities to storage scenarios.

    None selects the default comparison (no storage, 5, 7.5 and 10 kWh).
    Known sizes reuse the default scenario keys and labels.
    """
    if capacities_kwh is None:
        return STORAGE_SCENARIOS
    known = {scenario.capacity_kwh: scenario for scenario in STORAGE_SCENARIOS}
    scenarios = []
    for capacity in capacities_kwh:
        scenario = StorageScenario.from_capacity(capacity)
        scenarios.append(known.get(scenario.capacity_kwh, scenario))
    if not scenarios:
        raise InvalidParameterError("capacities_kwh", "at least one storage size is required")
    return tuple(scenarios)


def _scenario_summary(result: StorageScenarioResult, mode: ComparisonMode) -> Dict[str, Any]:
    """
    Flat scenario metrics plus the multi-year aggregation over the comparison horizon.
    """
    summary = result.to_summary()
    if mode is ComparisonMode.TECHNICAL_LIFETIME and result.lifecycle is None:
        # Without storage there is no technical lifetime; compare over the default horizon.
        horizon = resolve_horizon_years(ComparisonMode.FIFTEEN_YEARS)
    else:
        horizon = resolve_horizon_years(mode, result.lifecycle)
    years = horizon_as_whole_years(horizon)
    aggregation = aggregate_multi_year(result.annual_energy, years=years)
    summary["multi_year"] = {
        "years": years,
        "total_savings_eur": aggregation.total_savings_eur,
        "npv_eur": aggregation.npv_eur,
    }
    return summary


class SpeicherApplication:
    """
    High-level orchestrator used by the CLI and the FastAPI surface.
    """

    def __init__(
        self,
        *,
        save_outputs: bool = False,
        persistence: PersistenceService | None = None,
        result_builder: ResultBuilder | None = None,
    ) -> None:
        """
        Args:
            save_outputs: When True, ResultBuilder saves plots/reports.
            persistence: Optional PersistenceService for DB storage.
            result_builder: Optional ResultBuilder for CLI outputs.
        """
        self.save_outputs = save_outputs
        self.persistence = persistence
        self.result_builder = result_builder

    def run_household_calculation(
        self,
        *,
        annual_consumption_kwh: float,
        reference_weights: Sequence[float] | np.ndarray,
        pv_rows: Iterable[RawRowLike] | None = None,
        pv_payload: Mapping[str, Any] | None = None,
        chemistry: BatteryChemistry | str = BatteryChemistry.LFP,
        capacities_kwh: Optional[Iterable[float]] = None,
        apply_roundtrip_losses: bool = False,
        comparison_mode: ComparisonMode | str = ComparisonMode.FIFTEEN_YEARS,
        reference_total_kwh: float = BDEW_REFERENCE_TOTAL_KWH,
        scenario_name: str = "household",
    ) -> Dict[str, Any]:
        """
        Compare storage sizes for one household.

        Scales the reference load shape to the annual consumption, normalizes
        the PV rows (either given directly or extracted from a PVGIS
        response), and evaluates every storage size against both series.

        Args:
            annual_consumption_kwh: Household consumption per year.
            reference_weights: 8760 reference load-shape weights (BDEW H0).
            pv_rows: Raw hourly generation rows.
            pv_payload: Decoded PVGIS ``seriescalc`` response, used when
                ``pv_rows`` is not given.
            chemistry: Battery chemistry preset.
            capacities_kwh: Nominal storage sizes to compare; None selects
                the default set.
            apply_roundtrip_losses: Use the lossy storage model.
            comparison_mode: Horizon of the multi-year comparison.
            reference_total_kwh: Total the reference weights are normalized to.
            scenario_name: Label used for reports and stored records.

        Returns:
            JSON-safe summary with one entry per storage scenario, plot data,
            the report directory (if written) and the stored run id (if recorded).

        Raises:
            SimulationError: For any invalid input (see ``speicher_sim.errors``).
        """
        pv_source = "rows"
        if pv_rows is None:
            if pv_payload is None:
                raise InvalidParameterError("pv_rows", "either pv_rows or pv_payload is required")
            pv_rows = rows_from_pvgis_payload(pv_payload)
            pv_source = "pvgis"
        rows = list(pv_rows)

        spec = get_battery_spec(chemistry)
        try:
            mode = ComparisonMode(comparison_mode)
        except ValueError:
            raise InvalidParameterError("comparison_mode", f"unsupported comparison mode {comparison_mode!r}") from None
        scenarios = resolve_scenarios(capacities_kwh)

        load_kwh = scale_load_profile(reference_weights, annual_consumption_kwh, reference_total_kwh)
        pv_kwh = normalize_pv_series(rows)

        results = evaluate_storage_scenarios(
            load_kwh,
            pv_kwh,
            scenarios,
            spec,
            apply_roundtrip_losses=apply_roundtrip_losses,
        )
        reference = max(
            (r for r in results if r.simulation is not None),
            key=lambda r: r.scenario.capacity_kwh,
            default=None,
        )
        hourly = hourly_energy_balance(load_kwh, pv_kwh)
        monthly = monthly_energy_balance(hourly)

        summary: Dict[str, Any] = {
            "scenario_name": scenario_name,
            "chemistry": spec.chemistry.value,
            "battery": {
                "manufacturer": spec.manufacturer,
                "roundtrip_efficiency": spec.roundtrip_efficiency,
                "cycle_life_80pct": spec.cycle_life_80pct,
                "calendar_life_years": spec.calendar_life_years,
                "depth_of_discharge": spec.depth_of_discharge,
            },
            "apply_roundtrip_losses": bool(apply_roundtrip_losses),
            "comparison_mode": mode.value,
            "annual_consumption_kwh": float(load_kwh.sum()),
            "annual_pv_kwh": float(pv_kwh.sum()),
            "scenarios": [_scenario_summary(result, mode) for result in results],
            "plots_data": {
                "monthly_balance": {
                    "months": monthly["month"].tolist(),
                    "load_kwh": monthly["load_kwh"].tolist(),
                    "pv_kwh": monthly["pv_kwh"].tolist(),
                    "direct_use_kwh": monthly["direct_use_kwh"].tolist(),
                },
                "soc_profile": None,
            },
        }
        if reference is not None:
            soc = soc_profile_by_month(reference.simulation)
            summary["plots_data"]["soc_profile"] = {
                "scenario": reference.scenario.key,
                "hours": list(range(24)),
                "months_data": [
                    {
                        "month": m,
                        "soc_mean": soc[soc["month_in_year"] == m].sort_values("hour")["soc_mean"].tolist(),
                    }
                    for m in range(12)
                ],
            }

        output_dir: Optional[Path] = None
        if self.save_outputs and self.result_builder:
            output_dir = self.result_builder.build_household_report(
                scenario_name,
                results=results,
                hourly_balance=hourly,
            )

        run_id = None
        if self.persistence:
            calculation = self.persistence.record_calculation(
                scenario_name,
                annual_consumption_kwh=float(annual_consumption_kwh),
                chemistry=spec.chemistry.value,
                capacities_kwh=[s.capacity_kwh for s in scenarios],
                apply_roundtrip_losses=apply_roundtrip_losses,
                metadata={
                    "pv_rows": len(rows),
                    "pv_source": pv_source,
                    "comparison_mode": mode.value,
                },
            )
            run = self.persistence.record_run_result(
                "household",
                {k: v for k, v in summary.items() if k != "plots_data"},
                calculation=calculation,
                output_dir=str(output_dir) if output_dir else None,
            )
            run_id = run.id

        summary["output_dir"] = str(output_dir) if output_dir else None
        summary["run_id"] = run_id
        return summary
