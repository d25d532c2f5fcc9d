from __future__ import annotations

from pathlib import Path

import pytest

from speicher_sim.application import SpeicherApplication, resolve_scenarios
from speicher_sim.errors import DataValidityError, InvalidParameterError, LengthMismatchError
from speicher_sim.persistence import PersistenceService
from speicher_sim.result_builder import ResultBuilder
from speicher_sim.simulation.energy_balance import STORAGE_SCENARIOS
from speicher_sim.simulation.multi_year import horizon_as_whole_years


def test_resolve_scenarios():
    assert resolve_scenarios(None) == STORAGE_SCENARIOS
    scenarios = resolve_scenarios([0, 7.5, 12])
    assert [s.key for s in scenarios] == ["none", "7.5kwh", "12kwh"]
    assert scenarios[1] is STORAGE_SCENARIOS[2]
    with pytest.raises(InvalidParameterError):
        resolve_scenarios([])


def test_household_calculation_records_run(persistence: PersistenceService, demo_weights, demo_pv_rows):
    """A full household comparison is summarized and stored."""
    app = SpeicherApplication(save_outputs=False, persistence=persistence)
    summary = app.run_household_calculation(
        annual_consumption_kwh=4000.0,
        reference_weights=demo_weights,
        pv_rows=demo_pv_rows,
        scenario_name="Musterhaus",
    )

    assert summary["scenario_name"] == "Musterhaus"
    assert summary["chemistry"] == "LiFePO4"
    assert summary["battery"]["cycle_life_80pct"] == 6000
    assert summary["annual_consumption_kwh"] == pytest.approx(4000.0)
    assert summary["annual_pv_kwh"] > 0.0
    assert summary["output_dir"] is None
    assert [s["scenario"] for s in summary["scenarios"]] == ["none", "5kwh", "7.5kwh", "10kwh"]

    no_storage, *with_storage = summary["scenarios"]
    assert no_storage["cycles_per_year"] is None
    assert no_storage["multi_year"] == {"years": 15, "total_savings_eur": 0.0, "npv_eur": 0.0}
    for scenario in with_storage:
        assert scenario["self_consumption_kwh"] > no_storage["self_consumption_kwh"]
        assert scenario["limiting_factor"] in ("cycles", "calendar")

    plots = summary["plots_data"]
    assert plots["monthly_balance"]["months"] == list(range(1, 13))
    assert plots["soc_profile"]["scenario"] == "10kwh"
    assert len(plots["soc_profile"]["months_data"]) == 12
    assert len(plots["soc_profile"]["months_data"][0]["soc_mean"]) == 24

    assert summary["run_id"] is not None
    stored = persistence.get_run_result(summary["run_id"])
    assert stored.result_type == "household"
    assert "plots_data" not in stored.summary
    assert stored.summary["scenarios"][1]["scenario"] == "5kwh"

    calculation = persistence.list_calculations()[0]
    assert calculation.capacities_kwh == [0.0, 5.0, 7.5, 10.0]
    assert calculation.extra_metadata["pv_source"] == "rows"
    assert calculation.extra_metadata["pv_rows"] == 8760


def test_household_calculation_from_pvgis_payload(demo_weights, demo_pv_rows):
    payload = {
        "outputs": {"hourly": [{"time": row.timestamp, "P": row.power_watts} for row in demo_pv_rows]}
    }
    app = SpeicherApplication()
    from_payload = app.run_household_calculation(
        annual_consumption_kwh=3500.0,
        reference_weights=demo_weights,
        pv_payload=payload,
        capacities_kwh=[5.0],
    )
    from_rows = app.run_household_calculation(
        annual_consumption_kwh=3500.0,
        reference_weights=demo_weights,
        pv_rows=demo_pv_rows,
        capacities_kwh=[5.0],
    )
    assert from_payload["run_id"] is None
    assert from_payload["scenarios"] == from_rows["scenarios"]


def test_technical_lifetime_horizon_per_scenario(demo_weights, demo_pv_rows):
    app = SpeicherApplication()
    summary = app.run_household_calculation(
        annual_consumption_kwh=4000.0,
        reference_weights=demo_weights,
        pv_rows=demo_pv_rows,
        chemistry="NMC",
        comparison_mode="technicalLifetime",
    )
    assert summary["comparison_mode"] == "technicalLifetime"
    assert summary["chemistry"] == "NMC"
    for scenario in summary["scenarios"]:
        lifetime = scenario["effective_lifetime_years"]
        expected = 15 if lifetime is None else horizon_as_whole_years(lifetime)
        assert scenario["multi_year"]["years"] == expected


def test_lossy_calculation_lowers_feed_in(demo_weights, demo_pv_rows):
    app = SpeicherApplication()
    kwargs = dict(
        annual_consumption_kwh=4000.0,
        reference_weights=demo_weights,
        pv_rows=demo_pv_rows,
        capacities_kwh=[10.0],
    )
    lossless = app.run_household_calculation(**kwargs)
    lossy = app.run_household_calculation(apply_roundtrip_losses=True, **kwargs)
    assert lossy["apply_roundtrip_losses"] is True
    assert lossy["scenarios"][0]["feed_in_kwh"] < lossless["scenarios"][0]["feed_in_kwh"]


def test_household_calculation_writes_report(tmp_path, demo_weights, demo_pv_rows):
    app = SpeicherApplication(save_outputs=True, result_builder=ResultBuilder(tmp_path))
    summary = app.run_household_calculation(
        annual_consumption_kwh=4000.0,
        reference_weights=demo_weights,
        pv_rows=demo_pv_rows,
        capacities_kwh=[0, 5],
        scenario_name="report test",
    )
    output_dir = Path(summary["output_dir"])
    assert output_dir.parent == tmp_path
    assert output_dir.is_dir()
    assert output_dir.name.endswith("report_test")
    assert (output_dir / "scenarios.csv").exists()


def test_household_calculation_input_errors(demo_weights, demo_pv_rows):
    app = SpeicherApplication()
    with pytest.raises(InvalidParameterError):
        app.run_household_calculation(annual_consumption_kwh=4000.0, reference_weights=demo_weights)
    with pytest.raises(InvalidParameterError):
        app.run_household_calculation(
            annual_consumption_kwh=0.0, reference_weights=demo_weights, pv_rows=demo_pv_rows
        )
    with pytest.raises(InvalidParameterError):
        app.run_household_calculation(
            annual_consumption_kwh=4000.0,
            reference_weights=demo_weights,
            pv_rows=demo_pv_rows,
            comparison_mode="20",
        )
    with pytest.raises(LengthMismatchError):
        app.run_household_calculation(
            annual_consumption_kwh=4000.0, reference_weights=demo_weights, pv_rows=demo_pv_rows[:-1]
        )
    with pytest.raises(DataValidityError):
        app.run_household_calculation(
            annual_consumption_kwh=4000.0,
            reference_weights=demo_weights,
            pv_payload={"outputs": {}},
        )
