from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from speicher_sim.api import dependencies
from speicher_sim.api.app import create_app
from speicher_sim.application import SpeicherApplication
from speicher_sim.persistence import PersistenceService


def create_test_client(persistence: PersistenceService) -> TestClient:
    """Build a FastAPI test client with dependency overrides for persistence."""
    app = create_app()

    def get_app_service() -> SpeicherApplication:
        return SpeicherApplication(
            save_outputs=False,
            persistence=persistence,
            result_builder=None,
        )

    app.dependency_overrides[dependencies.get_application_service] = get_app_service
    app.dependency_overrides[dependencies.get_persistence_service] = lambda: persistence
    return TestClient(app)


@pytest.fixture()
def client(persistence: PersistenceService) -> TestClient:
    return create_test_client(persistence)


def test_self_consumption_endpoint(client: TestClient, flat_load, first_day_pv):
    resp = client.post(
        "/api/self-consumption",
        json={"load_kwh": flat_load.tolist(), "pv_kwh": first_day_pv.tolist()},
    )
    assert resp.status_code == 200
    assert resp.json()["self_consumption_kwh"] == pytest.approx(8.0)


def test_length_mismatch_maps_to_422(client: TestClient, flat_load):
    resp = client.post("/api/self-consumption", json={"load_kwh": flat_load.tolist(), "pv_kwh": [1.0] * 24})
    assert resp.status_code == 422
    body = resp.json()
    assert body["kind"] == "length_mismatch"
    assert "8760" in body["detail"]


def test_negative_values_map_to_data_validity(client: TestClient, flat_load):
    pv = [0.0] * 8760
    pv[5] = -1.0
    resp = client.post("/api/self-consumption", json={"load_kwh": flat_load.tolist(), "pv_kwh": pv})
    assert resp.status_code == 422
    assert resp.json()["kind"] == "data_validity"


def test_battery_simulation_endpoint(client: TestClient, flat_load, first_day_pv):
    payload = {
        "load_kwh": flat_load.tolist(),
        "pv_kwh": first_day_pv.tolist(),
        "usable_capacity_kwh": 5.0,
    }
    resp = client.post("/api/battery/simulate", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["self_consumption_with_storage_kwh"] == pytest.approx(13.0)
    assert data["cycles_per_year"] == pytest.approx(1.0)
    assert data["soc_hourly"] is None

    resp = client.post(
        "/api/battery/simulate",
        json={**payload, "include_soc": True, "apply_roundtrip_losses": True, "chemistry": "NMC"},
    )
    data = resp.json()
    assert len(data["soc_hourly"]) == 8760
    assert data["total_charged_kwh"] == pytest.approx(5.0 / 0.95)

    resp = client.post("/api/battery/simulate", json={**payload, "usable_capacity_kwh": 0})
    assert resp.status_code == 422
    assert resp.json()["kind"] == "invalid_parameter"


def test_battery_presets_endpoint(client: TestClient):
    resp = client.get("/api/battery/presets")
    assert resp.status_code == 200
    presets = {p["chemistry"]: p for p in resp.json()}
    assert presets["LiFePO4"]["cycle_life_80pct"] == 6000
    assert presets["NMC"]["calendar_life_years"] == 12.0


def test_lifecycle_endpoint(client: TestClient):
    resp = client.post("/api/lifecycle", json={"capacity_kwh": 5.0, "cycles_per_year": 500})
    assert resp.status_code == 200
    data = resp.json()
    assert data["effective_lifetime_years"] == 12.0
    assert data["limiting_factor"] == "cycles"

    resp = client.post(
        "/api/lifecycle",
        json={"capacity_kwh": 5.0, "cycles_per_year": 250, "chemistry": "NMC"},
    )
    assert resp.json()["effective_lifetime_years"] == 12.0
    assert resp.json()["limiting_factor"] == "calendar"

    resp = client.post(
        "/api/lifecycle",
        json={"capacity_kwh": 5.0, "cycles_per_year": 100, "battery": {"roundtrip_efficiency": 1.5}},
    )
    assert resp.status_code == 422
    assert resp.json()["kind"] == "invalid_parameter"


def test_multi_year_endpoint(client: TestClient):
    payload = {"self_consumption_kwh": 2100.0, "grid_import_kwh": 1900.0, "feed_in_kwh": 4800.0}
    resp = client.post("/api/multi-year", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"scenarios": [], "total_savings_eur": 0.0, "npv_eur": 0.0}

    resp = client.post("/api/multi-year", json={**payload, "years": 0})
    assert resp.status_code == 422
    assert resp.json()["kind"] == "invalid_parameter"


def test_api_calculation_and_runs(client: TestClient, demo_weights, demo_pv_rows):
    """Exercise /api/calculation and /api/runs endpoints."""
    resp = client.post(
        "/api/calculation",
        json={
            "annual_consumption_kwh": 4000,
            "reference_weights": demo_weights.tolist(),
            "pv_rows": [{"time": row.timestamp, "P": row.power_watts} for row in demo_pv_rows],
            "capacities_kwh": [0, 5, 10],
            "scenario_name": "api",
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [s["scenario"] for s in data["scenarios"]] == ["none", "5kwh", "10kwh"]
    assert data["plots_data"]["soc_profile"]["scenario"] == "10kwh"
    run_id = data["run_id"]
    assert run_id is not None

    runs_resp = client.get("/api/runs")
    assert runs_resp.status_code == 200
    runs = runs_resp.json()
    assert [r["id"] for r in runs] == [run_id]
    assert runs[0]["result_type"] == "household"

    run_resp = client.get(f"/api/runs/{run_id}")
    assert run_resp.status_code == 200
    assert run_resp.json()["summary"]["scenario_name"] == "api"

    assert client.get("/api/runs/9999").status_code == 404


def test_api_calculation_without_pv_data(client: TestClient, demo_weights):
    resp = client.post(
        "/api/calculation",
        json={"annual_consumption_kwh": 4000, "reference_weights": demo_weights.tolist()},
    )
    assert resp.status_code == 422
    assert resp.json()["kind"] == "invalid_parameter"


def test_openapi_documents_error_body(client: TestClient):
    schema = client.get("/openapi.json").json()
    assert "ErrorResponse" in schema["components"]["schemas"]
    responses = schema["paths"]["/api/lifecycle"]["post"]["responses"]
    assert responses["422"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
