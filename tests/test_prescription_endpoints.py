"""Tests for the HTTP surface."""

from typing import Any

from fastapi.testclient import TestClient

from nutrition_rx.api.app import create_app
from nutrition_rx.containers import AppContainer


def _scenario_a_payload() -> dict[str, Any]:
    return {
        "patient": {"weight_kg": 70, "height_cm": 175},
        "routes": {"enteral": True},
        "enteral": {
            "access": "SNE",
            "system_type": "closed",
            "infusion_mode": "pump",
            "formulas": [
                {"formula_id": "peptamen-15", "rate": 50, "duration_hours": 20}
            ],
            "equipment_volume_ml": 15,
            "bag_quantities": {"6:00": 1, "18:00": 1},
        },
    }


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_catalog_formulas_by_system(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/catalog/formulas", params={"system": "open"})

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == ["oral-supl", "standard-10"]


def test_catalog_formula_search(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/catalog/formulas", params={"q": "peptamen"})

    assert response.status_code == 200
    data = response.json()
    assert data[0]["composition"]["density"] == 1.5
    assert data[0]["system_type"] == "closed"


def test_catalog_rejects_unknown_system(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/catalog/formulas", params={"system": "tube"})

    assert response.status_code == 422


def test_catalog_modules(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/catalog/modules")

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == ["broken-mod", "protein-mod"]


def test_evaluate_prescription(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/prescriptions/evaluate", json=_scenario_a_payload())

    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["total_kcal"] == 1500.0
    assert data["dispensing_plan"]["total_volume_to_request"] == 1015.0
    assert data["dispensing_plan"]["number_of_packs_required"] == 2
    assert data["dispensing_plan"]["bag_quantities"] == {"06:00": 1, "18:00": 1}
    assert data["warnings"] == []
    assert data["costs"]["nursing_time_minutes"] == 10.0
    assert "Peptamen 1.5" in data["record_text"]


def test_evaluate_mixed_routes(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    payload = _scenario_a_payload()
    payload["routes"] = {"enteral": True, "oral": True, "parenteral": True}
    payload["oral"] = {
        "estimated_kcal": 300,
        "supplements": [{"formula_id": "oral-supl", "meals": {"meals": ["lunch"]}}],
    }
    payload["parenteral"] = {"aminoacids_g": 80, "lipids_g": 60, "glucose_g": 200}

    response = client.post("/prescriptions/evaluate", json=payload)

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["kcal_by_route"]["parenteral"] == 1540.0
    assert summary["kcal_by_route"]["oral"] == 600.0
    assert summary["parenteral"]["non_protein_kcal_per_g_nitrogen"] > 0


def test_invalid_route_combination_is_rejected(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/prescriptions/evaluate",
        json={"routes": {"oral": True, "parenteral": True}},
    )

    assert response.status_code == 422


def test_unknown_schedule_slot_is_rejected(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    payload = _scenario_a_payload()
    payload["enteral"]["formulas"][0]["schedule"] = {"slots": ["25:00"]}

    response = client.post("/prescriptions/evaluate", json=payload)

    assert response.status_code == 422


def test_too_many_module_lines_are_rejected(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    payload = _scenario_a_payload()
    payload["enteral"]["modules"] = [
        {"module_id": "protein-mod", "quantity_per_administration": 5}
    ] * 4

    response = client.post("/prescriptions/evaluate", json=payload)

    assert response.status_code == 422


def test_both_system_is_not_a_prescription_system(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    payload = _scenario_a_payload()
    payload["enteral"]["system_type"] = "both"

    response = client.post("/prescriptions/evaluate", json=payload)

    assert response.status_code == 422
