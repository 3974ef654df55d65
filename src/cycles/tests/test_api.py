"""Tests for the HTTP surface: /health and /api/v1/predictions."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.cycles.config_loader import PredictionConfig, get_prediction_config
from src.main import app


@pytest.fixture
def client():
    app.dependency_overrides[get_prediction_config] = PredictionConfig.default
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["prediction_config"] == "1.0"


class TestPredictionsEndpoint:
    def test_empty_history_is_not_an_error(self, client: TestClient) -> None:
        response = client.post("/api/v1/predictions", json={"cycles": []})
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "insufficient_data"
        assert body["prediction"] is None
        assert body["reminders"] == []

    def test_single_cycle(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/predictions",
            json={
                "cycles": [
                    {
                        "id": 1,
                        "start_date": "2024-01-01",
                        "bleeding_intensity": "Heavy",
                        "blood_color": "Dark Red",
                        "pain_level": 6,
                    }
                ],
                "as_of": "2024-01-20",
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        prediction = body["prediction"]
        assert prediction["most_likely_period_start"] == "2024-01-29"
        assert prediction["min_period_start"] == "2024-01-21"
        assert prediction["max_period_start"] == "2024-02-06"
        assert prediction["ovulation_day"] == "2024-01-15"
        assert prediction["fertile_window"] == {"start": "2024-01-09", "end": "2024-01-16"}
        assert prediction["cycle_regularity"] == "IRREGULAR"
        assert body["labels"] == {
            "regularity": "Irregular",
            "confidence": "Low",
            "days_left": "9d left",
        }
        assert [r["fire_on"] for r in body["reminders"]] == ["2024-01-24", "2024-01-27"]

    def test_unsorted_history(self, client: TestClient) -> None:
        cycles = [
            {"start_date": "2024-02-26", "end_date": "2024-03-01"},
            {"start_date": "2024-01-01", "end_date": "2024-01-05"},
            {"start_date": "2024-01-29", "end_date": "2024-02-02"},
        ]
        response = client.post("/api/v1/predictions", json={"cycles": cycles})
        assert response.status_code == 200
        prediction = response.json()["prediction"]
        assert prediction["cycle_regularity"] == "VERY_REGULAR"
        assert prediction["most_likely_period_start"] == "2024-03-25"
        assert prediction["period_length"] == 4

    @pytest.mark.parametrize(
        "cycle",
        [
            {"start_date": "2024-01-01", "pain_level": 11},
            {"start_date": "2024-01-01", "pain_level": -1},
            {"start_date": "2024-01-10", "end_date": "2024-01-05"},
            {"start_date": "2024-01-01", "bleeding_intensity": "Torrential"},
            {"start_date": "2024-01-01", "blood_color": "Purple"},
            {"start_date": "not-a-date"},
        ],
    )
    def test_invalid_records_rejected(self, client: TestClient, cycle: dict) -> None:
        response = client.post("/api/v1/predictions", json={"cycles": [cycle]})
        assert response.status_code == 422
