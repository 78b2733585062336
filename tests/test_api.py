"""
Тести для модуля api

Запуск: pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from dr_predict.api import APIConfig
from dr_predict.api.app import create_app
from dr_predict.encoding import InMemoryDatasetLoader
from dr_predict.lifecycle import ModelLifecycleManager


PATIENT = {"fever": True, "cough": True, "age": 35, "gender": "Male", "bloodPressure": 120}


def _client(manager, config):
    return TestClient(create_app(manager=manager, api_config=APIConfig(engine=config)))


def test_app_creation(fast_config):
    """Тест створення FastAPI app"""
    from fastapi import FastAPI

    app = create_app(ModelLifecycleManager(config=fast_config), APIConfig(engine=fast_config))

    assert isinstance(app, FastAPI)
    assert app.title == "Dr.Predict API"
    paths = set(app.openapi()["paths"])
    assert {"/health", "/api/v1/predict", "/api/v1/conditions"} <= paths


def test_not_ready_returns_503(fast_config):
    """Тест: до публікації моделі — 503 NOT_READY"""
    client = _client(ModelLifecycleManager(config=fast_config), fast_config)

    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "starting"
    assert response.json()["engine"]["state"] == "uninitialized"

    response = client.post("/api/v1/predict", json={"features": PATIENT})
    assert response.status_code == 503
    assert response.json()["error"] == "NOT_READY"

    # Стан перевіряється раніше за поля запиту
    response = client.post("/api/v1/predict", json={"features": {"age": -3}})
    assert response.status_code == 503

    assert client.get("/api/v1/conditions").status_code == 503


def test_predict(ready_manager, fast_config):
    """Тест прогнозу: 200, ранжований список"""
    with _client(ready_manager, fast_config) as client:
        response = client.post("/api/v1/predict", json={"features": PATIENT, "threshold": 0.0})

    assert response.status_code == 200
    data = response.json()

    assert data["threshold"] == 0.0
    assert data["model_version"] == 1
    assert len(data["predictions"]) == 4
    assert [p["rank"] for p in data["predictions"]] == [1, 2, 3, 4]

    probabilities = [p["probability"] for p in data["predictions"]]
    assert probabilities == sorted(probabilities, reverse=True)

    print(f"✓ Predictions: {data['predictions']}")


def test_predict_default_threshold(ready_manager, fast_config):
    """Тест: без порогу застосовується default_threshold"""
    client = _client(ready_manager, fast_config)

    response = client.post("/api/v1/predict", json={"features": PATIENT})

    assert response.status_code == 200
    assert response.json()["threshold"] == fast_config.predictor.default_threshold
    assert all(p["probability"] >= 0.5 for p in response.json()["predictions"])


@pytest.mark.parametrize("body", [
    {"features": {"fever": True, "gender": "Male", "bloodPressure": 120}},
    {"features": {**PATIENT, "bloodPressure": "unknown"}},
    {"features": PATIENT, "threshold": "high"},
    {"threshold": 0.1},
])
def test_predict_invalid_input(ready_manager, fast_config, body):
    """Тест: некоректний запит → 422 INVALID_INPUT"""
    client = _client(ready_manager, fast_config)

    response = client.post("/api/v1/predict", json=body)

    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_conditions(ready_manager, fast_config):
    """Тест списку умов"""
    client = _client(ready_manager, fast_config)

    response = client.get("/api/v1/conditions")

    assert response.status_code == 200
    assert response.json()["conditions"] == ["Flu", "COVID-19", "Asthma", "Migraine"]
    assert response.json()["count"] == 4


def test_health_ready(ready_manager, fast_config):
    """Тест health check після навчання"""
    client = _client(ready_manager, fast_config)

    data = client.get("/health").json()

    assert data["status"] == "ok"
    assert data["engine"]["model_version"] == 1


def test_health_failed(record_factory, fast_config):
    """Тест: невдала ініціалізація видна в health, predict → 503 з причиною"""
    manager = ModelLifecycleManager(
        InMemoryDatasetLoader([record_factory("Flu", outcome="Negative")]),
        fast_config
    )
    manager.run()
    client = _client(manager, fast_config)

    assert client.get("/health").json()["status"] == "failed"

    response = client.post("/api/v1/predict", json={"features": PATIENT})
    assert response.status_code == 503
    assert response.json()["details"]["state"] == "failed"
    assert response.json()["details"]["cause"].startswith("DEGENERATE_DATASET")


def test_lifespan_starts_training(records, fast_config):
    """Тест: старт додатку запускає навчання у фоні"""
    manager = ModelLifecycleManager(InMemoryDatasetLoader(records), fast_config)

    with _client(manager, fast_config) as client:
        assert manager.wait_until_ready(timeout=120)

        response = client.post("/api/v1/predict", json={"features": PATIENT, "threshold": 0.0})
        assert response.status_code == 200
        assert client.get("/health").json()["status"] == "ok"
