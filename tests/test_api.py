import pytest
from fastapi.testclient import TestClient

from stagesim_api.main import app
from stagesim_api.settings import Settings

client = TestClient(app)

SIM = {
    "hours": 2,
    "arrival_rate_per_hour": 10.0,
    "tolerance_minutes": 6.0,
    "abandon_probability": 0.5,
    "seed": 8,
    "stages": [
        {"name": "wash", "family": "normal", "param1": 4.0, "param2": 1.0},
        {"name": "rinse", "family": "exponential", "param1": 1.5},
    ],
}


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_simulate():
    r = client.post("/simulate", json=SIM)
    assert r.status_code == 200
    body = r.json()
    assert len(body["hours"]) == 2
    total = sum(h["served_count"] + h["pending_count"] + h["left_count"] for h in body["hours"])
    assert total == body["total_customers"]
    for h in body["hours"]:
        for c in h["customers"]:
            if c["left"]:
                assert c["stage_durations"] == [] and c["total_duration"] == 0.0


def test_simulate_is_reproducible_with_seed():
    assert client.post("/simulate", json=SIM).json() == client.post("/simulate", json=SIM).json()


@pytest.mark.parametrize("patch", [
    {"hours": 0},
    {"arrival_rate_per_hour": 0},
    {"stages": []},
    {"abandon_probability": 2.0},
    {"hours": True},
    {"stages": [{"name": "wax", "family": "gamma", "param1": 1.0}]},
])
def test_simulate_schema_rejections(patch):
    assert client.post("/simulate", json={**SIM, **patch}).status_code == 422


@pytest.mark.parametrize("stage", [
    {"name": "dry", "family": "uniform", "param1": 3.0, "param2": 1.0},
    {"name": "wash", "family": "normal", "param1": 3.0, "param2": -1.0},
    {"name": "rinse", "family": "exponential", "param1": 0.0},
])
def test_simulate_core_rejections(stage):
    r = client.post("/simulate", json={**SIM, "stages": [stage]})
    assert r.status_code == 422
    assert r.json()["kind"] == "InvalidConfiguration"


def test_replications():
    r = client.post("/simulate/replications", json={**SIM, "runs": 4})
    assert r.status_code == 200
    body = r.json()
    assert body["runs"] == 4
    assert len(body["avg_wait_per_run"]) == 4
    assert body["max_avg_wait"] == max(body["avg_wait_per_run"])


def test_montecarlo():
    r = client.post("/montecarlo", json={
        "n_simulations": 2000,
        "seed": 1,
        "variables": [
            {"name": "a", "family": "normal", "param1": 10.0, "param2": 4.0},
            {"name": "b", "family": "exponential", "param1": 2.0, "multiplier": -1.0},
        ],
    })
    assert r.status_code == 200
    body = r.json()
    assert body["iterations"] == 2000
    assert body["probability"] is None


def test_sample_means():
    r = client.post("/montecarlo/sample-means", json={
        "family": "uniform", "n_samples": 10, "n_trials": 25, "param1": 0.0, "param2": 1.0, "seed": 2,
    })
    assert r.status_code == 200
    assert len(r.json()) == 25


def test_generate():
    r = client.post("/generate", json={"family": "poisson", "n": 30, "param1": 3.0, "seed": 4})
    assert r.status_code == 200
    assert len(r.json()) == 30


def test_inverse_cdf():
    r = client.post("/inverse-cdf", json={"dist_type": "exponential", "probability": 0.5, "param1": 1.0})
    assert r.status_code == 200
    assert r.json()["z_score"] is None
    assert client.post("/inverse-cdf", json={
        "dist_type": "normal", "probability": 1.0, "param1": 0.0, "param2": 1.0,
    }).status_code == 422


def test_analyze():
    r = client.post("/analyze", json={"data": [2.0, 2.0, 2.0]})
    assert r.status_code == 200
    body = r.json()
    assert body["summary"]["mode"] == [2.0]
    assert body["best_fit"]["name"] == "exponential"
    assert client.post("/analyze", json={"data": []}).status_code == 422


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("STAGESIM_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("STAGESIM_LOG_LEVEL", "debug")
    s = Settings.from_env()
    assert s.cors_origins == ["http://a.test", "http://b.test"]
    assert s.log_level == "DEBUG"
