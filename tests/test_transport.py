import json

import pytest

from stagesim.errors import EmptyOrMissingInput, InvalidConfiguration
from stagesim.models import SimulationConfig, StageSpec
from stagesim.simulation import simulate
from stagesim.transport import (
    analyze_json, config_from_json, config_to_json, inverse_cdf_json, montecarlo_json,
    report_from_json, report_to_json, simulate_json,
)

CONFIG = {
    "hours": 3,
    "arrival_rate_per_hour": 12.0,
    "tolerance_minutes": 5.0,
    "abandon_probability": 0.4,
    "seed": 21,
    "stages": [
        {"name": "wash", "family": "normal", "param1": 5.0, "param2": 1.0},
        {"name": "dry", "family": "uniform", "param1": 1.0, "param2": 2.0},
    ],
}


def test_config_parses_into_dataclasses():
    cfg = config_from_json(json.dumps(CONFIG))
    assert isinstance(cfg, SimulationConfig)
    assert cfg.stages[0] == StageSpec("wash", "normal", 5.0, 1.0)
    assert config_from_json(config_to_json(cfg)) == cfg


def test_report_round_trips_field_for_field():
    report = simulate(config_from_json(json.dumps(CONFIG)))
    text = report_to_json(report)
    assert report_from_json(text) == report
    assert report_to_json(report_from_json(text)) == text


def test_simulate_json_returns_report():
    out = json.loads(simulate_json(json.dumps(CONFIG)))
    assert "error" not in out
    assert out["total_customers"] == sum(
        h["served_count"] + h["pending_count"] + h["left_count"] for h in out["hours"]
    )
    assert [h["hour_index"] for h in out["hours"]] == [1, 2, 3]


@pytest.mark.parametrize("text", [None, "", "   "])
def test_missing_input_is_reported(text):
    out = json.loads(simulate_json(text))
    assert out["kind"] == "EmptyOrMissingInput"
    with pytest.raises(EmptyOrMissingInput):
        config_from_json(text)


@pytest.mark.parametrize("patch", [
    {"hours": 0},
    {"arrival_rate_per_hour": -2.0},
    {"stages": []},
    {"stages": [{"name": "rinse", "family": "exponential", "param1": 0.0, "param2": 0.0}]},
    {"hours": "many"},
])
def test_invalid_configuration_never_yields_a_report(patch):
    out = json.loads(simulate_json(json.dumps({**CONFIG, **patch})))
    assert set(out) == {"error", "kind"}
    assert out["kind"] == "InvalidConfiguration"


def test_malformed_json():
    with pytest.raises(InvalidConfiguration):
        config_from_json("{not json")
    assert json.loads(simulate_json("{not json"))["kind"] == "InvalidConfiguration"


def test_montecarlo_json():
    req = {
        "n_simulations": 1000,
        "seed": 3,
        "variables": [{"name": "x", "family": "uniform", "param1": 0.0, "param2": 1.0}],
        "analysis": {"mode_type": "probability", "threshold": 0.5, "operator": ">",
                     "cost_per_event": 1.0, "population_size": 10.0},
    }
    out = json.loads(montecarlo_json(json.dumps(req)))
    assert out["iterations"] == 1000
    assert 0.0 < out["probability"] < 1.0

    bad = json.loads(montecarlo_json(json.dumps({**req, "n_simulations": 0})))
    assert bad["kind"] == "InvalidConfiguration"


def test_inverse_cdf_json():
    out = json.loads(inverse_cdf_json(json.dumps(
        {"dist_type": "uniform", "probability": 0.5, "param1": 0.0, "param2": 10.0}
    )))
    assert out == {"value": 5.0, "z_score": None}
    err = json.loads(inverse_cdf_json(json.dumps(
        {"dist_type": "uniform", "probability": 1.5, "param1": 0.0, "param2": 10.0}
    )))
    assert err["kind"] == "InvalidConfiguration"


def test_analyze_json():
    out = json.loads(analyze_json(json.dumps({"data": [1.0, 2.0, 2.0, 3.0, 4.0, 8.0]})))
    assert set(out) == {"summary", "histogram", "freq_table", "boxplot", "stem_leaf", "best_fit", "curves"}
    assert out["summary"]["n"] == 6
    assert json.loads(analyze_json(json.dumps({"data": []})))["kind"] == "EmptyOrMissingInput"


def test_null_document_is_missing_input():
    assert json.loads(simulate_json("null"))["kind"] == "EmptyOrMissingInput"
    with pytest.raises(EmptyOrMissingInput):
        config_from_json(" null ")


def test_boolean_hours_are_rejected():
    out = json.loads(simulate_json(json.dumps({**CONFIG, "hours": True})))
    assert out["kind"] == "InvalidConfiguration"
    bad_mc = {"n_simulations": True, "variables": [{"name": "x", "family": "exponential", "param1": 1.0}]}
    assert json.loads(montecarlo_json(json.dumps(bad_mc)))["kind"] == "InvalidConfiguration"


def test_analyze_json_rejects_inverted_limits():
    out = json.loads(analyze_json(json.dumps({"data": [1.0, 2.0, 3.0], "forced_min": 5.0, "forced_max": 0.0})))
    assert out["kind"] == "InvalidConfiguration"
