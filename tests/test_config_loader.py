import pytest
from pydantic import ValidationError

from bankroll.config.loader import load_settings


def test_missing_file_yields_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    s = load_settings(str(tmp_path / "absent.yaml"))
    assert s.ledger.unit_risk_percent == 1.0
    assert s.ledger.daily_goal_percent == 3.0
    assert s.advisory.provider == "gemini"
    assert s.advisory.min_operations == 3
    assert s.advisory.api_key == ""
    assert s.leverage.target_odd == 2.0


def test_yaml_values_and_env_api_key(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "ledger:\n"
        "  initial_balance: 500\n"
        "  unit_risk_percent: 2.5\n"
        "advisory:\n"
        "  provider: local_openai\n"
        "  base_url: http://localhost:9000/v1\n"
        "  api_key: from-yaml-is-ignored\n"
        "store:\n"
        "  path: /tmp/x.json\n"
    )
    monkeypatch.setenv("LOCAL_OPENAI_API_KEY", "secret")
    s = load_settings(str(cfg))
    assert s.ledger.initial_balance == 500.0
    assert s.ledger.unit_risk_percent == 2.5
    assert s.ledger.daily_goal_percent == 3.0
    assert s.advisory.provider == "local_openai"
    assert s.advisory.api_key == "secret"
    assert s.store.path == "/tmp/x.json"


def test_invalid_values_raise(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("leverage:\n  target_odd: 0.5\n")
    with pytest.raises(ValidationError):
        load_settings(str(cfg))
    cfg.write_text("advisory:\n  provider: carrier-pigeon\n")
    with pytest.raises(ValidationError):
        load_settings(str(cfg))
