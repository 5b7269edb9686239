"""
Configuration loader for bankroll.

What it does:
- Reads static settings from `config/config.yaml` (all sections optional; a
  missing file yields defaults).
- Resolves the advisory API key from an environment variable derived from
  the provider name: `{provider.upper()}_API_KEY` (e.g. `GEMINI_API_KEY`).
- Validates the resulting configuration using Pydantic models.

Where it is used:
- Called by `bankroll.main` to build a `Settings` object for runtime.

Key outputs:
- `Settings` with ledger defaults, store path, advisory provider settings,
  leverage cycle defaults and the report output directory.
"""

import os
import pathlib
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class LedgerDefaults(BaseModel):
    """Bankroll settings used when no ledger has been persisted yet."""
    initial_balance: float = Field(default=0.0, ge=0)
    unit_risk_percent: float = Field(default=1.0, ge=0, le=100)
    daily_goal_percent: float = Field(default=3.0, ge=0, le=100)


class StoreConfig(BaseModel):
    path: str = "data/bankroll.json"


class AdvisoryConfig(BaseModel):
    """Advisory text service settings. The API key never comes from YAML."""
    provider: Literal["gemini", "local_openai"] = "gemini"
    model: str = "gemini-2.0-flash"
    base_url: Optional[str] = None
    timeout_s: float = Field(default=30.0, gt=0)
    min_operations: int = Field(default=3, ge=0)
    api_key: str = ""


class LeverageDefaults(BaseModel):
    start_capital: float = Field(default=10.0, ge=0)
    target_odd: float = Field(default=2.0, gt=1)
    step_count: int = Field(default=5, ge=1)
    withdraw_percent: float = Field(default=0.0, ge=0, le=100)


class Settings(BaseModel):
    """Runtime settings assembled from YAML + environment variables."""
    ledger: LedgerDefaults = Field(default_factory=LedgerDefaults)
    store: StoreConfig = Field(default_factory=StoreConfig)
    advisory: AdvisoryConfig = Field(default_factory=AdvisoryConfig)
    leverage: LeverageDefaults = Field(default_factory=LeverageDefaults)
    report_dir: str = "reports"
    prometheus_port: Optional[int] = None

    @field_validator("report_dir")
    @classmethod
    def not_empty(cls, v, info):
        if not v:
            raise ValueError(f"{info.field_name} must not be empty")
        return v


def _read_yaml(path: str) -> Dict[str, Any]:
    p = pathlib.Path(path)
    if not p.exists():
        return {}
    with open(p, "r") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: str = "config/config.yaml") -> Settings:
    """Load YAML config, resolve the advisory API key from env, and return Settings.

    Invalid values raise pydantic.ValidationError.
    """
    config = _read_yaml(path)
    advisory = dict(config.get("advisory") or {})
    provider = str(advisory.get("provider", "gemini"))
    advisory["api_key"] = os.getenv(f"{provider.upper()}_API_KEY", "")
    config["advisory"] = advisory
    return Settings(**config)
