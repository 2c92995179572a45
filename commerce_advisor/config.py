"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      - committed static defaults
  2. ``config/local.toml``        - optional local overrides (gitignored)
  3. ``.env``                     - local env overrides (gitignored)
  4. Environment variables        - ``COMMERCE_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Advisors accept their own sub-config (``RestockConfig``, ``PricingConfig``
and so on) as an optional keyword argument.  The defaults below reproduce
the engine's documented thresholds exactly, so calling an advisor without a
config is equivalent to calling it with ``AppConfig().<section>``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class RestockConfig(BaseModel):
    """Demand-driven restock urgency settings."""

    model_config = ConfigDict(frozen=True)

    min_history_days: int = 7
    horizon_days: int = 30
    safety_stock_days: int = 14
    critical_days: int = 7
    high_days: int = 14
    medium_days: int = 21

    @model_validator(mode="after")
    def validate_urgency_bands(self) -> "RestockConfig":
        if not 0 < self.critical_days <= self.high_days <= self.medium_days:
            raise ValueError(
                "Urgency bands must satisfy 0 < critical_days <= high_days <= medium_days, "
                f"got {self.critical_days}/{self.high_days}/{self.medium_days}."
            )
        if self.horizon_days < 1:
            raise ValueError(f"horizon_days must be >= 1, got {self.horizon_days}.")
        return self


class PricingConfig(BaseModel):
    """Elasticity-driven price change settings."""

    model_config = ConfigDict(frozen=True)

    min_history_rows: int = 14
    target_margin: float = 0.40
    max_increase_pct: float = 0.15
    inelastic_threshold: float = 1.5
    elastic_threshold: float = 2.0
    competitor_trigger: float = 1.10
    competitor_target: float = 1.05
    min_price_change: float = 0.01
    max_confidence: float = 0.8
    price_points_for_full_confidence: int = 5

    @field_validator("target_margin")
    @classmethod
    def validate_target_margin(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError(f"target_margin must be in (0.0, 1.0), got {v}.")
        return v

    @field_validator("max_confidence")
    @classmethod
    def validate_max_confidence(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError(f"max_confidence must be in (0.0, 1.0], got {v}.")
        return v


class MarketingConfig(BaseModel):
    """Campaign ROAS / CTR triage thresholds."""

    model_config = ConfigDict(frozen=True)

    roas_target: float = 2.0
    roas_critical: float = 1.0
    ctr_floor: float = 0.01
    roas_scale: float = 3.0
    scale_budget_share: float = 0.5
    portfolio_roas_target: float = 2.5


class CrossSellConfig(BaseModel):
    """Market-basket mining thresholds."""

    model_config = ConfigDict(frozen=True)

    min_support: int = 5
    min_confidence: float = 0.10
    min_lift: float = 1.20
    max_recommendations: int = 3
    uplift_factor: float = 25.0

    @field_validator("max_recommendations")
    @classmethod
    def validate_max_recommendations(cls, v: int) -> int:
        if not 1 <= v <= 3:
            raise ValueError(f"max_recommendations must be in [1, 3], got {v}.")
        return v


class InsightConfig(BaseModel):
    """Business insight synthesis thresholds."""

    model_config = ConfigDict(frozen=True)

    window_days: int = 7
    trend_threshold_pct: float = 10.0
    high_impact_pct: float = 25.0
    high_margin: float = 0.5
    top_customers: int = 5
    concentration_threshold: float = 0.30
    anomaly_sensitivity: float = 2.0
    currency: str = "USD"


class ReportingConfig(BaseModel):
    """Where report files are written."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration - the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    restock: RestockConfig = RestockConfig()
    pricing: PricingConfig = PricingConfig()
    marketing: MarketingConfig = MarketingConfig()
    cross_sell: CrossSellConfig = CrossSellConfig()
    insights: InsightConfig = InsightConfig()
    reporting: ReportingConfig = ReportingConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "default.toml"

# TOML tables that map onto AppConfig sub-configs; anything else is ignored.
_SECTIONS = (
    "restock", "pricing", "marketing", "cross_sell", "insights", "reporting", "logging",
)

_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "COMMERCE_ADVISOR_LOG_LEVEL": ("logging", "level"),
    "COMMERCE_ADVISOR_OUTPUT_DIR": ("reporting", "output_dir"),
}


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build an ``AppConfig`` from ``config_path`` (default ``config/default.toml``).

    A ``local.toml`` next to the file is merged over it, then ``.env`` and
    ``COMMERCE_ADVISOR_*`` variables are applied.

    Raises:
        FileNotFoundError: ``config_path`` does not exist.
        pydantic.ValidationError: a merged value fails validation.
    """
    load_dotenv(dotenv_path=PROJECT_ROOT / ".env", override=False)

    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    raw = _read_toml(path)
    local_path = path.parent / "local.toml"
    if local_path.exists():
        raw = _deep_merge(raw, _read_toml(local_path))

    return _build_app_config(_apply_env_overrides(raw))


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` merged in; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``_ENV_OVERRIDES`` and ``COMMERCE_ADVISOR_DEBUG`` onto ``raw``."""
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        if value := os.environ.get(env_name):
            raw.setdefault(section, {})[key] = value

    if debug := os.environ.get("COMMERCE_ADVISOR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")
    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    # ``debug`` may sit at top level (env override) or under [project].
    debug = raw.get("debug", raw.get("project", {}).get("debug", False))
    sections = {name: raw[name] for name in _SECTIONS if name in raw}
    return AppConfig.model_validate({**sections, "debug": debug})
