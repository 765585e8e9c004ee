"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.

Every engine function takes its thresholds from these models, defaulting
to the module-level defaults when the caller passes no config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class RiskConfig(BaseModel):
    individual_limit_pct: float = 0.02  # 2% of equity per trade
    portfolio_limit_pct: float = 0.06  # 6% of equity across open trades
    warning_threshold_pct: float = 4.5  # portfolio % above which level is WARNING
    max_equity: float = 1_000_000_000.0
    max_cash_adjustment: float = 10_000_000.0


class GradeWeights(BaseModel):
    risk_management: float = 0.35
    method_alignment: float = 0.30
    mindset_quality: float = 0.25
    execution: float = 0.10

    @model_validator(mode="after")
    def _weights_sum_to_one(self) -> GradeWeights:
        total = (
            self.risk_management
            + self.method_alignment
            + self.mindset_quality
            + self.execution
        )
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"grade weights must sum to 1.0, got {total:.4f}")
        return self


class GradingConfig(BaseModel):
    weights: GradeWeights = Field(default_factory=GradeWeights)
    good_score: float = 80.0  # components below this always get an improvement
    recommendation_floor: float = 70.0  # overall score below this adds general advice
    neutral_execution_score: float = 75.0  # execution score while a trade is open
    loss_tolerance: float = 1.1  # loss up to 110% of planned risk counts as contained
    min_reward_risk: float = 2.0


class AnalyticsConfig(BaseModel):
    significance_sample_size: int = 30
    confidence_level: float = 95.0
    coaching_window: int = 10
    coaching_threshold: float = 70.0
    stable_trend_band: float = 2.0


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level engine settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    risk: RiskConfig = Field(default_factory=RiskConfig)
    grading: GradingConfig = Field(default_factory=GradingConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "JOURNAL_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    from .errors import ConfigError

    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        import tomli

        with open(path, "rb") as f:
            try:
                data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    return Settings(**data)
