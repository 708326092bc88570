import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cadence.domain import constants as c
from cadence.domain.models import SrsSettings, TimeThresholds, normalize_study_days


class ThresholdConfig(BaseModel):
    """Minute boundaries for one difficulty."""

    mastered: float = Field(ge=0)
    high: float = Field(ge=0)
    medium: float = Field(ge=0)

    @model_validator(mode="after")
    def check_ascending(self) -> "ThresholdConfig":
        if not (self.mastered <= self.high <= self.medium):
            raise ValueError("thresholds must ascend: mastered <= high <= medium")
        return self


class AppConfig(BaseSettings):
    """
    Configuration model for cadence.
    Supports loading from:
    1. Environment variables (CADENCE_*)
    2. Config file (~/.config/cadence/config.toml or ~/.cadence.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        extra="ignore",
    )

    # Paths
    store_path: Path = Field(default_factory=lambda: Path.home() / ".config/cadence/problems.json")

    # Scheduling defaults (stored settings in the problem store win over these)
    growth_factor: float = Field(default=c.DEFAULT_GROWTH_FACTOR, gt=1)
    max_stage: int = Field(default=c.DEFAULT_MAX_STAGE, ge=0)
    base_interval: float = Field(default=c.DEFAULT_BASE_INTERVAL, gt=0)
    max_interval: float = Field(default=c.DEFAULT_MAX_INTERVAL, gt=0)
    leech_threshold: int = Field(default=c.DEFAULT_LEECH_THRESHOLD, ge=1)
    max_daily_reviews: int = Field(default=c.DEFAULT_MAX_DAILY_REVIEWS, ge=1)
    study_days: list[bool] = Field(default_factory=lambda: list(c.DEFAULT_STUDY_DAYS))
    time_thresholds: dict[str, ThresholdConfig] = Field(
        default_factory=lambda: {
            name: ThresholdConfig(**bounds) for name, bounds in c.DEFAULT_TIME_THRESHOLDS.items()
        }
    )

    # 0 = warnings only, 1 = info, 2+ = debug
    verbose: int = Field(default=1, ge=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        toml_files = [
            Path.home() / ".config/cadence/config.toml",
            Path.home() / ".cadence.toml",
        ]

        toml_file = None
        for f in toml_files:
            if f.exists():
                toml_file = f
                break

        # Earlier sources win: CLI overrides, then environment, then file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("store_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @field_validator("study_days", mode="before")
    @classmethod
    def coerce_study_days(cls, v: Any) -> list[bool]:
        days = [bool(d) for d in v]
        if len(days) != 7:
            raise ValueError("study_days needs exactly 7 entries, Sunday first")
        return days

    @field_validator("time_thresholds", mode="before")
    @classmethod
    def lowercase_difficulties(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k).lower(): bounds for k, bounds in v.items()}
        return v

    def srs_settings(self, stored: dict[str, Any] | None = None) -> SrsSettings:
        """
        Build the engine settings.

        ``stored`` is the settings object saved in the problem store
        (camelCase keys); any field it carries overrides this config.
        """
        merged = self
        if stored:
            overrides = {
                field_name: stored[key]
                for key, field_name in STORED_SETTINGS_FIELDS.items()
                if stored.get(key) is not None
            }
            if overrides:
                # Init kwargs outrank env and file sources, so every field comes from here
                merged = AppConfig(**{**self.model_dump(), **overrides})

        return SrsSettings(
            growth_factor=merged.growth_factor,
            max_stage=merged.max_stage,
            base_interval=merged.base_interval,
            max_interval=merged.max_interval,
            leech_threshold=merged.leech_threshold,
            max_daily_reviews=merged.max_daily_reviews,
            study_days=normalize_study_days(merged.study_days),
            time_thresholds={
                name: TimeThresholds(mastered=t.mastered, high=t.high, medium=t.medium)
                for name, t in merged.time_thresholds.items()
            },
        )


# Stored settings key -> AppConfig field
STORED_SETTINGS_FIELDS = {
    "growthFactor": "growth_factor",
    "maxStage": "max_stage",
    "baseInterval": "base_interval",
    "maxInterval": "max_interval",
    "leechThreshold": "leech_threshold",
    "maxDailyReviews": "max_daily_reviews",
    "studyDays": "study_days",
    "timeThresholds": "time_thresholds",
}


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/cadence/config.toml (if exists)
    3. Environment variables (CADENCE_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)


def log_level(verbose: int) -> int:
    """Map a verbosity count to a logging level."""
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG
