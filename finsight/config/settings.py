"""
Configuration Management for FinSight

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Analytics thresholds live here too, so the insight rules can be tuned
without touching the statistics code.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINSIGHT_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="json_file",
        pattern="^(memory|json_file)$",
        description="Storage backend to use"
    )
    path: str = Field(
        default="data/finsight.json",
        description="Path of the JSON file used by the json_file backend"
    )
    transactions_key: str = Field(
        default="accounting-transactions",
        description="Key under which the transaction list is stored"
    )
    user_type_key: str = Field(
        default="accounting-user-type",
        description="Key under which the selected profile is stored"
    )

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject paths that point at a directory."""
        if Path(v).is_dir():
            raise ValueError(f"Storage path {v} is a directory")
        return v


class AnalyticsSettings(BaseSettings):
    """Thresholds used by the insight rules."""

    model_config = SettingsConfigDict(
        env_prefix="FINSIGHT_ANALYTICS_",
        extra="ignore"
    )

    velocity_warning: float = Field(
        default=1000.0,
        ge=0,
        description="Velocity (amount change per day) above which we warn"
    )
    entropy_opportunity: float = Field(
        default=3.0,
        ge=0,
        description="Cash flow entropy above which we suggest smoothing"
    )
    pattern_growth_amount: float = Field(
        default=5000.0,
        ge=0,
        description="Minimum average amount for a growth prediction"
    )
    risk_warning: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Composite risk score above which we warn"
    )
    min_pattern_transactions: int = Field(
        default=3,
        ge=2,
        description="Transactions a category needs to be reported as a pattern"
    )
    min_forecast_transactions: int = Field(
        default=5,
        ge=1,
        description="Transactions needed before forecasting"
    )
    min_risk_transactions: int = Field(
        default=10,
        ge=1,
        description="Transactions needed before computing a risk score"
    )
    forecast_weeks: int = Field(
        default=12,
        ge=1,
        le=52,
        description="Number of weekly predictions to generate"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local logs"
    )

    # Display
    currency_symbol: str = Field(
        default="Rs.",
        description="Prefix used when formatting amounts"
    )
    default_currency: str = Field(
        default="INR",
        min_length=3,
        max_length=3,
        description="Currency assigned to new transactions"
    )

    # Validation thresholds
    max_transaction_amount: float = Field(
        default=10000000.0,
        description="Maximum reasonable amount (for sanity checking)"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        description="How many days in the future a transaction date can be"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def analytics(self) -> AnalyticsSettings:
        return AnalyticsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    "<name>_error" entry for every section that failed.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "analytics", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
