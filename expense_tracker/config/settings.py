"""
Configuration Management for the Expense Tracker

Typed settings read from environment variables and an optional .env
file via pydantic-settings.

DESIGN DECISION: No other module reads the environment.
Every group has its own env prefix so a `.env` file can override any
value without touching code.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSES_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Key-value backend: 'file' for local disk, 'memory' for ephemeral runs"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one file per storage key"
    )

    # Keys of the two independent snapshots
    expenses_key: str = Field(
        default="expenses",
        min_length=1,
        description="Storage key of the expense collection snapshot"
    )
    budget_key: str = Field(
        default="budget",
        min_length=1,
        description="Storage key of the budget snapshot"
    )

    write_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a snapshot write before giving up"
    )

    @field_validator('budget_key')
    @classmethod
    def validate_distinct_keys(cls, v: str, info: ValidationInfo) -> str:
        """Both snapshots must live under different keys."""
        if v == info.data.get('expenses_key'):
            raise ValueError("expenses_key and budget_key must differ")
        return v


class BudgetSettings(BaseSettings):
    """Defaults used when no budget has been saved yet."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSES_BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_total: Decimal = Field(
        default=Decimal("50000"),
        ge=0,
        description="Monthly budget on first run"
    )


class AppSettings(BaseSettings):
    """Logging and display settings (no env prefix)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Deployment name included in startup logs"
    )
    debug_mode: bool = Field(
        default=False,
        description="Force DEBUG logging regardless of log_level"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of console output"
    )

    # Display
    currency_symbol: str = Field(
        default="₹",
        max_length=5,
        description="Symbol prefixed to formatted amounts"
    )
    export_filename: str = Field(
        default="expenses.csv",
        description="File name offered for the CSV download"
    )
    nearing_budget_percent: float = Field(
        default=80.0,
        ge=0.0,
        le=100.0,
        description="Budget usage above which the user is warned"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Entry point to every settings group.

    Each property re-reads its group, so a cleared cache picks up
    environment changes.
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
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Shared Settings instance.

    Tests call get_settings.cache_clear() after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to load every settings group.

    Returns a dict of {setting_name: is_valid}, with a
    `<name>_error` entry for every group that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "budget", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
