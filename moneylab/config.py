"""
Application configuration.

Settings are read from environment variables (or a ``.env`` file) and
validated when first loaded, so a bad ``TAX_YEAR`` or horizon setting stops
the app factory instead of the first request.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moneylab.models.tax_tables import TAX_TABLES, TaxTable, get_tax_table
from moneylab.models.time_grid import (
    DEFAULT_BUFFER_YEARS,
    DEFAULT_MAX_AGE,
    HorizonPolicy,
)

APP_ENVS = {"development", "testing", "production"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
PLACEHOLDER_SECRET_KEY = "your-secret-key-here-change-in-production"


class Settings(BaseSettings):
    """Calculator service settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_env: str = Field(default="development", alias="APP_ENV")
    secret_key: str = Field(..., alias="SECRET_KEY")
    flask_env: str = Field(default="development", alias="FLASK_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Net worth projection horizon, see HorizonPolicy
    projection_horizon_policy: Literal["dynamic", "fixed"] = Field(
        default="dynamic", alias="PROJECTION_HORIZON_POLICY"
    )
    projection_max_age: int = Field(
        default=DEFAULT_MAX_AGE, ge=1, le=150, alias="PROJECTION_MAX_AGE"
    )
    projection_buffer_years: int = Field(
        default=DEFAULT_BUFFER_YEARS, ge=0, alias="PROJECTION_BUFFER_YEARS"
    )

    tax_year: int = Field(default=2025, alias="TAX_YEAR")

    @field_validator("secret_key")
    @classmethod
    def reject_placeholder_secret(cls, v):
        if not v or v == PLACEHOLDER_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set to a secure value")
        return v

    @field_validator("app_env")
    @classmethod
    def check_app_env(cls, v):
        if v not in APP_ENVS:
            raise ValueError(f"APP_ENV must be one of {sorted(APP_ENVS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept any case, store upper case for ``logging``."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}")
        return level

    @field_validator("tax_year")
    @classmethod
    def check_tax_year(cls, v):
        """Only years with a published tax table can be selected."""
        if v not in TAX_TABLES:
            raise ValueError(f"TAX_YEAR must be one of {sorted(TAX_TABLES)}")
        return v

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    def horizon_policy(self) -> HorizonPolicy:
        """Projection horizon built from the PROJECTION_* settings."""
        return HorizonPolicy(
            policy=self.projection_horizon_policy,
            max_age=self.projection_max_age,
            buffer_years=self.projection_buffer_years,
        )

    def tax_table(self) -> TaxTable:
        """Tax table for the configured TAX_YEAR."""
        return get_tax_table(self.tax_year)


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings from the environment, or from ``env_file`` when given."""
    if env_file is None:
        return Settings()
    return Settings(_env_file=env_file)


# Loaded lazily so tests can patch the environment first
_settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_global_settings() -> None:
    """Forget the cached settings so the next call reloads them."""
    global _settings
    _settings = None
