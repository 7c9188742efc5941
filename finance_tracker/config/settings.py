"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The storage backend credentials, the fixed user identity and the
display conventions all live in one place and are validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet name within the spreadsheet
    finance_sheet_name: str = Field(
        default="FinanceTracker",
        description="Name of the sheet holding one finance row per user"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


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

    # Identity of the single finance record
    user_identifier: str = Field(
        default="default_user",
        min_length=1,
        description="Fixed key of the finance record in storage"
    )

    # Names given to freshly added list entries
    default_bank_name: str = Field(
        default="New bank",
        description="Name of a newly added bank account"
    )
    default_expense_name: str = Field(
        default="New expense",
        description="Name of a newly added fixed expense"
    )

    # Display conventions (vi-VN by default)
    currency_symbol: str = Field(
        default="₫",
        description="Currency symbol shown next to amounts"
    )
    currency_symbol_position: str = Field(
        default="suffix",
        pattern="^(prefix|suffix)$",
        description="Whether the symbol goes before or after the number"
    )
    thousands_separator: str = Field(
        default=".",
        max_length=1,
        description="Digit group separator"
    )

    # Jar percentages used when a record has none
    default_living_percent: int = Field(default=40, ge=0, le=100)
    default_invest_percent: int = Field(default=30, ge=0, le=100)
    default_savings_percent: int = Field(default=20, ge=0, le=100)
    default_play_percent: int = Field(default=10, ge=0, le=100)

    @property
    def default_allocation(self) -> dict[str, int]:
        """Default jar percentages keyed by jar name."""
        return {
            "living": self.default_living_percent,
            "invest": self.default_invest_percent,
            "savings": self.default_savings_percent,
            "play": self.default_play_percent,
        }


class Settings(BaseSettings):
    """
    Root settings container.

    Sub-settings are read from the environment on each access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Built on access: the app runs in memory when Sheets is not configured

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("google_sheets", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
