"""
Tests for configuration loading.
"""

import pytest

from finance_tracker.config import AppSettings, validate_all_settings


class TestAppSettings:
    """Tests for application defaults and overrides."""

    def test_defaults(self):
        settings = AppSettings(_env_file=None)
        assert settings.user_identifier == "default_user"
        assert settings.default_bank_name == "New bank"
        assert settings.default_allocation == {
            "living": 40, "invest": 30, "savings": 20, "play": 10,
        }

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_PLAY_PERCENT", "15")
        monkeypatch.setenv("CURRENCY_SYMBOL", "$")
        settings = AppSettings(_env_file=None)
        assert settings.default_allocation["play"] == 15
        assert settings.currency_symbol == "$"

    def test_rejects_bad_symbol_position(self, monkeypatch):
        monkeypatch.setenv("CURRENCY_SYMBOL_POSITION", "middle")
        with pytest.raises(ValueError):
            AppSettings(_env_file=None)


class TestValidateAllSettings:
    """Tests for the startup configuration check."""

    def test_missing_sheets_config(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        status = validate_all_settings()
        assert status["google_sheets"] is False
        assert "google_sheets_error" in status
        assert status["app"] is True

    def test_sheets_configured(self, monkeypatch, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-id")
        assert validate_all_settings()["google_sheets"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
