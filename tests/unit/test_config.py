"""Unit tests for application configuration.

Tests Settings defaults and production validation.
"""

import pytest
from pydantic import ValidationError

from contentsearch.config import DEFAULT_DATABASE_URL, Settings, get_settings


class TestSettingsDefaults:
    """Test default values."""

    def test_search_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.search_text_config == "simple"
        assert settings.search_max_query_terms == 32
        assert settings.single_tenant_mode is True
        assert settings.database_url == DEFAULT_DATABASE_URL

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SEARCH_TEXT_CONFIG", "english")
        monkeypatch.setenv("SEARCH_MAX_QUERY_TERMS", "8")

        settings = Settings(_env_file=None)

        assert settings.search_text_config == "english"
        assert settings.search_max_query_terms == 8

    @pytest.mark.parametrize("config", ["english'; drop table x; --", "Simple", ""])
    def test_text_config_must_be_an_identifier(self, config: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, search_text_config=config)

    def test_max_query_terms_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, search_max_query_terms=0)


class TestProductionValidation:
    """Test production safety checks."""

    def test_debug_rejected_in_production(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(
                _env_file=None,
                app_env="production",
                app_debug=True,
                database_url="postgresql+asyncpg://prod:secret@db:5432/cms",
            )
        assert "APP_DEBUG" in str(exc_info.value)

    def test_default_database_rejected_in_production(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, app_env="production")
        assert "DATABASE_URL" in str(exc_info.value)

    def test_sqlite_rejected_in_production(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, app_env="production", database_url="sqlite+aiosqlite:///x.db")

    def test_valid_production_settings(self):
        settings = Settings(
            _env_file=None,
            app_env="production",
            database_url="postgresql+asyncpg://prod:secret@db:5432/cms",
        )
        assert settings.is_production
        assert not settings.is_development


class TestSecretFiles:
    """Test *_FILE indirection."""

    def test_database_url_from_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        secret = tmp_path / "database_url"
        secret.write_text("sqlite+aiosqlite:///from-file.db\n", encoding="utf-8")
        monkeypatch.setenv("DATABASE_URL_FILE", str(secret))
        # Registered so the value written by the loader is undone afterwards
        monkeypatch.setenv("DATABASE_URL", "unused")

        get_settings.cache_clear()
        try:
            assert get_settings().database_url == "sqlite+aiosqlite:///from-file.db"
        finally:
            get_settings.cache_clear()

    def test_empty_secret_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        secret = tmp_path / "database_url"
        secret.write_text("  \n", encoding="utf-8")
        monkeypatch.setenv("DATABASE_URL_FILE", str(secret))
        monkeypatch.setenv("DATABASE_URL", "unused")

        get_settings.cache_clear()
        try:
            with pytest.raises(ValueError, match="DATABASE_URL_FILE is empty"):
                get_settings()
        finally:
            get_settings.cache_clear()
