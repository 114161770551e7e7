"""Tests for settings loading and runtime validation."""

import pytest
from pathlib import Path

from sisyflow.core.config import Settings, DEFAULT_SECRET_KEY, reload_settings, get_settings
from sisyflow.c1_database_session.database_manager import DATABASE_ENV_VAR, resolve_database_path


class TestSettingsDefaults:
    """Defaults used when no environment is configured."""

    def test_llm_defaults(self):
        settings = Settings()

        assert settings.llm.provider == "openrouter"
        assert settings.llm.base_url == "https://openrouter.ai/api/v1"
        assert settings.llm.api_key is None
        assert settings.llm.max_retries == 3

    def test_auth_and_server_defaults(self):
        settings = Settings()

        assert settings.auth.session_cookie_name == "sisyflow_session"
        assert settings.auth.algorithm == "HS256"
        assert settings.server.port == 8000
        assert settings.database.database_path == Path("sisyflow.db")


class TestEnvironmentOverrides:
    """Each sub-config reads its own prefix."""

    def test_openrouter_prefix(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
        monkeypatch.setenv("OPENROUTER_MODEL", "openai/gpt-4o-mini")

        settings = reload_settings()

        assert settings.llm.api_key.get_secret_value() == "sk-or-test"
        assert settings.llm.model == "openai/gpt-4o-mini"
        assert get_settings() is settings

    def test_server_and_auth_prefixes(self, monkeypatch):
        monkeypatch.setenv("SERVER_PORT", "9100")
        monkeypatch.setenv("AUTH_SESSION_TTL_MINUTES", "30")

        settings = reload_settings()

        assert settings.server.port == 9100
        assert settings.auth.session_ttl_minutes == 30

    def test_invalid_port_rejected(self, monkeypatch):
        monkeypatch.setenv("SERVER_PORT", "70000")

        with pytest.raises(ValueError):
            reload_settings()


class TestRuntimeValidation:
    """validate_for_runtime reports what a deployment is missing."""

    def test_missing_api_key(self):
        with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
            Settings(debug=True).validate_for_runtime()

    def test_default_secret_outside_debug(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
        monkeypatch.setenv("DEBUG", "false")
        settings = reload_settings()

        assert settings.auth.secret_key.get_secret_value() == DEFAULT_SECRET_KEY
        with pytest.raises(ValueError, match="AUTH_SECRET_KEY"):
            settings.validate_for_runtime()

    def test_complete_configuration(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
        monkeypatch.setenv("AUTH_SECRET_KEY", "a-real-secret")
        monkeypatch.setenv("DEBUG", "false")

        reload_settings().validate_for_runtime()


class TestDatabasePathResolution:
    def test_explicit_path_wins(self, monkeypatch):
        monkeypatch.setenv(DATABASE_ENV_VAR, "/tmp/from-env.db")

        assert resolve_database_path("/tmp/explicit.db") == "/tmp/explicit.db"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv(DATABASE_ENV_VAR, "/tmp/from-env.db")

        assert resolve_database_path() == "/tmp/from-env.db"

    def test_settings_fallback(self, monkeypatch):
        monkeypatch.delenv(DATABASE_ENV_VAR, raising=False)
        monkeypatch.setenv("DATABASE_PATH", "/tmp/from-settings.db")
        reload_settings()

        assert resolve_database_path() == "/tmp/from-settings.db"
