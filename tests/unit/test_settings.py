"""
Unit tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from flowgraph.config import Environment, Settings
from flowgraph.config.settings import EngineSettings, PostgresSettings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings()

        assert settings.environment == Environment.DEV
        assert settings.is_development
        assert settings.weather.timeout == 10.0
        assert settings.mailer.from_address == "weather-alerts@checkbox.com"
        assert settings.engine.max_steps is None
        assert settings.engine.persist_inline_workflows is True
        assert settings.api.prefix == "/api/v1"

    def test_environment_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "PROD")
        assert Settings().environment == Environment.PROD

    def test_nested_env_prefixes(self, monkeypatch):
        monkeypatch.setenv("ENGINE_MAX_STEPS", "25")
        monkeypatch.setenv("ENGINE_STRICT_NODE_VALIDATION", "true")
        monkeypatch.setenv("WEATHER_TIMEOUT", "2.5")
        monkeypatch.setenv("POSTGRES_HOST", "db.internal")

        settings = Settings()

        assert settings.engine.max_steps == 25
        assert settings.engine.strict_node_validation is True
        assert settings.weather.timeout == 2.5
        assert settings.postgres.host == "db.internal"

    def test_max_steps_must_be_positive(self):
        with pytest.raises(ValidationError):
            EngineSettings(max_steps=0)

    def test_postgres_url(self):
        pg = PostgresSettings(user="u", password="p", host="h", port=5433, database="d")
        assert pg.url == "postgresql+asyncpg://u:p@h:5433/d"
