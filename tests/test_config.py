"""Tests for settings and logging configuration."""

import logging

import config
import logging_config


def test_settings_defaults(monkeypatch):
    """Test: Optional behaviours are off unless configured."""
    for name in ["REQUIRE_ACTIVE_APPLICATION", "REPORT_POSITION", "CAPTURE_REQUEST_METADATA", "API_PREFIX"]:
        monkeypatch.delenv(name, raising=False)

    settings = config.Settings(_env_file=None)

    assert settings.REQUIRE_ACTIVE_APPLICATION is False
    assert settings.REPORT_POSITION is False
    assert settings.CAPTURE_REQUEST_METADATA is False
    assert settings.API_PREFIX == ""
    assert settings.CORS_ALLOW_ORIGINS == ["*"]
    assert settings.CORS_ALLOW_METHODS == ["POST", "OPTIONS"]


def test_settings_from_environment(monkeypatch):
    """Test: Settings are read from environment variables."""
    monkeypatch.setenv("REQUIRE_ACTIVE_APPLICATION", "true")
    monkeypatch.setenv("REPORT_POSITION", "1")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./waitlist.db")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://landing.example.com"]')

    settings = config.Settings(_env_file=None)

    assert settings.REQUIRE_ACTIVE_APPLICATION is True
    assert settings.REPORT_POSITION is True
    assert settings.DATABASE_URL == "sqlite+aiosqlite:///./waitlist.db"
    assert settings.CORS_ALLOW_ORIGINS == ["https://landing.example.com"]


def test_setup_logging_accepts_unknown_level(monkeypatch):
    """Test: An unknown level name falls back to INFO instead of failing."""
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    logging_config.setup_logging("verbose")

    assert calls["level"] == logging.INFO
