"""Unit tests for the FastAPI app factory and configuration."""

import pytest
from fastapi import FastAPI
from pydantic import ValidationError

from aifns import __version__, create_app
from aifns.config import AifnsSettings


def test_create_app_returns_fastapi_instance():
    """Test that create_app returns a FastAPI instance."""
    app = create_app()
    assert isinstance(app, FastAPI)


def test_create_app_with_settings(test_settings):
    """Test that create_app accepts custom settings."""
    app = create_app(settings=test_settings)
    assert isinstance(app, FastAPI)
    assert app.state.settings is test_settings


def test_create_app_metadata():
    """Test that app has correct metadata."""
    app = create_app()
    assert app.title == "aifns"
    assert app.version == "0.1.0"
    assert "typed function calling" in app.description


def test_create_app_registers_routes():
    """Test that the health, functions and chat routes exist."""
    app = create_app()

    routes = [route.path for route in app.routes]  # type: ignore[attr-defined]
    assert "/api/v1/health" in routes
    assert "/api/v1/functions" in routes
    assert "/api/v1/functions/{name}" in routes
    assert "/api/v1/functions/{name}/invoke" in routes
    assert "/api/v1/chat" in routes


def test_create_app_has_cors_middleware(test_settings):
    """Test that CORS middleware is configured."""
    app = create_app(settings=test_settings)

    middleware_classes = [m.cls.__name__ for m in app.user_middleware]  # type: ignore[attr-defined]
    assert "CORSMiddleware" in middleware_classes


@pytest.mark.asyncio
async def test_lifespan_keeps_preset_registry(test_app, sample_registry):
    """Test that a registry placed on app.state before startup is kept."""
    test_app.state.registry = sample_registry

    async with test_app.router.lifespan_context(test_app):
        assert test_app.state.registry is sample_registry
        assert test_app.state.ollama_client.host == "http://localhost:11434"


@pytest.mark.asyncio
async def test_lifespan_builds_default_registry(test_app):
    """Test that the built-in registry is created at startup."""
    async with test_app.router.lifespan_context(test_app):
        assert "clock" in test_app.state.registry
        assert "calculator" in test_app.state.registry


def test_version_constant():
    """Test that __version__ is defined and matches app version."""
    assert __version__ == "0.1.0"


def test_settings_default_values():
    """Test that settings have correct default values."""
    settings = AifnsSettings()

    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.ollama_host == "http://localhost:11434"
    assert settings.model == "llama3.1:8b"
    assert settings.max_turns == 10
    assert settings.enabled_functions == []
    assert settings.log_level == "INFO"
    assert settings.twilio_configured is False


def test_settings_env_prefix(monkeypatch):
    """Test that settings respect the AIFNS_ environment variable prefix."""
    monkeypatch.setenv("AIFNS_PORT", "9000")
    monkeypatch.setenv("AIFNS_OLLAMA_HOST", "http://custom:11434")
    monkeypatch.setenv("AIFNS_ENABLED_FUNCTIONS", '["clock", "weather"]')

    settings = AifnsSettings()

    assert settings.port == 9000
    assert settings.ollama_host == "http://custom:11434"
    assert settings.enabled_functions == ["clock", "weather"]


def test_settings_twilio_configured():
    """Test that Twilio counts as configured only with all three values."""
    partial = AifnsSettings(twilio_account_sid="AC1", twilio_auth_token="t")
    full = AifnsSettings(
        twilio_account_sid="AC1",
        twilio_auth_token="t",
        twilio_phone_number="+15550001111",
    )

    assert partial.twilio_configured is False
    assert full.twilio_configured is True


def test_settings_reject_zero_turn_budget():
    """Test that the turn budget must be at least one."""
    with pytest.raises(ValidationError):
        AifnsSettings(max_turns=0)
