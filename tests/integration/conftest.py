"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that ensure
proper test isolation and mocking for API endpoint tests.
"""

from unittest.mock import AsyncMock, patch

import pytest

from aifns import create_app


@pytest.fixture(autouse=True)
def mock_ollama_client(test_settings):
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    """
    with patch("aifns.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = test_settings.ollama_host
        mock_instance.check_connection.return_value = True

        # Return the mock instance when OllamaClient is instantiated
        mock_client_class.return_value = mock_instance

        yield mock_instance


@pytest.fixture
def test_app(test_settings, sample_registry):
    """Create a test application serving the sample registry."""
    app = create_app(settings=test_settings)
    app.state.registry = sample_registry
    return app
