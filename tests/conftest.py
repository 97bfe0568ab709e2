"""Pytest configuration and shared fixtures for aifns tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup and a scripted model client.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field

from aifns import create_app
from aifns.config import AifnsSettings
from aifns.conversation import Completion, FunctionCall, Message
from aifns.functions import FunctionRegistry, aifn


class ScriptedClient:
    """Model client returning a fixed sequence of completions.

    Every request is recorded so tests can inspect what the model was sent.
    """

    def __init__(self, completions: list[Completion]) -> None:
        self.completions = list(completions)
        self.requests: list[dict] = []

    async def complete(self, model, messages, functions, options=None) -> Completion:
        self.requests.append(
            {
                "model": model,
                "messages": list(messages),
                "functions": functions,
                "options": options,
            }
        )
        if not self.completions:
            raise AssertionError("ScriptedClient ran out of completions")
        return self.completions.pop(0)


def stop(content: str = "Done.") -> Completion:
    """A final assistant answer."""
    return Completion(
        finish_reason="stop",
        message=Message(role="assistant", content=content),
        model="llama3.1:8b",
    )


def call(name: str, arguments: str = "{}") -> Completion:
    """An assistant request to invoke a function."""
    return Completion(
        finish_reason="function_call",
        message=Message(
            role="assistant",
            content=None,
            function_call=FunctionCall(name=name, arguments=arguments),
        ),
        model="llama3.1:8b",
    )


class AddParams(BaseModel):
    a: int = Field(..., description="First addend")
    b: int = Field(default=0, description="Second addend")


class EchoParams(BaseModel):
    text: str


def add(params: AddParams) -> int:
    return params.a + params.b


async def echo(params: EchoParams) -> str:
    return params.text


@pytest.fixture
def scripted_client():
    """Factory for ScriptedClient instances."""
    return ScriptedClient


@pytest.fixture(name="stop")
def stop_fixture():
    """Builder for final-answer completions."""
    return stop


@pytest.fixture(name="call")
def call_fixture():
    """Builder for function-call completions."""
    return call


@pytest.fixture
def sample_registry():
    """Registry with a sync ``add`` and an async ``echo`` function."""
    return FunctionRegistry(
        [
            aifn("add", "Add two integers", AddParams, add),
            aifn("echo", "Echo the given text", EchoParams, echo),
        ]
    )


@pytest.fixture
def test_settings():
    """Create test settings.

    Returns:
        AifnsSettings: Settings instance configured for testing.
    """
    return AifnsSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="llama3.1:8b",
        max_turns=5,
        model_timeout=5.0,
        function_timeout=2.0,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance."""
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
