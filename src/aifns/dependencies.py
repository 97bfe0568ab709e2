"""Dependency injection providers for FastAPI endpoints.

The Ollama client and the function registry are built once in the app
lifespan and stored on app.state; these providers hand them to endpoints.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from aifns.config import AifnsSettings
from aifns.conversation import ConversationOrchestrator
from aifns.functions import FunctionRegistry
from aifns.ollama import OllamaClient


@lru_cache
def get_settings() -> AifnsSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the AIFNS_ prefix.

    Returns:
        AifnsSettings: The application configuration settings.
    """
    return AifnsSettings()


def get_ollama_client(request: Request) -> OllamaClient:
    """Get the Ollama client from app state.

    Raises:
        HTTPException: If the Ollama client is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "ollama_client"):
        raise HTTPException(
            status_code=503,
            detail="Ollama client not initialized",
        )
    return request.app.state.ollama_client


def get_registry(request: Request) -> FunctionRegistry:
    """Get the function registry from app state.

    Raises:
        HTTPException: If the registry is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "registry"):
        raise HTTPException(
            status_code=503,
            detail="Function registry not initialized",
        )
    return request.app.state.registry


def get_orchestrator(request: Request) -> ConversationOrchestrator:
    """Build a ConversationOrchestrator from the shared client and registry.

    The orchestrator keeps no per-conversation state, so a fresh instance
    per request is cheap and isolates concurrent conversations.

    Args:
        request: The FastAPI request object.

    Returns:
        ConversationOrchestrator: Orchestrator configured from app settings.
    """
    # Use settings from app.state instead of cached get_settings()
    # This ensures tests can use their own isolated settings
    settings: AifnsSettings = request.app.state.settings

    return ConversationOrchestrator(
        client=get_ollama_client(request),
        registry=get_registry(request),
        model=settings.model,
        max_turns=settings.max_turns,
        model_timeout=settings.model_timeout,
        function_timeout=settings.function_timeout,
    )
