"""FastAPI application factory.

``create_app`` wires settings, CORS and the routers; ``lifespan`` owns the
objects shared by every request: the Ollama client and the function
registry.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aifns import __version__
from aifns.config import AifnsSettings
from aifns.functions.builtin import create_default_registry
from aifns.ollama import OllamaClient
from aifns.routers import chat, functions, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared client and registry, and close the client on exit.

    A registry assigned to ``app.state`` before startup is used as is,
    otherwise the built-in functions enabled in settings are registered.
    """
    settings: AifnsSettings = app.state.settings

    if getattr(app.state, "registry", None) is None:
        app.state.registry = create_default_registry(settings)
    logger.info(f"Serving {len(app.state.registry)} functions")

    client = OllamaClient(host=settings.ollama_host)
    app.state.ollama_client = client

    if await client.check_connection():
        logger.info(f"Connected to Ollama at {settings.ollama_host}")
    else:
        logger.warning(
            f"Ollama at {settings.ollama_host} is not reachable, "
            "chat requests will fail until it is"
        )

    try:
        yield
    finally:
        await client.close()
        logger.info("Ollama client closed")


def create_app(settings: AifnsSettings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to serve with; loaded from ``AIFNS_*`` environment
                  variables when omitted.

    Returns:
        FastAPI: The configured application.
    """
    if settings is None:
        from aifns.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="aifns",
        description="LLM conversations with typed function calling via Ollama",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (health, functions, chat):
        app.include_router(module.router)

    return app
