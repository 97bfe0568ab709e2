"""Service health endpoint."""

import logging

from fastapi import APIRouter, Request

from aifns import __version__
from aifns.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


async def _ollama_reachable(client) -> bool:
    try:
        return await client.check_connection()
    except Exception as e:
        logger.warning(f"Ollama connection check raised: {e}")
        return False


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report the service version and the state of its components.

    ``ollama_connected`` and ``ollama_host`` stay None until the lifespan
    has created the Ollama client; ``functions`` counts the registry.
    """
    state = request.app.state
    client = getattr(state, "ollama_client", None)
    registry = getattr(state, "registry", None)

    response = HealthResponse(
        status="ok",
        version=__version__,
        functions=len(registry) if registry is not None else 0,
    )
    if client is not None:
        response.ollama_host = client.host
        response.ollama_connected = await _ollama_reachable(client)
        logger.debug(f"Ollama at {client.host} reachable: {response.ollama_connected}")

    return response
