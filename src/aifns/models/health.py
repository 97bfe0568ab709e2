"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of aifns.
        ollama_connected: Whether the Ollama server answered, None if no client.
        ollama_host: The Ollama host URL, None if no client.
        functions: Number of registered functions.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of aifns")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    functions: int = Field(default=0, description="Number of registered functions")
