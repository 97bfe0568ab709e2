"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from aifns.models.chat import (
    ChatRequest,
    ChatResponse,
    FunctionCallModel,
    MessageModel,
)
from aifns.models.functions import (
    FunctionListResponse,
    InvokeFunctionRequest,
    InvokeFunctionResponse,
)
from aifns.models.health import HealthResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "FunctionCallModel",
    "FunctionListResponse",
    "HealthResponse",
    "InvokeFunctionRequest",
    "InvokeFunctionResponse",
    "MessageModel",
]
