"""Pydantic models for the function API."""

from typing import Any

from pydantic import BaseModel, Field

from aifns.functions.function import FunctionSchema


class FunctionListResponse(BaseModel):
    """Response model for listing registered functions, in registry order."""

    functions: list[FunctionSchema] = Field(
        ..., description="Schemas advertised to the model"
    )


class InvokeFunctionRequest(BaseModel):
    """Request body for invoking a single function directly."""

    arguments: Any = Field(
        default_factory=dict,
        description="Raw arguments, validated against the function's parameters",
    )


class InvokeFunctionResponse(BaseModel):
    """Response body for a direct function invocation.

    Validation and handler failures are reported in ``result`` as a string,
    exactly as the model would see them.
    """

    name: str = Field(description="Function name")
    result: Any = Field(description="Function result or error string")
