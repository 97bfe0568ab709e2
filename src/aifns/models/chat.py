"""Pydantic models for chat API requests and responses."""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aifns.conversation.types import FunctionCall, Message


class FunctionCallModel(BaseModel):
    """A function call recorded on an assistant message."""

    name: str = Field(description="Function name")
    arguments: str = Field(
        default="{}", description="Arguments as JSON text, as produced by the model"
    )

    @field_validator("arguments")
    @classmethod
    def validate_arguments(cls, v: str) -> str:
        """Arguments must be JSON object text."""
        try:
            decoded = json.loads(v)
        except ValueError as e:
            raise ValueError(f"arguments must be valid JSON: {e}") from e
        if not isinstance(decoded, dict):
            raise ValueError("arguments must be a JSON object")
        return v


class MessageModel(BaseModel):
    """A transcript message as exchanged over the API."""

    role: Literal["user", "assistant", "function", "system"] = Field(
        description="Message role"
    )
    content: str | None = Field(default=None, description="Message content")
    function_call: FunctionCallModel | None = Field(
        default=None, description="Function call requested by the assistant"
    )
    name: str | None = Field(
        default=None, description="Function name, set on function messages"
    )

    def to_message(self) -> Message:
        function_call = None
        if self.function_call is not None:
            function_call = FunctionCall(
                name=self.function_call.name,
                arguments=self.function_call.arguments,
            )
        return Message(
            role=self.role,
            content=self.content,
            function_call=function_call,
            name=self.name,
        )

    @classmethod
    def from_message(cls, message: Message) -> "MessageModel":
        return cls.model_validate(message.to_dict())


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat."""

    messages: list[MessageModel] = Field(
        ..., min_length=1, description="Conversation so far"
    )
    model: str | None = Field(
        default=None, description="Model override; defaults to the configured model"
    )
    max_turns: int | None = Field(
        default=None, ge=1, description="Turn budget override for this request"
    )
    options: dict[str, Any] | None = Field(
        default=None, description="Model options (temperature, etc.)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "messages": [
                        {"role": "user", "content": "What time is it in Tokyo?"}
                    ],
                }
            ]
        }
    )


class ChatResponse(BaseModel):
    """Response body for POST /api/v1/chat."""

    message: MessageModel = Field(description="The final assistant message")
    transcript: list[MessageModel] = Field(
        description="Full transcript including function calls and results"
    )
    functions_called: list[str] = Field(
        default_factory=list, description="Functions invoked, in call order"
    )
    turns: int = Field(description="Number of model requests made")
    model: str = Field(description="Model that produced the final answer")
    eval_count: int | None = Field(
        default=None, description="Number of tokens generated in the final turn"
    )
    prompt_eval_count: int | None = Field(
        default=None, description="Number of prompt tokens in the final turn"
    )
