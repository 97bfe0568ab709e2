"""Data types for the conversation loop.

This module defines the transcript message, the function-call payload an
assistant message may carry, and the completion returned by a model client.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

ROLES = ("user", "assistant", "function", "system")

FINISH_STOP = "stop"
FINISH_LENGTH = "length"
FINISH_FUNCTION_CALL = "function_call"


@dataclass
class FunctionCall:
    """A request from the model to invoke a function.

    Attributes:
        name: Name of the function the model selected
        arguments: Raw argument text exactly as produced by the model
    """

    name: str
    arguments: str = "{}"


@dataclass
class Message:
    """A single transcript entry."""

    role: str
    content: str | None = None
    function_call: FunctionCall | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        """Validate the role and coerce a dict function_call."""
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role}")
        if isinstance(self.function_call, dict):
            self.function_call = FunctionCall(**self.function_call)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the message, omitting unset optional fields."""
        data = asdict(self)
        if data["function_call"] is None:
            del data["function_call"]
        if data["name"] is None:
            del data["name"]
        return data


@dataclass
class Completion:
    """One model response.

    Attributes:
        finish_reason: Why generation ended (stop, length, function_call, ...)
        message: The assistant message produced
        model: Model that produced the completion
        eval_count: Number of tokens generated, when reported
        prompt_eval_count: Number of prompt tokens, when reported
    """

    finish_reason: str
    message: Message
    model: str = ""
    eval_count: int | None = None
    prompt_eval_count: int | None = None


@dataclass
class ConversationResult:
    """Successful outcome of a conversation run."""

    completion: Completion
    transcript: list[Message] = field(default_factory=list)
    functions_called: list[str] = field(default_factory=list)
    turns: int = 0

    @property
    def content(self) -> str | None:
        return self.completion.message.content
