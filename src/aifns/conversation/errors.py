"""Fatal conversation errors.

Every error raised by the conversation loop carries the transcript as it
stood when the loop stopped, so callers can report or resume from it.
"""

from typing import Any

from aifns.conversation.types import Message


class ConversationError(Exception):
    """Base class for errors that terminate the conversation loop."""

    code = "conversation_error"

    def __init__(
        self,
        message: str,
        transcript: list[Message] | None = None,
        **details: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.transcript: list[Message] = list(transcript or [])
        self.details = details


class TruncatedResponseError(ConversationError):
    """The model stopped because it ran out of tokens."""

    code = "response_truncated"


class MalformedArgumentsError(ConversationError):
    """The model produced function-call arguments that are not a JSON object."""

    code = "malformed_arguments"


class UnknownFunctionError(ConversationError):
    """The model asked for a function that is not registered."""

    code = "unknown_function"


class UnrecognizedFinishReasonError(ConversationError):
    """The model client reported a finish reason the loop cannot handle."""

    code = "unrecognized_finish_reason"


class TurnBudgetExceededError(ConversationError):
    """The model kept requesting functions past the configured turn budget."""

    code = "turn_budget_exceeded"


class ModelTimeoutError(ConversationError):
    """The model did not answer within the configured timeout."""

    code = "model_timeout"
