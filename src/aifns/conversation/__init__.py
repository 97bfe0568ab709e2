"""Conversation loop: transcript types, fatal errors and the orchestrator."""

from aifns.conversation.errors import (
    ConversationError,
    MalformedArgumentsError,
    ModelTimeoutError,
    TruncatedResponseError,
    TurnBudgetExceededError,
    UnknownFunctionError,
    UnrecognizedFinishReasonError,
)
from aifns.conversation.orchestrator import ConversationOrchestrator, ModelClient
from aifns.conversation.types import (
    Completion,
    ConversationResult,
    FunctionCall,
    Message,
)

__all__ = [
    # Orchestration
    "ConversationOrchestrator",
    "ModelClient",
    # Transcript types
    "Completion",
    "ConversationResult",
    "FunctionCall",
    "Message",
    # Errors
    "ConversationError",
    "MalformedArgumentsError",
    "ModelTimeoutError",
    "TruncatedResponseError",
    "TurnBudgetExceededError",
    "UnknownFunctionError",
    "UnrecognizedFinishReasonError",
]
