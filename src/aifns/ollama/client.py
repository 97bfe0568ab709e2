"""Async Ollama client wrapper.

This module provides an async wrapper around ollama.AsyncClient that speaks
the conversation loop's vocabulary: it accepts transcript messages and
function schemas and returns a single Completion with a finish reason. The
client is designed to be created once at startup and reused.
"""

import json
import logging
from typing import Any

import ollama

from aifns.conversation.types import (
    FINISH_FUNCTION_CALL,
    FINISH_STOP,
    Completion,
    FunctionCall,
    Message,
)

logger = logging.getLogger(__name__)


def to_ollama_messages(messages: list[Message]) -> list[dict[str, Any]]:
    """Convert transcript messages to Ollama chat format.

    Function results become ``tool`` messages and assistant function calls
    become ``tool_calls`` entries with decoded arguments.

    Args:
        messages: Transcript messages

    Returns:
        List of message dicts in Ollama format
    """
    ollama_messages = []

    for msg in messages:
        if msg.role == "function":
            ollama_messages.append(
                {
                    "role": "tool",
                    "content": msg.content or "",
                    "tool_name": msg.name or "",
                }
            )
            continue

        ollama_msg: dict[str, Any] = {
            "role": msg.role,
            "content": msg.content or "",
        }
        if msg.function_call is not None:
            ollama_msg["tool_calls"] = [
                {
                    "function": {
                        "name": msg.function_call.name,
                        "arguments": json.loads(msg.function_call.arguments),
                    }
                }
            ]
        ollama_messages.append(ollama_msg)

    return ollama_messages


def to_ollama_tools(functions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Wrap function schemas in Ollama's tool envelope."""
    return [{"type": "function", "function": schema} for schema in functions]


def completion_from_response(response: dict[str, Any]) -> Completion:
    """Build a Completion from an Ollama chat response.

    A response carrying tool calls is reported as ``function_call``; only the
    first call is kept since functions are invoked one at a time. Otherwise
    Ollama's ``done_reason`` is passed through, defaulting to ``stop``.

    Args:
        response: Ollama chat response as a dict

    Returns:
        Completion: The normalized completion.
    """
    message = response.get("message") or {}
    tool_calls = message.get("tool_calls") or []

    if tool_calls:
        if len(tool_calls) > 1:
            logger.warning(
                f"Model requested {len(tool_calls)} tool calls, only the first is used"
            )
        call = tool_calls[0].get("function") or {}
        arguments = call.get("arguments")
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments if arguments is not None else {})

        finish_reason = FINISH_FUNCTION_CALL
        result_message = Message(
            role="assistant",
            content=message.get("content") or None,
            function_call=FunctionCall(name=call.get("name", ""), arguments=arguments),
        )
    else:
        finish_reason = response.get("done_reason") or FINISH_STOP
        result_message = Message(role="assistant", content=message.get("content") or "")

    return Completion(
        finish_reason=finish_reason,
        message=result_message,
        model=response.get("model") or "",
        eval_count=response.get("eval_count"),
        prompt_eval_count=response.get("prompt_eval_count"),
    )


class OllamaClient:
    """Async client for interacting with Ollama API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            # Try to list models as a connectivity check
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def complete(
        self,
        model: str,
        messages: list[Message],
        functions: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> Completion:
        """Request a single, non-streamed completion.

        Args:
            model: The model name to use for the chat
            messages: Transcript so far
            functions: Function schemas advertised to the model
            options: Optional model parameters (temperature, etc.)

        Returns:
            Completion: The model's answer and why it stopped

        Raises:
            ollama.ResponseError: If the Ollama API rejects the request
            Exception: If the Ollama server cannot be reached
        """
        logger.debug(
            f"Requesting completion from {model} with {len(messages)} messages "
            f"and {len(functions)} functions"
        )

        try:
            response = await self._client.chat(
                model=model,
                messages=to_ollama_messages(messages),
                tools=to_ollama_tools(functions) or None,
                stream=False,
                options=options,
            )
        except Exception as e:
            logger.error(f"Chat request to {model} failed: {e}")
            raise

        if hasattr(response, "model_dump"):
            response_dict = response.model_dump()
        elif isinstance(response, dict):
            response_dict = response
        else:
            response_dict = vars(response)

        completion = completion_from_response(response_dict)
        logger.debug(f"Completion finished with reason: {completion.finish_reason}")
        return completion

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient holds an httpx client internally; it is closed
        when the underlying transport is garbage collected.
        """
        logger.debug("OllamaClient closed")
