"""Conversation orchestration loop.

The orchestrator sends the transcript and the registry's function schemas to
the model, and whenever the model asks for a function it validates, invokes
and appends the result before asking again. The loop ends when the model
stops, on a fatal protocol error, or when the turn budget runs out.
"""

import asyncio
import functools
import inspect
import json
import logging
from typing import Any, Protocol

from aifns.conversation.errors import (
    MalformedArgumentsError,
    ModelTimeoutError,
    TruncatedResponseError,
    TurnBudgetExceededError,
    UnknownFunctionError,
    UnrecognizedFinishReasonError,
)
from aifns.conversation.types import (
    FINISH_FUNCTION_CALL,
    FINISH_LENGTH,
    FINISH_STOP,
    Completion,
    ConversationResult,
    FunctionCall,
    Message,
)
from aifns.functions.function import FunctionDescriptor
from aifns.functions.registry import FunctionNotFoundError, FunctionRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 10


class ModelClient(Protocol):
    """Anything that can turn a transcript into one completion."""

    async def complete(
        self,
        model: str,
        messages: list[Message],
        functions: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> Completion: ...


def serialize_result(result: Any) -> str:
    """Serialize a function result as the content of a function message."""
    return json.dumps({"res": result}, default=str)


class ConversationOrchestrator:
    """Runs the request, dispatch, resume loop for one model.

    The orchestrator holds no per-conversation state, so one instance can
    serve many concurrent conversations.
    """

    def __init__(
        self,
        client: ModelClient,
        registry: FunctionRegistry,
        model: str,
        max_turns: int = DEFAULT_MAX_TURNS,
        model_timeout: float | None = None,
        function_timeout: float | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Model client used for every completion request
            registry: Functions the model may call
            model: Model name sent with every request
            max_turns: Maximum number of model requests per run
            model_timeout: Seconds to wait for each completion (None: no limit)
            function_timeout: Seconds to wait for each function (None: no limit)
            options: Default model options (temperature, etc.)
        """
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")

        self.client = client
        self.registry = registry
        self.model = model
        self.max_turns = max_turns
        self.model_timeout = model_timeout
        self.function_timeout = function_timeout
        self.options = options

    async def run(
        self,
        messages: list[Message],
        model: str | None = None,
        max_turns: int | None = None,
        options: dict[str, Any] | None = None,
    ) -> ConversationResult:
        """Run the conversation until the model produces a final answer.

        Args:
            messages: Transcript to start from; the list is not modified
            model: Override the model for this run
            max_turns: Override the turn budget for this run
            options: Override the model options for this run

        Returns:
            ConversationResult: The final completion and the full transcript,
            ending with the final assistant message.

        Raises:
            ValueError: If the max_turns override is below 1.
            ConversationError: A subclass describing why the loop stopped;
                its ``transcript`` holds the conversation up to that point.
        """
        model = model or self.model
        max_turns = max_turns if max_turns is not None else self.max_turns
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        options = options if options is not None else self.options
        transcript = list(messages)
        functions = self.registry.list_schemas()
        functions_called: list[str] = []

        for turn in range(1, max_turns + 1):
            logger.debug(f"Turn {turn}/{max_turns}: requesting completion from {model}")
            completion = await self._request_completion(
                model, transcript, functions, options
            )
            reason = completion.finish_reason

            if reason == FINISH_STOP:
                transcript.append(completion.message)
                logger.info(
                    f"Conversation finished after {turn} turns "
                    f"({len(functions_called)} function calls)"
                )
                return ConversationResult(
                    completion=completion,
                    transcript=transcript,
                    functions_called=functions_called,
                    turns=turn,
                )

            if reason == FINISH_LENGTH:
                logger.error("Model response was truncated")
                raise TruncatedResponseError(
                    "Message too long: the model response was truncated",
                    transcript,
                    finish_reason=reason,
                )

            if reason != FINISH_FUNCTION_CALL:
                logger.error(f"Unrecognized finish reason: {reason}")
                raise UnrecognizedFinishReasonError(
                    f"Unrecognized finish reason: {reason}",
                    transcript,
                    finish_reason=reason,
                )

            call = completion.message.function_call
            if call is None:
                raise MalformedArgumentsError(
                    "Model reported a function call without one",
                    transcript,
                    finish_reason=reason,
                )

            args = self._parse_arguments(call, transcript)
            descriptor = self._resolve(call.name, transcript)

            result = await self._invoke(descriptor, args)
            functions_called.append(call.name)

            transcript.append(completion.message)
            transcript.append(
                Message(
                    role="function",
                    name=call.name,
                    content=self._result_content(call.name, result),
                )
            )

        logger.error(f"Turn budget of {max_turns} exceeded")
        raise TurnBudgetExceededError(
            f"Turn budget exceeded: no final answer after {max_turns} turns",
            transcript,
            max_turns=max_turns,
            functions_called=functions_called,
        )

    async def _request_completion(
        self,
        model: str,
        transcript: list[Message],
        functions: list[dict[str, Any]],
        options: dict[str, Any] | None,
    ) -> Completion:
        try:
            return await asyncio.wait_for(
                self.client.complete(
                    model=model,
                    messages=list(transcript),
                    functions=functions,
                    options=options,
                ),
                timeout=self.model_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Model {model} did not answer within {self.model_timeout}s")
            raise ModelTimeoutError(
                f"Model did not answer within {self.model_timeout} seconds",
                transcript,
                model=model,
            ) from None

    def _parse_arguments(
        self, call: FunctionCall, transcript: list[Message]
    ) -> dict[str, Any]:
        try:
            args = json.loads(call.arguments)
        except (TypeError, ValueError) as e:
            logger.error(f"Unparseable arguments for {call.name}: {e}")
            raise MalformedArgumentsError(
                f"Malformed arguments for function {call.name}: {e}",
                transcript,
                function_name=call.name,
                arguments=call.arguments,
            ) from e

        if not isinstance(args, dict):
            logger.error(f"Arguments for {call.name} are not a JSON object")
            raise MalformedArgumentsError(
                f"Malformed arguments for function {call.name}: expected a JSON object",
                transcript,
                function_name=call.name,
                arguments=call.arguments,
            )
        return args

    def _resolve(self, name: str, transcript: list[Message]) -> FunctionDescriptor:
        try:
            return self.registry.resolve(name)
        except FunctionNotFoundError:
            logger.error(f"Model requested unknown function: {name}")
            raise UnknownFunctionError(
                f"Unknown function {name}",
                transcript,
                function_name=name,
            ) from None

    def _result_content(self, name: str, result: Any) -> str:
        """Serialize a result; one json cannot encode is reported as a failure."""
        try:
            return serialize_result(result)
        except (TypeError, ValueError) as e:
            logger.warning(f"Result of {name} could not be serialized: {e}")
            return serialize_result(f"Failed to execute {name}: {e}")

    async def call_function(self, name: str, args: Any) -> Any:
        """Invoke a registered function outside of a conversation.

        Validation and handler failures are returned as strings, the same
        way the model would see them.

        Raises:
            FunctionNotFoundError: If no function has this name.
        """
        return await self._invoke(self.registry.resolve(name), args)

    async def _invoke(self, descriptor: FunctionDescriptor, args: Any) -> Any:
        """Invoke a function, turning handler failures into result strings."""
        logger.info(f"Calling function {descriptor.name}")

        async def call() -> Any:
            if inspect.iscoroutinefunction(descriptor.handler):
                result = descriptor.invoke(args)
            else:
                result = await asyncio.to_thread(
                    functools.partial(descriptor.invoke, args)
                )
            if inspect.isawaitable(result):
                result = await result
            return result

        try:
            return await asyncio.wait_for(call(), timeout=self.function_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Function {descriptor.name} timed out after {self.function_timeout}s"
            )
            return (
                f"Failed to execute {descriptor.name}: "
                f"timed out after {self.function_timeout} seconds"
            )
        except Exception as e:
            logger.warning(f"Function {descriptor.name} failed: {e}", exc_info=True)
            return f"Failed to execute {descriptor.name}: {e}"
