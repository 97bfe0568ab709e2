"""Chat API endpoint.

Runs the conversation loop for the posted transcript and returns the final
answer together with the full transcript, including every function call and
result.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from aifns.conversation import (
    ConversationError,
    ConversationOrchestrator,
    ModelTimeoutError,
)
from aifns.dependencies import get_orchestrator
from aifns.models.chat import ChatRequest, ChatResponse, MessageModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


def _conversation_error_response(error: ConversationError) -> HTTPException:
    """Map a fatal conversation error to an HTTP error with the transcript."""
    status_code = 504 if isinstance(error, ModelTimeoutError) else 422
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": error.code,
                "message": error.message,
                "details": {
                    **error.details,
                    "transcript": [
                        MessageModel.from_message(m).model_dump()
                        for m in error.transcript
                    ],
                },
            }
        },
    )


@router.post("", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> ChatResponse:
    """Run the conversation loop and return the final assistant message.

    Args:
        request_body: Transcript and per-request overrides
        orchestrator: Injected conversation orchestrator

    Returns:
        ChatResponse with the final message and the full transcript

    Raises:
        HTTPException: 422 on fatal conversation errors, 504 if the model
            timed out, 502 if Ollama fails
    """
    messages = [m.to_message() for m in request_body.messages]
    logger.info(f"Starting conversation with {len(messages)} messages")

    try:
        result = await orchestrator.run(
            messages,
            model=request_body.model,
            max_turns=request_body.max_turns,
            options=request_body.options,
        )
    except ConversationError as e:
        logger.error(f"Conversation failed ({e.code}): {e.message}")
        raise _conversation_error_response(e)
    except Exception as e:
        logger.error(f"Ollama error during conversation: {e}")
        raise HTTPException(
            status_code=502,
            detail={
                "error": {
                    "code": "ollama_error",
                    "message": f"Failed to get response from Ollama: {str(e)}",
                    "details": {},
                }
            },
        )

    completion = result.completion
    return ChatResponse(
        message=MessageModel.from_message(completion.message),
        transcript=[MessageModel.from_message(m) for m in result.transcript],
        functions_called=result.functions_called,
        turns=result.turns,
        model=completion.model or request_body.model or orchestrator.model,
        eval_count=completion.eval_count,
        prompt_eval_count=completion.prompt_eval_count,
    )
