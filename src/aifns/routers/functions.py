"""Function registry endpoints.

Lists the schemas advertised to the model and allows invoking a single
function directly, which is handy for checking a function's behavior
without a model in the loop.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from aifns.conversation import ConversationOrchestrator
from aifns.dependencies import get_orchestrator, get_registry
from aifns.functions import FunctionNotFoundError, FunctionRegistry, FunctionSchema
from aifns.models.functions import (
    FunctionListResponse,
    InvokeFunctionRequest,
    InvokeFunctionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/functions", tags=["functions"])


def _not_found(name: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "error": {
                "code": "function_not_found",
                "message": f"Function '{name}' not found",
                "details": {"name": name},
            }
        },
    )


@router.get("", response_model=FunctionListResponse)
async def list_functions(
    registry: FunctionRegistry = Depends(get_registry),
) -> FunctionListResponse:
    """List the function schemas advertised to the model, in registry order."""
    return FunctionListResponse(functions=registry.list_schemas())


@router.get("/{name}", response_model=FunctionSchema)
async def get_function(
    name: str,
    registry: FunctionRegistry = Depends(get_registry),
) -> FunctionSchema:
    """Get the schema of a single function.

    Raises:
        HTTPException: 404 if the function is not registered.
    """
    descriptor = registry.get(name)
    if descriptor is None:
        raise _not_found(name)
    return descriptor.schema


@router.post("/{name}/invoke", response_model=InvokeFunctionResponse)
async def invoke_function(
    name: str,
    request_body: InvokeFunctionRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> InvokeFunctionResponse:
    """Invoke a function with raw arguments.

    Validation errors and handler failures are returned as the result
    string, exactly as the model would receive them.

    Raises:
        HTTPException: 404 if the function is not registered.
    """
    try:
        result = await orchestrator.call_function(name, request_body.arguments)
    except FunctionNotFoundError:
        raise _not_found(name)

    logger.info(f"Invoked function {name} directly")
    return InvokeFunctionResponse(name=name, result=result)
