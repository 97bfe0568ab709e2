"""Function descriptor factory.

Turns a pydantic parameter model and a handler into a descriptor the model
can be told about (``schema``) and the conversation loop can call
(``invoke``). Argument validation is fail-soft: bad arguments come back as a
readable string so the model can correct itself, instead of an exception
that would end the conversation.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

FUNCTION_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

P = TypeVar("P", bound=BaseModel)


class InvalidFunctionSchemaError(ValueError):
    """Raised when a function definition would be rejected by the model."""


class FunctionSchema(BaseModel):
    """Schema of a function as advertised to the model."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="The name of the function to be called.",
    )
    description: str | None = Field(
        default=None,
        description=(
            "A description of what the function does, used by the model to "
            "choose when and how to call the function."
        ),
    )
    parameters: dict[str, Any] = Field(
        ...,
        description="The parameters the function accepts, described as a JSON Schema object.",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Restrict names to letters, digits, underscore and hyphen."""
        if not FUNCTION_NAME_PATTERN.match(v):
            raise ValueError(
                "Function name may only contain letters, digits, underscores and hyphens"
            )
        return v


@dataclass(frozen=True)
class FunctionDescriptor(Generic[P]):
    """A function the model may call.

    Attributes:
        schema: What is advertised to the model
        parameters: Pydantic model used to validate raw arguments
        handler: Called with a validated ``parameters`` instance
    """

    schema: FunctionSchema
    parameters: type[P]
    handler: Callable[[P], Any]

    @property
    def name(self) -> str:
        return self.schema.name

    def invoke(self, raw_args: Any) -> Any:
        """Validate ``raw_args`` and call the handler.

        Args:
            raw_args: Untyped arguments, usually the decoded JSON object the
                      model produced.

        Returns:
            The handler's return value unchanged (an un-awaited coroutine for
            async handlers), or a string describing why validation failed.
        """
        try:
            args = self.parameters.model_validate(raw_args)
        except ValidationError as e:
            logger.debug(f"Rejected arguments for {self.name}: {e}")
            return _format_validation_error(self.name, e)

        return self.handler(args)


def _format_validation_error(name: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{location}: {item['msg']}")
    return f"Invalid arguments for {name}: " + "; ".join(problems)


def aifn(
    name: str,
    description: str,
    parameters: type[P],
    handler: Callable[[P], Any],
) -> FunctionDescriptor[P]:
    """Build a function descriptor.

    Args:
        name: Function name, 1-64 characters of [A-Za-z0-9_-]
        description: What the function does, shown to the model
        parameters: Pydantic model describing the accepted arguments
        handler: Callable receiving a validated ``parameters`` instance;
                 may be sync or async

    Returns:
        FunctionDescriptor: The schema and invoke pair.

    Raises:
        InvalidFunctionSchemaError: If the name would be rejected by the model.
    """
    try:
        schema = FunctionSchema(
            name=name,
            description=description,
            parameters=parameters.model_json_schema(),
        )
    except ValidationError as e:
        raise InvalidFunctionSchemaError(f"Invalid function '{name}': {e}") from e

    return FunctionDescriptor(schema=schema, parameters=parameters, handler=handler)


def function(
    name: str, description: str, parameters: type[P]
) -> Callable[[Callable[[P], Any]], FunctionDescriptor[P]]:
    """Decorator form of :func:`aifn`."""

    def decorator(handler: Callable[[P], Any]) -> FunctionDescriptor[P]:
        return aifn(name, description, parameters, handler)

    return decorator
