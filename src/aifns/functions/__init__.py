"""Function definition, registry and built-in functions.

This package provides the descriptor factory that turns a pydantic parameter
model and a handler into a model-callable function, the immutable registry
those descriptors live in, and the built-in functions.
"""

from aifns.functions.function import (
    FunctionDescriptor,
    FunctionSchema,
    InvalidFunctionSchemaError,
    aifn,
    function,
)
from aifns.functions.registry import (
    DuplicateFunctionError,
    FunctionNotFoundError,
    FunctionRegistry,
)

__all__ = [
    "DuplicateFunctionError",
    "FunctionDescriptor",
    "FunctionNotFoundError",
    "FunctionRegistry",
    "FunctionSchema",
    "InvalidFunctionSchemaError",
    "aifn",
    "function",
]
