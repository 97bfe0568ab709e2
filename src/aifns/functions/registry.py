"""Function registry.

The registry is built once at startup from a fixed list of descriptors and
never changes afterwards, so a single instance can be shared by every
conversation running in the process.
"""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Iterator

from aifns.functions.function import FunctionDescriptor

logger = logging.getLogger(__name__)


class FunctionNotFoundError(KeyError):
    """Raised when a function name does not resolve in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown function {self.name}"


class DuplicateFunctionError(ValueError):
    """Raised when two descriptors share a name."""


class FunctionRegistry:
    """Immutable mapping from function name to descriptor.

    Registration order is preserved and determines the order in which
    schemas are advertised to the model.
    """

    def __init__(self, descriptors: Iterable[FunctionDescriptor] = ()) -> None:
        """Build the registry.

        Args:
            descriptors: Function descriptors, in advertising order

        Raises:
            DuplicateFunctionError: If two descriptors share a name.
        """
        functions: dict[str, FunctionDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in functions:
                raise DuplicateFunctionError(
                    f"Function '{descriptor.name}' is registered more than once"
                )
            functions[descriptor.name] = descriptor

        self._functions = MappingProxyType(functions)
        logger.info(
            f"Function registry built with {len(functions)} functions: "
            f"{', '.join(functions) or '(none)'}"
        )

    def resolve(self, name: str) -> FunctionDescriptor:
        """Look up a function by name.

        Raises:
            FunctionNotFoundError: If no function has this name.
        """
        try:
            return self._functions[name]
        except KeyError:
            raise FunctionNotFoundError(name) from None

    def get(self, name: str) -> FunctionDescriptor | None:
        return self._functions.get(name)

    def list_schemas(self) -> list[dict[str, Any]]:
        """Return the schemas sent with every model request.

        Each call returns fresh dicts in registration order.
        """
        return [
            descriptor.schema.model_dump(exclude_none=True)
            for descriptor in self._functions.values()
        ]

    def names(self) -> list[str]:
        return list(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[FunctionDescriptor]:
        return iter(self._functions.values())
