"""Built-in functions.

Each module exposes ``NAME`` and ``build(settings, client_factory)``
returning a FunctionDescriptor. ``create_default_registry`` assembles the
enabled ones into a FunctionRegistry in the order listed here.
"""

import logging

import httpx

from aifns.config import AifnsSettings
from aifns.functions.builtin import (
    calculator,
    clock,
    hackernews,
    reddit,
    request,
    rss,
    sms,
    weather,
)
from aifns.functions.function import FunctionDescriptor
from aifns.functions.http import make_client_factory
from aifns.functions.registry import FunctionRegistry

logger = logging.getLogger(__name__)

BUILTIN_MODULES = (calculator, clock, hackernews, reddit, request, rss, sms, weather)

BUILTIN_NAMES = tuple(module.NAME for module in BUILTIN_MODULES)


def builtin_functions(
    settings: AifnsSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[FunctionDescriptor]:
    """Build the enabled built-in function descriptors.

    Args:
        settings: Application settings. ``enabled_functions`` restricts the
                  set (empty means all); ``sms`` is skipped unless Twilio is
                  configured.
        transport: Optional httpx transport shared by HTTP-based functions

    Returns:
        list[FunctionDescriptor]: Descriptors in registration order.

    Raises:
        ValueError: If ``enabled_functions`` names an unknown function.
    """
    enabled = set(settings.enabled_functions or BUILTIN_NAMES)
    unknown = enabled - set(BUILTIN_NAMES)
    if unknown:
        raise ValueError(f"Unknown built-in functions: {', '.join(sorted(unknown))}")

    client_factory = make_client_factory(settings.http_timeout, transport=transport)

    descriptors = []
    for module in BUILTIN_MODULES:
        if module.NAME not in enabled:
            continue
        if module is sms and not settings.twilio_configured:
            logger.info("Twilio is not configured, skipping the sms function")
            continue
        descriptors.append(module.build(settings, client_factory=client_factory))
    return descriptors


def create_default_registry(
    settings: AifnsSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FunctionRegistry:
    """Create the registry of built-in functions for the given settings."""
    return FunctionRegistry(builtin_functions(settings, transport=transport))


__all__ = ["BUILTIN_NAMES", "builtin_functions", "create_default_registry"]
