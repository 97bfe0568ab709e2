"""Shared outbound HTTP client construction for built-in functions."""

from typing import Callable

import httpx

USER_AGENT = "aifns/0.1.0"

HttpClientFactory = Callable[[], httpx.AsyncClient]


def make_client_factory(
    timeout: float, transport: httpx.AsyncBaseTransport | None = None
) -> HttpClientFactory:
    """Return a callable producing configured ``httpx.AsyncClient`` instances.

    Args:
        timeout: Timeout in seconds applied to every request
        transport: Optional transport override (used by tests)
    """

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    return factory
