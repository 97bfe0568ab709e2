"""Generic HTTP request function."""

import logging
from typing import Any

from pydantic import BaseModel, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory, make_client_factory

logger = logging.getLogger(__name__)

NAME = "request"
DESCRIPTION = (
    "Useful for sending http request. Use this when you need to get specific "
    "content from a url. Input is a url, method, body, output is the result of "
    "the request."
)


class RequestParams(BaseModel):
    """Arguments for the request function."""

    url: str = Field(..., description="Absolute URL to request")
    method: str = Field(default="GET", description="HTTP method")
    body: Any = Field(default=None, description="JSON body to send")


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    client_factory = client_factory or make_client_factory(settings.http_timeout)

    async def send_request(params: RequestParams) -> Any:
        method = params.method.upper()
        logger.info(f"{method} {params.url}")
        async with client_factory() as client:
            response = await client.request(
                method,
                params.url,
                json=params.body,
            )
            response.raise_for_status()
            try:
                return response.json()
            except ValueError:
                return response.text

    return aifn(NAME, DESCRIPTION, RequestParams, send_request)
