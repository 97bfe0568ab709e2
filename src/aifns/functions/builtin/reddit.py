"""Subreddit listings from reddit's public JSON endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory, make_client_factory

NAME = "reddit"
DESCRIPTION = "Get stories from reddit"

REDDIT_URL = "https://www.reddit.com"
DEFAULT_LIMIT = 10


class RedditParams(BaseModel):
    """Arguments for the reddit function."""

    subreddit: str | None = Field(
        default=None, description="Subreddit name without the r/ prefix"
    )
    limit: int | None = Field(
        default=None, ge=1, le=100, description="Number of stories to return"
    )
    type: Literal["hot", "new", "random", "top", "rising", "controversial"] = Field(
        ..., description="Listing to read"
    )


def listing_url(params: RedditParams) -> str:
    if params.subreddit:
        return f"{REDDIT_URL}/r/{params.subreddit}/{params.type}.json"
    return f"{REDDIT_URL}/{params.type}.json"


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    client_factory = client_factory or make_client_factory(settings.http_timeout)

    async def stories(params: RedditParams) -> Any:
        async with client_factory() as client:
            response = await client.get(
                listing_url(params),
                params={"limit": params.limit or DEFAULT_LIMIT},
            )
            response.raise_for_status()
            return response.json()

    return aifn(NAME, DESCRIPTION, RedditParams, stories)
