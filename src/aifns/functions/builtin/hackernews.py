"""Latest Hacker News stories via the public Firebase API."""

import asyncio
import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory, make_client_factory

logger = logging.getLogger(__name__)

NAME = "hackernews"
DESCRIPTION = "Get the latest news from hackernews"

API_URL = "https://hacker-news.firebaseio.com/v0"
STORY_LIMIT = 10


class HackerNewsParams(BaseModel):
    """Arguments for the hackernews function."""

    type: Literal["top", "best", "new", "ask", "show", "job"] = Field(
        ..., description="Which story list to read"
    )
    query: str | None = Field(
        default=None, description="Only keep stories whose title contains this text"
    )


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    client_factory = client_factory or make_client_factory(settings.http_timeout)

    async def latest_stories(params: HackerNewsParams) -> list[dict[str, Any]]:
        async with client_factory() as client:
            response = await client.get(f"{API_URL}/{params.type}stories.json")
            response.raise_for_status()
            story_ids = response.json()[:STORY_LIMIT]
            logger.debug(f"Fetching {len(story_ids)} {params.type} stories")

            async def fetch_item(item_id: int) -> dict[str, Any]:
                item_response = await client.get(f"{API_URL}/item/{item_id}.json")
                item_response.raise_for_status()
                return item_response.json()

            stories = await asyncio.gather(*(fetch_item(i) for i in story_ids))

        if params.query:
            needle = params.query.lower()
            stories = [s for s in stories if needle in (s.get("title") or "").lower()]
        return list(stories)

    return aifn(NAME, DESCRIPTION, HackerNewsParams, latest_stories)
