"""RSS and Atom feed reader."""

from typing import Any

import feedparser
from pydantic import BaseModel, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory, make_client_factory

NAME = "rss"
DESCRIPTION = "Get the latest news from an rss feed"

MAX_ENTRIES = 20


class RssParams(BaseModel):
    """Arguments for the rss function."""

    url: str = Field(..., description="URL of the RSS or Atom feed")


def parse_feed(document: str, url: str) -> dict[str, Any]:
    """Parse a feed document into a JSON-serializable summary.

    Raises:
        ValueError: If the document is not a feed.
    """
    feed = feedparser.parse(document)
    if feed.bozo and not feed.entries:
        raise ValueError(f"Could not parse feed at {url}: {feed.bozo_exception}")

    return {
        "title": feed.feed.get("title", url),
        "link": feed.feed.get("link", url),
        "description": feed.feed.get("description", ""),
        "items": [
            {
                "title": entry.get("title", ""),
                "link": entry.get("link", ""),
                "published": entry.get("published", entry.get("updated", "")),
                "summary": entry.get("summary", ""),
            }
            for entry in feed.entries[:MAX_ENTRIES]
        ],
    }


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    client_factory = client_factory or make_client_factory(settings.http_timeout)

    async def read_feed(params: RssParams) -> dict[str, Any]:
        async with client_factory() as client:
            response = await client.get(params.url)
            response.raise_for_status()
        return parse_feed(response.text, params.url)

    return aifn(NAME, DESCRIPTION, RssParams, read_feed)
