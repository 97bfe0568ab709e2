"""Unit tests for the built-in functions.

HTTP-based functions are exercised against httpx.MockTransport, so no test
touches the network.
"""

import json
import math

import httpx
import pytest

from aifns.config import AifnsSettings
from aifns.functions.builtin import (
    BUILTIN_NAMES,
    builtin_functions,
    calculator,
    clock,
    create_default_registry,
    hackernews,
    reddit,
    request,
    rss,
    sms,
    weather,
)
from aifns.functions.http import USER_AGENT, make_client_factory

RSS_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example Feed</title>
    <link>https://example.com/</link>
    <description>News from example.com</description>
    <item>
      <title>First post</title>
      <link>https://example.com/1</link>
      <pubDate>Mon, 06 Sep 2021 16:45:00 GMT</pubDate>
      <description>Hello world</description>
    </item>
    <item>
      <title>Second post</title>
      <link>https://example.com/2</link>
    </item>
  </channel>
</rss>
"""


def factory_for(handler):
    """Client factory whose requests are answered by ``handler``."""
    return make_client_factory(5.0, transport=httpx.MockTransport(handler))


@pytest.fixture
def settings():
    return AifnsSettings()


@pytest.fixture
def twilio_settings():
    return AifnsSettings(
        twilio_account_sid="AC123",
        twilio_auth_token="secret",
        twilio_phone_number="+15550001111",
    )


class TestCalculator:
    """Tests for the arithmetic evaluator."""

    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("1 + 2", 3),
            ("2 * (3 + 4)", 14),
            ("7 / 2", 3.5),
            ("7 // 2", 3),
            ("7 % 4", 3),
            ("2 ** 10", 1024),
            ("-3 + +1", -2),
            ("sqrt(16)", 4.0),
            ("max(1, 5, 3)", 5),
            ("round(2.567, 2)", 2.57),
            ("floor(2.7) + ceil(2.1)", 5),
        ],
    )
    def test_evaluate(self, expression, expected):
        assert calculator.evaluate(expression) == expected

    def test_constants(self):
        assert calculator.evaluate("pi") == math.pi
        assert calculator.evaluate("2 * e") == 2 * math.e

    @pytest.mark.parametrize(
        "expression",
        [
            "",
            "   ",
            "1 +",
            "__import__('os')",
            "open('x')",
            "x + 1",
            "'a' * 3",
            "True + 1",
            "[1, 2]",
            "sqrt(x=4)",
            "2 ** 100000",
            "9 ** 5000",
            "(9 ** 9999) ** 9999",
            "(2 ** 5000) ** 3",
            "(lambda: 1)()",
        ],
    )
    def test_rejected_expressions(self, expression):
        with pytest.raises(ValueError):
            calculator.evaluate(expression)

    def test_large_but_bounded_powers(self):
        assert calculator.evaluate("2 ** 9999") == 2**9999
        assert calculator.evaluate("0.5 ** 9999") == 0.5**9999
        assert calculator.evaluate("(-1) ** 9999") == -1

    def test_division_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            calculator.evaluate("1 / 0")

    def test_descriptor(self, settings):
        descriptor = calculator.build(settings)

        assert descriptor.name == "calculator"
        assert descriptor.invoke({"expression": "6 * 7"}) == 42
        assert descriptor.invoke({}).startswith("Invalid arguments for calculator")


class TestClock:
    """Tests for the clock function."""

    def test_accepts_field_name(self, settings):
        descriptor = clock.build(settings)

        result = descriptor.invoke({"time_zone": "UTC"})

        assert result.endswith(("AM", "PM"))

    def test_no_leading_zero(self, settings):
        result = clock.build(settings).invoke({"timeZone": "Europe/Berlin"})

        assert not result.startswith("0")

    @pytest.mark.parametrize("zone", ["Not/AZone", "../etc/passwd"])
    def test_unknown_time_zone_raises(self, zone):
        with pytest.raises(ValueError, match="Unknown time zone"):
            clock.current_time(clock.ClockParams(timeZone=zone))


class TestWeather:
    """Tests for the weather function."""

    @pytest.mark.asyncio
    async def test_requests_current_weather(self, settings):
        seen = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(
                200, json={"current_weather": {"temperature": 21.5, "windspeed": 3}}
            )

        descriptor = weather.build(settings, client_factory=factory_for(handler))

        result = await descriptor.invoke({"longitude": 13.4, "latitude": 52.5})

        assert result["current_weather"]["temperature"] == 21.5
        (req,) = seen
        assert str(req.url).startswith(weather.FORECAST_URL)
        assert req.url.params["latitude"] == "52.5"
        assert req.url.params["longitude"] == "13.4"
        assert req.url.params["current_weather"] == "true"
        assert req.headers["User-Agent"] == USER_AGENT

    def test_out_of_range_coordinates(self, settings):
        descriptor = weather.build(settings)

        result = descriptor.invoke({"longitude": 181, "latitude": 0})

        assert result.startswith("Invalid arguments for weather")
        assert "longitude" in result

    @pytest.mark.asyncio
    async def test_http_errors_raise(self, settings):
        descriptor = weather.build(
            settings,
            client_factory=factory_for(lambda req: httpx.Response(500)),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await descriptor.invoke({"longitude": 0, "latitude": 0})


class TestHackerNews:
    """Tests for the hackernews function."""

    @staticmethod
    def handler(req: httpx.Request) -> httpx.Response:
        path = req.url.path
        if path.endswith("/topstories.json"):
            return httpx.Response(200, json=list(range(1, 16)))
        item_id = int(path.rsplit("/", 1)[-1].removesuffix(".json"))
        title = "Python 4 released" if item_id == 3 else f"Story {item_id}"
        return httpx.Response(200, json={"id": item_id, "title": title})

    @pytest.mark.asyncio
    async def test_fetches_first_stories(self, settings):
        descriptor = hackernews.build(settings, client_factory=factory_for(self.handler))

        stories = await descriptor.invoke({"type": "top"})

        assert len(stories) == hackernews.STORY_LIMIT
        assert [s["id"] for s in stories] == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_query_filters_titles(self, settings):
        descriptor = hackernews.build(settings, client_factory=factory_for(self.handler))

        stories = await descriptor.invoke({"type": "top", "query": "python"})

        assert [s["id"] for s in stories] == [3]

    def test_unknown_story_type(self, settings):
        result = hackernews.build(settings).invoke({"type": "trending"})

        assert result.startswith("Invalid arguments for hackernews")


class TestReddit:
    """Tests for the reddit function."""

    def test_listing_url(self):
        assert (
            reddit.listing_url(reddit.RedditParams(subreddit="python", type="hot"))
            == "https://www.reddit.com/r/python/hot.json"
        )
        assert (
            reddit.listing_url(reddit.RedditParams(type="new"))
            == "https://www.reddit.com/new.json"
        )

    @pytest.mark.asyncio
    async def test_default_limit(self, settings):
        seen = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(200, json={"data": {"children": []}})

        descriptor = reddit.build(settings, client_factory=factory_for(handler))

        result = await descriptor.invoke({"subreddit": "python", "type": "top"})

        assert result == {"data": {"children": []}}
        assert seen[0].url.path == "/r/python/top.json"
        assert seen[0].url.params["limit"] == str(reddit.DEFAULT_LIMIT)

    def test_limit_bounds(self, settings):
        result = reddit.build(settings).invoke({"type": "hot", "limit": 500})

        assert result.startswith("Invalid arguments for reddit")


class TestRequest:
    """Tests for the generic request function."""

    @pytest.mark.asyncio
    async def test_post_json_body(self, settings):
        seen = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(201, json={"created": True})

        descriptor = request.build(settings, client_factory=factory_for(handler))

        result = await descriptor.invoke(
            {"url": "https://api.example.com/items", "method": "post", "body": {"a": 1}}
        )

        assert result == {"created": True}
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"a": 1}

    @pytest.mark.asyncio
    async def test_non_json_response_returns_text(self, settings):
        descriptor = request.build(
            settings,
            client_factory=factory_for(lambda req: httpx.Response(200, text="<html/>")),
        )

        result = await descriptor.invoke({"url": "https://example.com"})

        assert result == "<html/>"

    @pytest.mark.asyncio
    async def test_error_status_raises(self, settings):
        descriptor = request.build(
            settings,
            client_factory=factory_for(lambda req: httpx.Response(404)),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await descriptor.invoke({"url": "https://example.com/missing"})


class TestRss:
    """Tests for the rss function."""

    def test_parse_feed(self):
        feed = rss.parse_feed(RSS_DOCUMENT, "https://example.com/feed")

        assert feed["title"] == "Example Feed"
        assert feed["link"] == "https://example.com/"
        assert feed["description"] == "News from example.com"
        assert [item["title"] for item in feed["items"]] == [
            "First post",
            "Second post",
        ]
        assert feed["items"][0]["summary"] == "Hello world"
        assert feed["items"][0]["published"]
        assert feed["items"][1]["published"] == ""

    def test_parse_garbage_raises(self):
        with pytest.raises(ValueError, match="Could not parse feed"):
            rss.parse_feed("this is not a feed <<<", "https://example.com/feed")

    @pytest.mark.asyncio
    async def test_read_feed(self, settings):
        descriptor = rss.build(
            settings,
            client_factory=factory_for(
                lambda req: httpx.Response(200, text=RSS_DOCUMENT)
            ),
        )

        feed = await descriptor.invoke({"url": "https://example.com/feed"})

        assert feed["title"] == "Example Feed"
        assert len(feed["items"]) == 2


class TestSms:
    """Tests for the sms function."""

    def test_requires_twilio_settings(self, settings):
        with pytest.raises(ValueError, match="Twilio"):
            sms.build(settings)

    @pytest.mark.asyncio
    async def test_sends_message(self, twilio_settings):
        seen = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(
                201,
                json={
                    "sid": "SM1",
                    "status": "queued",
                    "from": "+15550001111",
                    "to": "+15552223333",
                    "body": "Hi",
                },
            )

        descriptor = sms.build(twilio_settings, client_factory=factory_for(handler))

        result = await descriptor.invoke({"to": "+15552223333", "body": "Hi"})

        assert result == {
            "sid": "SM1",
            "status": "queued",
            "from": "+15550001111",
            "to": "+15552223333",
        }
        (req,) = seen
        assert req.method == "POST"
        assert req.url.path == "/2010-04-01/Accounts/AC123/Messages.json"
        assert req.headers["Authorization"].startswith("Basic ")
        form = dict(
            pair.split("=", 1) for pair in req.content.decode().split("&")
        )
        assert form["From"] == "%2B15550001111"
        assert form["To"] == "%2B15552223333"
        assert form["Body"] == "Hi"

    @pytest.mark.asyncio
    async def test_explicit_sender(self, twilio_settings):
        seen = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(201, json={"sid": "SM2"})

        descriptor = sms.build(twilio_settings, client_factory=factory_for(handler))

        await descriptor.invoke({"from": "+15559998888", "to": "+15552223333", "body": "x"})

        assert "From=%2B15559998888" in seen[0].content.decode()

    @pytest.mark.parametrize("to", ["5552223333", "+0123", "+1 555 222 3333"])
    def test_rejects_non_e164_numbers(self, twilio_settings, to):
        result = sms.build(twilio_settings).invoke({"to": to, "body": "Hi"})

        assert result.startswith("Invalid arguments for sms")


class TestDefaultRegistry:
    """Tests for assembling the built-in registry."""

    def test_all_but_sms_without_twilio(self, settings):
        registry = create_default_registry(settings)

        assert registry.names() == [n for n in BUILTIN_NAMES if n != "sms"]

    def test_sms_included_with_twilio(self, twilio_settings):
        registry = create_default_registry(twilio_settings)

        assert "sms" in registry
        assert len(registry) == len(BUILTIN_NAMES)

    def test_enabled_functions_filter(self):
        settings = AifnsSettings(enabled_functions=["weather", "clock"])

        descriptors = builtin_functions(settings)

        # Registration order is fixed, independent of the configured order
        assert [d.name for d in descriptors] == ["clock", "weather"]

    def test_unknown_enabled_function(self):
        settings = AifnsSettings(enabled_functions=["clock", "teleport"])

        with pytest.raises(ValueError, match="teleport"):
            builtin_functions(settings)

    def test_every_schema_is_an_object(self, twilio_settings):
        for schema in create_default_registry(twilio_settings).list_schemas():
            assert schema["parameters"]["type"] == "object"
            assert schema["description"]
