"""Current weather from the Open-Meteo forecast API."""

from typing import Any

from pydantic import BaseModel, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory, make_client_factory

NAME = "weather"
DESCRIPTION = "Get the current weather in a given location"

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


class WeatherParams(BaseModel):
    """Arguments for the weather function."""

    longitude: float = Field(..., ge=-180, le=180, description="Longitude")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude")


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    client_factory = client_factory or make_client_factory(settings.http_timeout)

    async def current_weather(params: WeatherParams) -> dict[str, Any]:
        async with client_factory() as client:
            response = await client.get(
                FORECAST_URL,
                params={
                    "latitude": params.latitude,
                    "longitude": params.longitude,
                    "current_weather": "true",
                },
            )
            response.raise_for_status()
            return response.json()

    return aifn(NAME, DESCRIPTION, WeatherParams, current_weather)
