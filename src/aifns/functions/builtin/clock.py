"""Current time of day in a given time zone."""

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory

NAME = "clock"
DESCRIPTION = "Get the current time given a timezone"


class ClockParams(BaseModel):
    """Arguments for the clock function."""

    time_zone: str = Field(
        ...,
        alias="timeZone",
        description="IANA time zone name, e.g. 'America/New_York'",
    )

    model_config = ConfigDict(populate_by_name=True)


def current_time(params: ClockParams) -> str:
    """Return the local time in ``params.time_zone`` as e.g. ``3:04:05 PM``.

    Raises:
        ValueError: If the time zone is not known.
    """
    try:
        zone = ZoneInfo(params.time_zone)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ValueError(f"Unknown time zone: {params.time_zone}") from e

    return datetime.now(zone).strftime("%I:%M:%S %p").lstrip("0")


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    return aifn(NAME, DESCRIPTION, ClockParams, current_time)
