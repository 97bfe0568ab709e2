"""Send text messages through the Twilio REST API."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory, make_client_factory

logger = logging.getLogger(__name__)

NAME = "sms"
DESCRIPTION = "Send a text message to a phone number"

TWILIO_API_URL = "https://api.twilio.com/2010-04-01"


class SmsParams(BaseModel):
    """Arguments for the sms function."""

    sender: str | None = Field(
        default=None,
        alias="from",
        description="Sending phone number; defaults to the configured number",
    )
    to: str = Field(
        ...,
        pattern=r"^\+[1-9]\d{1,14}$",
        description="Recipient phone number in E.164 format",
    )
    body: str = Field(..., description="Message text")

    model_config = ConfigDict(populate_by_name=True)


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    """Build the sms function.

    Raises:
        ValueError: If Twilio credentials are not configured.
    """
    if not settings.twilio_configured:
        raise ValueError("Twilio credentials are not configured")

    client_factory = client_factory or make_client_factory(settings.http_timeout)
    account_sid = settings.twilio_account_sid
    auth = (account_sid, settings.twilio_auth_token)
    default_sender = settings.twilio_phone_number

    async def send_sms(params: SmsParams) -> dict[str, Any]:
        sender = params.sender or default_sender
        logger.info(f"Sending SMS from {sender} to {params.to}")
        async with client_factory() as client:
            response = await client.post(
                f"{TWILIO_API_URL}/Accounts/{account_sid}/Messages.json",
                auth=auth,
                data={"From": sender, "To": params.to, "Body": params.body},
            )
            response.raise_for_status()
            message = response.json()

        return {
            "sid": message.get("sid"),
            "status": message.get("status"),
            "from": message.get("from"),
            "to": message.get("to"),
        }

    return aifn(NAME, DESCRIPTION, SmsParams, send_sms)
