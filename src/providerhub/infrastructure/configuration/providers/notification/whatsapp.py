"""Twilio WhatsApp notification channel."""

from typing import Any

import httpx

from providerhub.domain.entities.provider_descriptor import (
    Capability,
    ProviderDescriptor,
    ProviderFamily,
    ProviderField,
)
from providerhub.infrastructure.configuration.providers.base import (
    DEFAULT_HTTP_TIMEOUT,
    ConnectivityProbe,
    error_message,
)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01"

WHATSAPP_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.NOTIFICATION_CHANNEL,
    provider_id="whatsapp",
    display_name="WhatsApp (Twilio)",
    fields=(
        ProviderField("account_sid", label="Account SID"),
        ProviderField("auth_token", is_secret=True, label="Auth Token"),
        ProviderField("from_number", label="WhatsApp Sender Number"),
    ),
    capabilities=frozenset({Capability.SEND, Capability.TEMPLATES}),
)


class WhatsAppChannelProvider(ConnectivityProbe):
    """Checks Twilio credentials by fetching the account resource."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return WHATSAPP_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        account_sid = values["account_sid"]
        url = f"{TWILIO_API_URL}/Accounts/{account_sid}.json"

        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.get(url, auth=(account_sid, values["auth_token"]))
            except httpx.HTTPError as e:
                return False, f"Connectivity error to Twilio: {str(e)}"

        if response.status_code != 200:
            return False, f"Twilio authentication failed: {error_message(response)}"

        status = response.json().get("status", "unknown")
        if status != "active":
            return False, f"Twilio account is not active (status: {status})"
        return True, "Twilio account is active"
