"""Skebby SMS notification channel."""

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
)

SKEBBY_API_URL = "https://api.skebby.it/API/v1.0/REST/"

SMS_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.NOTIFICATION_CHANNEL,
    provider_id="sms",
    display_name="SMS (Skebby)",
    fields=(
        ProviderField("username", label="Username"),
        ProviderField("password", is_secret=True, label="Password"),
        ProviderField("sender", required=False, label="Sender Name"),
        ProviderField("api_url", required=False, label="API URL", default=SKEBBY_API_URL),
    ),
    capabilities=frozenset({Capability.SEND, Capability.DELIVERY_REPORTS}),
)


class SmsChannelProvider(ConnectivityProbe):
    """Checks Skebby credentials with the login endpoint.

    A successful login answers with a plain-text "user_key;session_key" body.
    """

    @property
    def descriptor(self) -> ProviderDescriptor:
        return SMS_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        api_url = (values.get("api_url") or SKEBBY_API_URL).rstrip("/") + "/"
        params = {"username": values["username"], "password": values["password"]}

        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.get(f"{api_url}login", params=params)
            except httpx.HTTPError as e:
                return False, f"Connectivity error to SMS gateway: {str(e)}"

        if response.status_code in (401, 403):
            return False, "SMS gateway rejected the credentials"
        if response.status_code != 200:
            return False, f"SMS gateway login failed (HTTP {response.status_code})"

        parts = response.text.strip().split(";")
        if len(parts) != 2 or not all(parts):
            return False, "SMS gateway login returned an unexpected response"
        return True, "SMS gateway credentials are valid"
