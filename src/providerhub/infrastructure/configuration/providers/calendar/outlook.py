"""Microsoft Outlook calendar provider."""

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

OUTLOOK_TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"
OUTLOOK_SCOPES = "offline_access https://graph.microsoft.com/Calendars.ReadWrite"

OUTLOOK_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.CALENDAR,
    provider_id="outlook",
    display_name="Microsoft Outlook",
    fields=(
        ProviderField("client_id", label="Application (client) ID"),
        ProviderField("client_secret", is_secret=True, label="Client Secret"),
        ProviderField("refresh_token", is_secret=True, label="Refresh Token"),
        ProviderField("tenant_id", required=False, label="Tenant ID", default="common"),
    ),
    capabilities=frozenset({Capability.BIDIRECTIONAL_SYNC, Capability.OAUTH}),
)


class OutlookCalendarProvider(ConnectivityProbe):
    """Checks Microsoft identity credentials with a refresh-token grant."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return OUTLOOK_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        token_url = OUTLOOK_TOKEN_URL.format(tenant=values.get("tenant_id") or "common")
        data = {
            "client_id": values["client_id"],
            "client_secret": values["client_secret"],
            "refresh_token": values["refresh_token"],
            "grant_type": "refresh_token",
            "scope": OUTLOOK_SCOPES,
        }

        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.post(token_url, data=data)
            except httpx.HTTPError as e:
                return False, f"Connectivity error to Microsoft: {str(e)}"

        if response.status_code != 200:
            return False, f"Microsoft token refresh failed: {error_message(response)}"
        if not response.json().get("access_token"):
            return False, "Microsoft token refresh failed: no access token returned"
        return True, "Outlook credentials are valid"
