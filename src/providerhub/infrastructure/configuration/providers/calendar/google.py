"""Google Calendar provider."""

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

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"

GOOGLE_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.CALENDAR,
    provider_id="google",
    display_name="Google Calendar",
    fields=(
        ProviderField("client_id", label="Client ID"),
        ProviderField("client_secret", is_secret=True, label="Client Secret"),
        ProviderField("refresh_token", is_secret=True, label="Refresh Token"),
        ProviderField("calendar_id", required=False, label="Calendar ID", default="primary"),
    ),
    capabilities=frozenset({Capability.BIDIRECTIONAL_SYNC, Capability.OAUTH}),
)


class GoogleCalendarProvider(ConnectivityProbe):
    """Checks Google OAuth credentials with a refresh-token grant."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return GOOGLE_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        data = {
            "client_id": values["client_id"],
            "client_secret": values["client_secret"],
            "refresh_token": values["refresh_token"],
            "grant_type": "refresh_token",
        }

        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.post(GOOGLE_TOKEN_URL, data=data)
            except httpx.HTTPError as e:
                return False, f"Connectivity error to Google: {str(e)}"

        if response.status_code != 200:
            return False, f"Google token refresh failed: {error_message(response)}"
        if not response.json().get("access_token"):
            return False, "Google token refresh failed: no access token returned"
        return True, "Google Calendar credentials are valid"
