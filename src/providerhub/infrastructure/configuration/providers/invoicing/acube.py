"""A-Cube (FatturaPA / SdI) invoicing provider."""

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

ACUBE_LOGIN_URLS = {
    "sandbox": "https://common-sandbox.api.acubeapi.com/login",
    "production": "https://common.api.acubeapi.com/login",
}

ACUBE_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.INVOICING,
    provider_id="acube",
    display_name="A-Cube",
    fields=(
        ProviderField("username", label="Email"),
        ProviderField("password", is_secret=True, label="Password"),
        ProviderField("environment", required=False, label="Environment", default="sandbox"),
    ),
    capabilities=frozenset({Capability.SEND_INVOICES}),
)


class ACubeProvider(ConnectivityProbe):
    """Checks A-Cube credentials by logging in to the selected environment."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return ACUBE_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        environment = (values.get("environment") or "sandbox").strip().lower()
        login_url = ACUBE_LOGIN_URLS.get(environment)
        if login_url is None:
            return False, f"Unknown A-Cube environment '{environment}' (expected sandbox or production)"

        payload = {"email": values["username"], "password": values["password"]}
        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.post(login_url, json=payload)
            except httpx.HTTPError as e:
                return False, f"Connectivity error to A-Cube: {str(e)}"

        if response.status_code != 200:
            return False, f"A-Cube login failed: {error_message(response)}"
        if not response.json().get("token"):
            return False, "A-Cube login failed: no token returned"
        return True, f"A-Cube credentials are valid ({environment})"
