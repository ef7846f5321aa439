"""Fatture in Cloud invoicing provider."""

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

FATTUREINCLOUD_API_URL = "https://api-v2.fattureincloud.it"

FATTUREINCLOUD_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.INVOICING,
    provider_id="fattureincloud",
    display_name="Fatture in Cloud",
    fields=(
        ProviderField("api_key", is_secret=True, label="Access Token"),
        ProviderField("company_id_external", label="Company ID"),
    ),
    capabilities=frozenset({Capability.SEND_INVOICES, Capability.SYNC_STATUS}),
)


class FattureInCloudProvider(ConnectivityProbe):
    """Checks the access token and that it can reach the configured company."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return FATTUREINCLOUD_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        headers = {"Authorization": f"Bearer {values['api_key']}", "Accept": "application/json"}
        company_id = str(values["company_id_external"]).strip()

        async with httpx.AsyncClient(base_url=FATTUREINCLOUD_API_URL, timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.get("/user/companies", headers=headers)
            except httpx.HTTPError as e:
                return False, f"Connectivity error to Fatture in Cloud: {str(e)}"

        if response.status_code != 200:
            return False, f"Fatture in Cloud authentication failed: {error_message(response)}"

        companies = response.json().get("data", {}).get("companies", [])
        for company in companies:
            if str(company.get("id")) == company_id:
                return True, f"Connected to Fatture in Cloud company '{company.get('name', company_id)}'"
        return False, f"Company {company_id} is not accessible with this access token"
