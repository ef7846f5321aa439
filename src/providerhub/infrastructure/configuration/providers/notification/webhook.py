"""Generic webhook notification channel."""

import hashlib
import hmac
import json
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

WEBHOOK_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.NOTIFICATION_CHANNEL,
    provider_id="webhook",
    display_name="Webhook",
    fields=(
        ProviderField("url", label="Endpoint URL"),
        ProviderField("signing_secret", is_secret=True, required=False, label="Signing Secret"),
    ),
    capabilities=frozenset({Capability.SEND}),
)


def sign_payload(secret: str, body: bytes) -> str:
    """Compute the X-Signature header value for a request body."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


class WebhookChannelProvider(ConnectivityProbe):
    """Checks a webhook endpoint by delivering a signed ping event."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return WEBHOOK_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        url = values["url"]
        if not url.startswith(("http://", "https://")):
            return False, "Webhook URL must start with http:// or https://"

        body = json.dumps({"event": "ping"}).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if values.get("signing_secret"):
            headers["X-Signature"] = sign_payload(values["signing_secret"], body)

        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.post(url, content=body, headers=headers)
            except httpx.HTTPError as e:
                return False, f"Webhook delivery failed: {str(e)}"

        if response.is_success:
            return True, f"Webhook endpoint answered HTTP {response.status_code}"
        return False, f"Webhook endpoint answered HTTP {response.status_code}"
