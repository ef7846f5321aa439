"""Telegram bot notification channel."""

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

TELEGRAM_API_URL = "https://api.telegram.org"

TELEGRAM_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.NOTIFICATION_CHANNEL,
    provider_id="telegram",
    display_name="Telegram",
    fields=(
        ProviderField("bot_token", is_secret=True, label="Bot Token"),
        ProviderField("bot_username", required=False, label="Bot Username"),
        ProviderField("webhook_url", required=False, label="Webhook URL"),
        ProviderField("webhook_secret", is_secret=True, required=False, label="Webhook Secret"),
    ),
    capabilities=frozenset({Capability.SEND, Capability.TEMPLATES}),
)


class TelegramChannelProvider(ConnectivityProbe):
    """Checks a bot token with the getMe method of the Bot API."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return TELEGRAM_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        url = f"{TELEGRAM_API_URL}/bot{values['bot_token']}/getMe"

        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                return False, f"Connectivity error to Telegram: {str(e)}"

        if response.status_code != 200:
            return False, f"Telegram rejected the bot token: {error_message(response)}"

        data = response.json()
        if not data.get("ok"):
            return False, f"Telegram rejected the bot token: {error_message(response)}"

        username = data.get("result", {}).get("username")
        expected = (values.get("bot_username") or "").lstrip("@")
        if expected and username and expected.lower() != username.lower():
            return False, f"Bot token belongs to @{username}, not @{expected}"
        return True, f"Connected to bot @{username}"
