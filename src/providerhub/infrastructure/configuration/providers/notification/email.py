"""SMTP email notification channel."""

from typing import Any

import aiosmtplib

from providerhub.domain.entities.provider_descriptor import (
    Capability,
    ProviderDescriptor,
    ProviderFamily,
    ProviderField,
)
from providerhub.infrastructure.configuration.providers.base import (
    DEFAULT_HTTP_TIMEOUT,
    ConnectivityProbe,
    is_truthy,
)

EMAIL_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.NOTIFICATION_CHANNEL,
    provider_id="email",
    display_name="Email (SMTP)",
    fields=(
        ProviderField("host", label="SMTP Host"),
        ProviderField("port", label="SMTP Port", default="587"),
        ProviderField("username", label="Username"),
        ProviderField("password", is_secret=True, label="Password"),
        ProviderField("from_email", label="From Address"),
        ProviderField("use_tls", required=False, label="Use STARTTLS", default="true"),
    ),
    capabilities=frozenset({Capability.SEND}),
)


class EmailChannelProvider(ConnectivityProbe):
    """Checks SMTP connectivity and authentication without sending mail."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return EMAIL_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        host = values["host"]
        try:
            port = int(values["port"])
        except (TypeError, ValueError):
            return False, f"SMTP port must be a number, got '{values['port']}'"

        # Port 465 speaks implicit TLS; anything else upgrades with STARTTLS
        use_ssl = port == 465
        use_starttls = is_truthy(values.get("use_tls", "true")) and not use_ssl

        try:
            async with aiosmtplib.SMTP(
                hostname=host,
                port=port,
                use_tls=use_ssl,
                start_tls=False,
                timeout=DEFAULT_HTTP_TIMEOUT,
            ) as smtp:
                if use_starttls:
                    await smtp.starttls()
                await smtp.login(values["username"], values["password"])
        except aiosmtplib.SMTPException as e:
            return False, f"SMTP connection failed: {str(e)}"
        except OSError as e:
            return False, f"SMTP connection failed: {str(e)}"
        return True, f"SMTP login to {host}:{port} succeeded"
