"""Notification channel providers."""

from providerhub.infrastructure.configuration.providers.notification.email import (
    EmailChannelProvider,
)
from providerhub.infrastructure.configuration.providers.notification.sms import (
    SmsChannelProvider,
)
from providerhub.infrastructure.configuration.providers.notification.telegram import (
    TelegramChannelProvider,
)
from providerhub.infrastructure.configuration.providers.notification.webhook import (
    WebhookChannelProvider,
)
from providerhub.infrastructure.configuration.providers.notification.whatsapp import (
    WhatsAppChannelProvider,
)

__all__ = [
    "EmailChannelProvider",
    "SmsChannelProvider",
    "TelegramChannelProvider",
    "WebhookChannelProvider",
    "WhatsAppChannelProvider",
]
