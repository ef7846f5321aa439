"""Built-in provider catalog.

Every provider class carries its descriptor and its connectivity probe.
The registry and probe registry built here are the process-wide catalog;
adding a provider means adding a class to BUILTIN_PROVIDERS.
"""

from providerhub.core.configuration.provider_registry import ProviderRegistry
from providerhub.infrastructure.configuration.providers.backup import (
    AzureBackupProvider,
    LocalBackupProvider,
    S3BackupProvider,
)
from providerhub.infrastructure.configuration.providers.base import (
    ConnectivityProbe,
    ProbeRegistry,
)
from providerhub.infrastructure.configuration.providers.calendar import (
    GoogleCalendarProvider,
    OutlookCalendarProvider,
)
from providerhub.infrastructure.configuration.providers.invoicing import (
    ACubeProvider,
    FattureInCloudProvider,
)
from providerhub.infrastructure.configuration.providers.notification import (
    EmailChannelProvider,
    SmsChannelProvider,
    TelegramChannelProvider,
    WebhookChannelProvider,
    WhatsAppChannelProvider,
)

BUILTIN_PROVIDERS: tuple[type[ConnectivityProbe], ...] = (
    S3BackupProvider,
    AzureBackupProvider,
    LocalBackupProvider,
    GoogleCalendarProvider,
    OutlookCalendarProvider,
    FattureInCloudProvider,
    ACubeProvider,
    EmailChannelProvider,
    SmsChannelProvider,
    WhatsAppChannelProvider,
    TelegramChannelProvider,
    WebhookChannelProvider,
)


def build_default_registry() -> ProviderRegistry:
    """Build and freeze the registry of built-in provider descriptors."""
    registry = ProviderRegistry(provider().descriptor for provider in BUILTIN_PROVIDERS)
    registry.freeze()
    return registry


def build_default_probes() -> ProbeRegistry:
    """Build the probe registry of built-in providers."""
    probes = ProbeRegistry()
    for provider in BUILTIN_PROVIDERS:
        probes.register(provider())
    return probes


__all__ = [
    "BUILTIN_PROVIDERS",
    "ConnectivityProbe",
    "ProbeRegistry",
    "build_default_probes",
    "build_default_registry",
]
