"""Electronic invoicing providers."""

from providerhub.infrastructure.configuration.providers.invoicing.acube import ACubeProvider
from providerhub.infrastructure.configuration.providers.invoicing.fattureincloud import (
    FattureInCloudProvider,
)

__all__ = ["ACubeProvider", "FattureInCloudProvider"]
