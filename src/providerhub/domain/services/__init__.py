"""Domain services for ProviderHub.

Services contain logic that doesn't naturally fit within a single entity.
"""

from providerhub.domain.services.configuration_validator import (
    ConfigurationValidator,
    ResolvedValues,
)
from providerhub.domain.services.secret_redactor import MASK_SENTINEL, SecretRedactor
from providerhub.domain.services.status_cache import StatusCache

__all__ = [
    "ConfigurationValidator",
    "MASK_SENTINEL",
    "ResolvedValues",
    "SecretRedactor",
    "StatusCache",
]
