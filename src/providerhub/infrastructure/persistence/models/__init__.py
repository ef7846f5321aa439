"""SQLAlchemy ORM models."""

from providerhub.infrastructure.persistence.models.provider_configuration import (
    GLOBAL_SCOPE,
    ProviderConfigurationModel,
)

__all__ = ["GLOBAL_SCOPE", "ProviderConfigurationModel"]
