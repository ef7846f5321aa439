"""Repositories for database access."""

from providerhub.infrastructure.persistence.repositories.provider_configuration_repository import (
    ProviderConfigurationRepository,
)

__all__ = ["ProviderConfigurationRepository"]
