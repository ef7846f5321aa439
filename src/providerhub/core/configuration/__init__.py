"""Provider registry and configuration error types."""

from providerhub.core.configuration.exceptions import (
    AggregationError,
    ConflictError,
    NotFoundError,
    NotVerifiedError,
    ProviderConfigError,
    ProviderNotFoundError,
    TestFailedError,
    ValidationError,
)
from providerhub.core.configuration.provider_registry import ProviderRegistry

__all__ = [
    "AggregationError",
    "ConflictError",
    "NotFoundError",
    "NotVerifiedError",
    "ProviderConfigError",
    "ProviderNotFoundError",
    "ProviderRegistry",
    "TestFailedError",
    "ValidationError",
]
