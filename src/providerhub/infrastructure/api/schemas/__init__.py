"""API request/response schemas."""

from providerhub.infrastructure.api.schemas.provider_schemas import (
    ConfigurationResponse,
    ProviderDescriptorResponse,
    ProviderFamilyResponse,
    ProviderFieldResponse,
    ProviderStatusResponse,
    RuntimeFailureRequest,
    SaveConfigurationRequest,
    ScopeRequest,
    StatusOverviewResponse,
    StatusSummaryResponse,
    TestConnectionRequest,
    TestResultResponse,
)

__all__ = [
    "ConfigurationResponse",
    "ProviderDescriptorResponse",
    "ProviderFamilyResponse",
    "ProviderFieldResponse",
    "ProviderStatusResponse",
    "RuntimeFailureRequest",
    "SaveConfigurationRequest",
    "ScopeRequest",
    "StatusOverviewResponse",
    "StatusSummaryResponse",
    "TestConnectionRequest",
    "TestResultResponse",
]
