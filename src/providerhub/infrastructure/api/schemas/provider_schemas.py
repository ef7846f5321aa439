"""Provider configuration API schemas.

Pydantic schemas for the provider catalog, configuration reads and writes,
connection tests and status summaries. Every configuration response carries
masked secret values.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from providerhub.domain.entities.provider_configuration import (
    ProviderConfiguration,
    StatusSummary,
    TestResult,
)
from providerhub.domain.entities.provider_descriptor import ProviderDescriptor


class ProviderFieldResponse(BaseModel):
    """One credential field of a provider."""

    name: str
    label: str
    is_secret: bool
    required: bool
    default: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProviderDescriptorResponse(BaseModel):
    """Static description of a provider."""

    provider_id: str
    display_name: str
    fields: list[ProviderFieldResponse]
    capabilities: list[str]

    @classmethod
    def from_descriptor(cls, descriptor: ProviderDescriptor) -> "ProviderDescriptorResponse":
        return cls(
            provider_id=descriptor.provider_id,
            display_name=descriptor.display_name,
            fields=[
                ProviderFieldResponse(
                    name=f.name,
                    label=f.label or f.name,
                    is_secret=f.is_secret,
                    required=f.required,
                    default=f.default,
                )
                for f in descriptor.fields
            ],
            capabilities=sorted(c.value for c in descriptor.capabilities),
        )


class ProviderFamilyResponse(BaseModel):
    """A provider family with its providers in catalog order."""

    family: str
    providers: list[ProviderDescriptorResponse]


class ConfigurationResponse(BaseModel):
    """Provider configuration with secrets masked."""

    id: Optional[str] = None
    family: str
    provider_id: str
    owner_scope: Optional[str] = None
    field_values: dict[str, Any] = Field(default_factory=dict)
    state: str
    last_verified_at: Optional[datetime] = None
    last_error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, config: ProviderConfiguration) -> "ConfigurationResponse":
        return cls(
            id=config.id,
            family=config.family,
            provider_id=config.provider_id,
            owner_scope=config.owner_scope,
            field_values=config.field_values,
            state=config.state.value,
            last_verified_at=config.last_verified_at,
            last_error=config.last_error,
            created_at=config.created_at,
            updated_at=config.updated_at,
        )


class ScopeRequest(BaseModel):
    """Request body naming the owner scope of a configuration."""

    owner_scope: Optional[str] = Field(None, description="Owning entity; omit for the global scope")


class SaveConfigurationRequest(ScopeRequest):
    """Request to create or update a configuration."""

    field_values: dict[str, Any] = Field(
        ..., description="Field values; masked secrets keep the stored value"
    )
    test_first: bool = Field(False, description="Test the values and save only if the test passes")
    partial: bool = Field(False, description="Keep stored values for fields not sent")
    expected_updated_at: Optional[datetime] = Field(
        None, description="Reject the save if the stored record changed since this time"
    )


class TestConnectionRequest(ScopeRequest):
    """Request to test candidate values without saving them."""

    __test__ = False  # not a pytest test class

    field_values: dict[str, Any] = Field(default_factory=dict)


class RuntimeFailureRequest(ScopeRequest):
    """Report of a runtime failure of an operation using a configuration."""

    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]


class TestResultResponse(BaseModel):
    """Outcome of a connection test."""

    __test__ = False  # not a pytest test class

    success: bool
    detail: str
    duration_ms: int
    tested_at: datetime

    @classmethod
    def from_result(cls, result: TestResult) -> "TestResultResponse":
        return cls(
            success=result.success,
            detail=result.detail,
            duration_ms=result.duration_ms,
            tested_at=result.tested_at,
        )


class ProviderStatusResponse(BaseModel):
    """Status of one provider."""

    provider_id: str
    display_name: str
    configured: bool
    active: bool
    state: str
    last_error: Optional[str] = None
    last_verified_at: Optional[datetime] = None


class StatusSummaryResponse(BaseModel):
    """Status of every provider in a family."""

    family: str
    providers: dict[str, ProviderStatusResponse]
    counts: dict[str, int]
    generated_at: datetime

    @classmethod
    def from_summary(cls, summary: StatusSummary) -> "StatusSummaryResponse":
        return cls(
            family=summary.family,
            providers={
                provider_id: ProviderStatusResponse(
                    provider_id=status.provider_id,
                    display_name=status.display_name,
                    configured=status.configured,
                    active=status.active,
                    state=status.state.value,
                    last_error=status.last_error,
                    last_verified_at=status.last_verified_at,
                )
                for provider_id, status in summary.providers.items()
            },
            counts=summary.counts(),
            generated_at=summary.generated_at,
        )


class StatusOverviewResponse(BaseModel):
    """Status of every family plus global totals."""

    families: dict[str, StatusSummaryResponse]
    totals: dict[str, int]
