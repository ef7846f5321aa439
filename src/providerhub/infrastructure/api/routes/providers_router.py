"""Provider configuration API routes.

Catalog, status, masked reads, connection tests and the configuration
lifecycle (save, verify, activate, runtime failure, delete). Domain errors
propagate to the application's exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Query, Response, status

from providerhub.application.services.status_aggregator import aggregate_counts
from providerhub.infrastructure.api.dependencies import Aggregator, Gateway, Registry
from providerhub.infrastructure.api.schemas import (
    ConfigurationResponse,
    ProviderDescriptorResponse,
    ProviderFamilyResponse,
    RuntimeFailureRequest,
    SaveConfigurationRequest,
    ScopeRequest,
    StatusOverviewResponse,
    StatusSummaryResponse,
    TestConnectionRequest,
    TestResultResponse,
)

router = APIRouter()

OwnerScopeQuery = Query(None, description="Owning entity; omit for the global scope")


@router.get("/families", response_model=list[ProviderFamilyResponse])
async def list_families(registry: Registry) -> list[ProviderFamilyResponse]:
    """List every provider family with its providers and their fields."""
    return [
        ProviderFamilyResponse(
            family=family.value,
            providers=[
                ProviderDescriptorResponse.from_descriptor(d)
                for d in registry.list_providers(family)
            ],
        )
        for family in registry.list_families()
    ]


@router.get("/status", response_model=StatusOverviewResponse)
async def get_status_overview(
    aggregator: Aggregator,
    owner_scope: Optional[str] = OwnerScopeQuery,
) -> StatusOverviewResponse:
    """Status of every family with global counts."""
    summaries = await aggregator.summarize_all(owner_scope)
    return StatusOverviewResponse(
        families={
            family: StatusSummaryResponse.from_summary(summary)
            for family, summary in summaries.items()
        },
        totals=aggregate_counts(summaries),
    )


@router.get("/status/{family}", response_model=StatusSummaryResponse)
async def get_family_status(
    family: str,
    aggregator: Aggregator,
    owner_scope: Optional[str] = OwnerScopeQuery,
) -> StatusSummaryResponse:
    """Status of every provider in one family."""
    summary = await aggregator.summarize(family, owner_scope)
    return StatusSummaryResponse.from_summary(summary)


@router.get("/{family}/{provider_id}", response_model=ConfigurationResponse)
async def get_configuration(
    family: str,
    provider_id: str,
    gateway: Gateway,
    owner_scope: Optional[str] = OwnerScopeQuery,
) -> ConfigurationResponse:
    """Get a configuration with secrets masked.

    Returns state "unconfigured" when nothing is stored.
    """
    config = await gateway.get_masked(family, provider_id, owner_scope)
    return ConfigurationResponse.from_entity(config)


@router.post("/{family}/{provider_id}/test", response_model=TestResultResponse)
async def test_configuration(
    family: str,
    provider_id: str,
    body: TestConnectionRequest,
    gateway: Gateway,
) -> TestResultResponse:
    """Test candidate values without saving them.

    Always answers 200; a failed test is reported with success=false.
    """
    result = await gateway.test(family, provider_id, body.field_values, body.owner_scope)
    return TestResultResponse.from_result(result)


@router.put("/{family}/{provider_id}", response_model=ConfigurationResponse)
async def save_configuration(
    family: str,
    provider_id: str,
    body: SaveConfigurationRequest,
    gateway: Gateway,
) -> ConfigurationResponse:
    """Create or update a configuration."""
    config = await gateway.apply_configuration(
        family,
        provider_id,
        body.owner_scope,
        body.field_values,
        test_first=body.test_first,
        partial=body.partial,
        expected_updated_at=body.expected_updated_at,
    )
    return ConfigurationResponse.from_entity(gateway.store.mask(config))


@router.post("/{family}/{provider_id}/verify", response_model=ConfigurationResponse)
async def verify_configuration(
    family: str,
    provider_id: str,
    gateway: Gateway,
    body: Optional[ScopeRequest] = None,
) -> ConfigurationResponse:
    """Test the stored values and mark the configuration verified."""
    owner_scope = body.owner_scope if body else None
    config = await gateway.verify(family, provider_id, owner_scope)
    return ConfigurationResponse.from_entity(gateway.store.mask(config))


@router.post("/{family}/{provider_id}/activate", response_model=ConfigurationResponse)
async def activate_configuration(
    family: str,
    provider_id: str,
    gateway: Gateway,
    body: Optional[ScopeRequest] = None,
) -> ConfigurationResponse:
    """Activate a verified configuration."""
    owner_scope = body.owner_scope if body else None
    config = await gateway.activate(family, provider_id, owner_scope)
    return ConfigurationResponse.from_entity(gateway.store.mask(config))


@router.post("/{family}/{provider_id}/error", response_model=ConfigurationResponse)
async def report_runtime_failure(
    family: str,
    provider_id: str,
    body: RuntimeFailureRequest,
    gateway: Gateway,
) -> ConfigurationResponse:
    """Report that an operation using this configuration failed."""
    config = await gateway.record_runtime_failure(
        family, provider_id, body.owner_scope, body.message
    )
    return ConfigurationResponse.from_entity(gateway.store.mask(config))


@router.delete(
    "/{family}/{provider_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_configuration(
    family: str,
    provider_id: str,
    gateway: Gateway,
    owner_scope: Optional[str] = OwnerScopeQuery,
) -> Response:
    """Delete a configuration."""
    await gateway.delete(family, provider_id, owner_scope)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
