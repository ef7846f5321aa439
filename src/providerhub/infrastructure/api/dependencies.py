"""FastAPI dependencies for the provider configuration services.

Process-wide services live on app.state; stores and gateways are built per
request around the request's database session.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from providerhub.application.services.configuration_store import ProviderConfigurationStore
from providerhub.application.services.settings_gateway import SettingsMutationGateway
from providerhub.application.services.status_aggregator import StatusAggregator
from providerhub.core.configuration.provider_registry import ProviderRegistry
from providerhub.infrastructure.persistence.database import get_db_session


def get_provider_registry(request: Request) -> ProviderRegistry:
    return request.app.state.provider_registry


async def get_configuration_store(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProviderConfigurationStore:
    """Build a configuration store bound to the request's session."""
    state = request.app.state
    return ProviderConfigurationStore(
        session=session,
        registry=state.provider_registry,
        encryption_service=state.encryption_service,
        hook_registry=state.hook_registry,
        locks=state.configuration_locks,
        redactor=state.secret_redactor,
    )


async def get_settings_gateway(
    request: Request,
    store: Annotated[ProviderConfigurationStore, Depends(get_configuration_store)],
) -> SettingsMutationGateway:
    return SettingsMutationGateway(store=store, executor=request.app.state.connectivity_executor)


async def get_status_aggregator(
    request: Request,
    store: Annotated[ProviderConfigurationStore, Depends(get_configuration_store)],
) -> StatusAggregator:
    return StatusAggregator(
        registry=request.app.state.provider_registry,
        source=store,
        cache=request.app.state.status_cache,
    )


Registry = Annotated[ProviderRegistry, Depends(get_provider_registry)]
Gateway = Annotated[SettingsMutationGateway, Depends(get_settings_gateway)]
Aggregator = Annotated[StatusAggregator, Depends(get_status_aggregator)]
