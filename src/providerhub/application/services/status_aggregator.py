"""Status aggregation across provider families.

Joins the registry (every provider that could be configured) with the store
(what actually is configured) into per-family summaries for dashboards.
Summaries are cached per (family, owner scope) and dropped as soon as the
store reports a mutation in that family.
"""

from typing import Any, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from providerhub.core.configuration.exceptions import AggregationError
from providerhub.core.configuration.provider_registry import ProviderRegistry
from providerhub.core.hooks.hook_events import CONFIGURATION_EVENTS
from providerhub.core.hooks.hook_registry import HookRegistry
from providerhub.core.logging import get_logger
from providerhub.domain.entities.hook_context import HookContext
from providerhub.domain.entities.provider_configuration import (
    ConfigurationState,
    ProviderConfiguration,
    ProviderStatus,
    StatusSummary,
)
from providerhub.domain.entities.provider_descriptor import ProviderFamily
from providerhub.domain.services.status_cache import StatusCache
from providerhub.infrastructure.persistence.repositories.provider_configuration_repository import (
    check_owner_scope,
)

logger = get_logger(__name__)


class ConfigurationSource(Protocol):
    async def list_family(
        self, family: str, owner_scope: Optional[str] = None
    ) -> list[ProviderConfiguration]: ...


def register_cache_invalidation(hook_registry: HookRegistry, cache: StatusCache) -> list[str]:
    """Subscribe the status cache to every configuration mutation event.

    Returns:
        The registered hook IDs.
    """

    def invalidate(event: str, data: Optional[dict[str, Any]], context: Optional[HookContext]) -> None:
        if context is None:
            cache.invalidate_all()
            return
        removed = cache.invalidate_family(context.family)
        logger.debug(
            "Status cache invalidated",
            hook_event=event,
            family=context.family,
            removed=removed,
        )

    # Runs before any other listener so later listeners see fresh status
    return [hook_registry.register(event, invalidate, priority=100) for event in CONFIGURATION_EVENTS]


def aggregate_counts(summaries: dict[str, StatusSummary]) -> dict[str, int]:
    """Sum the per-family counts into global totals."""
    totals = {"total": 0, "configured": 0, "active": 0, "error": 0}
    for summary in summaries.values():
        for key, value in summary.counts().items():
            totals[key] += value
    return totals


class StatusAggregator:
    """Builds status summaries from the registry and a configuration source."""

    def __init__(
        self,
        registry: ProviderRegistry,
        source: ConfigurationSource,
        cache: Optional[StatusCache] = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            registry: Provider registry.
            source: Configuration source, usually a ProviderConfigurationStore.
            cache: Shared status cache; a private one is created if omitted.
        """
        self.registry = registry
        self.source = source
        self.cache = cache or StatusCache()

    async def summarize(self, family: ProviderFamily | str, owner_scope: Optional[str] = None) -> StatusSummary:
        """Summarize one family.

        Every registered provider of the family appears in the result, with
        configured=False when nothing is stored for it.

        Raises:
            ProviderNotFoundError: If the family is unknown.
            ValidationError: If owner_scope is blank or reserved.
            AggregationError: If reading the store fails.
        """
        check_owner_scope(owner_scope)
        descriptors = self.registry.list_providers(family)
        family_value = ProviderFamily(family).value

        cached = self.cache.get(family_value, owner_scope)
        if cached is not None:
            return cached

        generation = self.cache.generation(family_value, owner_scope)
        try:
            configs = await self.source.list_family(family_value, owner_scope)
        except SQLAlchemyError as e:
            logger.error(
                "Status aggregation failed",
                family=family_value,
                owner_scope=owner_scope,
                error=str(e),
            )
            raise AggregationError(f"Could not read configurations for family '{family_value}'") from e

        by_provider = {config.provider_id: config for config in configs}
        summary = StatusSummary(family=family_value)
        for descriptor in descriptors:
            config = by_provider.get(descriptor.provider_id)
            if config is None:
                summary.providers[descriptor.provider_id] = ProviderStatus(
                    provider_id=descriptor.provider_id,
                    display_name=descriptor.display_name,
                )
                continue
            summary.providers[descriptor.provider_id] = ProviderStatus(
                provider_id=descriptor.provider_id,
                display_name=descriptor.display_name,
                configured=config.state != ConfigurationState.UNCONFIGURED,
                active=config.state == ConfigurationState.ACTIVE,
                state=config.state,
                last_error=config.last_error,
                last_verified_at=config.last_verified_at,
            )

        self.cache.set(family_value, summary, owner_scope, generation=generation)
        return summary

    async def summarize_all(self, owner_scope: Optional[str] = None) -> dict[str, StatusSummary]:
        """Summarize every family, keyed by family value."""
        return {
            family.value: await self.summarize(family, owner_scope)
            for family in self.registry.list_families()
        }
