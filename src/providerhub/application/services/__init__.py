"""Application services orchestrating the provider configuration lifecycle."""

from providerhub.application.services.configuration_store import (
    KeyedLocks,
    ProviderConfigurationStore,
)
from providerhub.application.services.connectivity_tester import ConnectivityTestExecutor
from providerhub.application.services.settings_gateway import SettingsMutationGateway
from providerhub.application.services.status_aggregator import (
    StatusAggregator,
    aggregate_counts,
    register_cache_invalidation,
)

__all__ = [
    "ConnectivityTestExecutor",
    "KeyedLocks",
    "ProviderConfigurationStore",
    "SettingsMutationGateway",
    "StatusAggregator",
    "aggregate_counts",
    "register_cache_invalidation",
]
