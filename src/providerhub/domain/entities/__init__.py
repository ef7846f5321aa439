"""Domain entities for ProviderHub.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from providerhub.domain.entities.hook_context import HookContext, HookResult
from providerhub.domain.entities.provider_configuration import (
    ConfigurationState,
    ProviderConfiguration,
    ProviderStatus,
    StatusSummary,
    TestResult,
)
from providerhub.domain.entities.provider_descriptor import (
    Capability,
    ProviderDescriptor,
    ProviderFamily,
    ProviderField,
)

__all__ = [
    "Capability",
    "ConfigurationState",
    "HookContext",
    "HookResult",
    "ProviderConfiguration",
    "ProviderDescriptor",
    "ProviderFamily",
    "ProviderField",
    "ProviderStatus",
    "StatusSummary",
    "TestResult",
]
