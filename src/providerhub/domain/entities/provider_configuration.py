"""Provider configuration entities.

A ProviderConfiguration is the persisted settings of one provider for one
owner scope. Its state follows a small lifecycle:

    unconfigured -> configured -> verified -> active
    configured | verified | active -> error (runtime failure)
    error -> configured (re-save) | verified (re-test)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ConfigurationState(str, Enum):
    """Lifecycle states of a provider configuration."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    VERIFIED = "verified"
    ACTIVE = "active"
    ERROR = "error"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProviderConfiguration:
    """Provider configuration entity.

    Attributes:
        id: Opaque identifier, None for the unconfigured placeholder.
        family: Provider family value.
        provider_id: Provider key within the family.
        owner_scope: Owning entity (e.g. company id); None means global.
        field_values: Field name to value mapping. Secret values are raw
            inside the service layer and masked on every read path.
        state: Lifecycle state.
        last_verified_at: Time of the last successful verification.
        last_error: Diagnostic message, always set when state is ERROR.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp, used for optimistic concurrency.
    """

    id: str | None
    family: str
    provider_id: str
    owner_scope: str | None = None
    field_values: dict[str, Any] = field(default_factory=dict)
    state: ConfigurationState = ConfigurationState.UNCONFIGURED
    last_verified_at: datetime | None = None
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.state == ConfigurationState.ERROR and not self.last_error:
            raise ValueError("Configurations in error state require last_error")

    @classmethod
    def unconfigured(
        cls, family: str, provider_id: str, owner_scope: str | None = None
    ) -> "ProviderConfiguration":
        """Placeholder returned when nothing is persisted for a key."""
        return cls(id=None, family=family, provider_id=provider_id, owner_scope=owner_scope)

    @property
    def is_configured(self) -> bool:
        return self.state != ConfigurationState.UNCONFIGURED

    @property
    def is_active(self) -> bool:
        return self.state == ConfigurationState.ACTIVE


@dataclass
class TestResult:
    """Outcome of a connectivity test. Never raised, always returned."""

    __test__ = False  # not a pytest test class

    success: bool
    detail: str
    duration_ms: int = 0
    tested_at: datetime = field(default_factory=utcnow)


@dataclass
class ProviderStatus:
    """Status of one provider inside a family summary."""

    provider_id: str
    display_name: str
    configured: bool = False
    active: bool = False
    state: ConfigurationState = ConfigurationState.UNCONFIGURED
    last_error: str | None = None
    last_verified_at: datetime | None = None


@dataclass
class StatusSummary:
    """Derived status of every provider in one family.

    Not persisted; recomputed on demand by the status aggregator.
    """

    family: str
    providers: dict[str, ProviderStatus] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=utcnow)

    @property
    def total(self) -> int:
        return len(self.providers)

    @property
    def configured_count(self) -> int:
        return sum(1 for p in self.providers.values() if p.configured)

    @property
    def active_count(self) -> int:
        return sum(1 for p in self.providers.values() if p.active)

    @property
    def error_count(self) -> int:
        return sum(1 for p in self.providers.values() if p.state == ConfigurationState.ERROR)

    def counts(self) -> dict[str, int]:
        return {
            "total": self.total,
            "configured": self.configured_count,
            "active": self.active_count,
            "error": self.error_count,
        }
