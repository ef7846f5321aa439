"""Provider descriptor entities.

A descriptor is the static, compiled-in description of one pluggable external
service: which family it belongs to, which credential fields it needs and
which of them are secret. Descriptors never change after process start.
"""

from dataclasses import dataclass, field
from enum import Enum


class ProviderFamily(str, Enum):
    """Categories of pluggable external services."""

    BACKUP_STORAGE = "backup_storage"
    CALENDAR = "calendar"
    INVOICING = "invoicing"
    NOTIFICATION_CHANNEL = "notification_channel"


class Capability(str, Enum):
    """Capability flags a provider may advertise."""

    UPLOAD = "upload"
    RETENTION = "retention"
    OAUTH = "oauth"
    BIDIRECTIONAL_SYNC = "bidirectional_sync"
    SEND_INVOICES = "send_invoices"
    SYNC_STATUS = "sync_status"
    SEND = "send"
    DELIVERY_REPORTS = "delivery_reports"
    TEMPLATES = "templates"


@dataclass(frozen=True)
class ProviderField:
    """One credential/setting field of a provider.

    Attributes:
        name: Field key as stored in field_values.
        is_secret: Whether the value is encrypted at rest and masked on read.
        required: Whether a non-empty value is needed for a valid configuration.
        label: Human-readable label.
        default: Value suggested to the UI when nothing is stored.
    """

    name: str
    is_secret: bool = False
    required: bool = True
    label: str = ""
    default: str | None = None


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of a provider within a family.

    Attributes:
        family: Provider family.
        provider_id: Stable key, unique within the family (e.g. 's3', 'google').
        display_name: Human-readable name.
        fields: Ordered credential/setting fields.
        capabilities: Capability flags.
    """

    family: ProviderFamily
    provider_id: str
    display_name: str
    fields: tuple[ProviderField, ...] = ()
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.provider_id:
            raise ValueError("Provider ID is required")
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names in provider '{self.provider_id}'")

    @property
    def required_fields(self) -> tuple[ProviderField, ...]:
        return tuple(f for f in self.fields if f.required)

    @property
    def required_field_names(self) -> list[str]:
        return [f.name for f in self.fields if f.required]

    @property
    def secret_field_names(self) -> list[str]:
        return [f.name for f in self.fields if f.is_secret]

    def get_field(self, name: str) -> ProviderField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def has_capability(self, capability: Capability) -> bool:
        return capability in self.capabilities
