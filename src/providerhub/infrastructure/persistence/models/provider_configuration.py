"""SQLAlchemy model for the provider_configurations table.

One row per (family, provider, owner scope). The global scope is stored as
the reserved owner value GLOBAL_SCOPE so the unique constraint also covers it.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from providerhub.infrastructure.persistence.database import Base

GLOBAL_SCOPE = "__global__"


class ProviderConfigurationModel(Base):
    """SQLAlchemy model for the provider_configurations table.

    Attributes:
        id: Primary key (UUID).
        family: Provider family (e.g., 'backup_storage', 'calendar').
        provider_id: Provider identifier (e.g., 's3', 'google').
        owner_scope: Owning entity, or GLOBAL_SCOPE for system-wide configs.
        field_values: Field values as JSON; secret fields are encrypted.
        state: Lifecycle state.
        last_verified_at: Time of the last successful connection test.
        last_error: Diagnostic from the last runtime failure.
        created_at: Timestamp when the configuration was created.
        updated_at: Timestamp of the last write, used for compare-and-swap.
    """

    __tablename__ = "provider_configurations"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Configuration ID (UUID)",
    )
    family: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Provider family (e.g., 'backup_storage', 'notification_channel')",
    )
    provider_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Provider identifier (e.g., 's3', 'google')",
    )
    owner_scope: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default=GLOBAL_SCOPE,
        comment="Owning entity, '__global__' for system-wide configurations",
    )
    field_values: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        comment="Field values as JSON with secret fields encrypted",
    )
    state: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Lifecycle state",
    )
    last_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_error: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "family",
            "provider_id",
            "owner_scope",
            name="uq_provider_configurations_family_provider_owner",
        ),
        # Status summaries read a whole family for one owner
        Index("ix_provider_configurations_family_owner", "family", "owner_scope"),
    )

    def __repr__(self) -> str:
        return (
            f"<ProviderConfiguration(id={self.id}, family={self.family}, "
            f"provider={self.provider_id}, owner_scope={self.owner_scope}, state={self.state})>"
        )
