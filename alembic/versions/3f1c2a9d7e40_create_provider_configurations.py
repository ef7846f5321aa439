"""create_provider_configurations

Revision ID: 3f1c2a9d7e40
Revises:
Create Date: 2026-10-18 09:12:44.518203

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "provider_configurations",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Configuration ID (UUID)"),
        sa.Column(
            "family",
            sa.String(length=50),
            nullable=False,
            comment="Provider family (e.g., 'backup_storage', 'notification_channel')",
        ),
        sa.Column(
            "provider_id",
            sa.String(length=100),
            nullable=False,
            comment="Provider identifier (e.g., 's3', 'google')",
        ),
        sa.Column(
            "owner_scope",
            sa.String(length=100),
            nullable=False,
            comment="Owning entity, '__global__' for system-wide configurations",
        ),
        sa.Column(
            "field_values",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
            comment="Field values as JSON with secret fields encrypted",
        ),
        sa.Column("state", sa.String(length=20), nullable=False, comment="Lifecycle state"),
        sa.Column("last_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "family",
            "provider_id",
            "owner_scope",
            name="uq_provider_configurations_family_provider_owner",
        ),
    )
    op.create_index(
        "ix_provider_configurations_family_owner",
        "provider_configurations",
        ["family", "owner_scope"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_provider_configurations_family_owner", table_name="provider_configurations")
    op.drop_table("provider_configurations")
