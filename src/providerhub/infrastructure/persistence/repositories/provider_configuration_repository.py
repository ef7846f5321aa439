"""Provider configuration repository for database operations."""

from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import and_, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from providerhub.core.configuration.exceptions import ValidationError
from providerhub.infrastructure.persistence.models.provider_configuration import (
    GLOBAL_SCOPE,
    ProviderConfigurationModel,
)


def check_owner_scope(owner_scope: Optional[str]) -> None:
    """Reject owner scopes that are blank or collide with the global scope.

    Raises:
        ValidationError: If owner_scope is empty, whitespace or reserved.
    """
    if owner_scope is None:
        return
    if not owner_scope.strip():
        raise ValidationError(
            "Owner scope cannot be blank; omit it for the global scope",
            field_errors={"owner_scope": "must not be blank"},
        )
    if owner_scope == GLOBAL_SCOPE:
        raise ValidationError(
            f"Owner scope '{GLOBAL_SCOPE}' is reserved",
            field_errors={"owner_scope": "reserved value"},
        )


def scope_key(owner_scope: Optional[str]) -> str:
    """Map a domain owner scope (None = global) to its stored value."""
    check_owner_scope(owner_scope)
    return GLOBAL_SCOPE if owner_scope is None else owner_scope


def scope_value(stored_scope: str) -> Optional[str]:
    """Map a stored owner scope back to the domain value."""
    return None if stored_scope == GLOBAL_SCOPE else stored_scope


class ProviderConfigurationRepository:
    """Repository for provider configuration database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> Optional[ProviderConfigurationModel]:
        """Get a configuration by its unique key.

        Args:
            family: Provider family.
            provider_id: Provider identifier.
            owner_scope: Owning entity, None for the global scope.

        Returns:
            Configuration model if found, None otherwise.
        """
        query = (
            select(ProviderConfigurationModel)
            .where(
                and_(
                    ProviderConfigurationModel.family == family,
                    ProviderConfigurationModel.provider_id == provider_id,
                    ProviderConfigurationModel.owner_scope == scope_key(owner_scope),
                )
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_by_family(
        self,
        family: str,
        owner_scope: Optional[str] = None,
    ) -> Sequence[ProviderConfigurationModel]:
        """List the configurations of a family for one owner scope.

        Args:
            family: Provider family.
            owner_scope: Owning entity, None for the global scope.

        Returns:
            List of configuration models ordered by provider ID.
        """
        query = (
            select(ProviderConfigurationModel)
            .where(
                and_(
                    ProviderConfigurationModel.family == family,
                    ProviderConfigurationModel.owner_scope == scope_key(owner_scope),
                )
            )
            .order_by(ProviderConfigurationModel.provider_id.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def create(self, config: ProviderConfigurationModel) -> ProviderConfigurationModel:
        """Create a new configuration.

        Args:
            config: Configuration model to create.

        Returns:
            Created configuration model.
        """
        self.session.add(config)
        await self.session.flush()
        return config

    async def compare_and_swap(
        self,
        record_id: str,
        expected_updated_at: datetime,
        values: dict[str, Any],
    ) -> bool:
        """Update a configuration only if it has not changed since it was read.

        Args:
            record_id: Configuration ID.
            expected_updated_at: The updated_at value observed when reading.
            values: Column values to write; must include a new updated_at.

        Returns:
            True if the row was updated, False if it changed or disappeared.
        """
        result = await self.session.execute(
            update(ProviderConfigurationModel)
            .where(
                and_(
                    ProviderConfigurationModel.id == record_id,
                    ProviderConfigurationModel.updated_at == expected_updated_at,
                )
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def delete(self, record_id: str) -> bool:
        """Delete a configuration.

        Args:
            record_id: Configuration ID.

        Returns:
            True if deleted, False if not found.
        """
        result = await self.session.execute(
            delete(ProviderConfigurationModel)
            .where(ProviderConfigurationModel.id == record_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
