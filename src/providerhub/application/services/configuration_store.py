"""Provider configuration store.

Persists one configuration per (family, provider, owner scope) and owns every
lifecycle transition. Writes to the same key are serialized by an in-process
lock and guarded by a compare-and-swap on updated_at, so a writer that read
a stale record fails with ConflictError instead of overwriting.

Secret values are encrypted at rest. Entities returned by this store carry
raw values; callers facing the outside world use get_masked().
"""

import asyncio
import weakref
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from providerhub.core.configuration.exceptions import (
    ConflictError,
    NotFoundError,
    NotVerifiedError,
    ProviderNotFoundError,
    ValidationError,
)
from providerhub.core.configuration.provider_registry import ProviderRegistry
from providerhub.core.hooks.hook_events import HookEvent
from providerhub.core.hooks.hook_registry import HookRegistry
from providerhub.core.logging import get_logger
from providerhub.domain.entities.hook_context import HookContext
from providerhub.domain.entities.provider_configuration import (
    ConfigurationState,
    ProviderConfiguration,
    utcnow,
)
from providerhub.domain.entities.provider_descriptor import ProviderDescriptor, ProviderFamily
from providerhub.domain.services.configuration_validator import ConfigurationValidator
from providerhub.domain.services.secret_redactor import SecretRedactor
from providerhub.infrastructure.persistence.models.provider_configuration import (
    ProviderConfigurationModel,
)
from providerhub.infrastructure.persistence.repositories.provider_configuration_repository import (
    ProviderConfigurationRepository,
    scope_key,
    scope_value,
)
from providerhub.infrastructure.security.encryption import EncryptionService

logger = get_logger(__name__)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC (SQLite returns naive values)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class KeyedLocks:
    """Per-key asyncio locks, shared by every store of the process.

    Locks are held weakly: a key's lock is dropped once no writer holds or
    awaits it.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks.setdefault(key, asyncio.Lock())
        return lock

    def __len__(self) -> int:
        return len(self._locks)


class ProviderConfigurationStore:
    """Store for provider configurations bound to one database session."""

    def __init__(
        self,
        session: AsyncSession,
        registry: ProviderRegistry,
        encryption_service: EncryptionService,
        hook_registry: Optional[HookRegistry] = None,
        locks: Optional[KeyedLocks] = None,
        redactor: Optional[SecretRedactor] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the store.

        Args:
            session: SQLAlchemy async session.
            registry: Provider registry used to validate keys and fields.
            encryption_service: Service encrypting secret fields at rest.
            hook_registry: Registry notified after every committed mutation.
            locks: Process-wide per-key locks; a private set is created if omitted.
            redactor: Redactor used by get_masked().
            clock: Time source, injectable for tests.
        """
        self.session = session
        self.repository = ProviderConfigurationRepository(session)
        self.registry = registry
        self.encryption_service = encryption_service
        self.hook_registry = hook_registry
        self.locks = locks or KeyedLocks()
        self.redactor = redactor or SecretRedactor()
        self._clock = clock

    @staticmethod
    def _lock_key(family: str, provider_id: str, owner_scope: Optional[str]) -> str:
        return f"{family}:{provider_id}:{scope_key(owner_scope)}"

    def _descriptor(self, family: str, provider_id: str) -> ProviderDescriptor:
        return self.registry.get_provider(family, provider_id)

    def _next_timestamp(self, previous: Optional[datetime]) -> datetime:
        """Return a write timestamp strictly after the previous one."""
        now = as_utc(self._clock())
        previous = as_utc(previous)
        if previous is not None and now <= previous:
            return previous + timedelta(microseconds=1)
        return now

    def _to_entity(
        self, model: ProviderConfigurationModel, descriptor: ProviderDescriptor
    ) -> ProviderConfiguration:
        return ProviderConfiguration(
            id=model.id,
            family=model.family,
            provider_id=model.provider_id,
            owner_scope=scope_value(model.owner_scope),
            field_values=self.encryption_service.decrypt_fields(
                dict(model.field_values or {}), descriptor.secret_field_names
            ),
            state=ConfigurationState(model.state),
            last_verified_at=as_utc(model.last_verified_at),
            last_error=model.last_error,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def _notify(
        self,
        event: str,
        family: str,
        provider_id: str,
        owner_scope: Optional[str],
        data: dict[str, Any],
    ) -> None:
        if self.hook_registry is None:
            return
        await self.hook_registry.trigger(
            event=event,
            data=data,
            context=HookContext(family=family, provider_id=provider_id, owner_scope=owner_scope),
            filters={"family": family, "provider_id": provider_id},
        )

    async def get(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> ProviderConfiguration:
        """Get a configuration with raw (decrypted) values.

        Returns:
            The configuration, or an unconfigured placeholder if none is stored.

        Raises:
            ProviderNotFoundError: If the family/provider pair is unknown.
        """
        descriptor = self._descriptor(family, provider_id)
        family = descriptor.family.value
        model = await self.repository.get(family, provider_id, owner_scope)
        if model is None:
            return ProviderConfiguration.unconfigured(family, provider_id, owner_scope)
        return self._to_entity(model, descriptor)

    async def get_masked(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> ProviderConfiguration:
        """Get a configuration with every secret field masked."""
        config = await self.get(family, provider_id, owner_scope)
        return self.mask(config)

    def mask(self, config: ProviderConfiguration) -> ProviderConfiguration:
        """Return a copy of a configuration with secret fields masked."""
        descriptor = self._descriptor(config.family, config.provider_id)
        return ProviderConfiguration(
            id=config.id,
            family=config.family,
            provider_id=config.provider_id,
            owner_scope=config.owner_scope,
            field_values=self.redactor.mask_values(
                config.field_values, descriptor.secret_field_names
            ),
            state=config.state,
            last_verified_at=config.last_verified_at,
            last_error=config.last_error,
            created_at=config.created_at,
            updated_at=config.updated_at,
        )

    async def list_family(
        self,
        family: str,
        owner_scope: Optional[str] = None,
    ) -> list[ProviderConfiguration]:
        """List the stored configurations of a family, secrets masked.

        Rows for providers no longer in the registry are skipped.
        """
        configs = []
        for model in await self.repository.list_by_family(ProviderFamily(family).value, owner_scope):
            try:
                descriptor = self._descriptor(model.family, model.provider_id)
            except ProviderNotFoundError:
                continue
            configs.append(self.mask(self._to_entity(model, descriptor)))
        return configs

    async def upsert(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str],
        field_values: dict[str, Any],
        partial: bool = False,
        expected_updated_at: Optional[datetime] = None,
    ) -> ProviderConfiguration:
        """Create or update a configuration.

        Masked secret values keep the stored raw value. Saving values that
        differ from the stored ones puts the configuration back in the
        configured state; saving identical values keeps a verified or
        active state.

        Args:
            family: Provider family.
            provider_id: Provider identifier.
            owner_scope: Owning entity, None for the global scope.
            field_values: Candidate field values.
            partial: If True, fields absent from field_values keep their
                stored values.
            expected_updated_at: If given, the write fails unless the stored
                record still has this updated_at.

        Returns:
            The stored configuration with raw values.

        Raises:
            ProviderNotFoundError: If the family/provider pair is unknown.
            ValidationError: If required fields are missing or invalid.
            ConflictError: If the record changed concurrently.
        """
        descriptor = self._descriptor(family, provider_id)
        family = descriptor.family.value

        async with self.locks.get(self._lock_key(family, provider_id, owner_scope)):
            model = await self.repository.get(family, provider_id, owner_scope)

            if expected_updated_at is not None and (
                model is None or as_utc(model.updated_at) != as_utc(expected_updated_at)
            ):
                raise ConflictError(
                    f"Configuration {family}/{provider_id} was modified by another request; "
                    "reload and retry"
                )

            stored = (
                self.encryption_service.decrypt_fields(
                    dict(model.field_values or {}), descriptor.secret_field_names
                )
                if model is not None
                else {}
            )
            values = ConfigurationValidator.resolve_or_raise(
                descriptor, field_values, stored=stored, partial=partial
            )
            encrypted = self.encryption_service.encrypt_fields(
                values, descriptor.secret_field_names
            )

            if model is None:
                now = self._next_timestamp(None)
                previous_state = ConfigurationState.UNCONFIGURED
                model = ProviderConfigurationModel(
                    id=str(uuid4()),
                    family=family,
                    provider_id=provider_id,
                    owner_scope=scope_key(owner_scope),
                    field_values=encrypted,
                    state=ConfigurationState.CONFIGURED.value,
                    created_at=now,
                    updated_at=now,
                )
                try:
                    await self.repository.create(model)
                    await self.session.commit()
                except IntegrityError as e:
                    await self.session.rollback()
                    raise ConflictError(
                        f"Configuration {family}/{provider_id} was created by another request; "
                        "reload and retry"
                    ) from e
                config = self._to_entity(model, descriptor)
            else:
                previous_state = ConfigurationState(model.state)
                unchanged = values == stored and previous_state != ConfigurationState.ERROR
                new_state = previous_state if unchanged else ConfigurationState.CONFIGURED
                now = self._next_timestamp(model.updated_at)
                changes = {
                    "field_values": encrypted,
                    "state": new_state.value,
                    "last_error": model.last_error if unchanged else None,
                    "updated_at": now,
                }
                if not await self.repository.compare_and_swap(model.id, model.updated_at, changes):
                    await self.session.rollback()
                    raise ConflictError(
                        f"Configuration {family}/{provider_id} was modified by another request; "
                        "reload and retry"
                    )
                await self.session.commit()
                config = ProviderConfiguration(
                    id=model.id,
                    family=family,
                    provider_id=provider_id,
                    owner_scope=owner_scope,
                    field_values=values,
                    state=new_state,
                    last_verified_at=as_utc(model.last_verified_at),
                    last_error=changes["last_error"],
                    created_at=as_utc(model.created_at),
                    updated_at=now,
                )

        logger.info(
            "Configuration saved",
            family=family,
            provider_id=provider_id,
            owner_scope=owner_scope,
            previous_state=previous_state.value,
            state=config.state.value,
        )
        await self._notify(
            HookEvent.ON_CONFIGURATION_AFTER_UPSERT,
            family,
            provider_id,
            owner_scope,
            {"state": config.state.value, "previous_state": previous_state.value},
        )
        return config

    async def delete(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> None:
        """Hard-delete a configuration.

        Raises:
            ProviderNotFoundError: If the family/provider pair is unknown.
            NotFoundError: If nothing is stored for the key.
        """
        descriptor = self._descriptor(family, provider_id)
        family = descriptor.family.value

        async with self.locks.get(self._lock_key(family, provider_id, owner_scope)):
            model = await self.repository.get(family, provider_id, owner_scope)
            if model is None:
                raise NotFoundError(family, provider_id, owner_scope)
            if not await self.repository.delete(model.id):
                await self.session.rollback()
                raise NotFoundError(family, provider_id, owner_scope)
            await self.session.commit()

        logger.info(
            "Configuration deleted",
            family=family,
            provider_id=provider_id,
            owner_scope=owner_scope,
        )
        await self._notify(
            HookEvent.ON_CONFIGURATION_AFTER_DELETE,
            family,
            provider_id,
            owner_scope,
            {"state": None, "previous_state": model.state},
        )

    async def mark_verified(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
        expected_updated_at: Optional[datetime] = None,
    ) -> ProviderConfiguration:
        """Record a successful connectivity test against the stored values.

        Sets the state to verified, stamps last_verified_at and clears
        last_error. An active configuration stays active.

        Args:
            expected_updated_at: updated_at of the record that was tested;
                if the record changed since, ConflictError is raised.
        """

        def apply(model: ProviderConfigurationModel, now: datetime) -> dict[str, Any]:
            state = ConfigurationState(model.state)
            return {
                "state": (
                    state if state == ConfigurationState.ACTIVE else ConfigurationState.VERIFIED
                ).value,
                "last_verified_at": now,
                "last_error": None,
            }

        config = await self._transition(
            family, provider_id, owner_scope, apply, expected_updated_at=expected_updated_at
        )
        logger.info(
            "Configuration verified",
            family=config.family,
            provider_id=provider_id,
            owner_scope=owner_scope,
        )
        return config

    async def mark_error(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str],
        message: str,
    ) -> ProviderConfiguration:
        """Record a runtime failure of an operation using this configuration.

        Raises:
            ValidationError: If message is blank.
        """
        if not message or not message.strip():
            raise ValidationError("An error message is required", missing_fields=["message"])

        def apply(model: ProviderConfigurationModel, now: datetime) -> dict[str, Any]:
            return {"state": ConfigurationState.ERROR.value, "last_error": message}

        config = await self._transition(family, provider_id, owner_scope, apply)
        logger.warning(
            "Configuration marked as failed",
            family=config.family,
            provider_id=provider_id,
            owner_scope=owner_scope,
        )
        return config

    async def mark_active(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> ProviderConfiguration:
        """Activate a verified configuration.

        Raises:
            NotVerifiedError: If the configuration is not in the verified state.
        """

        def apply(model: ProviderConfigurationModel, now: datetime) -> dict[str, Any]:
            if model.state != ConfigurationState.VERIFIED.value:
                raise NotVerifiedError(model.state)
            return {"state": ConfigurationState.ACTIVE.value}

        config = await self._transition(family, provider_id, owner_scope, apply)
        logger.info(
            "Configuration activated",
            family=config.family,
            provider_id=provider_id,
            owner_scope=owner_scope,
        )
        return config

    async def _transition(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str],
        apply: Callable[[ProviderConfigurationModel, datetime], dict[str, Any]],
        expected_updated_at: Optional[datetime] = None,
    ) -> ProviderConfiguration:
        """Apply a state change to a stored configuration under its key lock.

        Args:
            apply: Callback returning the column changes; may raise to reject
                the transition.

        Raises:
            NotFoundError: If nothing is stored for the key.
            ConflictError: If the record changed concurrently.
        """
        descriptor = self._descriptor(family, provider_id)
        family = descriptor.family.value

        async with self.locks.get(self._lock_key(family, provider_id, owner_scope)):
            model = await self.repository.get(family, provider_id, owner_scope)
            if model is None:
                raise NotFoundError(family, provider_id, owner_scope)
            if expected_updated_at is not None and as_utc(model.updated_at) != as_utc(
                expected_updated_at
            ):
                raise ConflictError(
                    f"Configuration {family}/{provider_id} was modified by another request; "
                    "reload and retry"
                )

            previous_state = model.state
            now = self._next_timestamp(model.updated_at)
            changes = apply(model, now)
            changes["updated_at"] = now
            if not await self.repository.compare_and_swap(model.id, model.updated_at, changes):
                await self.session.rollback()
                raise ConflictError(
                    f"Configuration {family}/{provider_id} was modified by another request; "
                    "reload and retry"
                )
            await self.session.commit()

            model = await self.repository.get(family, provider_id, owner_scope)
            if model is None:
                raise NotFoundError(family, provider_id, owner_scope)
            config = self._to_entity(model, descriptor)

        await self._notify(
            HookEvent.ON_CONFIGURATION_AFTER_STATE_CHANGE,
            family,
            provider_id,
            owner_scope,
            {"state": config.state.value, "previous_state": previous_state},
        )
        return config
