"""Settings mutation gateway.

The single write path for provider configurations. It resolves candidate
values, optionally tests them before saving, and is the only caller allowed
to move a configuration to verified (after a passing test of the stored
values) or active (from verified only).
"""

from datetime import datetime
from typing import Any, Optional

from providerhub.application.services.configuration_store import ProviderConfigurationStore
from providerhub.application.services.connectivity_tester import ConnectivityTestExecutor
from providerhub.core.configuration.exceptions import (
    NotFoundError,
    NotVerifiedError,
    TestFailedError,
)
from providerhub.core.logging import get_logger
from providerhub.domain.entities.provider_configuration import (
    ConfigurationState,
    ProviderConfiguration,
    TestResult,
)
from providerhub.domain.services.configuration_validator import ConfigurationValidator
from providerhub.domain.services.secret_redactor import SecretRedactor

logger = get_logger(__name__)


class SettingsMutationGateway:
    """Entry point for every configuration change coming from the API."""

    def __init__(
        self,
        store: ProviderConfigurationStore,
        executor: ConnectivityTestExecutor,
    ) -> None:
        self.store = store
        self.executor = executor

    async def apply_configuration(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str],
        field_values: dict[str, Any],
        test_first: bool = False,
        partial: bool = False,
        expected_updated_at: Optional[datetime] = None,
    ) -> ProviderConfiguration:
        """Validate and persist a configuration.

        Args:
            family: Provider family.
            provider_id: Provider identifier.
            owner_scope: Owning entity, None for the global scope.
            field_values: Candidate values; masked secrets mean "unchanged".
            test_first: Run a connectivity test on the resolved values and
                persist only if it passes.
            partial: Keep stored values for fields absent from field_values.
            expected_updated_at: Optional optimistic-concurrency token.

        Returns:
            The stored configuration with raw values.

        Raises:
            ValidationError: If the values are incomplete or invalid.
            TestFailedError: If test_first is set and the test fails.
            ConflictError: If the record changed concurrently.
        """
        if test_first:
            descriptor = self.store.registry.get_provider(family, provider_id)
            stored = await self.store.get(family, provider_id, owner_scope)
            values = ConfigurationValidator.resolve_or_raise(
                descriptor, field_values, stored=stored.field_values, partial=partial
            )
            result = await self.executor.test(family, provider_id, values)
            if not result.success:
                logger.info(
                    "Configuration not saved, connection test failed",
                    family=descriptor.family.value,
                    provider_id=provider_id,
                    owner_scope=owner_scope,
                )
                raise TestFailedError(result.detail)

        return await self.store.upsert(
            family,
            provider_id,
            owner_scope,
            field_values,
            partial=partial,
            expected_updated_at=expected_updated_at,
        )

    async def test(
        self,
        family: str,
        provider_id: str,
        candidate: dict[str, Any],
        owner_scope: Optional[str] = None,
    ) -> TestResult:
        """Test candidate values without persisting anything.

        Masked secrets in the candidate are replaced with the stored raw
        values, so an edited form can be tested without retyping secrets.
        """
        descriptor = self.store.registry.get_provider(family, provider_id)
        values = dict(candidate)
        masked = [
            name
            for name in descriptor.secret_field_names
            if SecretRedactor.is_masked(values.get(name))
        ]
        if masked:
            stored = await self.store.get(family, provider_id, owner_scope)
            for name in masked:
                if stored.field_values.get(name):
                    values[name] = stored.field_values[name]
        return await self.executor.test(family, provider_id, values)

    async def verify(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> ProviderConfiguration:
        """Test the stored values and mark the configuration verified on success.

        Raises:
            NotFoundError: If nothing is stored for the key.
            TestFailedError: If the test fails; the state is left unchanged.
            ConflictError: If the values changed while the test was running.
        """
        config = await self.store.get(family, provider_id, owner_scope)
        if not config.is_configured:
            raise NotFoundError(config.family, provider_id, owner_scope)

        result = await self.executor.test(family, provider_id, config.field_values)
        if not result.success:
            raise TestFailedError(result.detail)

        return await self.store.mark_verified(
            family, provider_id, owner_scope, expected_updated_at=config.updated_at
        )

    async def activate(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> ProviderConfiguration:
        """Activate a verified configuration.

        Raises:
            NotVerifiedError: Unless the current state is verified.
        """
        config = await self.store.get(family, provider_id, owner_scope)
        if config.state != ConfigurationState.VERIFIED:
            raise NotVerifiedError(config.state.value)
        return await self.store.mark_active(family, provider_id, owner_scope)

    async def record_runtime_failure(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str],
        message: str,
    ) -> ProviderConfiguration:
        """Move a configuration to the error state after a runtime failure.

        The message is scrubbed of stored secret values before it is saved.

        Raises:
            NotFoundError: If nothing is stored for the key.
        """
        descriptor = self.store.registry.get_provider(family, provider_id)
        config = await self.store.get(family, provider_id, owner_scope)
        if not config.is_configured:
            raise NotFoundError(config.family, provider_id, owner_scope)
        secrets = [config.field_values.get(name) for name in descriptor.secret_field_names]
        return await self.store.mark_error(
            family, provider_id, owner_scope, SecretRedactor.sanitize(message, secrets)
        )

    async def delete(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> None:
        await self.store.delete(family, provider_id, owner_scope)

    async def get_masked(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> ProviderConfiguration:
        return await self.store.get_masked(family, provider_id, owner_scope)

    async def resolve_effective(
        self,
        family: str,
        provider_id: str,
        owner_scope: Optional[str] = None,
    ) -> Optional[ProviderConfiguration]:
        """Resolve the active configuration a runtime operation should use.

        The owner's own active configuration wins; otherwise the active
        global configuration is used.

        Returns:
            The configuration with raw values, or None if neither is active.
        """
        if owner_scope is not None:
            config = await self.store.get(family, provider_id, owner_scope)
            if config.is_active:
                return config
        config = await self.store.get(family, provider_id, None)
        return config if config.is_active else None
