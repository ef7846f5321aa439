"""Connectivity test executor.

Runs a provider's probe against candidate values with a bounded timeout.
It never persists anything and never raises: every failure, including
timeouts and unexpected exceptions, comes back as TestResult(success=False).
"""

import asyncio
import time
from typing import Any

from providerhub.core.configuration.exceptions import ProviderNotFoundError
from providerhub.core.configuration.provider_registry import ProviderRegistry
from providerhub.core.logging import get_logger
from providerhub.domain.entities.provider_configuration import TestResult
from providerhub.domain.services.configuration_validator import ConfigurationValidator
from providerhub.domain.services.secret_redactor import SecretRedactor
from providerhub.infrastructure.configuration.providers.base import ProbeRegistry

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


class ConnectivityTestExecutor:
    """Executes side-effect-free connectivity tests against external providers."""

    def __init__(
        self,
        registry: ProviderRegistry,
        probes: ProbeRegistry,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the executor.

        Args:
            registry: Provider registry used to resolve descriptors.
            probes: Probes keyed by (family, provider ID).
            timeout_seconds: Upper bound for a single probe call.
        """
        self.registry = registry
        self.probes = probes
        self.timeout_seconds = timeout_seconds

    async def test(
        self,
        family: str,
        provider_id: str,
        candidate: dict[str, Any],
    ) -> TestResult:
        """Test candidate values against the external provider.

        Args:
            family: Provider family.
            provider_id: Provider identifier.
            candidate: Raw candidate values; may differ from what is stored.

        Returns:
            TestResult with a secret-free detail message.
        """
        started = time.perf_counter()

        try:
            descriptor = self.registry.get_provider(family, provider_id)
        except ProviderNotFoundError as e:
            return self._result(False, e.message, started)

        resolved = ConfigurationValidator.resolve(descriptor, candidate)
        secrets = [resolved.values.get(name) for name in descriptor.secret_field_names]

        if resolved.field_errors:
            fields = ", ".join(sorted(resolved.field_errors))
            return self._result(False, f"Invalid fields: {fields}", started)
        if resolved.missing_fields:
            fields = ", ".join(resolved.missing_fields)
            return self._result(False, f"Missing required fields: {fields}", started)

        probe = self.probes.get(descriptor.family.value, provider_id)
        if probe is None:
            return self._result(
                False, f"{descriptor.display_name} does not support connection testing", started
            )

        try:
            success, detail = await asyncio.wait_for(
                probe.check(resolved.values), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            success, detail = False, (
                f"{descriptor.display_name} did not respond within {self.timeout_seconds:g} seconds"
            )
        except Exception as e:
            success, detail = False, f"{descriptor.display_name} connection failed: {str(e) or type(e).__name__}"

        result = self._result(bool(success), SecretRedactor.sanitize(detail or "", secrets), started)
        log = logger.info if result.success else logger.warning
        log(
            "Connection test succeeded" if result.success else "Connection test failed",
            family=descriptor.family.value,
            provider_id=provider_id,
            duration_ms=result.duration_ms,
            detail=result.detail,
        )
        return result

    @staticmethod
    def _result(success: bool, detail: str, started: float) -> TestResult:
        return TestResult(
            success=success,
            detail=detail,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
