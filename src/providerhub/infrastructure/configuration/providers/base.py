"""Base abstractions for provider connectivity probes.

A probe pairs a provider's static descriptor with the one external call used
to check that a set of credentials actually works.
"""

import abc
from typing import Any

from providerhub.domain.entities.provider_descriptor import ProviderDescriptor

DEFAULT_HTTP_TIMEOUT = 10.0


class ConnectivityProbe(abc.ABC):
    """Abstract base class for provider connectivity probes.

    Subclasses declare their descriptor and implement check(). A probe never
    persists anything; it only talks to the external service.
    """

    @property
    @abc.abstractmethod
    def descriptor(self) -> ProviderDescriptor:
        """Static descriptor of the provider this probe checks."""
        pass

    @property
    def family(self) -> str:
        return self.descriptor.family.value

    @property
    def provider_id(self) -> str:
        return self.descriptor.provider_id

    @abc.abstractmethod
    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        """Attempt an authenticated round-trip with the given values.

        Args:
            values: Raw (unmasked, decrypted) field values.

        Returns:
            Tuple of (success, human-readable detail).
        """
        pass


class ProbeRegistry:
    """Registry of connectivity probes keyed by (family, provider ID)."""

    def __init__(self) -> None:
        self._probes: dict[tuple[str, str], ConnectivityProbe] = {}

    def register(self, probe: ConnectivityProbe) -> None:
        """Register a probe.

        Raises:
            ValueError: If a probe is already registered for the same key.
        """
        key = (probe.family, probe.provider_id)
        if key in self._probes:
            raise ValueError(f"Probe already registered for {key[0]}/{key[1]}")
        self._probes[key] = probe

    def get(self, family: str, provider_id: str) -> ConnectivityProbe | None:
        return self._probes.get((str(getattr(family, "value", family)), provider_id))

    def __len__(self) -> int:
        return len(self._probes)


def is_truthy(value: Any) -> bool:
    """Interpret a stored string flag ('true', '1', 'yes', 'on')."""
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def error_message(response: Any) -> str:
    """Extract a readable error from an HTTP error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error.get("code") or error)
        return str(
            data.get("error_description")
            or data.get("message")
            or data.get("description")
            or error
            or f"HTTP {response.status_code}"
        )
    return f"HTTP {response.status_code}"
