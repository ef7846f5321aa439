"""Provider registry for the statically-known provider catalog."""

from typing import Iterable

from providerhub.core.configuration.exceptions import ProviderNotFoundError
from providerhub.domain.entities.provider_descriptor import ProviderDescriptor, ProviderFamily


class ProviderRegistry:
    """Registry of provider descriptors, grouped by family.

    Descriptors are registered once at startup and are read-only afterwards.
    Lookups are pure and perform no I/O. Providers are listed in
    registration order.
    """

    def __init__(self, descriptors: Iterable[ProviderDescriptor] = ()) -> None:
        """Initialize the registry.

        Args:
            descriptors: Optional descriptors to register immediately.
        """
        self._descriptors: dict[ProviderFamily, dict[str, ProviderDescriptor]] = {
            family: {} for family in ProviderFamily
        }
        self._frozen = False
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ProviderDescriptor) -> None:
        """Register a provider descriptor.

        Args:
            descriptor: Descriptor to add.

        Raises:
            ValueError: If the registry is frozen or the provider ID is
                already registered within the family.
        """
        if self._frozen:
            raise ValueError("Provider registry is frozen")
        family_providers = self._descriptors[ProviderFamily(descriptor.family)]
        if descriptor.provider_id in family_providers:
            raise ValueError(
                f"Provider '{descriptor.provider_id}' already registered "
                f"in family '{descriptor.family.value}'"
            )
        family_providers[descriptor.provider_id] = descriptor

    def freeze(self) -> None:
        """Reject further registrations for the lifetime of the process."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def list_families(self) -> list[ProviderFamily]:
        return list(ProviderFamily)

    def list_providers(self, family: ProviderFamily | str) -> list[ProviderDescriptor]:
        """List the providers of a family in registration order.

        Args:
            family: Provider family (enum or its string value).

        Returns:
            Ordered list of descriptors.
        """
        return list(self._descriptors[self._coerce_family(family)].values())

    def get_provider(self, family: ProviderFamily | str, provider_id: str) -> ProviderDescriptor:
        """Retrieve a provider descriptor.

        Args:
            family: Provider family (enum or its string value).
            provider_id: Provider identifier.

        Returns:
            The matching descriptor.

        Raises:
            ProviderNotFoundError: If the family or provider is unknown.
        """
        family_key = self._coerce_family(family, provider_id)
        descriptor = self._descriptors[family_key].get(provider_id)
        if descriptor is None:
            raise ProviderNotFoundError(family_key.value, provider_id)
        return descriptor

    def _coerce_family(self, family: ProviderFamily | str, provider_id: str = "") -> ProviderFamily:
        try:
            return ProviderFamily(family)
        except ValueError as e:
            raise ProviderNotFoundError(str(family), provider_id) from e
