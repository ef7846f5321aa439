"""Exceptions raised by the provider configuration subsystem."""


class ProviderConfigError(Exception):
    """Base class for all provider configuration errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProviderNotFoundError(ProviderConfigError):
    """Raised when a family/provider pair is not in the registry."""

    def __init__(self, family: str, provider_id: str) -> None:
        self.family = family
        self.provider_id = provider_id
        super().__init__(f"Unknown provider '{provider_id}' in family '{family}'")


class NotFoundError(ProviderConfigError):
    """Raised when no configuration is persisted for a key."""

    def __init__(self, family: str, provider_id: str, owner_scope: str | None) -> None:
        self.family = family
        self.provider_id = provider_id
        self.owner_scope = owner_scope
        scope = owner_scope or "global"
        super().__init__(f"No configuration for {family}/{provider_id} (scope: {scope})")


class ValidationError(ProviderConfigError):
    """Raised when field values or an owner scope fail validation."""

    def __init__(
        self,
        message: str,
        missing_fields: list[str] | None = None,
        field_errors: dict[str, str] | None = None,
    ) -> None:
        self.missing_fields = missing_fields or []
        self.field_errors = field_errors or {}
        super().__init__(message)


class ConflictError(ProviderConfigError):
    """Raised when a write loses an optimistic-concurrency race."""


class TestFailedError(ProviderConfigError):
    """Raised when a connectivity test did not pass."""

    __test__ = False  # not a pytest test class

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Connection test failed: {detail}")


class NotVerifiedError(ProviderConfigError):
    """Raised when activation is attempted on a non-verified configuration."""

    def __init__(self, current_state: str) -> None:
        self.current_state = current_state
        super().__init__(
            f"Configuration must be verified before activation (current state: {current_state})"
        )


class AggregationError(ProviderConfigError):
    """Raised when the status summary cannot be computed."""
