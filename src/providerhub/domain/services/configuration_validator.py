"""Validation of candidate field values against a provider descriptor.

Resolves a candidate mapping into the values that would actually be stored:
masked secrets are swapped for the previously stored raw value, partial
updates inherit unspecified fields, and defaults fill absent fields.
"""

from dataclasses import dataclass, field
from typing import Any

from providerhub.core.configuration.exceptions import ValidationError
from providerhub.domain.entities.provider_descriptor import ProviderDescriptor
from providerhub.domain.services.secret_redactor import SecretRedactor


@dataclass
class ResolvedValues:
    """Outcome of resolving candidate values.

    Attributes:
        values: Field values as they would be stored.
        missing_fields: Required fields without a non-empty value.
        field_errors: Per-field error messages.
    """

    values: dict[str, str] = field(default_factory=dict)
    missing_fields: list[str] = field(default_factory=list)
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.missing_fields and not self.field_errors


class ConfigurationValidator:
    """Validator for provider field values."""

    @classmethod
    def coerce_value(cls, value: Any) -> str | None:
        """Coerce a scalar JSON value to the stored string form.

        Returns:
            The string value, or None if the value is not a scalar.
        """
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        return None

    @classmethod
    def resolve(
        cls,
        descriptor: ProviderDescriptor,
        candidate: dict[str, Any],
        stored: dict[str, str] | None = None,
        partial: bool = False,
    ) -> ResolvedValues:
        """Resolve candidate values into storable values.

        Args:
            descriptor: Descriptor of the target provider.
            candidate: Values submitted by the caller.
            stored: Previously stored raw values, if any.
            partial: If True, fields absent from the candidate keep their
                stored values.

        Returns:
            ResolvedValues with the merged values and any problems found.
        """
        stored = stored or {}
        result = ResolvedValues()

        for key, raw in candidate.items():
            spec = descriptor.get_field(key)
            if spec is None:
                result.field_errors[key] = "Unknown field"
                continue

            value = cls.coerce_value(raw)
            if value is None:
                result.field_errors[key] = f"Expected a text value, got {type(raw).__name__}"
                continue

            if spec.is_secret and SecretRedactor.is_masked(value):
                previous = stored.get(key)
                if not previous:
                    result.field_errors[key] = "Masked placeholder given but no value is stored"
                    continue
                value = previous

            result.values[key] = value

        for spec in descriptor.fields:
            if spec.name in result.values or spec.name in result.field_errors:
                continue
            if partial and stored.get(spec.name):
                result.values[spec.name] = stored[spec.name]
            elif spec.default is not None:
                result.values[spec.name] = spec.default

        result.missing_fields = [
            spec.name
            for spec in descriptor.required_fields
            if spec.name not in result.field_errors and not result.values.get(spec.name, "").strip()
        ]
        return result

    @classmethod
    def resolve_or_raise(
        cls,
        descriptor: ProviderDescriptor,
        candidate: dict[str, Any],
        stored: dict[str, str] | None = None,
        partial: bool = False,
    ) -> dict[str, str]:
        """Resolve candidate values, raising on any problem.

        Raises:
            ValidationError: If required fields are missing or a field is invalid.
        """
        resolved = cls.resolve(descriptor, candidate, stored=stored, partial=partial)
        if not resolved.is_valid:
            parts = []
            if resolved.missing_fields:
                parts.append(f"missing required fields: {', '.join(resolved.missing_fields)}")
            if resolved.field_errors:
                parts.append(f"invalid fields: {', '.join(sorted(resolved.field_errors))}")
            raise ValidationError(
                f"Invalid configuration for {descriptor.provider_id}: {'; '.join(parts)}",
                missing_fields=resolved.missing_fields,
                field_errors=resolved.field_errors,
            )
        return resolved.values
