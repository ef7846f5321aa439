"""Secret redaction for provider configurations.

Masks secret field values for display and scrubs raw secrets out of
diagnostic text. Never mutates its inputs.
"""

from typing import Any, Iterable

MASK_SENTINEL = "••••••••"


class SecretRedactor:
    """Service for masking secret values in configuration read paths.

    A masked value is the sentinel, optionally followed by the last few
    characters of the raw value (e.g. "••••••••a1b2"). Any value that starts
    with the sentinel is treated as "unchanged" when written back.
    """

    def __init__(self, visible_chars: int = 4) -> None:
        """Initialize the redactor.

        Args:
            visible_chars: Number of trailing characters left visible. Values
                shorter than twice this length are fully masked.
        """
        self.visible_chars = visible_chars

    @staticmethod
    def is_masked(value: Any) -> bool:
        """Check whether a value is (or starts with) the masking sentinel."""
        return isinstance(value, str) and value.startswith(MASK_SENTINEL)

    def mask_value(self, value: Any) -> Any:
        """Mask a single secret value.

        Empty values are returned unchanged so the UI can tell "not set"
        apart from "set but hidden".
        """
        if value is None or value == "":
            return value
        text = str(value)
        if self.visible_chars and len(text) >= self.visible_chars * 2:
            return MASK_SENTINEL + text[-self.visible_chars :]
        return MASK_SENTINEL

    def mask_values(self, values: dict[str, Any], secret_fields: Iterable[str]) -> dict[str, Any]:
        """Return a copy of values with every secret field masked.

        Args:
            values: Raw field values.
            secret_fields: Names of fields to mask.

        Returns:
            New dictionary; the input is left untouched.
        """
        secrets = set(secret_fields)
        return {
            key: self.mask_value(value) if key in secrets else value
            for key, value in values.items()
        }

    @staticmethod
    def sanitize(text: str, secret_values: Iterable[Any]) -> str:
        """Replace every raw secret occurring in text with the sentinel.

        Longer secrets are replaced first so a secret containing another
        secret is fully scrubbed.
        """
        if not text:
            return text
        candidates = sorted(
            {str(v) for v in secret_values if v not in (None, "") and not SecretRedactor.is_masked(v)},
            key=len,
            reverse=True,
        )
        for secret in candidates:
            text = text.replace(secret, MASK_SENTINEL)
        return text
