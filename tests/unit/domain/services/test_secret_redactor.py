"""Unit tests for SecretRedactor."""

from providerhub.domain.services.secret_redactor import MASK_SENTINEL, SecretRedactor


class TestMasking:
    def test_long_value_keeps_last_chars(self):
        redactor = SecretRedactor(visible_chars=4)

        assert redactor.mask_value("sk_live_abcdef1234") == MASK_SENTINEL + "1234"

    def test_short_value_fully_masked(self):
        redactor = SecretRedactor(visible_chars=4)

        assert redactor.mask_value("abc123") == MASK_SENTINEL

    def test_zero_visible_chars(self):
        redactor = SecretRedactor(visible_chars=0)

        assert redactor.mask_value("a-very-long-secret-value") == MASK_SENTINEL

    def test_empty_values_are_left_alone(self):
        redactor = SecretRedactor()

        assert redactor.mask_value("") == ""
        assert redactor.mask_value(None) is None

    def test_mask_values_only_touches_secret_fields(self):
        redactor = SecretRedactor()
        values = {"client_id": "public-id", "client_secret": "super-secret-value"}

        masked = redactor.mask_values(values, ["client_secret"])

        assert masked["client_id"] == "public-id"
        assert masked["client_secret"].startswith(MASK_SENTINEL)
        assert "super-secret" not in masked["client_secret"]
        assert values["client_secret"] == "super-secret-value"

    def test_is_masked(self):
        assert SecretRedactor.is_masked(MASK_SENTINEL) is True
        assert SecretRedactor.is_masked(MASK_SENTINEL + "1234") is True
        assert SecretRedactor.is_masked("plain") is False
        assert SecretRedactor.is_masked(None) is False


class TestSanitize:
    def test_replaces_every_occurrence(self):
        text = "auth failed for key s3cr3t (retry with s3cr3t)"

        result = SecretRedactor.sanitize(text, ["s3cr3t"])

        assert "s3cr3t" not in result
        assert result.count(MASK_SENTINEL) == 2

    def test_longer_secret_replaced_first(self):
        text = "tokens: abc and abcdef"

        result = SecretRedactor.sanitize(text, ["abc", "abcdef"])

        assert "def" not in result
        assert "abc" not in result

    def test_ignores_empty_and_masked_values(self):
        text = "nothing to hide"

        assert SecretRedactor.sanitize(text, ["", None, MASK_SENTINEL]) == text

    def test_empty_text(self):
        assert SecretRedactor.sanitize("", ["secret"]) == ""
