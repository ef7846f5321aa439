import base64
import hashlib
from typing import Any, Iterable

from cryptography.fernet import Fernet, InvalidToken


class EncryptionService:
    """
    Encryption service for provider secrets at rest, using Fernet symmetric encryption.

    Only the fields a provider descriptor marks as secret are encrypted;
    everything else is stored as plain JSON.
    """

    def __init__(self, secret_key: str):
        """
        Initialize the encryption service with a secret key.
        The secret key is hashed using SHA-256 to ensure it's a valid 32-byte Fernet key.
        """
        h = hashlib.sha256(secret_key.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(h))

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a plaintext string and return a base64-encoded ciphertext.
        """
        if not plaintext:
            return plaintext
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt a base64-encoded ciphertext and return the original plaintext.
        Returns the original value if it is not a valid token for this key.
        """
        if not ciphertext:
            return ciphertext
        try:
            return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")
        except (InvalidToken, ValueError):
            return ciphertext

    def encrypt_fields(self, values: dict[str, Any], secret_fields: Iterable[str]) -> dict[str, Any]:
        """
        Return a copy of values with the named secret fields encrypted.
        """
        secrets = set(secret_fields)
        return {
            key: self.encrypt(value) if key in secrets and isinstance(value, str) and value else value
            for key, value in values.items()
        }

    def decrypt_fields(self, values: dict[str, Any], secret_fields: Iterable[str]) -> dict[str, Any]:
        """
        Return a copy of values with the named secret fields decrypted.
        """
        secrets = set(secret_fields)
        return {
            key: self.decrypt(value) if key in secrets and isinstance(value, str) and value else value
            for key, value in values.items()
        }
