"""Security utilities."""

from providerhub.infrastructure.security.encryption import EncryptionService

__all__ = ["EncryptionService"]
