"""Backup storage providers."""

from providerhub.infrastructure.configuration.providers.backup.azure import AzureBackupProvider
from providerhub.infrastructure.configuration.providers.backup.local import LocalBackupProvider
from providerhub.infrastructure.configuration.providers.backup.s3 import S3BackupProvider

__all__ = ["AzureBackupProvider", "LocalBackupProvider", "S3BackupProvider"]
