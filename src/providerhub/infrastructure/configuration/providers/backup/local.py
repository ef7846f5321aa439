"""Local filesystem backup provider."""

import asyncio
import tempfile
from pathlib import Path
from typing import Any

from providerhub.domain.entities.provider_descriptor import (
    Capability,
    ProviderDescriptor,
    ProviderFamily,
    ProviderField,
)
from providerhub.infrastructure.configuration.providers.base import ConnectivityProbe

LOCAL_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.BACKUP_STORAGE,
    provider_id="local",
    display_name="Local Filesystem",
    fields=(ProviderField("BACKUP_PATH", label="Backup Directory", default="./backups"),),
    capabilities=frozenset({Capability.UPLOAD}),
)


def _probe_directory(path: Path) -> tuple[bool, str]:
    if not path.exists():
        return False, f"Backup directory '{path}' does not exist"
    if not path.is_dir():
        return False, f"Backup path '{path}' is not a directory"
    try:
        with tempfile.NamedTemporaryFile(dir=path, prefix=".providerhub-", delete=True):
            pass
    except OSError as e:
        return False, f"Backup directory '{path}' is not writable: {e.strerror or str(e)}"
    return True, f"Backup directory '{path}' is writable"


class LocalBackupProvider(ConnectivityProbe):
    """Checks that the backup directory exists and is writable."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return LOCAL_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        path = Path(values["BACKUP_PATH"]).expanduser()
        return await asyncio.to_thread(_probe_directory, path)
