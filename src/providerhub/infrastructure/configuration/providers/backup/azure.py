"""Azure Blob Storage backup provider.

The check reads the container properties with a SharedKey-signed request,
which proves both the account key and the container name.
"""

import base64
import binascii
import hashlib
import hmac
from email.utils import formatdate
from typing import Any

import httpx

from providerhub.domain.entities.provider_descriptor import (
    Capability,
    ProviderDescriptor,
    ProviderFamily,
    ProviderField,
)
from providerhub.infrastructure.configuration.providers.base import (
    DEFAULT_HTTP_TIMEOUT,
    ConnectivityProbe,
)

AZURE_API_VERSION = "2021-08-06"

AZURE_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.BACKUP_STORAGE,
    provider_id="azure",
    display_name="Azure Blob Storage",
    fields=(
        ProviderField("AZURE_STORAGE_ACCOUNT_NAME", label="Storage Account Name"),
        ProviderField("AZURE_STORAGE_ACCOUNT_KEY", is_secret=True, label="Storage Account Key"),
        ProviderField("AZURE_CONTAINER_NAME", label="Container"),
    ),
    capabilities=frozenset({Capability.UPLOAD, Capability.RETENTION}),
)


def sign_shared_key(
    account: str,
    key: str,
    method: str,
    path: str,
    query: dict[str, str],
    headers: dict[str, str],
) -> str:
    """Build the SharedKey Authorization header value for a request without a body.

    Raises:
        binascii.Error: If the account key is not valid base64.
    """
    canonical_headers = "".join(
        f"{name}:{value}\n"
        for name, value in sorted((k.lower(), v) for k, v in headers.items() if k.lower().startswith("x-ms-"))
    )
    canonical_resource = f"/{account}{path}" + "".join(
        f"\n{name.lower()}:{value}" for name, value in sorted(query.items())
    )
    # Content-Encoding through Range are all empty for a bodiless GET
    string_to_sign = method + "\n" * 12 + canonical_headers + canonical_resource
    digest = hmac.new(
        base64.b64decode(key, validate=True),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return f"SharedKey {account}:{base64.b64encode(digest).decode('utf-8')}"


class AzureBackupProvider(ConnectivityProbe):
    """Checks Azure credentials by fetching the backup container properties."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return AZURE_DESCRIPTOR

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        account = values["AZURE_STORAGE_ACCOUNT_NAME"]
        container = values["AZURE_CONTAINER_NAME"]
        path = f"/{container}"
        query = {"restype": "container"}
        headers = {
            "x-ms-date": formatdate(usegmt=True),
            "x-ms-version": AZURE_API_VERSION,
        }
        try:
            headers["Authorization"] = sign_shared_key(
                account, values["AZURE_STORAGE_ACCOUNT_KEY"], "GET", path, query, headers
            )
        except (binascii.Error, ValueError):
            return False, "Azure connection failed: storage account key is not valid base64"

        url = f"https://{account}.blob.core.windows.net{path}"
        async with httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT) as client:
            try:
                response = await client.get(url, params=query, headers=headers)
            except httpx.HTTPError as e:
                return False, f"Azure connection failed: {str(e)}"

        if response.status_code == 200:
            return True, f"Azure connection successful. Container '{container}' is accessible."
        error_code = response.headers.get("x-ms-error-code", f"HTTP {response.status_code}")
        return False, f"Azure connection failed ({error_code})"
