"""Amazon S3 (and S3-compatible) backup storage provider."""

import asyncio
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from providerhub.domain.entities.provider_descriptor import (
    Capability,
    ProviderDescriptor,
    ProviderFamily,
    ProviderField,
)
from providerhub.infrastructure.configuration.providers.base import ConnectivityProbe

S3_DESCRIPTOR = ProviderDescriptor(
    family=ProviderFamily.BACKUP_STORAGE,
    provider_id="s3",
    display_name="Amazon S3",
    fields=(
        ProviderField("AWS_ACCESS_KEY_ID", label="Access Key ID"),
        ProviderField("AWS_SECRET_ACCESS_KEY", is_secret=True, label="Secret Access Key"),
        ProviderField("AWS_REGION", label="Region", default="eu-west-1"),
        ProviderField("AWS_S3_BUCKET_NAME", label="Bucket"),
        ProviderField("AWS_ENDPOINT_URL", required=False, label="Endpoint URL"),
    ),
    capabilities=frozenset({Capability.UPLOAD, Capability.RETENTION}),
)


class S3BackupProvider(ConnectivityProbe):
    """Checks S3 credentials with a HeadBucket call on the backup bucket."""

    @property
    def descriptor(self) -> ProviderDescriptor:
        return S3_DESCRIPTOR

    def _get_client(self, values: dict[str, Any]):
        return boto3.client(
            "s3",
            aws_access_key_id=values["AWS_ACCESS_KEY_ID"],
            aws_secret_access_key=values["AWS_SECRET_ACCESS_KEY"],
            region_name=values.get("AWS_REGION") or "eu-west-1",
            endpoint_url=values.get("AWS_ENDPOINT_URL") or None,
            config=Config(retries={"max_attempts": 1}, connect_timeout=5, read_timeout=10),
        )

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        bucket = values["AWS_S3_BUCKET_NAME"]
        region = values.get("AWS_REGION") or "eu-west-1"
        try:
            client = self._get_client(values)
            await asyncio.to_thread(client.head_bucket, Bucket=bucket)
            return True, (
                f"S3 connection successful. Bucket '{bucket}' "
                f"is accessible in region '{region}'."
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))
            return False, f"S3 connection failed ({error_code}): {error_message}"
        except BotoCoreError as e:
            return False, f"S3 connection failed: {str(e)}"
