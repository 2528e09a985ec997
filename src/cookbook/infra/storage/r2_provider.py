# src/cookbook/infra/storage/r2_provider.py
"""
Cloudflare R2 storage provider implementation.
R2 is S3-compatible, so we use boto3 with custom endpoint.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from src.cookbook.domain.errors import ConfigurationError, ImageUploadError
from src.cookbook.infra.storage.base import ObjectStore

logger = logging.getLogger(__name__)

_EXISTS_CODES = {"PreconditionFailed", "412", "ConditionalRequestConflict"}


class R2StorageProvider(ObjectStore):
    """
    Cloudflare R2 storage provider using boto3 (S3-compatible).

    Environment variables required:
    - R2_ACCOUNT_ID: Cloudflare account ID
    - R2_ACCESS_KEY_ID: R2 access key ID
    - R2_SECRET_ACCESS_KEY: R2 secret access key
    - R2_PUBLIC_URL: Public URL the buckets are served from
    """

    def __init__(
        self,
        account_id: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        public_url: Optional[str] = None,
        client=None,
    ):
        self.account_id = account_id or os.getenv("R2_ACCOUNT_ID")
        self.access_key_id = access_key_id or os.getenv("R2_ACCESS_KEY_ID")
        self.secret_access_key = secret_access_key or os.getenv("R2_SECRET_ACCESS_KEY")
        self.public_base_url = (public_url or os.getenv("R2_PUBLIC_URL") or "").rstrip("/")

        missing = [
            name
            for name, value in (
                ("R2_ACCOUNT_ID", self.account_id),
                ("R2_ACCESS_KEY_ID", self.access_key_id),
                ("R2_SECRET_ACCESS_KEY", self.secret_access_key),
                ("R2_PUBLIC_URL", self.public_base_url),
            )
            if not value
        ]
        if missing and client is None:
            raise ConfigurationError([f"{name} is required" for name in missing])

        self.endpoint_url = f"https://{self.account_id}.r2.cloudflarestorage.com"

        self._client = client or boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=Config(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "adaptive"},
            ),
            region_name="auto",  # R2 uses 'auto' as region
        )

        logger.info("R2StorageProvider initialized: endpoint=%s", self.endpoint_url)

    def upload(
        self,
        bucket: str,
        object_key: str,
        data: bytes,
        content_type: Optional[str] = None,
        overwrite: bool = False,
    ) -> str:
        """Put an object into R2; without overwrite the write is conditional on the key being absent."""
        params = {"Bucket": bucket, "Key": object_key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        if not overwrite:
            params["IfNoneMatch"] = "*"

        try:
            self._client.put_object(**params)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in _EXISTS_CODES:
                raise ImageUploadError(object_key, "Object already exists") from e
            logger.error("Failed to upload to R2: %s", e)
            raise ImageUploadError(object_key, f"Failed to upload file: {e}") from e

        logger.info("Uploaded to R2: bucket=%s, key=%s, size=%d bytes", bucket, object_key, len(data))
        return object_key

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{path}"
