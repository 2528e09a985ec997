# src/cookbook/infra/storage/supabase_storage.py
"""
Supabase Storage provider for recipe images.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx
from storage3.utils import StorageException
from supabase import Client

from src.cookbook.domain.errors import ImageUploadError
from src.cookbook.infra.storage.base import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_CACHE_CONTROL = "3600"


class SupabaseObjectStore(ObjectStore):
    def __init__(self, client: Client, cache_control: str = DEFAULT_CACHE_CONTROL):
        self._client = client
        self.cache_control = cache_control
        logger.info("SupabaseObjectStore initialized")

    def upload(
        self,
        bucket: str,
        object_key: str,
        data: bytes,
        content_type: Optional[str] = None,
        overwrite: bool = False,
    ) -> str:
        file_options = {
            "cache-control": self.cache_control,
            "upsert": "true" if overwrite else "false",
        }
        if content_type:
            file_options["content-type"] = content_type

        try:
            response = self._client.storage.from_(bucket).upload(
                path=object_key,
                file=data,
                file_options=file_options,
            )
        except (StorageException, httpx.HTTPError) as error:
            logger.error("Failed to upload to Supabase Storage: bucket=%s, key=%s, error=%s", bucket, object_key, error)
            raise ImageUploadError(object_key, str(error)) from error

        # Older storage3 releases return the raw response without a path.
        path = getattr(response, "path", None) or object_key
        logger.info("Uploaded object: bucket=%s, path=%s, size=%d bytes", bucket, path, len(data))
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return self._client.storage.from_(bucket).get_public_url(path)
