# src/cookbook/infra/storage/base.py
"""
Abstract base class for storage providers.
This interface allows easy swapping between different storage backends (Supabase Storage, R2, ...)
"""
from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from typing import Optional
from uuid import uuid4


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for storage."""
    # Remove path components
    filename = os.path.basename(filename)
    # Replace unsafe characters
    filename = re.sub(r'[^a-zA-Z0-9._-]', '_', filename)
    # Limit length
    if len(filename) > 100:
        name, ext = os.path.splitext(filename)
        filename = name[:95] + ext
    return filename or "image"


class ObjectStore(ABC):
    """
    Abstract interface for object storage operations.

    Implementations:
    - SupabaseObjectStore: Supabase Storage buckets
    - R2StorageProvider: Cloudflare R2 (S3-compatible)
    """

    @abstractmethod
    def upload(
        self,
        bucket: str,
        object_key: str,
        data: bytes,
        content_type: Optional[str] = None,
        overwrite: bool = False,
    ) -> str:
        """
        Upload a blob.

        Args:
            bucket: Target bucket
            object_key: The key/path where the object will be stored
            data: Object contents
            content_type: MIME type of the content (e.g., "image/jpeg")
            overwrite: When False the upload must fail if the key exists

        Returns:
            The stored object's path inside the bucket
        """
        pass

    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        """
        Resolve the public URL of a stored object.

        Args:
            bucket: Bucket holding the object
            path: Path returned by upload()

        Returns:
            A publicly resolvable URL
        """
        pass

    def generate_object_key(self, filename: str) -> str:
        """
        Generate a collision-resistant key for an uploaded file.

        Format: {uuid}-{sanitized filename}. The client's file name is not used
        verbatim: path components are dropped, characters outside [A-Za-z0-9._-]
        become underscores and long names are shortened, so keys stay valid
        object paths on both Supabase Storage and R2.
        """
        return f"{uuid4()}-{sanitize_filename(filename)}"
