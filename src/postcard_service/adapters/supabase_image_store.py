"""Supabase Storage bucket for postcard images."""

from dataclasses import dataclass
from uuid import uuid4

import httpx
from storage3.exceptions import StorageApiError
from supabase import Client

from postcard_service.errors import StorageError
from postcard_service.services.postcards import ImageStore

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/heic": "heic"}


@dataclass
class SupabaseImageStore(ImageStore):
    """Uploads postcard images and returns their public URL."""

    client: Client
    bucket: str = "postcards"

    def upload(self, data: bytes, content_type: str) -> str:
        """Upload image bytes under a random name and return the public URL."""
        extension = _EXTENSIONS.get(content_type, "jpg")
        path = f"postcards/{uuid4()}.{extension}"
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(path, data, {"content-type": content_type})
            return bucket.get_public_url(path)
        except (StorageApiError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to upload postcard image: {exc}") from exc
