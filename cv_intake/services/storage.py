# cv_intake/services/storage.py
import logging
import uuid
from pathlib import PurePosixPath
from typing import Optional

from supabase import Client

logger = logging.getLogger(__name__)


def storage_key(filename: str) -> str:
    """Unique object key that keeps the uploaded file's base name."""
    base_name = PurePosixPath((filename or "").replace("\\", "/")).name or "cv"
    return f"{uuid.uuid4().hex}/{base_name}"


class SupabaseStorage:
    """Uploads CVs to a public Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    def upload(self, content: bytes, filename: str, content_type: Optional[str] = None) -> str:
        key = storage_key(filename)
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            key,
            content,
            {"content-type": content_type or "application/octet-stream"},
        )
        public_url = bucket.get_public_url(key).rstrip("?")
        logger.info(f"Stored {filename} as {self.bucket}/{key}")
        return public_url
