"""Blob store access (Supabase Storage). The core only keeps storage ids and hands out URLs."""
import logging
from typing import Optional

from supabase import Client
from vault.config import settings

logger = logging.getLogger(__name__)


class BlobStore:
    def __init__(self, supabase: Client, bucket: Optional[str] = None):
        self.supabase = supabase
        self.bucket = bucket or settings.storage_bucket

    def get_url(self, storage_id: Optional[str]) -> Optional[str]:
        """Signed URL for a stored object, or None when it cannot be produced."""
        if not storage_id:
            return None
        try:
            result = self.supabase.storage.from_(self.bucket).create_signed_url(
                storage_id, settings.signed_url_ttl_seconds
            )
        except Exception as e:
            logger.warning("Failed to sign storage object %s: %s", storage_id, e)
            return None
        if not result:
            return None
        return result.get("signedURL") or result.get("signedUrl")

    def remove(self, storage_id: Optional[str]) -> bool:
        if not storage_id:
            return False
        try:
            self.supabase.storage.from_(self.bucket).remove([storage_id])
            return True
        except Exception as e:
            logger.warning("Failed to remove storage object %s: %s", storage_id, e)
            return False
