from supabase import Client
from typing import List
import logging

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Thin wrapper around one Supabase Storage bucket"""

    def __init__(self, supabase: Client, bucket_name: str):
        if not bucket_name:
            raise ValueError("Storage bucket name must be configured")
        self.bucket_name = bucket_name
        self.bucket = supabase.storage.from_(bucket_name)

    def upload_file(self, file_content: bytes, key: str, content_type: str = "application/octet-stream") -> str:
        """Upload file to the bucket and return its public URL"""
        try:
            self.bucket.upload(key, file_content, {"content-type": content_type, "upsert": "false"})
        except Exception as e:
            logger.error(f"Failed to upload {key} to {self.bucket_name}: {str(e)}")
            raise
        return self.bucket.get_public_url(key)

    def delete_files(self, keys: List[str]) -> bool:
        """Delete files from the bucket"""
        try:
            self.bucket.remove(keys)
            return True
        except Exception as e:
            logger.error(f"Failed to delete {keys} from {self.bucket_name}: {str(e)}")
            return False

    def delete_file(self, key: str) -> bool:
        return self.delete_files([key])
