"""
Asset Storage Factory

Builds the process-wide storage client from configuration.
"""
from functools import lru_cache

from ..config import settings
from .storage_base import AssetStorage
from .storage_cloudinary import CloudinaryStorage


@lru_cache(maxsize=1)
def get_storage() -> AssetStorage:
    """
    Get the remote asset storage

    Note:
    - Needs CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY / CLOUDINARY_API_SECRET in .env;
      calls fail with StorageError until they are set
    - Tests replace this dependency with an in-memory store
    """
    return CloudinaryStorage(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        api_base=settings.cloudinary_api_base,
        timeout=settings.storage_timeout_sec,
    )
