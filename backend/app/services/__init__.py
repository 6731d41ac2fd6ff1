"""
Services Module

Provides interfaces for external services:
- Asset storage: Cloudinary (remote images / videos)
- Media upload orchestration: remote assets + Media record
"""

# Asset storage
from .storage_base import (
    AssetStorage,
    StorageError,
    StoredAsset,
    IMAGE,
    VIDEO,
    public_id_from_url,
)
from .storage_cloudinary import CloudinaryStorage
from .storage_factory import get_storage

# Upload orchestration
from .media_upload import MediaUploadOrchestrator, media_folder

__all__ = [
    # Storage - interface
    "AssetStorage",
    "StorageError",
    "StoredAsset",
    "IMAGE",
    "VIDEO",
    "public_id_from_url",
    # Storage - implementations
    "CloudinaryStorage",
    "get_storage",
    # Upload
    "MediaUploadOrchestrator",
    "media_folder",
]
