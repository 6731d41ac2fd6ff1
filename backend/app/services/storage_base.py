"""
Asset Storage Abstract Interface

Provides a unified interface for remote object stores (Cloudinary / in-memory for tests / others).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

# Resource kinds understood by the object store
IMAGE = "image"
VIDEO = "video"


class StorageError(Exception):
    """A remote storage call failed (transport error, rejected request, bad response)."""


@dataclass
class StoredAsset:
    """An object that landed in remote storage"""
    url: str  # Public (https) delivery URL
    public_id: str  # Remote identity, needed to delete the object later
    resource_type: str  # "image" or "video"
    bytes: Optional[int] = None
    format: Optional[str] = None


class AssetStorage(ABC):
    """Remote Object Store Abstract Base Class"""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        *,
        folder: str,
        resource_type: str,
        public_id: Optional[str] = None,
        overwrite: bool = False,
    ) -> StoredAsset:
        """
        Upload a blob

        Parameters:
        - data: Raw file bytes
        - folder: Remote folder, e.g. "tiktokclone/<userId>/<mediaId>"
        - resource_type: "image" or "video"
        - public_id: Fixed object name inside the folder (random if omitted)
        - overwrite: Replace an existing object with the same identity

        Raises:
        - StorageError
        """
        pass

    @abstractmethod
    async def delete(self, public_id: str, *, resource_type: str = IMAGE) -> None:
        """
        Delete an object by its identity. Deleting a missing object is not an error.

        Raises:
        - StorageError
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name (e.g., "Cloudinary")"""
        pass


def public_id_from_url(url: str) -> str:
    """
    Recover the remote object identity from a delivery URL.

    Cloudinary URLs look like
    ``https://res.cloudinary.com/<cloud>/image/upload/v1712/<public_id>.<ext>``;
    everything after the optional version segment is the identity. Any other
    URL falls back to its last two path segments. The extension is dropped.
    """
    path = urlparse(url).path
    segments = [s for s in path.split("/") if s]
    if "upload" in segments:
        rest = segments[segments.index("upload") + 1:]
        if rest and rest[0].startswith("v") and rest[0][1:].isdigit():
            rest = rest[1:]
    else:
        rest = segments[-2:]
    identity = "/".join(rest)
    head, dot, ext = identity.rpartition(".")
    # Only strip a dot that belongs to the last segment
    if dot and "/" not in ext:
        identity = head
    return identity
