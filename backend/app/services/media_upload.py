"""
Media Upload Orchestrator

Creates a Media record whose two assets (thumbnail image, video) live in
remote storage. Steps run strictly in order within one request:

    1) allocate the media id in memory (nothing persisted yet)
    2) upload the thumbnail            -> failure: nothing to undo
    3) upload the video                -> failure: delete the thumbnail
    4) validate + persist the record   -> failure: delete both assets

Either exactly one complete record is persisted, or none is.
"""
import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError as SchemaValidationError
from tortoise.exceptions import BaseORMException

from app.core.errors import ServerError, ValidationError
from app.models.media import Media
from app.models.user import User
from app.schemas.media import MediaCreate
from .storage_base import AssetStorage, StorageError, StoredAsset, IMAGE, VIDEO

logger = logging.getLogger("uvicorn.error")


def media_folder(namespace: str, uploader_id, media_id) -> str:
    """Remote folder holding one media item's assets."""
    return f"{namespace}/{uploader_id}/{media_id}"


def schema_error_message(exc: SchemaValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid value"))
    return "; ".join(parts) or "Invalid media"


class MediaUploadOrchestrator:
    """Coordinates remote asset uploads with the Media row they belong to."""

    def __init__(self, storage: AssetStorage, namespace: str):
        self.storage = storage
        self.namespace = namespace

    async def _discard(self, assets: List[StoredAsset]) -> None:
        """Best-effort removal of assets that will never be referenced."""
        for asset in assets:
            try:
                await self.storage.delete(asset.public_id, resource_type=asset.resource_type)
                logger.info("[upload] rolled back %s %s", asset.resource_type, asset.public_id)
            except StorageError as exc:
                logger.warning("[upload] could not roll back %s %s: %s", asset.resource_type, asset.public_id, exc)

    async def upload(
        self,
        uploader: User,
        *,
        title: Optional[str],
        caption: Optional[str],
        age_rating: Optional[str],
        thumbnail: bytes,
        video: bytes,
    ) -> Media:
        # 1) Placeholder: the id is needed for the storage path.
        # Metadata is validated together with the asset URLs in step 4.
        media = Media(
            id=uuid.uuid4(),
            title=title or "",
            caption=caption or "",
            age_rating=age_rating or "",
            uploader=uploader,
            thumbnail="",
            video="",
        )
        folder = media_folder(self.namespace, uploader.id, media.id)
        logger.info("[upload] start media=%s uploader=%s", media.id, uploader.id)

        # 2) Thumbnail
        try:
            thumb = await self.storage.upload(thumbnail, folder=folder, resource_type=IMAGE)
        except StorageError as exc:
            logger.error("[upload] thumbnail failed media=%s: %s", media.id, exc)
            raise ServerError("Thumbnail upload failed") from exc

        # 3) Video, only once the thumbnail is in place
        try:
            clip = await self.storage.upload(video, folder=folder, resource_type=VIDEO)
        except StorageError as exc:
            logger.error("[upload] video failed media=%s: %s", media.id, exc)
            await self._discard([thumb])
            raise ServerError("Video upload failed") from exc

        # 4) Finalize
        try:
            MediaCreate(
                title=title,
                caption=caption,
                ageRating=age_rating,
                thumbnail=thumb.url,
                video=clip.url,
                uploader=str(uploader.id),
            )
        except SchemaValidationError as exc:
            await self._discard([thumb, clip])
            raise ValidationError(schema_error_message(exc)) from exc

        media.thumbnail = thumb.url
        media.video = clip.url
        try:
            await media.save(force_create=True)
        except BaseORMException as exc:
            logger.error("[upload] persisting media=%s failed: %s", media.id, exc)
            await self._discard([thumb, clip])
            raise ServerError("Could not save media") from exc

        logger.info("[upload] done media=%s", media.id)
        return media
