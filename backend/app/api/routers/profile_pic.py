# app/api/routers/profile_pic.py
import logging

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.deps import get_current_user
from app.config import settings
from app.core.errors import BadRequestError, ServerError
from app.models.user import User
from app.services.storage_base import AssetStorage, StorageError, IMAGE, public_id_from_url
from app.services.storage_factory import get_storage

router = APIRouter(prefix="/profile-pic", tags=["profile-pic"])
logger = logging.getLogger("uvicorn.error")

# Every upload for a user lands on the same object, so it is overwritten in place
PROFILE_PIC_PUBLIC_ID = "profilePic"


def profile_folder(user_id) -> str:
    return f"{settings.storage_namespace}/{user_id}/profile"


@router.post("/upload")
async def upload_profile_pic(
    profilePic: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    storage: AssetStorage = Depends(get_storage),
):
    """
    Upload or replace the authenticated user's profile picture.

    The previous picture (if any) is deleted first; failing to delete it
    does not stop the new upload.

    Returns:
        dict: {"profilePic": <new url>}

    Raises:
        BadRequestError (400): no file uploaded
        ServerError (500): the upload itself failed
    """
    data = b""
    if profilePic is not None:
        try:
            data = await profilePic.read()
        finally:
            await profilePic.close()
    if not data:
        raise BadRequestError("No file uploaded")

    if user.profile_pic:
        old_id = public_id_from_url(user.profile_pic)
        try:
            await storage.delete(old_id, resource_type=IMAGE)
        except StorageError as exc:
            logger.warning("[profile-pic] could not delete old picture %s for user=%s: %s", old_id, user.id, exc)

    try:
        asset = await storage.upload(
            data,
            folder=profile_folder(user.id),
            resource_type=IMAGE,
            public_id=PROFILE_PIC_PUBLIC_ID,
            overwrite=True,
        )
    except StorageError as exc:
        logger.error("[profile-pic] upload failed for user=%s: %s", user.id, exc)
        raise ServerError("Upload failed") from exc

    user.profile_pic = asset.url
    await user.save(update_fields=["profile_pic", "updated_at"])
    return {"profilePic": user.profile_pic}

@router.delete("/delete")
async def delete_profile_pic(
    user: User = Depends(get_current_user),
    storage: AssetStorage = Depends(get_storage),
):
    """
    Delete the authenticated user's profile picture.

    Raises:
        BadRequestError (400): the user has no profile picture
        ServerError (500): remote delete failed (the field is left untouched)
    """
    if not user.profile_pic:
        raise BadRequestError("No profile picture to delete")
    public_id = public_id_from_url(user.profile_pic)
    try:
        await storage.delete(public_id, resource_type=IMAGE)
    except StorageError as exc:
        logger.error("[profile-pic] delete failed for user=%s: %s", user.id, exc)
        raise ServerError("Could not delete profile picture") from exc

    user.profile_pic = None
    await user.save(update_fields=["profile_pic", "updated_at"])
    return {"message": "Profile picture deleted"}
