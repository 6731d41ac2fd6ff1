# app/api/routers/media.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from tortoise.expressions import F

from app.api.deps import get_current_user, get_upload_orchestrator, parse_uuid, require_creator
from app.core.errors import BadRequestError, NotFoundError, ValidationError
from app.models.media import Comment, Media, Rating
from app.models.user import User
from app.schemas.media import (
    CommentIn,
    CommentOut,
    MediaDetailOut,
    MediaListItem,
    MediaRecordOut,
    RatingIn,
    RatingOut,
    ViewsOut,
    comment_out,
    media_detail_out,
    media_list_item,
    media_record_out,
    rating_out,
)
from app.services.media_queries import complete_media, feedback_of
from app.services.media_upload import MediaUploadOrchestrator

router = APIRouter(prefix="/media", tags=["media"])
logger = logging.getLogger("uvicorn.error")

RATING_MIN, RATING_MAX = 1, 10


async def _get_media_or_404(media_id: str) -> Media:
    mid = parse_uuid(media_id)
    media = await Media.get_or_none(id=mid) if mid else None
    if not media:
        raise NotFoundError("Media not found")
    return media

async def _list_items(qs) -> List[MediaListItem]:
    rows = await qs.prefetch_related("uploader", "comments__user", "ratings__user")
    items = []
    for m in rows:
        comments, ratings = feedback_of(m)
        items.append(media_list_item(m, comments, ratings))
    return items

async def _read_upload(part: Optional[UploadFile]) -> bytes:
    if part is None:
        return b""
    try:
        return await part.read()
    finally:
        await part.close()


# ===== Routes =====
@router.get("", response_model=List[MediaListItem])
async def list_media(user: User = Depends(get_current_user)):
    """
    All media with uploader, comments, ratings, counts and average rating.
    """
    return await _list_items(complete_media())

@router.get("/search", response_model=List[MediaListItem])
async def search_media(
    query: str | None = Query(default=None, description="Case-insensitive substring of the title"),
    user: User = Depends(get_current_user),
):
    """
    Media whose title contains ``query`` (case-insensitive), same shape as the listing.

    Raises:
        BadRequestError (400): query is missing or blank
    """
    if not query or not query.strip():
        raise BadRequestError("Search query is required")
    return await _list_items(complete_media().filter(title__icontains=query.strip()))

@router.post("/upload", response_model=MediaRecordOut, status_code=status.HTTP_201_CREATED)
async def upload_media(
    video: UploadFile | None = File(default=None),
    thumbnail: UploadFile | None = File(default=None),
    title: str | None = Form(default=None),
    caption: str | None = Form(default=None),
    ageRating: str | None = Form(default=None),
    user: User = Depends(require_creator),
    orchestrator: MediaUploadOrchestrator = Depends(get_upload_orchestrator),
):
    """
    Upload a video and its thumbnail (creators only).

    The thumbnail is uploaded first, then the video; the Media row is only
    written once both are stored. See MediaUploadOrchestrator.

    Raises:
        ForbiddenError (403): caller is not a creator
        BadRequestError (400): video or thumbnail missing
        ValidationError (400): title/caption/ageRating invalid
        ServerError (500): remote storage failed
    """
    video_bytes = await _read_upload(video)
    thumbnail_bytes = await _read_upload(thumbnail)
    if not video_bytes or not thumbnail_bytes:
        raise BadRequestError("Video and thumbnail are required")

    media = await orchestrator.upload(
        user,
        title=title,
        caption=caption,
        age_rating=ageRating,
        thumbnail=thumbnail_bytes,
        video=video_bytes,
    )
    return media_record_out(media)

@router.get("/{media_id}", response_model=MediaDetailOut)
async def get_media(media_id: str):
    """
    One media item with comments, ratings, views and computed aggregates (public).

    Raises:
        NotFoundError (404): no such media
    """
    media = await _get_media_or_404(media_id)
    await media.fetch_related("uploader", "comments__user", "ratings")
    comments, ratings = feedback_of(media)
    return media_detail_out(media, comments, ratings)

@router.post("/{media_id}/comment", response_model=List[CommentOut], status_code=status.HTTP_201_CREATED)
async def add_comment(media_id: str, body: CommentIn, user: User = Depends(get_current_user)):
    """
    Append a comment and return the media's full comment list.

    Raises:
        NotFoundError (404): no such media
    """
    media = await _get_media_or_404(media_id)
    await Comment.create(media=media, user=user, text=body.text)
    comments = await Comment.filter(media_id=media.id).order_by("created_at", "id")
    return [comment_out(c) for c in comments]

@router.post("/{media_id}/rate", response_model=List[RatingOut], status_code=status.HTTP_201_CREATED)
async def add_rating(media_id: str, body: RatingIn, user: User = Depends(get_current_user)):
    """
    Rate a media item 1-10. A user's new rating replaces their previous one.

    Raises:
        ValidationError (400): value outside 1-10
        NotFoundError (404): no such media
    """
    if not RATING_MIN <= body.value <= RATING_MAX:
        raise ValidationError("Rating must be 1-10")
    media = await _get_media_or_404(media_id)
    # Upsert keyed by (media, user) in one transaction; the unique constraint backs it up
    await Rating.update_or_create(media=media, user=user, defaults={"value": body.value})
    ratings = await Rating.filter(media_id=media.id).order_by("created_at", "id")
    return [rating_out(r) for r in ratings]

@router.post("/{media_id}/view", response_model=ViewsOut)
async def increment_view(media_id: str):
    """
    Count one view (public, every call counts).

    Raises:
        NotFoundError (404): no such media
    """
    mid = parse_uuid(media_id)
    updated = await Media.filter(id=mid).update(views=F("views") + 1) if mid else 0
    if not updated:
        raise NotFoundError("Media not found")
    views = await Media.filter(id=mid).values_list("views", flat=True)
    return ViewsOut(views=views[0])
