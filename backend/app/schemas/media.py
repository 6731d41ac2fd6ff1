# app/schemas/media.py
"""
Pydantic schemas for media endpoints.

Response models are built by the plain mapping functions at the bottom of
this module, so the wire format does not depend on how rows are stored.
The mapping functions expect related rows (uploader, comment/rating users)
to be fetched already.
"""
from datetime import datetime
from typing import Iterable, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from app.models.media import Media, Comment, Rating

AgeRating = Literal["below 18", "18 plus"]


# ===== Input =====
class MediaCreate(BaseModel):
    """
    Complete media record, checked right before it is persisted.
    Empty asset URLs (an unfinished upload) do not validate.
    """
    title: str = Field(min_length=1)
    caption: str = Field(min_length=1)
    ageRating: AgeRating
    thumbnail: str = Field(min_length=1)
    video: str = Field(min_length=1)
    uploader: str


class CommentIn(BaseModel):
    text: str = Field(min_length=1)


class RatingIn(BaseModel):
    value: int  # 1..10, range is checked by the endpoint


# ===== Raw record =====
class CommentOut(BaseModel):
    user: str  # Author id
    text: str
    createdAt: datetime


class RatingOut(BaseModel):
    user: str  # Author id
    value: int


class MediaRecordOut(BaseModel):
    id: str
    title: str
    caption: str
    ageRating: str
    thumbnail: str
    video: str
    uploader: str  # Uploader id
    views: int
    comments: List[CommentOut]
    ratings: List[RatingOut]
    createdAt: datetime
    updatedAt: datetime


class MediaWithCountsOut(MediaRecordOut):
    commentsCount: int
    ratingsCount: int


# ===== Listing (denormalized) =====
class UploaderSummary(BaseModel):
    username: str
    profilePic: Optional[str] = None


class CommentSummary(BaseModel):
    username: str
    text: str
    createdAt: datetime


class RatingSummary(BaseModel):
    username: str
    value: int


class MediaListItem(BaseModel):
    id: str
    title: str
    caption: str
    ageRating: str
    thumbnail: str
    video: str
    uploader: UploaderSummary
    createdAt: datetime
    updatedAt: datetime
    comments: List[CommentSummary]
    ratings: List[RatingSummary]
    commentsCount: int
    ratingsCount: int
    avgRating: Optional[float] = None  # None when nobody rated yet
    views: int


# ===== Detail =====
class UploaderRef(BaseModel):
    id: str
    username: str
    email: str


class CommentAuthor(BaseModel):
    id: str
    username: str


class CommentDetail(BaseModel):
    user: CommentAuthor
    text: str
    createdAt: datetime


class MediaDetailOut(BaseModel):
    id: str
    title: str
    caption: str
    ageRating: str
    thumbnail: str
    video: str
    uploader: UploaderRef
    views: int
    comments: List[CommentDetail]
    ratings: List[RatingOut]
    avgRating: Optional[float] = None
    commentsCount: int
    ratingsCount: int
    createdAt: datetime
    updatedAt: datetime


class ViewsOut(BaseModel):
    views: int


# ===== Mapping =====
def average_rating(values: Iterable[int]) -> Optional[float]:
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def comment_out(c: Comment) -> CommentOut:
    return CommentOut(user=str(c.user_id), text=c.text, createdAt=c.created_at)


def rating_out(r: Rating) -> RatingOut:
    return RatingOut(user=str(r.user_id), value=r.value)


def media_record_out(m: Media, comments: Sequence[Comment] = (), ratings: Sequence[Rating] = ()) -> MediaRecordOut:
    return MediaRecordOut(
        id=str(m.id),
        title=m.title,
        caption=m.caption,
        ageRating=m.age_rating,
        thumbnail=m.thumbnail,
        video=m.video,
        uploader=str(m.uploader_id),
        views=m.views,
        comments=[comment_out(c) for c in comments],
        ratings=[rating_out(r) for r in ratings],
        createdAt=m.created_at,
        updatedAt=m.updated_at,
    )


def media_with_counts_out(m: Media, comments: Sequence[Comment], ratings: Sequence[Rating]) -> MediaWithCountsOut:
    record = media_record_out(m, comments, ratings)
    return MediaWithCountsOut(
        **record.model_dump(),
        commentsCount=len(comments),
        ratingsCount=len(ratings),
    )


def media_list_item(m: Media, comments: Sequence[Comment], ratings: Sequence[Rating]) -> MediaListItem:
    uploader = m.uploader
    return MediaListItem(
        id=str(m.id),
        title=m.title,
        caption=m.caption,
        ageRating=m.age_rating,
        thumbnail=m.thumbnail,
        video=m.video,
        uploader=UploaderSummary(username=uploader.username, profilePic=uploader.profile_pic or None),
        createdAt=m.created_at,
        updatedAt=m.updated_at,
        comments=[CommentSummary(username=c.user.username, text=c.text, createdAt=c.created_at) for c in comments],
        ratings=[RatingSummary(username=r.user.username, value=r.value) for r in ratings],
        commentsCount=len(comments),
        ratingsCount=len(ratings),
        avgRating=average_rating(r.value for r in ratings),
        views=m.views,
    )


def media_detail_out(m: Media, comments: Sequence[Comment], ratings: Sequence[Rating]) -> MediaDetailOut:
    uploader = m.uploader
    return MediaDetailOut(
        id=str(m.id),
        title=m.title,
        caption=m.caption,
        ageRating=m.age_rating,
        thumbnail=m.thumbnail,
        video=m.video,
        uploader=UploaderRef(id=str(uploader.id), username=uploader.username, email=uploader.email),
        views=m.views,
        comments=[
            CommentDetail(
                user=CommentAuthor(id=str(c.user.id), username=c.user.username),
                text=c.text,
                createdAt=c.created_at,
            )
            for c in comments
        ],
        ratings=[rating_out(r) for r in ratings],
        avgRating=average_rating(r.value for r in ratings),
        commentsCount=len(comments),
        ratingsCount=len(ratings),
        createdAt=m.created_at,
        updatedAt=m.updated_at,
    )
