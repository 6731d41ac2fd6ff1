"""
Media read helpers shared by the media and profile endpoints.
"""
from typing import List, Tuple

from tortoise.queryset import QuerySet

from app.models.media import Comment, Media, Rating
from app.schemas.media import MediaWithCountsOut, media_with_counts_out


def complete_media() -> QuerySet[Media]:
    """Media whose assets have both landed, oldest first."""
    return Media.exclude(thumbnail="").exclude(video="").order_by("created_at", "id")


def feedback_of(m: Media) -> Tuple[List[Comment], List[Rating]]:
    """Prefetched comments and ratings of ``m`` in insertion order."""
    comments = sorted(m.comments, key=lambda c: (c.created_at, c.id))
    ratings = sorted(m.ratings, key=lambda r: (r.created_at, r.id))
    return comments, ratings


async def uploads_with_counts(user_id) -> List[MediaWithCountsOut]:
    rows = await complete_media().filter(uploader_id=user_id).prefetch_related("comments", "ratings")
    items = []
    for m in rows:
        comments, ratings = feedback_of(m)
        items.append(media_with_counts_out(m, comments, ratings))
    return items
