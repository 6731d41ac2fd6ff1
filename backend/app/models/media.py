# app/models/media.py
"""
Database models for uploaded media and the feedback attached to it.

A Media row only exists once both of its remote assets (thumbnail image and
video) have been uploaded; comments and ratings live in their own tables so
they can be appended / upserted without rewriting the media row.
"""
import uuid
from tortoise import fields, models

AGE_RATINGS = ("below 18", "18 plus")


class Media(models.Model):
    """
    Media database model.

    Relationships:
    - Belongs to a User, the uploader (many-to-one, immutable after creation)
    - Has many Comments (ordered by creation time)
    - Has many Ratings (at most one per user)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Allocated before the assets are uploaded
    title = fields.CharField(max_length=256)
    caption = fields.TextField()
    age_rating = fields.CharField(max_length=16)  # "below 18" or "18 plus"
    thumbnail = fields.CharField(max_length=1024, default="")  # Remote image URL
    video = fields.CharField(max_length=1024, default="")  # Remote video URL
    uploader = fields.ForeignKeyField(
        "models.User",
        related_name="media",
        on_delete=fields.CASCADE,
    )
    views = fields.IntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "media"


class Comment(models.Model):
    id = fields.IntField(pk=True)  # Auto-increment keeps insertion order stable
    media = fields.ForeignKeyField("models.Media", related_name="comments", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="comments", on_delete=fields.CASCADE)
    text = fields.TextField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "media_comments"
        ordering = ["created_at", "id"]


class Rating(models.Model):
    id = fields.IntField(pk=True)
    media = fields.ForeignKeyField("models.Media", related_name="ratings", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="ratings", on_delete=fields.CASCADE)
    value = fields.SmallIntField()  # 1..10, checked by the rate endpoint
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "media_ratings"
        unique_together = (("media", "user"),)  # One rating per user per media
        ordering = ["created_at", "id"]
