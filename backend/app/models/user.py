# app/models/user.py
"""
Database model for users.
Represents a user account in the system, containing authentication credentials,
profile information, and role-based access control.
"""
import uuid
from tortoise import fields, models

USER_ROLES = ("consumer", "creator")


class User(models.Model):
    """
    User database model.

    Represents a user account in the system. Creators can upload media;
    consumers can browse, comment, rate and view it.

    Relationships:
    - Has many Media uploads (one-to-many, via related_name="media")
    - Has many Comments and Ratings (via the Comment / Rating models)

    Security:
    - Password is stored as a bcrypt hash (never store plain text passwords)
    - Username and email must each be unique across all users
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    username = fields.CharField(
        max_length=64,
        unique=True,
        index=True
    )  # Lowercase letters, digits and underscores only (validated at registration)
    email = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)  # Never serialized in API responses
    role = fields.CharField(max_length=16, default="consumer")  # "consumer" (default) or "creator"
    profile_pic = fields.CharField(max_length=1024, null=True)  # Remote URL of the profile picture
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    def __str__(self) -> str:
        return self.username
