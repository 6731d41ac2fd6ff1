# app/schemas/auth.py
"""
Pydantic schemas for authentication and profile endpoints.
Defines request/response models plus the functions that project a User
row onto them (the password hash never leaves the server).
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel

from app.models.user import User
from app.schemas.media import MediaWithCountsOut


class RegisterIn(BaseModel):
    """
    Request model for registration.
    username/email format is checked by the endpoint so that failures
    surface as ValidationError with a readable message.
    """
    username: str
    email: str
    password: str
    role: Optional[str] = None  # "consumer" (default) or "creator"


class LoginIn(BaseModel):
    """
    Request model for login. Either username or email identifies the account.
    """
    username: Optional[str] = None
    email: Optional[str] = None
    password: str


class UserOut(BaseModel):
    """Minimal user projection returned by login and register."""
    id: str
    username: str
    email: str
    role: str


class UserPublicOut(UserOut):
    """Full public projection of a user."""
    profilePic: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime


class RegisterOut(BaseModel):
    message: str
    user: UserOut


class LoginOut(BaseModel):
    token: str  # JWT, send back as "Authorization: Bearer <token>"
    user: UserOut


class ProfileOut(BaseModel):
    """Any user's profile plus the media they uploaded."""
    user: UserPublicOut
    media: List[MediaWithCountsOut]


class CurrentUserOut(UserPublicOut):
    """The authenticated user with their uploads inlined."""
    media: List[MediaWithCountsOut]


def user_out(u: User) -> UserOut:
    return UserOut(id=str(u.id), username=u.username, email=u.email, role=u.role)


def user_public_out(u: User) -> UserPublicOut:
    return UserPublicOut(
        id=str(u.id),
        username=u.username,
        email=u.email,
        role=u.role,
        profilePic=u.profile_pic or None,
        createdAt=u.created_at,
        updatedAt=u.updated_at,
    )
