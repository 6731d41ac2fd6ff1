# app/api/deps.py
import uuid

from fastapi import Depends, Header

from app.config import settings
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import InvalidTokenError, TokenService, token_service
from app.models.user import User
from app.services.media_upload import MediaUploadOrchestrator
from app.services.storage_base import AssetStorage
from app.services.storage_factory import get_storage


def parse_uuid(value: str) -> uuid.UUID | None:
    """Return the UUID for ``value`` or None when it is not a valid identifier."""
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def get_token_service() -> TokenService:
    return token_service


async def get_current_user(
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Reads the ``Authorization: Bearer <token>`` header, verifies the token
    and loads the user it was issued for. Never mutates anything.

    Returns:
        User: The authenticated user object from database. Handlers must
        serialize it through a public projection (no password hash).

    Raises:
        UnauthorizedError (401): no token, invalid/expired token, or the
        user no longer exists
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()

    if not token:
        raise UnauthorizedError("Not authorized, no token")

    try:
        user_id = parse_uuid(tokens.verify(token))
    except InvalidTokenError:
        raise UnauthorizedError("Not authorized, token failed")

    user = await User.get_or_none(id=user_id) if user_id else None
    if not user:
        raise UnauthorizedError("Not authorized, user not found")
    return user

async def require_creator(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to ensure the current user may upload media.

    Raises:
        ForbiddenError (403): If the user's role is not "creator"
        UnauthorizedError (401): If user is not authenticated (from get_current_user)
    """
    if current.role != "creator":
        raise ForbiddenError("Only creators can upload media")
    return current

def get_upload_orchestrator(storage: AssetStorage = Depends(get_storage)) -> MediaUploadOrchestrator:
    return MediaUploadOrchestrator(storage=storage, namespace=settings.storage_namespace)
