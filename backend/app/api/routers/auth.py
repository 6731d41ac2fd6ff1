# app/api/routers/auth.py
import logging
import re

from fastapi import APIRouter, Depends, status
from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from app.api.deps import get_current_user, get_token_service, parse_uuid
from app.core.errors import BadRequestError, NotFoundError, UnauthorizedError, ValidationError
from app.core.security import TokenService, hash_password, verify_password
from app.models.user import User, USER_ROLES
from app.schemas.auth import (
    CurrentUserOut,
    LoginIn,
    LoginOut,
    ProfileOut,
    RegisterIn,
    RegisterOut,
    user_out,
    user_public_out,
)
from app.services.media_queries import uploads_with_counts

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("uvicorn.error")

# Lowercase letters, digits and underscores only
USERNAME_RE = re.compile(r"^[a-z0-9_]+$")
# local@domain.tld, no whitespace and a single "@"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn):
    """
    Register a new user account.

    Username must match ``^[a-z0-9_]+$`` and email ``local@domain.tld``.
    A single lookup rejects the registration when either the username or
    the email is already taken. The password is bcrypt-hashed (cost 10);
    role defaults to "consumer".

    Raises:
        ValidationError (400): malformed username/email/role, empty
            password, or an existing user with the same username or email
    """
    if not USERNAME_RE.match(body.username):
        raise ValidationError(
            "Username must contain only lowercase letters, numbers, and underscores (no uppercase allowed)."
        )
    if not EMAIL_RE.match(body.email):
        raise ValidationError("Invalid email format.")
    if not body.password:
        raise ValidationError("Password is required.")
    role = body.role or "consumer"
    if role not in USER_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(USER_ROLES)}.")

    if await User.filter(Q(username=body.username) | Q(email=body.email)).exists():
        raise ValidationError("User already exists")

    password_hash = hash_password(body.password)
    try:
        u = await User.create(
            username=body.username,
            email=body.email,
            password_hash=password_hash,
            role=role,
        )
    except IntegrityError:
        # Lost a race against a concurrent registration
        raise ValidationError("User already exists")
    logger.info("[auth] registered user=%s role=%s", u.id, u.role)
    return RegisterOut(message="User registered successfully", user=user_out(u))

@router.post("/login", response_model=LoginOut)
async def login(body: LoginIn, tokens: TokenService = Depends(get_token_service)):
    """
    Authenticate by username or email and return a session token.

    "No such user" and "wrong password" produce the same error so that
    accounts cannot be enumerated.

    Raises:
        UnauthorizedError (401): Invalid credentials
    """
    lookups = []
    if body.username:
        lookups.append(Q(username=body.username))
    if body.email:
        lookups.append(Q(email=body.email))
    user = await User.filter(Q(*lookups, join_type="OR")).first() if lookups else None

    if not user:
        raise UnauthorizedError(INVALID_CREDENTIALS)
    if not verify_password(body.password, user.password_hash):
        raise UnauthorizedError(INVALID_CREDENTIALS)

    return LoginOut(token=tokens.issue(str(user.id)), user=user_out(user))

@router.get("/profile/{user_id}", response_model=ProfileOut)
async def get_profile(user_id: str):
    """
    Get any user's public profile and the media they uploaded.

    Raises:
        BadRequestError (400): user_id is not a valid identifier
        NotFoundError (404): no such user
    """
    uid = parse_uuid(user_id)
    if uid is None:
        raise BadRequestError("Invalid user id")
    user = await User.get_or_none(id=uid)
    if not user:
        raise NotFoundError("User not found")
    return ProfileOut(user=user_public_out(user), media=await uploads_with_counts(user.id))

@router.get("/current", response_model=CurrentUserOut)
async def current(user: User = Depends(get_current_user)):
    """
    Get the authenticated user, including profile picture and uploads.
    """
    media = await uploads_with_counts(user.id)
    return CurrentUserOut(**user_public_out(user).model_dump(), media=media)
