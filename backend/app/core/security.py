# app/core/security.py
"""
Security module for authentication.
Handles password hashing and session token (JWT) issuance/verification.
"""
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from app.config import settings

# Password hashing context
# bcrypt with cost factor 10; the salt is generated per hash and embedded in it
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=10,
)


class InvalidTokenError(Exception):
    """Raised when a session token is malformed, expired or badly signed."""


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns False (instead of raising) when the stored hash is empty or not a
    recognizable bcrypt hash.
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


class TokenService:
    """
    Issues and verifies signed, time-limited session tokens.

    The signing key and lifetime are passed in at construction; the service
    never reads process configuration by itself.

    Token payload:
        - id:  user id (what clients decode)
        - sub: user id (standard subject claim)
        - iat: issued at
        - exp: expiry (issued at + ``expires_in``)
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: dt.timedelta = dt.timedelta(days=7)):
        if not secret:
            raise ValueError("TokenService requires a signing secret")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, user_id: str) -> str:
        now = dt.datetime.now(dt.timezone.utc)
        payload = {
            "id": str(user_id),
            "sub": str(user_id),
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict:
        """
        Decode and validate a token, returning its payload.

        Raises:
            InvalidTokenError: bad signature, expired, or malformed token
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token expired") from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("Invalid token") from exc

    def verify(self, token: str) -> str:
        """Return the user id the token was issued for."""
        payload = self.decode(token)
        user_id = payload.get("id") or payload.get("sub")
        if not user_id:
            raise InvalidTokenError("Token has no subject")
        return str(user_id)


token_service = TokenService(
    secret=settings.jwt_secret,
    algorithm=settings.jwt_algorithm,
    expires_in=dt.timedelta(days=settings.jwt_expire_days),
)
