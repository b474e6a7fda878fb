"""Password hashing (bcrypt) and access-token encoding (PyJWT)."""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from logistics.core.config import settings


class TokenError(Exception):
    """Raised when an access token cannot be validated."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: str, *, expires_in: timedelta | None = None) -> str:
    """Create a signed access token for *user_id*.

    The token carries only the subject. Organization and role are read from
    the database on every request, so a token never outlives a deactivation
    or a role change.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_in or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Validate signature and expiry and return the claims.

    Raises:
        TokenError: If the token is expired, tampered, or lacks a subject.
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"invalid token: {exc}") from exc

    if not isinstance(claims.get("sub"), str) or not claims["sub"]:
        raise TokenError("token subject is missing")
    return claims
