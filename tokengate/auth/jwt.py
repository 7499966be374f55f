"""
JWT access tokens for authenticated API routes.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from tokengate.core.config import settings
from tokengate.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a valid access token."""

    user_id: int
    email: str
    expires_at: datetime


def create_access_token(
    user_id: int,
    email: str,
    now: Optional[datetime] = None,
    secret: Optional[str] = None,
) -> str:
    """Issue an access token valid for the configured number of hours."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": now + timedelta(hours=settings.access_token_expire_hours),
        "iat": now,
        "nbf": now,
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, secret: Optional[str] = None) -> TokenClaims:
    """Verify an access token and return its claims."""
    try:
        payload = jwt.decode(
            token,
            secret or settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat", "nbf"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token", {"reason": str(e)}) from e

    user_id = payload.get("user_id")
    email = payload.get("email")
    # bool is an int subclass
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(email, str):
        raise AuthenticationError("Invalid token claims")

    return TokenClaims(
        user_id=user_id,
        email=email,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
