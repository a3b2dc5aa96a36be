"""JWT verification for identities issued by the external identity provider.

The provider signs a token per session with the shared key; this service only
verifies it and reads the user id from the 'sub' claim. Token creation lives
here as well so tests and local tooling can mint tokens with the same key.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from loguru import logger

from fitplan.config.settings import settings


def create_access_token(user_id: str, expires_in: timedelta = timedelta(days=1)) -> str:
    """Create a signed access token for a user.

    Args:
        user_id: User ID to encode in the 'sub' claim
        expires_in: Token lifetime

    Returns:
        JWT token string
    """
    user_id_str = str(user_id) if user_id is not None else ""
    if not user_id_str:
        raise ValueError("user_id cannot be None or empty")

    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id_str,
        "exp": now + expires_in,
        "iat": now,
    }
    return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> str:
    """Decode and verify an access token.

    Args:
        token: JWT token string

    Returns:
        User ID (string) from token 'sub' claim

    Raises:
        ValueError: If token is invalid or expired
    """
    if not settings.auth_secret_key:
        raise ValueError("Token verification key is not configured")
    try:
        payload = jwt.decode(
            token,
            settings.auth_secret_key,
            algorithms=[settings.auth_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT decode failed: {e}")
        raise ValueError("Invalid or expired token") from e

    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Token missing user ID")
    return str(user_id)
