"""FastAPI authentication dependency.

The identity provider issues the session token; this dependency only
verifies it and returns the user id from its 'sub' claim.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from loguru import logger

from fitplan.core.auth_jwt import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_current_user_id(request: Request, token: str | None = Depends(oauth2_scheme)) -> str:
    """FastAPI dependency to get the current authenticated user ID.

    Accepts the token from the Authorization header (Bearer) or, for web
    clients, from the 'session' cookie.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    auth_token = token or request.cookies.get("session")

    if not auth_token:
        logger.warning(f"Auth failed: Missing authentication token. Path: {request.url.path}, Method: {request.method}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header or a session cookie.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_access_token(auth_token)
    except ValueError as e:
        logger.warning(f"Auth failed: {e}, Path: {request.url.path}, Method: {request.method}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
