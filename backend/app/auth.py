"""
VideoTube Backend - Access Token Verification
===============================================

What:  Resolves the authenticated caller for every protected route.
Why:   Owner checks compare the caller's ID with a resource's owner_id, so
       each mutation needs a trustworthy caller identity.
How:   Reads an HS256 JWT from the `Authorization: Bearer` header (API
       clients) or the access token cookie (browsers), verifies it with PyJWT,
       and loads the user named by the `sub` claim.

Scope:
    Tokens are issued, refreshed and revoked by the identity service. This
    module only verifies them; it never signs anything.

Failure modes (all → 401 via UnauthorizedError):
    - no token in header or cookie
    - bad signature, malformed token, expired token
    - `sub` missing or not a UUID
    - user no longer exists
"""

import logging
import uuid
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import DatabaseError, UnauthorizedError
from app.models.user import User

logger = logging.getLogger(__name__)

# auto_error=False: a missing header falls back to the cookie instead of 403
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Verify a token and return the user ID it was issued for.

    Raises:
        UnauthorizedError: expired, tampered, or missing a usable `sub`.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(message="Access token expired")
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected access token: %s", str(e))
        raise UnauthorizedError(message="Invalid access token")

    try:
        return uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise UnauthorizedError(message="Invalid access token")


def extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Header first, then cookie."""
    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(settings.access_token_cookie)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    FastAPI dependency returning the authenticated User.

    Usage:
        @router.delete("/videos/{video_id}")
        async def delete_video(video_id: str, user: User = Depends(get_current_user)):
            ...
    """
    token = extract_token(request, credentials)
    if not token:
        raise UnauthorizedError()

    user_id = decode_access_token(token)

    try:
        user = await db.get(User, user_id)
    except SQLAlchemyError as e:
        logger.error("Database error resolving user %s: %s", user_id, str(e))
        raise DatabaseError(context={"error_type": type(e).__name__})

    if user is None:
        raise UnauthorizedError(message="Invalid access token")

    request.state.user_id = str(user.id)
    return user
