"""
Authentication dependencies

The session cookie only carries identity. Roles are always re-read from the
user store by the services, never trusted from the token.
"""

from fastapi import Request, HTTPException
from jose import JWTError
from typing import Optional

from .jwt_session import decode_access_token

COOKIE_NAME = "access_token"


class SessionUser:
    """Minimal user info from JWT token"""
    def __init__(self, user_id: str, username: str, role: Optional[str] = None):
        self.user_id = user_id
        self.username = username
        self.role = role


async def get_current_user_optional(request: Request) -> Optional[SessionUser]:
    """
    Get current user from JWT token (optional - doesn't raise if not authenticated)

    Returns:
        SessionUser if authenticated, None otherwise
    """
    token = request.cookies.get(COOKIE_NAME)

    if not token:
        return None

    try:
        payload = decode_access_token(token, request.app.state.settings)
    except JWTError:
        return None

    if not payload.get("sub"):
        return None

    return SessionUser(
        user_id=payload["sub"],
        username=payload.get("name"),
        role=payload.get("role"),
    )


async def get_current_user(request: Request) -> SessionUser:
    """
    Get current user (required - raises 401 if not authenticated)

    Raises:
        HTTPException 401 if not authenticated
    """
    user = await get_current_user_optional(request)

    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")

    return user
