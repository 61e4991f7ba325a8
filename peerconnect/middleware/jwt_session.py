"""
JWT session management
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt

from peerconnect.config import Settings, get_settings


def create_access_token(user, settings: Optional[Settings] = None) -> str:
    """
    Create JWT access token for user

    Args:
        user: User model with user_id, username, role

    Returns:
        JWT token string
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(user.user_id),
        "name": user.username,
        "role": user.role.value,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
        "iat": now,
    }

    return jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str, settings: Optional[Settings] = None) -> dict:
    """
    Decode and validate JWT token

    Returns:
        Decoded payload dict

    Raises:
        jose.JWTError if token invalid/expired
    """
    settings = settings or get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm]
    )
