"""
Shared FastAPI dependencies
"""
from fastapi import Depends, HTTPException, Request

from peerconnect.middleware.auth import SessionUser, get_current_user
from peerconnect.services import Services


def get_services(request: Request) -> Services:
    """Services built at startup (see main.lifespan)"""
    return request.app.state.services


async def get_session_user(
    current_user: SessionUser = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> SessionUser:
    """
    Logged-in user whose account still exists.

    A valid token for a deleted account is treated as no session (401), not
    as a missing resource.
    """
    if await services.store.users.get_by_id(current_user.user_id) is None:
        raise HTTPException(status_code=401, detail="Session user no longer exists")
    return current_user
