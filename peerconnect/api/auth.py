"""
Authentication API router

Username-only login that issues the session cookie. There are no passwords.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from peerconnect.middleware.auth import COOKIE_NAME, SessionUser
from peerconnect.middleware.jwt_session import create_access_token
from peerconnect.models.api import LoginRequest, UserProfileResponse
from peerconnect.services import Services
from .deps import get_services, get_session_user

router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/login", response_model=UserProfileResponse)
async def login(
    body: LoginRequest,
    request: Request,
    services: Services = Depends(get_services),
):
    """
    Log in by username

    Sets the access_token cookie and returns the profile with today's quota.
    """
    settings = request.app.state.settings
    profile = await services.users.login(body.username)

    response = JSONResponse(
        content=UserProfileResponse.from_profile(profile).model_dump(mode="json")
    )
    response.set_cookie(
        key=COOKIE_NAME,
        value=create_access_token(profile.user, settings),
        httponly=True,
        max_age=settings.jwt_expire_minutes * 60,
        samesite="lax",
        secure=settings.environment == "production",
    )
    return response


@router.post("/logout")
async def logout():
    """Clear session cookie"""
    response = JSONResponse(content={"status": "success"})
    response.delete_cookie(key=COOKIE_NAME)
    return response


@router.get("/me", response_model=UserProfileResponse)
async def me(
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    """Current user with today's quota"""
    profile = await services.users.get_profile(current_user.user_id)
    return UserProfileResponse.from_profile(profile)
