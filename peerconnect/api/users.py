"""
User API Endpoints
==================

Endpoints:
- GET /api/users/leaderboard - Top users by credibility
- GET /api/users/me/quota - Today's posting allowance
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from peerconnect.middleware.auth import SessionUser
from peerconnect.models.api import QuotaResponse, UserPublic
from peerconnect.services import Services
from .deps import get_services, get_session_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/leaderboard", response_model=List[UserPublic])
async def leaderboard(
    limit: int = Query(10, ge=1, le=100),
    services: Services = Depends(get_services),
):
    users = await services.users.leaderboard(limit)
    return [UserPublic.from_domain(u) for u in users]


@router.get("/me/quota", response_model=QuotaResponse)
async def my_quota(
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    allowance = await services.quota.get_allowance(current_user.user_id)
    return QuotaResponse(
        posted_today=allowance.posted_today,
        max_allowed=allowance.max_allowed,
        remaining=allowance.remaining,
    )
