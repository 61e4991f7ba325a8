"""
Pydantic models for User
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from peerconnect.models.domain import User, UserProfile


class LoginRequest(BaseModel):
    """Username-only login"""
    username: str


class UserPublic(BaseModel):
    """Public user model (leaderboard rows, author info)"""
    user_id: str
    username: str
    role: str
    credibility_score: int

    model_config = {
        "from_attributes": True,
    }

    @classmethod
    def from_domain(cls, user: User) -> 'UserPublic':
        return cls(
            user_id=user.user_id,
            username=user.username,
            role=user.role.value,
            credibility_score=user.credibility_score,
        )


class UserProfileResponse(UserPublic):
    """Logged-in user's view of themselves, with today's quota"""
    daily_limit: int
    doubts_posted_today: int
    remaining_today: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> 'UserProfileResponse':
        user = profile.user
        return cls(
            user_id=user.user_id,
            username=user.username,
            role=user.role.value,
            credibility_score=user.credibility_score,
            daily_limit=profile.daily_limit,
            doubts_posted_today=profile.doubts_posted_today,
            remaining_today=profile.remaining_today,
            created_at=user.created_at,
        )


class QuotaResponse(BaseModel):
    """Today's posting allowance"""
    posted_today: int
    max_allowed: int
    remaining: int
