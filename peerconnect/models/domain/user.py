"""
User domain model
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid


class UserRole(str, Enum):
    """Account roles"""
    STUDENT = "STUDENT"
    MENTOR = "MENTOR"
    ADMIN = "ADMIN"


@dataclass
class User:
    """
    User domain model - storage-agnostic representation

    Storage: PostgreSQL (users table) or the in-memory store

    credibility_score only ever grows, and only through answer verification.
    Daily limit and posts-made-today are derived from the daily tracking
    record, see UserProfile.
    """
    user_id: str  # UUID format
    username: str
    role: UserRole = UserRole.STUDENT

    # Reputation earned from verified answers
    credibility_score: int = 0

    # Timestamps
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Generate UUID if not provided"""
        if not self.user_id:
            self.user_id = str(uuid.uuid4())
        if not isinstance(self.role, UserRole):
            self.role = UserRole(self.role)

    @property
    def is_mentor(self) -> bool:
        """Only mentors may verify answers (admins included out)"""
        return self.role == UserRole.MENTOR


@dataclass
class UserProfile:
    """User plus today's posting allowance."""
    user: User
    daily_limit: int
    doubts_posted_today: int

    @property
    def remaining_today(self) -> int:
        return max(0, self.daily_limit - self.doubts_posted_today)
