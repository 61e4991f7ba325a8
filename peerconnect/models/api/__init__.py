"""
API models - Pydantic request/response schemas for the HTTP layer
"""

from .user import LoginRequest, UserPublic, UserProfileResponse, QuotaResponse
from .doubt import DoubtCreate, DoubtResponse, PostDoubtResponse
from .answer import AnswerCreate, AnswerResponse
from .notification import NotificationResponse, NotificationFeed

__all__ = [
    'LoginRequest',
    'UserPublic',
    'UserProfileResponse',
    'QuotaResponse',
    'DoubtCreate',
    'DoubtResponse',
    'PostDoubtResponse',
    'AnswerCreate',
    'AnswerResponse',
    'NotificationResponse',
    'NotificationFeed',
]
