"""
Domain Models - Storage-agnostic data structures

These models represent the core domain entities independent of storage layer.
Services operate on these models, not raw database rows.

Architecture:
- Domain models are pure Python objects (dataclasses)
- Storage details (PostgreSQL, in-memory) are abstracted via repositories
- Business logic operates on these models, not database rows
"""

from .user import User, UserRole, UserProfile
from .doubt import Doubt, CATEGORIES, ANONYMOUS_NAME
from .answer import Answer
from .tracking import DailyTrackingRecord, Allowance
from .notification import Notification, NotificationKind
from .drafts import DoubtDraft, PostOptions, AnswerSteps, PostStatus, PostOutcome

__all__ = [
    # Accounts
    'User',
    'UserRole',
    'UserProfile',

    # Q&A
    'Doubt',
    'Answer',
    'CATEGORIES',
    'ANONYMOUS_NAME',

    # Quota
    'DailyTrackingRecord',
    'Allowance',

    # Alerts
    'Notification',
    'NotificationKind',

    # Workflow requests/results
    'DoubtDraft',
    'PostOptions',
    'AnswerSteps',
    'PostStatus',
    'PostOutcome',
]
