"""
Services - business workflows over the Store interface
"""
from dataclasses import dataclass
from typing import Optional

from peerconnect.config import Settings, get_settings
from peerconnect.repositories.base import Store
from peerconnect.utils.datetime_utils import Clock
from .quota_tracker import QuotaTracker
from .similarity import SimilarityChecker
from .notifications import NotificationService
from .doubt_service import DoubtService
from .answer_service import AnswerService
from .user_service import UserService


@dataclass
class Services:
    """All services sharing one store, one clock and one set of rules"""
    store: Store
    quota: QuotaTracker
    doubts: DoubtService
    answers: AnswerService
    users: UserService
    notifications: NotificationService


def build_services(
    store: Store,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> Services:
    settings = settings or get_settings()
    clock = clock or Clock()

    quota = QuotaTracker(store.tracking, base_limit=settings.base_daily_limit, clock=clock)
    notifications = NotificationService(store.notifications, clock)
    return Services(
        store=store,
        quota=quota,
        doubts=DoubtService(store, quota, SimilarityChecker(settings.similarity_threshold)),
        answers=AnswerService(
            store,
            quota,
            notifications,
            verification_reward=settings.verification_reward,
            bonus_per_answer=settings.bonus_per_answer,
        ),
        users=UserService(store, quota),
        notifications=notifications,
    )


__all__ = [
    'Services',
    'build_services',
    'QuotaTracker',
    'SimilarityChecker',
    'NotificationService',
    'DoubtService',
    'AnswerService',
    'UserService',
]
