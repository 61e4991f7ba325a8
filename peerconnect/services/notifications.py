"""
Notification Service - builds and reads user alerts
"""
import logging
from typing import List, Optional

from peerconnect.models.domain import Notification, NotificationKind
from peerconnect.repositories.base import NotificationStore
from peerconnect.utils.datetime_utils import Clock

logger = logging.getLogger(__name__)


class NotificationService:
    """Thin layer over the notification store that knows the message texts"""

    def __init__(self, notifications: NotificationStore, clock: Optional[Clock] = None):
        self.notifications = notifications
        self.clock = clock or Clock()

    def within(self, notifications: NotificationStore) -> 'NotificationService':
        return NotificationService(notifications, self.clock)

    async def enqueue(
        self,
        user_id: str,
        message: str,
        kind: NotificationKind,
        doubt_id: Optional[str] = None,
    ) -> Notification:
        return await self.notifications.enqueue(Notification(
            id="",
            user_id=user_id,
            message=message,
            kind=kind,
            doubt_id=doubt_id,
            created_at=self.clock.now(),
        ))

    async def notify_new_answer(self, doubt_author_id: str, answerer_name: str, doubt_id: str) -> Notification:
        return await self.enqueue(
            doubt_author_id,
            f'Peer Contribution: "{answerer_name}" added a micro-explanation to your inquiry.',
            NotificationKind.NEW_ANSWER,
            doubt_id,
        )

    async def notify_verified(self, answer_author_id: str, doubt_title: Optional[str], doubt_id: str) -> Notification:
        return await self.enqueue(
            answer_author_id,
            f'Excellence Verified: Your solution for "{doubt_title or "an inquiry"}" was approved!',
            NotificationKind.VERIFIED,
            doubt_id,
        )

    # =========================================================================
    # READ SIDE
    # =========================================================================

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        return await self.notifications.list_for_user(user_id, limit)

    async def unread_count(self, user_id: str) -> int:
        return await self.notifications.count_unread(user_id)

    async def mark_all_read(self, user_id: str) -> int:
        changed = await self.notifications.mark_all_read(user_id)
        if changed:
            logger.debug(f"Marked {changed} notification(s) read for {user_id}")
        return changed
