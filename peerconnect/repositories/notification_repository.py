"""
Notification Repository - PostgreSQL storage for user alerts

Storage: PostgreSQL (notifications table)
"""
import logging
from typing import List

from peerconnect.models.domain.notification import Notification, NotificationKind
from .base import NotificationStore
from .postgres_base import PostgresRepository, rows_affected

logger = logging.getLogger(__name__)


class NotificationRepository(PostgresRepository, NotificationStore):
    """Repository for Notification domain model"""

    async def enqueue(self, notification: Notification) -> Notification:
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                INSERT INTO notifications (
                    id, user_id, message, kind, is_read, doubt_id, created_at
                )
                VALUES ($1, $2, $3, $4, $5, $6, COALESCE($7, NOW()))
                RETURNING created_at
            """,
                notification.id,
                notification.user_id,
                notification.message,
                notification.kind.value,
                notification.is_read,
                notification.doubt_id,
                notification.created_at
            )

            notification.created_at = row['created_at']
            logger.debug(f"Queued {notification.kind.value} notification for {notification.user_id}")
            return notification

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        async with self.connection() as conn:
            rows = await conn.fetch("""
                SELECT id, user_id, message, kind, is_read, doubt_id, created_at
                FROM notifications
                WHERE user_id = $1
                ORDER BY created_at DESC, id DESC
                LIMIT $2
            """, user_id, limit)

            return [
                Notification(
                    id=row['id'],
                    user_id=str(row['user_id']),
                    message=row['message'],
                    kind=NotificationKind(row['kind']),
                    is_read=bool(row['is_read']),
                    doubt_id=row['doubt_id'],
                    created_at=row['created_at'],
                )
                for row in rows
            ]

    async def count_unread(self, user_id: str) -> int:
        async with self.connection() as conn:
            return await conn.fetchval("""
                SELECT COUNT(*) FROM notifications WHERE user_id = $1 AND NOT is_read
            """, user_id)

    async def mark_all_read(self, user_id: str) -> int:
        async with self.connection() as conn:
            result = await conn.execute("""
                UPDATE notifications SET is_read = TRUE
                WHERE user_id = $1 AND NOT is_read
            """, user_id)
            return rows_affected(result)
