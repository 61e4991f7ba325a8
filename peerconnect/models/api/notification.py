"""
Pydantic models for notifications
"""

from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from peerconnect.models.domain import Notification


class NotificationResponse(BaseModel):
    id: str
    message: str
    kind: str
    is_read: bool
    doubt_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, notification: Notification) -> 'NotificationResponse':
        return cls(
            id=notification.id,
            message=notification.message,
            kind=notification.kind.value,
            is_read=notification.is_read,
            doubt_id=notification.doubt_id,
            created_at=notification.created_at,
        )


class NotificationFeed(BaseModel):
    notifications: List[NotificationResponse]
    unread: int
