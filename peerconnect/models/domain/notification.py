"""
Notification domain model
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from peerconnect.utils.id_generator import generate_notification_id, validate_id


class NotificationKind(str, Enum):
    """Notification types"""
    NEW_ANSWER = "NEW_ANSWER"
    VERIFIED = "VERIFIED"


@dataclass
class Notification:
    """
    Read/unread alert for a user

    ID format: nt_xxxxxxxx (11 chars)
    """
    id: str
    user_id: str
    message: str
    kind: NotificationKind
    is_read: bool = False
    doubt_id: Optional[str] = None

    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id or not validate_id(self.id, 'notification'):
            self.id = generate_notification_id()
        if not isinstance(self.kind, NotificationKind):
            self.kind = NotificationKind(self.kind)
