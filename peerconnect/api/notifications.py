"""
Notifications API router
"""

from fastapi import APIRouter, Depends, Query

from peerconnect.middleware.auth import SessionUser
from peerconnect.models.api import NotificationFeed, NotificationResponse
from peerconnect.services import Services
from .deps import get_services, get_session_user

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=NotificationFeed)
async def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    """Newest first, with the unread count"""
    notifications = await services.notifications.list_for_user(current_user.user_id, limit)
    unread = await services.notifications.unread_count(current_user.user_id)
    return NotificationFeed(
        notifications=[NotificationResponse.from_domain(n) for n in notifications],
        unread=unread,
    )


@router.post("/read")
async def mark_read(
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    """Mark every notification read"""
    changed = await services.notifications.mark_all_read(current_user.user_id)
    return {"status": "success", "marked": changed}
