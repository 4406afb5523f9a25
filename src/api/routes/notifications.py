"""Notification inbox endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user
from src.db.database import get_session
from src.db.models import User
from src.domains.portal import notifications
from src.domains.portal.models import NotificationOut

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    unread: bool = Query(default=False),
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[dict]:
    rows = await notifications.list_notifications(session, user.id, unread_only=unread)
    return [NotificationOut.model_validate(row).to_wire() for row in rows]


@router.get("/unread-count")
async def unread_count(
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    return {"count": await notifications.unread_count(session, user.id)}


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    notification = await notifications.mark_read(session, user.id, notification_id)
    return NotificationOut.model_validate(notification).to_wire()
