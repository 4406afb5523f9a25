"""Notification sink: rows persisted per user, read from the portal inbox."""

from datetime import UTC, datetime

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import Notification
from src.domains.fraud.errors import NotFoundError

logger = structlog.get_logger()

NOTIFICATION_TYPES = ("alert", "warning", "info", "success")


def notify(
    session: AsyncSession,
    user_id: str,
    title: str,
    message: str,
    type: str = "info",
    action_url: str | None = None,
) -> Notification:
    """Stage a notification on the caller's session; the caller commits."""
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        read=False,
        action_url=action_url,
        created_at=datetime.now(UTC),
    )
    session.add(notification)
    logger.info("notification_queued", user_id=user_id, title=title, type=type)
    return notification


async def list_notifications(
    session: AsyncSession,
    user_id: str,
    unread_only: bool = False,
) -> list[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def mark_read(session: AsyncSession, user_id: str, notification_id: int) -> Notification:
    stmt = select(Notification).where(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    )
    result = await session.execute(stmt)
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError(f"Notification not found: {notification_id}")

    if not notification.read:
        notification.read = True
        notification.read_at = datetime.now(UTC)
    await session.commit()
    return notification


async def unread_count(session: AsyncSession, user_id: str) -> int:
    stmt = select(func.count(Notification.id)).where(
        Notification.user_id == user_id,
        Notification.read.is_(False),
    )
    result = await session.execute(stmt)
    return result.scalar_one()
