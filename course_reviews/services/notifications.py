"""
Notification store — durable per-recipient rows created by the fan-out engine.

Like the subscription store, operations flush and leave the commit to the caller.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from course_reviews.exceptions import NotFoundError, ValidationError
from course_reviews.models import Notification, Review

logger = logging.getLogger(__name__)


async def create_notification(
    db: AsyncSession,
    recipient_id: str,
    course_code: Optional[int] = None,
    professor_id: Optional[int] = None,
    review_id: Optional[int] = None,
    vote_id: Optional[int] = None,
    created_review_id: Optional[int] = None,
) -> Notification:
    """
    Create a notification for recipient_id.

    Exactly one of course_code, professor_id, review_id names the target.
    vote_id and created_review_id are modifiers and never count toward that rule.
    Raises ValidationError before any write when the rule is broken.
    """
    if not recipient_id:
        raise ValidationError("Must provide recipient_id to create notification")

    targets = [t for t in (course_code, professor_id, review_id) if t is not None]
    if not targets:
        raise ValidationError(
            "Must provide a course_code, professor_id, or review_id to create notification"
        )
    if len(targets) != 1:
        raise ValidationError(
            "Must provide exactly one of course_code, professor_id, or review_id "
            "to create notification"
        )

    notification = Notification(
        recipient_id=recipient_id,
        course_code=course_code,
        professor_id=professor_id,
        review_id=review_id,
        vote_id=vote_id,
        created_review_id=created_review_id,
    )
    db.add(notification)
    await db.flush()
    return notification


async def find_notifications_by_recipient(
    db: AsyncSession, recipient_id: str
) -> list[Notification]:
    """
    All notifications for a user, newest first, with the review they concern
    (plus its course and professor) and the vote loaded for display.
    """
    review_options = (selectinload(Review.course), selectinload(Review.professor))
    result = await db.execute(
        select(Notification)
        .where(Notification.recipient_id == recipient_id)
        .options(
            selectinload(Notification.review).options(*review_options),
            selectinload(Notification.created_review).options(*review_options),
            selectinload(Notification.vote),
        )
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return list(result.scalars().all())


async def find_notification(
    db: AsyncSession, recipient_id: str, vote_id: int
) -> Optional[Notification]:
    """The notification recipient_id received for a specific vote, if any."""
    result = await db.execute(
        select(Notification).where(
            Notification.recipient_id == recipient_id,
            Notification.vote_id == vote_id,
        )
    )
    return result.scalars().first()


async def count_unread_notifications(db: AsyncSession, recipient_id: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.recipient_id == recipient_id,
            Notification.read.is_(False),
        )
    )
    return result.scalar() or 0


async def mark_notification_read(
    db: AsyncSession, notification_id: int, recipient_id: str
) -> Notification:
    """Flag one of recipient_id's notifications as read."""
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.recipient_id == recipient_id,
        )
    )
    notification = result.scalars().first()
    if notification is None:
        raise NotFoundError(f"Notification {notification_id} not found")

    notification.read = True
    await db.flush()
    return notification


async def mark_all_notifications_read(db: AsyncSession, recipient_id: str) -> int:
    """Flag every unread notification of recipient_id as read; returns the count."""
    result = await db.execute(
        update(Notification)
        .where(
            Notification.recipient_id == recipient_id,
            Notification.read.is_(False),
        )
        .values(read=True)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount or 0


async def delete_notification(
    db: AsyncSession,
    notification_id: int,
    recipient_id: Optional[str] = None,
) -> None:
    """
    Delete a notification. A falsy id is rejected outright; an id that matches
    nothing (or belongs to someone other than recipient_id) raises NotFoundError.
    """
    if not notification_id:
        raise ValidationError("Must provide notification_id to delete notification")

    stmt = select(Notification).where(Notification.id == notification_id)
    if recipient_id is not None:
        stmt = stmt.where(Notification.recipient_id == recipient_id)

    notification = (await db.execute(stmt)).scalars().first()
    if notification is None:
        raise NotFoundError(f"Notification {notification_id} not found")

    await db.delete(notification)
    await db.flush()


async def delete_notifications_for_vote(db: AsyncSession, vote_id: int) -> int:
    """
    Delete every notification produced by vote_id, whether or not its recipient
    is still subscribed. Returns the number of rows removed.
    """
    result = await db.execute(
        delete(Notification).where(Notification.vote_id == vote_id)
    )
    return result.rowcount or 0
