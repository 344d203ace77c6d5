"""
Fan-out engine — turns a domain event into one notification per subscriber.

Events:
  review created under a course     → notify_course_review_created
  review created under a professor  → notify_professor_review_created
  vote cast on a review             → notify_review_voted
  vote removed from a review        → notify_review_vote_removed

Fan-out is push-on-write: every subscriber gets a durable row so read state is
tracked per recipient. Subscribers are visited sequentially, one write each.
A failure for one subscriber is captured into the FanOutReport and the loop
moves on, so a single bad row never starves the remaining subscribers.
Nothing here commits; the calling action owns the transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.exceptions import ValidationError
from course_reviews.models import Notification, Subscription
from course_reviews.services.notifications import (
    create_notification,
    delete_notification,
    find_notification,
)
from course_reviews.services.subscriptions import (
    find_subscriptions_by_course,
    find_subscriptions_by_professor,
    find_subscriptions_by_review,
)

logger = logging.getLogger(__name__)

# Errors a single subscriber's write may raise without aborting the batch
_CAPTURED_ERRORS = (ValidationError, SQLAlchemyError)


@dataclass
class FanOutFailure:
    """A subscriber whose notification write failed."""

    recipient_id: str
    error: Exception


@dataclass
class FanOutReport:
    """
    Result of one fan-out call.
    notifications holds the rows created (or deleted, for vote removal).
    """

    event: str
    attempted: int = 0
    notifications: list[Notification] = field(default_factory=list)
    failures: list[FanOutFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


async def _fan_out(
    db: AsyncSession,
    event: str,
    subscribers: list[Subscription],
    deliver: Callable[[Subscription], Awaitable[Notification | None]],
) -> FanOutReport:
    """
    Run deliver() once per subscriber inside its own SAVEPOINT, so a failed
    write rolls back only that subscriber and the session stays usable.
    """
    report = FanOutReport(event=event, attempted=len(subscribers))
    if not subscribers:
        return report

    logger.debug("Fan-out %s to %d subscriber(s)", event, len(subscribers))

    for subscriber in subscribers:
        recipient_id = subscriber.user_id
        try:
            async with db.begin_nested():
                notification = await deliver(subscriber)
        except _CAPTURED_ERRORS as exc:
            logger.warning(
                "Fan-out %s failed for recipient %s: %s",
                event, recipient_id, exc,
            )
            report.failures.append(FanOutFailure(recipient_id, exc))
            continue
        if notification is not None:
            report.notifications.append(notification)

    if report.failures:
        logger.warning(
            "Fan-out %s: %d of %d subscriber(s) failed",
            event, len(report.failures), report.attempted,
        )
    return report


async def notify_course_review_created(
    db: AsyncSession, course_code: int, review_id: int
) -> FanOutReport:
    """Notify every subscriber of course_code that review_id was posted."""
    subscribers = await find_subscriptions_by_course(db, course_code)

    async def deliver(subscriber: Subscription) -> Notification:
        return await create_notification(
            db,
            subscriber.user_id,
            course_code=course_code,
            created_review_id=review_id,
        )

    return await _fan_out(db, f"course_review_created:{course_code}", subscribers, deliver)


async def notify_professor_review_created(
    db: AsyncSession, professor_id: int, review_id: int
) -> FanOutReport:
    """Notify every subscriber of professor_id that review_id was posted."""
    subscribers = await find_subscriptions_by_professor(db, professor_id)

    async def deliver(subscriber: Subscription) -> Notification:
        return await create_notification(
            db,
            subscriber.user_id,
            professor_id=professor_id,
            created_review_id=review_id,
        )

    return await _fan_out(
        db, f"professor_review_created:{professor_id}", subscribers, deliver
    )


async def notify_review_voted(
    db: AsyncSession, review_id: int, vote_id: int
) -> FanOutReport:
    """Notify every subscriber of review_id about vote_id."""
    subscribers = await find_subscriptions_by_review(db, review_id)

    async def deliver(subscriber: Subscription) -> Notification:
        return await create_notification(
            db,
            subscriber.user_id,
            review_id=review_id,
            vote_id=vote_id,
        )

    return await _fan_out(db, f"review_voted:{review_id}", subscribers, deliver)


async def notify_review_vote_removed(
    db: AsyncSession, review_id: int, vote_id: int
) -> FanOutReport:
    """
    Withdraw the notification each subscriber of review_id received for vote_id.
    Subscribers without such a notification are left alone.
    """
    subscribers = await find_subscriptions_by_review(db, review_id)

    async def deliver(subscriber: Subscription) -> Notification | None:
        notification = await find_notification(db, subscriber.user_id, vote_id)
        if notification is None:
            return None
        await delete_notification(db, notification.id)
        return notification

    return await _fan_out(db, f"review_vote_removed:{review_id}", subscribers, deliver)
