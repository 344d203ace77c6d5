"""
Subscription store — who follows which course, professor, or review.

Every operation takes the caller's AsyncSession and only flushes; committing
is the caller's decision.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from course_reviews.exceptions import NotFoundError, ValidationError
from course_reviews.models import Subscription

logger = logging.getLogger(__name__)


def _count_targets(*targets: Optional[int]) -> int:
    return sum(1 for t in targets if t is not None)


async def create_subscription(
    db: AsyncSession,
    user_id: str,
    course_code: Optional[int] = None,
    professor_id: Optional[int] = None,
    review_id: Optional[int] = None,
) -> Subscription:
    """
    Subscribe user_id to exactly one of a course, professor, or review.

    Raises ValidationError before touching the store when user_id is empty or
    when zero or several targets are given. Subscribing twice to the same
    target returns the existing row.
    """
    if not user_id:
        raise ValidationError("Must provide user_id to create subscription")

    if _count_targets(course_code, professor_id, review_id) != 1:
        raise ValidationError(
            "Must provide exactly one of course_code, professor_id, or review_id "
            "to create subscription"
        )

    result = await db.execute(
        select(Subscription).where(
            Subscription.user_id == user_id,
            Subscription.course_code.is_(None) if course_code is None
            else Subscription.course_code == course_code,
            Subscription.professor_id.is_(None) if professor_id is None
            else Subscription.professor_id == professor_id,
            Subscription.review_id.is_(None) if review_id is None
            else Subscription.review_id == review_id,
        )
    )
    existing = result.scalars().first()
    if existing is not None:
        return existing

    subscription = Subscription(
        user_id=user_id,
        course_code=course_code,
        professor_id=professor_id,
        review_id=review_id,
    )
    db.add(subscription)
    await db.flush()
    logger.debug(
        "Subscription %s created (user=%s course=%s professor=%s review=%s)",
        subscription.id, user_id, course_code, professor_id, review_id,
    )
    return subscription


async def find_subscriptions_by_course(
    db: AsyncSession, course_code: int
) -> list[Subscription]:
    """All subscriptions targeting a course, unordered."""
    result = await db.execute(
        select(Subscription).where(Subscription.course_code == course_code)
    )
    return list(result.scalars().all())


async def find_subscriptions_by_professor(
    db: AsyncSession, professor_id: int
) -> list[Subscription]:
    """All subscriptions targeting a professor, unordered."""
    result = await db.execute(
        select(Subscription).where(Subscription.professor_id == professor_id)
    )
    return list(result.scalars().all())


async def find_subscriptions_by_review(
    db: AsyncSession, review_id: int
) -> list[Subscription]:
    """All subscriptions targeting a review, unordered."""
    result = await db.execute(
        select(Subscription).where(Subscription.review_id == review_id)
    )
    return list(result.scalars().all())


async def find_subscriptions_by_user(
    db: AsyncSession, user_id: str
) -> list[Subscription]:
    """A user's subscriptions, newest first, with the followed entity loaded."""
    result = await db.execute(
        select(Subscription)
        .where(Subscription.user_id == user_id)
        .options(
            selectinload(Subscription.course),
            selectinload(Subscription.professor),
            selectinload(Subscription.review),
        )
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
    )
    return list(result.scalars().all())


async def delete_subscription(
    db: AsyncSession,
    subscription_id: int,
    user_id: Optional[str] = None,
) -> None:
    """
    Delete a subscription. When user_id is given only that user's row matches,
    so one user cannot unsubscribe another.
    """
    stmt = select(Subscription).where(Subscription.id == subscription_id)
    if user_id is not None:
        stmt = stmt.where(Subscription.user_id == user_id)

    subscription = (await db.execute(stmt)).scalars().first()
    if subscription is None:
        raise NotFoundError(f"Subscription {subscription_id} not found")

    await db.delete(subscription)
    await db.flush()
