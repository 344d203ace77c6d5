"""Subscription endpoints — follow and unfollow courses, professors, and reviews."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.database import get_db
from course_reviews.exceptions import ReviewServiceError
from course_reviews.routers.deps import current_user_id, to_http_error
from course_reviews.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionDetail,
    SubscriptionRead,
)
from course_reviews.services.subscriptions import (
    create_subscription,
    delete_subscription,
    find_subscriptions_by_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("", response_model=list[SubscriptionDetail])
async def subscriptions(
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[SubscriptionDetail]:
    """The caller's subscriptions with the followed course, professor, or review."""
    rows = await find_subscriptions_by_user(db, user_id)
    return [SubscriptionDetail.model_validate(s) for s in rows]


@router.post("", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
async def subscribe(
    body: SubscriptionCreate,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> SubscriptionRead:
    """Subscribe to exactly one course, professor, or review (idempotent)."""
    try:
        subscription = await create_subscription(
            db,
            user_id,
            course_code=body.course_code,
            professor_id=body.professor_id,
            review_id=body.review_id,
        )
        await db.commit()
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
    return SubscriptionRead.model_validate(subscription)


@router.delete("/{subscription_id}")
async def unsubscribe(
    subscription_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await delete_subscription(db, subscription_id, user_id=user_id)
        await db.commit()
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
