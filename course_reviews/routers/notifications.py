"""Notification endpoints — the caller's inbox."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.database import get_db
from course_reviews.exceptions import ReviewServiceError
from course_reviews.routers.deps import current_user_id, to_http_error
from course_reviews.schemas.notification import NotificationRead, ReadAllResponse
from course_reviews.services.notifications import (
    count_unread_notifications,
    delete_notification,
    mark_all_notifications_read,
    mark_notification_read,
)
from course_reviews.services.review_actions import get_notifications

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
async def notifications(
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[NotificationRead]:
    """All of the caller's notifications, newest first."""
    return await get_notifications(db, user_id)


@router.get("/unread-count")
async def unread_count(
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return {"recipient_id": user_id, "unread": await count_unread_notifications(db, user_id)}


@router.post("/read-all", response_model=ReadAllResponse)
async def read_all(
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ReadAllResponse:
    updated = await mark_all_notifications_read(db, user_id)
    await db.commit()
    return ReadAllResponse(recipient_id=user_id, updated=updated)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def read(
    notification_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await mark_notification_read(db, notification_id, user_id)
        await db.commit()
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}")
async def dismiss(
    notification_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete one of the caller's notifications."""
    try:
        await delete_notification(db, notification_id, recipient_id=user_id)
        await db.commit()
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
