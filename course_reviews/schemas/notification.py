"""Pydantic schemas for notifications."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from course_reviews.schemas.review import ReviewDetail, VoteRead


class NotificationRead(BaseModel):
    """
    A notification as shown to its recipient, enriched with the review it is
    about (including that review's course and professor) and the vote, if any.
    """

    id: int
    recipient_id: str
    course_code: Optional[int] = None
    professor_id: Optional[int] = None
    review_id: Optional[int] = None
    vote_id: Optional[int] = None
    created_review_id: Optional[int] = None
    read: bool
    created_at: datetime

    review: Optional[ReviewDetail] = None
    vote: Optional[VoteRead] = None

    @classmethod
    def from_notification(cls, notification) -> "NotificationRead":
        """Build from an ORM Notification whose review/vote relations are loaded."""
        review = notification.subject_review
        return cls(
            id=notification.id,
            recipient_id=notification.recipient_id,
            course_code=notification.course_code,
            professor_id=notification.professor_id,
            review_id=notification.review_id,
            vote_id=notification.vote_id,
            created_review_id=notification.created_review_id,
            read=notification.read,
            created_at=notification.created_at,
            review=ReviewDetail.model_validate(review) if review is not None else None,
            vote=(
                VoteRead.model_validate(notification.vote)
                if notification.vote is not None
                else None
            ),
        )


class ReadAllResponse(BaseModel):
    """Response for POST /notifications/read-all."""

    recipient_id: str
    updated: int
