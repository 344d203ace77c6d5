"""Pydantic schemas for subscriptions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from course_reviews.schemas.review import CourseRead, ProfessorRead, ReviewRead


class SubscriptionCreate(BaseModel):
    """
    Body for POST /subscriptions. Exactly one target must be given; the store
    enforces this so the rule holds for every caller, not only HTTP.
    """

    course_code: Optional[int] = None
    professor_id: Optional[int] = None
    review_id: Optional[int] = None


class SubscriptionRead(BaseModel):
    """A stored subscription."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    course_code: Optional[int]
    professor_id: Optional[int]
    review_id: Optional[int]
    created_at: datetime


class SubscriptionDetail(SubscriptionRead):
    """A subscription with whichever target it follows. Requires the relations loaded."""

    course: Optional[CourseRead] = None
    professor: Optional[ProfessorRead] = None
    review: Optional[ReviewRead] = None
