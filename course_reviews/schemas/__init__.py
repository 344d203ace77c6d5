"""Pydantic schemas package."""

from course_reviews.schemas.review import (
    CourseRead,
    DeletedReview,
    ProfessorRead,
    ReviewDetail,
    ReviewForm,
    ReviewRead,
    ReviewSort,
    VoteRead,
    VoteRequest,
    VoteResult,
)
from course_reviews.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionDetail,
    SubscriptionRead,
)
from course_reviews.schemas.notification import NotificationRead, ReadAllResponse

__all__ = [
    "CourseRead", "DeletedReview", "ProfessorRead", "ReviewDetail", "ReviewForm", "ReviewRead",
    "ReviewSort", "VoteRead", "VoteRequest", "VoteResult",
    "SubscriptionCreate", "SubscriptionDetail", "SubscriptionRead",
    "NotificationRead", "ReadAllResponse",
]
