"""SQLAlchemy ORM models package."""

from course_reviews.database import Base
from course_reviews.models.catalogue import Course, Professor
from course_reviews.models.review import Review, Vote
from course_reviews.models.subscription import Subscription
from course_reviews.models.notification import Notification

__all__ = [
    "Base", "Course", "Professor", "Review", "Vote",
    "Subscription", "Notification",
]
