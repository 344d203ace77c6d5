"""Subscription ORM model — a user following one course, professor, or review."""

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from course_reviews.database import Base
from course_reviews.models.review import utcnow


class Subscription(Base):
    """
    Exactly one of course_code, professor_id, review_id is set. The store
    validates this before insert; the check constraint backs it up.
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint(
            "CAST(course_code IS NOT NULL AS INTEGER)"
            " + CAST(professor_id IS NOT NULL AS INTEGER)"
            " + CAST(review_id IS NOT NULL AS INTEGER) = 1",
            name="ck_subscriptions_single_target",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)

    course_code = Column(
        Integer,
        ForeignKey("courses.code", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    professor_id = Column(
        Integer,
        ForeignKey("professors.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    review_id = Column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    # Relationships
    course = relationship("Course")
    professor = relationship("Professor")
    review = relationship("Review")
