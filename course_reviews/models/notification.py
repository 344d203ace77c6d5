"""Notification ORM model — one durable row per recipient per event."""

from sqlalchemy import Column, Integer, Text, Boolean, TIMESTAMP, ForeignKey
from sqlalchemy.orm import relationship

from course_reviews.database import Base
from course_reviews.models.review import utcnow


class Notification(Base):
    """
    Target (exactly one): course_code | professor_id | review_id, the entity the
    recipient subscribed to.
    Modifiers (optional): vote_id for vote events on a review, created_review_id
    for a new review posted under a course or professor.
    """

    __tablename__ = "notifications"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipient_id = Column(Text, nullable=False, index=True)

    course_code = Column(
        Integer, ForeignKey("courses.code", ondelete="CASCADE"), nullable=True
    )
    professor_id = Column(
        Integer, ForeignKey("professors.id", ondelete="CASCADE"), nullable=True
    )
    review_id = Column(
        Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=True
    )
    vote_id = Column(
        Integer, ForeignKey("votes.id", ondelete="CASCADE"), nullable=True, index=True
    )
    created_review_id = Column(
        Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=True
    )

    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    # Relationships
    course = relationship("Course")
    professor = relationship("Professor")
    review = relationship("Review", foreign_keys=[review_id])
    created_review = relationship("Review", foreign_keys=[created_review_id])
    vote = relationship("Vote")

    @property
    def subject_review(self):
        """The review this notification is about, whichever column carries it."""
        return self.review if self.review_id is not None else self.created_review
