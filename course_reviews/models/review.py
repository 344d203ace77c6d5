"""Review and Vote ORM models."""

from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, SmallInteger, Text, Boolean,
    TIMESTAMP, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from course_reviews.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Review(Base):
    """
    A student's review of a course, optionally tied to the professor who taught it.
    professor_id is NULL when the professor named on the form did not resolve.
    """

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    course_code = Column(
        Integer, ForeignKey("courses.code"), nullable=False, index=True
    )
    professor_id = Column(
        Integer, ForeignKey("professors.id"), nullable=True, index=True
    )

    year = Column(Integer, nullable=False)
    semester = Column(SmallInteger, nullable=False)   # term code
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)

    # Ratings on the configured scale (default 1–5)
    rating = Column(SmallInteger, nullable=False)
    difficulty_rating = Column(SmallInteger, nullable=False)
    workload = Column(SmallInteger, nullable=False)
    professor_quality_rating = Column(SmallInteger, nullable=False)
    professor_difficulty_rating = Column(SmallInteger, nullable=False)
    lecture_rating = Column(SmallInteger, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    last_modified = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    # Relationships
    course = relationship("Course", back_populates="reviews")
    professor = relationship("Professor", back_populates="reviews")
    votes = relationship("Vote", back_populates="review")


class Vote(Base):
    """An up- or downvote cast on a review. One per (voter, review)."""

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("voter_id", "review_id", name="uq_votes_voter_review"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    voter_id = Column(Text, nullable=False)
    upvote = Column(Boolean, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    review = relationship("Review", back_populates="votes")
