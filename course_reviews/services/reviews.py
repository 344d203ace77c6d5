"""
Review store — professor resolution, review rows, listing, and deletion.

Parsing helpers turn the free-text fields of the review form into the keys the
store understands: a professor display name into (first, last) and a course
label into its numeric code.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import case, delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from course_reviews.exceptions import CreationError, NotFoundError, ValidationError
from course_reviews.models import Notification, Professor, Review, Subscription, Vote
from course_reviews.models.review import utcnow

logger = logging.getLogger(__name__)


# ── Form parsing ─────────────────────────────────────────────────────────────


def parse_professor_name(display_name: str) -> tuple[Optional[str], Optional[str]]:
    """
    Split a professor display name into uppercased (first_name, last_name).

    "Smith"         → (None, "SMITH")
    "Jane Smith"    → ("JANE", "SMITH")
    "Jane Q Smith"  → ("JANE", "Q")   tokens past the second are dropped
    ""              → (None, None)
    """
    tokens = display_name.split()
    if not tokens:
        return None, None
    if len(tokens) == 1:
        return None, tokens[0].upper()
    return tokens[0].upper(), tokens[1].upper()


def parse_course_code(course: str) -> int:
    """Return the leading numeric token of a course label: "101 Intro to CS" → 101."""
    tokens = course.split()
    try:
        return int(tokens[0])
    except (IndexError, ValueError) as exc:
        raise ValidationError(
            f"Course {course!r} does not start with a numeric code"
        ) from exc


# ── Lookups ──────────────────────────────────────────────────────────────────


async def find_professor_by_name(
    db: AsyncSession,
    first_name: Optional[str],
    last_name: str,
) -> Optional[Professor]:
    """
    Case-insensitive exact match on last name, and on first name when given.
    Without a first name any professor with that last name matches.
    """
    stmt = select(Professor).where(func.upper(Professor.last_name) == last_name.upper())
    if first_name is not None:
        stmt = stmt.where(func.upper(Professor.first_name) == first_name.upper())
    result = await db.execute(stmt.order_by(Professor.id).limit(1))
    return result.scalars().first()


async def get_review(
    db: AsyncSession, review_id: int, with_relations: bool = False
) -> Review:
    """Fetch one review or raise NotFoundError."""
    stmt = select(Review).where(Review.id == review_id)
    if with_relations:
        stmt = stmt.options(
            selectinload(Review.course), selectinload(Review.professor)
        )
    review = (await db.execute(stmt)).scalars().first()
    if review is None:
        raise NotFoundError(f"Review {review_id} not found")
    return review


async def list_reviews(
    db: AsyncSession,
    course_code: Optional[int] = None,
    professor_id: Optional[int] = None,
    year: Optional[int] = None,
    term: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: str = "newest",
    limit: int = 50,
    offset: int = 0,
) -> list[Review]:
    """
    Filtered, sorted page of reviews with course and professor loaded.
    sort_by: newest | oldest | upvotes | downvotes (vote sorts break ties newest first).
    """
    stmt = select(Review).options(
        selectinload(Review.course), selectinload(Review.professor)
    )

    if course_code is not None:
        stmt = stmt.where(Review.course_code == course_code)
    if professor_id is not None:
        stmt = stmt.where(Review.professor_id == professor_id)
    if year is not None:
        stmt = stmt.where(Review.year == year)
    if term is not None:
        stmt = stmt.where(Review.semester == term)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Review.title.ilike(pattern), Review.content.ilike(pattern)))

    if sort_by in ("upvotes", "downvotes"):
        counted = Vote.upvote.is_(sort_by == "upvotes")
        tally = func.coalesce(func.sum(case((counted, 1), else_=0)), 0)
        stmt = (
            stmt.outerjoin(Vote, Vote.review_id == Review.id)
            .group_by(Review.id)
            .order_by(tally.desc(), Review.created_at.desc(), Review.id.desc())
        )
    elif sort_by == "oldest":
        stmt = stmt.order_by(Review.created_at.asc(), Review.id.asc())
    elif sort_by == "newest":
        stmt = stmt.order_by(Review.created_at.desc(), Review.id.desc())
    else:
        raise ValidationError(f"Unknown sort {sort_by!r}")

    result = await db.execute(stmt.limit(limit).offset(offset))
    return list(result.scalars().all())


# ── Writes ───────────────────────────────────────────────────────────────────


async def insert_review(db: AsyncSession, **fields: Any) -> Review:
    """Insert a review row; CreationError if the store does not hand one back."""
    review = Review(**fields)
    db.add(review)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Failed to insert review for user %s: %s", fields.get("user_id"), exc)
        raise CreationError("Failed to create review") from exc

    if review.id is None:
        raise CreationError("Failed to create review")
    return review


async def update_review_record(
    db: AsyncSession, review_id: int, **fields: Any
) -> Review:
    """Overwrite fields and stamp last_modified in the same UPDATE."""
    review = await get_review(db, review_id)
    for name, value in fields.items():
        setattr(review, name, value)
    review.last_modified = utcnow()
    await db.flush()
    return review


async def delete_review_record(db: AsyncSession, review_id: int) -> None:
    """
    Delete a review and every row that points at it: notifications about the
    review or its votes, subscriptions to it, and its votes.
    """
    vote_ids = select(Vote.id).where(Vote.review_id == review_id)

    await db.execute(
        delete(Notification).where(
            or_(
                Notification.review_id == review_id,
                Notification.created_review_id == review_id,
                Notification.vote_id.in_(vote_ids),
            )
        )
    )
    await db.execute(delete(Subscription).where(Subscription.review_id == review_id))
    await db.execute(delete(Vote).where(Vote.review_id == review_id))
    result = await db.execute(delete(Review).where(Review.id == review_id))
    if not result.rowcount:
        raise NotFoundError(f"Review {review_id} not found")
