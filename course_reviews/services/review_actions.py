"""
Review actions — the operations request handlers call.

Each action is one sequential unit of work over the caller's session:
validate, write, auto-subscribe, fan out, commit. Errors propagate to the
caller untouched; nothing is retried.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.exceptions import ValidationError
from course_reviews.models import Review
from course_reviews.schemas.notification import NotificationRead
from course_reviews.schemas.review import DeletedReview, ReviewForm, VoteResult
from course_reviews.services.fan_out import (
    notify_course_review_created,
    notify_professor_review_created,
)
from course_reviews.services.notifications import find_notifications_by_recipient
from course_reviews.services.reviews import (
    delete_review_record,
    find_professor_by_name,
    get_review,
    insert_review,
    parse_course_code,
    parse_professor_name,
    update_review_record,
)
from course_reviews.services.subscriptions import create_subscription
from course_reviews.services.votes import downvote_review, upvote_review

logger = logging.getLogger(__name__)


def _rating_fields(form: ReviewForm) -> dict[str, int]:
    """Map form rating names onto Review columns."""
    return {
        "rating": form.course_rating,
        "difficulty_rating": form.course_difficulty_rating,
        "workload": form.course_workload,
        "professor_quality_rating": form.professor_rating,
        "professor_difficulty_rating": form.professor_difficulty_rating,
        "lecture_rating": form.lecture_rating,
    }


async def create_review(db: AsyncSession, form: ReviewForm, user_id: str) -> Review:
    """
    Create a review and subscribe its author to it.

    1. Resolve the professor from the display name (absent if unmatched)
    2. Parse the course code from the course label
    3. Insert the review; CreationError stops here, before any subscription
    4. Auto-subscribe the author to the new review, commit
    5. Fan out to course subscribers, then professor subscribers when resolved
    """
    if not user_id:
        raise ValidationError("Must provide user_id to create review")

    first_name, last_name = parse_professor_name(form.professor)
    course_code = parse_course_code(form.course)

    professor = (
        await find_professor_by_name(db, first_name, last_name) if last_name else None
    )
    professor_id = professor.id if professor is not None else None
    if professor_id is None:
        logger.info(
            "Professor %r not found; review will have no professor", form.professor
        )

    review = await insert_review(
        db,
        user_id=user_id,
        course_code=course_code,
        professor_id=professor_id,
        year=form.year,
        semester=form.term,
        title=form.title,
        content=form.content,
        **_rating_fields(form),
    )

    await create_subscription(db, user_id, review_id=review.id)
    await db.commit()
    logger.info("Review %s created by %s (course=%s)", review.id, user_id, course_code)

    await notify_course_review_created(db, course_code, review.id)
    if professor_id is not None:
        await notify_professor_review_created(db, professor_id, review.id)
    await db.commit()

    return review


async def update_review(db: AsyncSession, review_id: int, form: ReviewForm) -> Review:
    """Overwrite title, content, and ratings; last_modified moves in the same write."""
    review = await update_review_record(
        db,
        review_id,
        title=form.title,
        content=form.content,
        **_rating_fields(form),
    )
    await db.commit()
    return review


async def vote(
    db: AsyncSession, user_id: str, review_id: int, upvote: bool
) -> VoteResult:
    """Cast, flip, or withdraw user_id's vote on a review."""
    cast = upvote_review if upvote else downvote_review
    result = await cast(db, user_id, review_id)
    await db.commit()
    return result


async def delete_review(db: AsyncSession, review_id: int) -> DeletedReview:
    """Delete a review with its votes, subscriptions, and notifications."""
    review = await get_review(db, review_id)
    snapshot = DeletedReview.model_validate(review)

    await delete_review_record(db, review_id)
    await db.commit()
    logger.info("Review %s deleted", review_id)
    return snapshot


async def get_notifications(db: AsyncSession, user_id: str) -> list[NotificationRead]:
    """A user's notifications, newest first, each with its review and vote."""
    notifications = await find_notifications_by_recipient(db, user_id)
    return [NotificationRead.from_notification(n) for n in notifications]
