"""
Review endpoints — create, edit, vote on, list, and delete reviews.
The caller is identified by the X-User-ID header.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.database import get_db
from course_reviews.exceptions import ReviewServiceError
from course_reviews.routers.deps import current_user_id, to_http_error
from course_reviews.schemas.review import (
    DeletedReview,
    ReviewDetail,
    ReviewForm,
    ReviewRead,
    ReviewSort,
    VoteRequest,
    VoteResult,
)
from course_reviews.services import review_actions
from course_reviews.services.reviews import get_review, list_reviews

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewForm,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ReviewRead:
    """Create a review; the author is subscribed to it automatically."""
    try:
        review = await review_actions.create_review(db, body, user_id)
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
    return ReviewRead.model_validate(review)


@router.get("", response_model=list[ReviewDetail])
async def reviews(
    course_code: Optional[int] = Query(default=None),
    professor_id: Optional[int] = Query(default=None),
    year: Optional[int] = Query(default=None),
    term: Optional[int] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=200),
    sort_by: ReviewSort = Query(default="newest"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> list[ReviewDetail]:
    """Filtered and sorted reviews for a course or professor page."""
    rows = await list_reviews(
        db,
        course_code=course_code,
        professor_id=professor_id,
        year=year,
        term=term,
        search=search,
        sort_by=sort_by,
        limit=limit,
        offset=offset,
    )
    return [ReviewDetail.model_validate(r) for r in rows]


@router.get("/{review_id}", response_model=ReviewDetail)
async def review(
    review_id: int,
    db: AsyncSession = Depends(get_db),
) -> ReviewDetail:
    try:
        found = await get_review(db, review_id, with_relations=True)
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
    return ReviewDetail.model_validate(found)


@router.put("/{review_id}", response_model=ReviewRead)
async def update_review(
    review_id: int,
    body: ReviewForm,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ReviewRead:
    """Edit title, content, and ratings of one of the caller's reviews."""
    try:
        existing = await get_review(db, review_id)
        if existing.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="X-User-ID does not match the review author",
            )
        review = await review_actions.update_review(db, review_id, body)
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
    return ReviewRead.model_validate(review)


@router.post("/{review_id}/vote", response_model=VoteResult)
async def vote(
    review_id: int,
    body: VoteRequest,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> VoteResult:
    """Up- or downvote a review. Repeating the same vote withdraws it."""
    try:
        return await review_actions.vote(db, user_id, review_id, body.upvote)
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc


@router.delete("/{review_id}", response_model=DeletedReview)
async def delete_review(
    review_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
) -> DeletedReview:
    """Delete one of the caller's reviews along with everything that references it."""
    try:
        existing = await get_review(db, review_id)
        if existing.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="X-User-ID does not match the review author",
            )
        return await review_actions.delete_review(db, review_id)
    except ReviewServiceError as exc:
        raise to_http_error(exc) from exc
