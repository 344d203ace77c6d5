"""
Vote store — one vote per (voter, review), with toggle semantics.

  no vote yet       → create it, notify review subscribers
  same direction    → remove it, withdraw the notifications it produced
  other direction   → flip it; old notifications withdrawn, new ones sent
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.exceptions import ValidationError
from course_reviews.models import Vote
from course_reviews.schemas.review import VoteResult
from course_reviews.services.fan_out import notify_review_vote_removed, notify_review_voted
from course_reviews.services.notifications import delete_notifications_for_vote
from course_reviews.services.reviews import get_review

logger = logging.getLogger(__name__)


async def find_vote(db: AsyncSession, voter_id: str, review_id: int) -> Optional[Vote]:
    result = await db.execute(
        select(Vote).where(Vote.voter_id == voter_id, Vote.review_id == review_id)
    )
    return result.scalars().first()


async def _cast_vote(
    db: AsyncSession, voter_id: str, review_id: int, upvote: bool
) -> VoteResult:
    if not voter_id:
        raise ValidationError("Must provide voter_id to vote")
    await get_review(db, review_id)

    vote = await find_vote(db, voter_id, review_id)

    if vote is None:
        vote = Vote(review_id=review_id, voter_id=voter_id, upvote=upvote)
        db.add(vote)
        await db.flush()
        await notify_review_voted(db, review_id, vote.id)
        return VoteResult(
            review_id=review_id, vote_id=vote.id, upvote=upvote, action="created"
        )

    if vote.upvote == upvote:
        vote_id = vote.id
        await notify_review_vote_removed(db, review_id, vote_id)
        await delete_notifications_for_vote(db, vote_id)
        await db.execute(delete(Vote).where(Vote.id == vote_id))
        logger.debug("Vote %s withdrawn by %s on review %s", vote_id, voter_id, review_id)
        return VoteResult(review_id=review_id, action="removed")

    await notify_review_vote_removed(db, review_id, vote.id)
    await delete_notifications_for_vote(db, vote.id)
    vote.upvote = upvote
    await db.flush()
    await notify_review_voted(db, review_id, vote.id)
    return VoteResult(
        review_id=review_id, vote_id=vote.id, upvote=upvote, action="changed"
    )


async def upvote_review(db: AsyncSession, voter_id: str, review_id: int) -> VoteResult:
    return await _cast_vote(db, voter_id, review_id, upvote=True)


async def downvote_review(db: AsyncSession, voter_id: str, review_id: int) -> VoteResult:
    return await _cast_vote(db, voter_id, review_id, upvote=False)
