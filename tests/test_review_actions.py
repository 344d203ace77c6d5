"""Tests for the review action layer: create, update, delete, and the inbox."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as FormValidationError
from sqlalchemy import event, func, select

from course_reviews.exceptions import CreationError, NotFoundError, ValidationError
from course_reviews.models import Notification, Review, Subscription, Vote
from course_reviews.services import review_actions, reviews
from course_reviews.services.review_actions import (
    create_review,
    delete_review,
    get_notifications,
    update_review,
    vote,
)
from course_reviews.services.subscriptions import (
    create_subscription,
    find_subscriptions_by_review,
)


async def _count(db, model, *where):
    result = await db.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar()


async def test_create_resolves_professor_and_course(db, catalogue, review_form):
    review = await create_review(db, review_form(professor="jane smith"), "alice")

    assert review.course_code == 101
    assert review.professor_id == catalogue["smith"].id
    assert review.year == 2024 and review.semester == 1
    assert review.rating == 4 and review.professor_quality_rating == 5


async def test_create_subscribes_the_author(db, catalogue, review_form):
    review = await create_review(db, review_form(), "alice")

    subscribers = await find_subscriptions_by_review(db, review.id)
    assert [s.user_id for s in subscribers] == ["alice"]


async def test_create_fans_out_to_course_and_professor(db, catalogue, review_form):
    smith_id = catalogue["smith"].id
    await create_subscription(db, "bob", course_code=101)
    await create_subscription(db, "carol", course_code=101)
    await create_subscription(db, "dave", professor_id=smith_id)
    await create_subscription(db, "erin", course_code=202)
    await db.commit()

    review = await create_review(db, review_form(), "alice")

    course_rows = await _count(
        db, Notification,
        Notification.course_code == 101,
        Notification.created_review_id == review.id,
    )
    professor_rows = await _count(
        db, Notification,
        Notification.professor_id == smith_id,
        Notification.created_review_id == review.id,
    )
    assert course_rows == 2
    assert professor_rows == 1
    assert await _count(db, Notification, Notification.recipient_id == "erin") == 0


async def test_single_token_professor_matches_last_name(db, catalogue, review_form):
    review = await create_review(db, review_form(professor="Turing"), "alice")
    assert review.professor_id == catalogue["turing"].id


async def test_unresolved_professor_skips_professor_fan_out(
    db, catalogue, review_form, monkeypatch
):
    calls = []

    async def spy(db_, professor_id, review_id):
        calls.append(professor_id)

    monkeypatch.setattr(review_actions, "notify_professor_review_created", spy)

    review = await create_review(db, review_form(professor="Nobody Known"), "alice")

    assert review.professor_id is None
    assert calls == []


async def test_failed_insert_stops_before_subscription_and_fan_out(
    db, catalogue, review_form, monkeypatch
):
    calls = []

    async def failing_insert(db_, **fields):
        raise CreationError("Failed to create review")

    async def record(*args, **kwargs):
        calls.append(args)

    monkeypatch.setattr(review_actions, "insert_review", failing_insert)
    monkeypatch.setattr(review_actions, "create_subscription", record)
    monkeypatch.setattr(review_actions, "notify_course_review_created", record)
    monkeypatch.setattr(review_actions, "notify_professor_review_created", record)

    with pytest.raises(CreationError):
        await create_review(db, review_form(), "alice")

    assert calls == []
    assert await _count(db, Review) == 0


async def test_create_rejects_bad_course_label(db, catalogue, review_form):
    with pytest.raises(ValidationError):
        await create_review(db, review_form(course="Intro to CS"), "alice")
    assert await _count(db, Review) == 0


async def test_create_requires_author(db, catalogue, review_form):
    with pytest.raises(ValidationError):
        await create_review(db, review_form(), "")


def test_rating_outside_scale_is_rejected(review_form):
    with pytest.raises(FormValidationError):
        review_form(courseRating="6")
    with pytest.raises(FormValidationError):
        review_form(lectureRating="0")


async def test_update_writes_fields_and_timestamp_once(
    db, engine, catalogue, review_form, monkeypatch
):
    review = await create_review(db, review_form(), "alice")
    stamp = datetime(2030, 1, 1, tzinfo=timezone.utc)
    monkeypatch.setattr(reviews, "utcnow", lambda: stamp)

    updates = []

    def count_updates(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("UPDATE REVIEWS"):
            updates.append(statement)

    event.listen(engine.sync_engine, "before_cursor_execute", count_updates)
    try:
        updated = await update_review(
            db,
            review.id,
            review_form(title="Revised", content="Changed my mind", courseRating="2"),
        )
    finally:
        event.remove(engine.sync_engine, "before_cursor_execute", count_updates)

    assert updated.title == "Revised"
    assert updated.content == "Changed my mind"
    assert updated.rating == 2
    assert updated.last_modified == stamp
    assert len(updates) == 1
    assert "last_modified" in updates[0]


async def test_update_missing_review(db, catalogue, review_form):
    with pytest.raises(NotFoundError):
        await update_review(db, 999, review_form())


async def test_delete_removes_dependents(db, catalogue, review_form):
    await create_subscription(db, "bob", course_code=101)
    await db.commit()
    review = await create_review(db, review_form(), "alice")
    keeper = await create_review(db, review_form(title="Keep me"), "carol")
    await vote(db, "bob", review.id, upvote=True)
    await vote(db, "bob", keeper.id, upvote=False)

    deleted = await delete_review(db, review.id)

    assert deleted.id == review.id
    assert deleted.title == "Solid first course"
    assert await _count(db, Review, Review.id == review.id) == 0
    assert await _count(db, Vote, Vote.review_id == review.id) == 0
    assert await _count(db, Subscription, Subscription.review_id == review.id) == 0
    assert await _count(db, Notification, Notification.review_id == review.id) == 0
    assert await _count(db, Notification, Notification.created_review_id == review.id) == 0

    assert await _count(db, Vote, Vote.review_id == keeper.id) == 1
    assert await _count(db, Notification, Notification.created_review_id == keeper.id) == 1

    with pytest.raises(NotFoundError):
        await delete_review(db, review.id)


async def test_get_notifications_enriches_review_and_vote(
    db, catalogue, review_form, session_factory
):
    await create_subscription(db, "bob", course_code=101)
    await db.commit()
    review = await create_review(db, review_form(), "alice")
    await vote(db, "bob", review.id, upvote=True)

    async with session_factory() as fresh:
        alice_inbox = await get_notifications(fresh, "alice")
        bob_inbox = await get_notifications(fresh, "bob")

    assert len(alice_inbox) == 1
    voted = alice_inbox[0]
    assert voted.vote is not None and voted.vote.upvote is True
    assert voted.review.id == review.id
    assert voted.review.course.name == "Intro to CS"
    assert voted.review.professor.last_name == "SMITH"

    assert len(bob_inbox) == 1
    created = bob_inbox[0]
    assert created.course_code == 101
    assert created.vote is None
    assert created.review.id == review.id
    assert created.read is False
