"""
Shared fixtures: a fresh in-memory SQLite database per test, seeded with a
small catalogue, plus helpers for building review forms.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from course_reviews.database import build_engine, create_all
from course_reviews.models import Course, Professor, Vote
from course_reviews.schemas.review import ReviewForm
from course_reviews.services.reviews import insert_review


@pytest.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def catalogue(db):
    """Two courses and two professors; returns them keyed by short name."""
    intro = Course(code=101, name="Intro to CS")
    systems = Course(code=202, name="Systems Programming")
    smith = Professor(first_name="JANE", last_name="SMITH")
    turing = Professor(first_name="ALAN", last_name="TURING")
    db.add_all([intro, systems, smith, turing])
    await db.commit()
    return {"intro": intro, "systems": systems, "smith": smith, "turing": turing}


def make_form(**overrides) -> ReviewForm:
    """A valid review form as the browser posts it: every value a string."""
    data = {
        "professor": "Jane Smith",
        "course": "101 Intro to CS",
        "year": "2024",
        "term": "1",
        "title": "Solid first course",
        "content": "Clear lectures and fair exams.",
        "courseRating": "4",
        "courseDifficultyRating": "3",
        "courseWorkload": "3",
        "professorRating": "5",
        "professorDifficultyRating": "2",
        "lectureRating": "4",
    }
    data.update(overrides)
    return ReviewForm.model_validate(data)


@pytest.fixture
def review_form():
    return make_form


@pytest.fixture
async def posted_review(db, catalogue):
    """A stored review of course 101 by "author", without professor or subscriptions."""
    review = await insert_review(
        db,
        user_id="author",
        course_code=101,
        professor_id=None,
        year=2024,
        semester=1,
        title="Posted",
        content="Already on the site.",
        rating=4,
        difficulty_rating=3,
        workload=3,
        professor_quality_rating=4,
        professor_difficulty_rating=2,
        lecture_rating=4,
    )
    await db.commit()
    return review


@pytest.fixture
def add_vote(db):
    """Store a vote directly, bypassing fan-out."""

    async def _add(review_id: int, voter_id: str, upvote: bool = True) -> Vote:
        vote = Vote(review_id=review_id, voter_id=voter_id, upvote=upvote)
        db.add(vote)
        await db.commit()
        return vote

    return _add
