"""Pydantic schemas for reviews, votes, and the catalogue entities they embed."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from course_reviews.config import settings

ReviewSort = Literal["newest", "oldest", "upvotes", "downvotes"]


class ReviewForm(BaseModel):
    """
    Body for POST /reviews and PUT /reviews/{id}: the review form as submitted.

    The form posts every field as a string; numeric fields are coerced here.
    `professor` is a display name ("Jane Smith" or "Smith") and `course` is the
    course label whose leading token is the numeric code ("101 Intro to CS").
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    professor: str = ""
    course: str = Field(..., min_length=1)
    year: int
    term: int
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)

    course_rating: int = Field(..., alias="courseRating")
    course_difficulty_rating: int = Field(..., alias="courseDifficultyRating")
    course_workload: int = Field(..., alias="courseWorkload")
    professor_rating: int = Field(..., alias="professorRating")
    professor_difficulty_rating: int = Field(..., alias="professorDifficultyRating")
    lecture_rating: int = Field(..., alias="lectureRating")

    @field_validator(
        "course_rating",
        "course_difficulty_rating",
        "course_workload",
        "professor_rating",
        "professor_difficulty_rating",
        "lecture_rating",
    )
    @classmethod
    def _rating_on_scale(cls, value: int) -> int:
        if not settings.rating_min <= value <= settings.rating_max:
            raise ValueError(
                f"rating must be between {settings.rating_min} and {settings.rating_max}"
            )
        return value


class CourseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: int
    name: str


class ProfessorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: Optional[str] = None
    last_name: str


class ReviewRead(BaseModel):
    """A stored review, scalar columns only."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    course_code: int
    professor_id: Optional[int]
    year: int
    semester: int
    title: str
    content: str
    rating: int
    difficulty_rating: int
    workload: int
    professor_quality_rating: int
    professor_difficulty_rating: int
    lecture_rating: int
    created_at: datetime
    last_modified: datetime


class ReviewDetail(ReviewRead):
    """A review with its course and professor. Requires both relations loaded."""

    course: Optional[CourseRead] = None
    professor: Optional[ProfessorRead] = None


class DeletedReview(BaseModel):
    """Snapshot of a review returned after it has been deleted."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    course_code: int
    professor_id: Optional[int]
    title: str
    created_at: datetime


class VoteRequest(BaseModel):
    """Body for POST /reviews/{id}/vote."""

    upvote: bool


class VoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    review_id: int
    voter_id: str
    upvote: bool


class VoteResult(BaseModel):
    """
    Outcome of casting a vote. Voting the same way twice removes the vote,
    so vote_id/upvote are None when action == "removed".
    """

    review_id: int
    vote_id: Optional[int] = None
    upvote: Optional[bool] = None
    action: Literal["created", "changed", "removed"]
