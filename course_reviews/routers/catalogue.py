"""Catalogue endpoints — course and professor options for the review form."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.database import get_db
from course_reviews.schemas.review import CourseRead, ProfessorRead
from course_reviews.services.catalogue import list_courses, list_professors

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalogue"])


@router.get("/courses", response_model=list[CourseRead])
async def courses(
    search: Optional[str] = Query(default=None, max_length=100),
    db: AsyncSession = Depends(get_db),
) -> list[CourseRead]:
    rows = await list_courses(db, search=search)
    return [CourseRead.model_validate(c) for c in rows]


@router.get("/professors", response_model=list[ProfessorRead])
async def professors(
    search: Optional[str] = Query(default=None, max_length=100),
    db: AsyncSession = Depends(get_db),
) -> list[ProfessorRead]:
    rows = await list_professors(db, search=search)
    return [ProfessorRead.model_validate(p) for p in rows]
