"""Catalogue store — the courses and professors a review form picks from."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import String, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from course_reviews.models import Course, Professor


async def list_courses(db: AsyncSession, search: Optional[str] = None) -> list[Course]:
    """All courses by code. search matches the name, or the code as a prefix."""
    stmt = select(Course)
    if search:
        stmt = stmt.where(
            or_(
                Course.name.ilike(f"%{search}%"),
                cast(Course.code, String).like(f"{search}%"),
            )
        )
    result = await db.execute(stmt.order_by(Course.code))
    return list(result.scalars().all())


async def list_professors(
    db: AsyncSession, search: Optional[str] = None
) -> list[Professor]:
    """All professors by last then first name. search matches either name."""
    stmt = select(Professor)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(Professor.first_name.ilike(pattern), Professor.last_name.ilike(pattern))
        )
    result = await db.execute(
        stmt.order_by(Professor.last_name, Professor.first_name, Professor.id)
    )
    return list(result.scalars().all())
