"""Tests for the course and professor listings."""

from course_reviews.models import Course, Professor
from course_reviews.services.catalogue import list_courses, list_professors


async def test_list_courses_orders_by_code(db, catalogue):
    db.add(Course(code=55, name="Discrete Math"))
    await db.commit()

    assert [c.code for c in await list_courses(db)] == [55, 101, 202]


async def test_list_courses_search_matches_name_or_code_prefix(db, catalogue):
    assert [c.code for c in await list_courses(db, search="systems")] == [202]
    assert [c.code for c in await list_courses(db, search="10")] == [101]
    assert await list_courses(db, search="biology") == []


async def test_list_professors_orders_by_name(db, catalogue):
    db.add(Professor(first_name="ADA", last_name="LOVELACE"))
    db.add(Professor(first_name=None, last_name="HOPPER"))
    await db.commit()

    names = [p.last_name for p in await list_professors(db)]
    assert names == ["HOPPER", "LOVELACE", "SMITH", "TURING"]


async def test_list_professors_search(db, catalogue):
    found = await list_professors(db, search="jan")
    assert [p.id for p in found] == [catalogue["smith"].id]

    assert [p.last_name for p in await list_professors(db, search="Turing")] == ["TURING"]
    assert await list_professors(db, search="nobody") == []
