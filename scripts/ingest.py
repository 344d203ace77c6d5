"""
ingest.py — course and professor catalogue ingestion script.

Expects a CSV with one row per course offering:
    course_code, course_name, professor
where `professor` is a display name ("Jane Smith" or "Smith") and may be empty.

Usage:
    python scripts/ingest.py --csv data/catalogue.csv            # upsert catalogue
    python scripts/ingest.py --csv data/catalogue.csv --dry-run  # parse, no DB writes
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from course_reviews.database import AsyncSessionLocal, create_all, engine
from course_reviews.models import Course, Professor
from course_reviews.services.reviews import find_professor_by_name, parse_professor_name

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ── Column helpers ───────────────────────────────────────────────────────────


def _parse_code(val: object) -> Optional[int]:
    """Parse a course code; '101', '101.0' and ' 101 ' all give 101."""
    if pd.isna(val):
        return None
    try:
        return int(float(str(val).strip()))
    except ValueError:
        return None


def _parse_text(val: object) -> str:
    if pd.isna(val):
        return ""
    return str(val).strip()


def load_catalogue(csv_path: str) -> pd.DataFrame:
    """Read the CSV, normalise columns, and drop rows without a usable code."""
    df = pd.read_csv(csv_path, dtype=str)
    df.columns = [c.strip().lower() for c in df.columns]

    missing = {"course_code", "course_name"} - set(df.columns)
    if missing:
        raise ValueError(f"CSV is missing required column(s): {sorted(missing)}")
    if "professor" not in df.columns:
        df["professor"] = ""

    df["course_code"] = df["course_code"].map(_parse_code)
    df["course_name"] = df["course_name"].map(_parse_text)
    df["professor"] = df["professor"].map(_parse_text)
    df = df[df["course_code"].notna()].copy()
    df["course_code"] = df["course_code"].astype(int)
    return df


# ── DB helpers ───────────────────────────────────────────────────────────────


async def upsert_course(session: AsyncSession, code: int, name: str) -> bool:
    """Insert or rename a course. Returns True if a new row was created."""
    course = await session.get(Course, code)
    if course is None:
        session.add(Course(code=code, name=name))
        return True
    if name and course.name != name:
        course.name = name
    return False


async def ensure_professor(session: AsyncSession, display_name: str) -> bool:
    """Create the professor unless one with the same name exists. True if created."""
    first_name, last_name = parse_professor_name(display_name)
    if last_name is None:
        return False
    stmt = select(Professor).where(Professor.last_name == last_name)
    if first_name is None:
        stmt = stmt.where(Professor.first_name.is_(None))
        existing = (await session.execute(stmt)).scalars().first()
    else:
        existing = await find_professor_by_name(session, first_name, last_name)
    if existing is not None:
        return False
    session.add(Professor(first_name=first_name, last_name=last_name))
    await session.flush()
    return True


# ── Main ─────────────────────────────────────────────────────────────────────


async def run_ingest(
    csv_path: str,
    dry_run: bool = False,
    session_factory: async_sessionmaker = AsyncSessionLocal,
    bind: AsyncEngine = engine,
) -> dict[str, int]:
    """Upsert courses and professors from csv_path; returns the counts added."""
    df = load_catalogue(csv_path)
    logger.info("Loaded %d catalogue row(s) from %s", len(df), csv_path)

    if dry_run:
        logger.info(
            "Dry run: %d course(s), %d professor name(s). No DB writes.",
            df["course_code"].nunique(),
            df.loc[df["professor"] != "", "professor"].nunique(),
        )
        return {"courses_added": 0, "professors_added": 0}

    await create_all(bind)

    courses_added = professors_added = 0
    async with session_factory() as session:
        for code, name in (
            df.drop_duplicates("course_code")[["course_code", "course_name"]]
            .itertuples(index=False)
        ):
            if await upsert_course(session, int(code), name):
                courses_added += 1

        for display_name in df.loc[df["professor"] != "", "professor"].unique():
            if await ensure_professor(session, display_name):
                professors_added += 1

        await session.commit()

    logger.info(
        "Ingestion complete. Courses added: %d, Professors added: %d",
        courses_added, professors_added,
    )
    return {"courses_added": courses_added, "professors_added": professors_added}


async def _run(csv_path: str, dry_run: bool) -> None:
    try:
        await run_ingest(csv_path=csv_path, dry_run=dry_run)
    finally:
        await engine.dispose()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Ingest a course/professor catalogue CSV.")
    parser.add_argument("--csv", required=True, help="Path to catalogue.csv")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, no DB writes")
    args = parser.parse_args()

    asyncio.run(_run(args.csv, args.dry_run))


if __name__ == "__main__":
    main()
