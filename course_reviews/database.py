"""Async SQLAlchemy engine, session factory, and Base declaration."""

from typing import Any, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import event, text

from course_reviews.config import settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
    pass


def _engine_options(url: str) -> dict[str, Any]:
    """Pool sizing only applies to server databases; SQLite manages its own pool."""
    options: dict[str, Any] = {
        "echo": settings.app_env == "development",
        "pool_pre_ping": True,
    }
    if not url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20)
    return options


def _configure_sqlite(engine: AsyncEngine) -> None:
    """
    Enforce foreign keys on every SQLite connection, and let SQLAlchemy emit
    BEGIN itself so SAVEPOINTs nest inside a real transaction.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """Create an async engine for url; SQLite engines get FK enforcement."""
    options = _engine_options(url)
    options.update(overrides)
    engine = create_async_engine(url, **options)
    if url.startswith("sqlite"):
        _configure_sqlite(engine)
    return engine


engine: AsyncEngine = build_engine(settings.database_url)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: yields an async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_db_connectivity() -> bool:
    """Return True if a simple SELECT 1 succeeds."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


async def create_all(bind: AsyncEngine = engine) -> None:
    """Create every table registered on Base (IF NOT EXISTS)."""
    # Importing the models package registers the tables on Base.metadata.
    import course_reviews.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
