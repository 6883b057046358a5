"""
VideoTube Backend - Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       per-request session dependency.
How:   One engine with a connection pool is created at import time. Each
       request gets its own AsyncSession that commits when the handler
       returns and rolls back when it raises.
Who:   Routes receive sessions via Depends(get_db_session); services receive
       them as their first argument.

Connection Pooling:
    pool_size=20, max_overflow=10   at most 30 connections per worker
    pool_pre_ping                   validates connections after DB restarts
    pool_recycle=3600               recycles connections every hour
"""

from typing import AsyncGenerator

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=3600,
    echo=settings.log_level == "DEBUG",
)

# expire_on_commit=False: response schemas read attributes after the
# dependency has committed; expired attributes would trigger lazy IO
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Deterministic constraint names so Alembic migrations can drop them by name
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Every model registers its table on this shared metadata, which Alembic
    reads for --autogenerate.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Commits when the route handler finishes without raising, rolls back
    otherwise, and always returns the connection to the pool. Exceptions are
    re-raised so the global handlers can build the error envelope.

    Example usage in a route:
        @router.get("/videos/{video_id}")
        async def get_video(video_id: str, db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_database() -> bool:
    """Run SELECT 1 against the pool; used by the health check."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


async def dispose_engine() -> None:
    """Close every pooled connection. Called on application shutdown."""
    await engine.dispose()
