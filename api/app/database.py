"""Async engine, session factory and startup migrations."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from alembic import command
from alembic.config import Config
from app.config import settings

logger = logging.getLogger(__name__)

API_ROOT = Path(__file__).resolve().parents[1]


def engine_options(url: str) -> dict[str, Any]:
    """Pool settings for a database URL; SQLite gets the driver defaults."""
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
    }


engine = create_async_engine(settings.database_url, echo=False, **engine_options(settings.database_url))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


def alembic_config(db_url: str) -> Config:
    config = Config(str(API_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(API_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", db_url)
    return config


async def init_db(db_url: str | None = None) -> None:
    """
    Bring the schema up to the latest Alembic revision.

    Alembic's command API is synchronous and drives its own event loop in
    env.py, so it runs in a worker thread. Set RUN_MIGRATIONS=false when
    migrations are applied by a separate deploy step.
    """
    if not settings.run_migrations:
        logger.info("Skipping startup migrations")
        return
    url = db_url or settings.database_url
    logger.info("Upgrading database schema to head")
    await asyncio.to_thread(command.upgrade, alembic_config(url), "head")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; committed on success, rolled back when the handler raises."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
