"""Async engine, session factory and the FastAPI session dependency."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from app import models  # noqa: F401  (registers tables on SQLModel.metadata)
from app.core.config import BACKEND_ROOT, settings
from app.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)

ALEMBIC_INI = BACKEND_ROOT / "alembic.ini"

engine = create_async_engine(settings.database_url, echo=settings.db_echo, pool_pre_ping=True)
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        yield session


def _run_migrations(ini_path: Path) -> None:
    from alembic import command
    from alembic.config import Config

    config = Config(str(ini_path), attributes={"configure_logger": False})
    config.set_main_option("script_location", str(BACKEND_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(config, "head")


async def init_db() -> None:
    if not settings.db_auto_migrate:
        return
    logger.info("db.migrate.start")
    # env.py drives its own event loop, so keep it off the app loop.
    await asyncio.to_thread(_run_migrations, ALEMBIC_INI)
    logger.info("db.migrate.done")
