"""Thin persistence helpers shared by the service layer.

Every helper that commits rolls the session back and raises `StoreError` when
the database rejects the write, so callers never see a half-applied unit of work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel

from app.core.errors import ConflictError, StoreError
from app.core.logging import get_logger

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

ModelT = TypeVar("ModelT", bound=SQLModel)

logger = get_logger(__name__)


async def get_by_id(session: AsyncSession, model: type[ModelT], obj_id: object) -> ModelT | None:
    try:
        return await session.get(model, obj_id)
    except SQLAlchemyError as exc:
        logger.exception("store.get_failed model=%s id=%s", model.__name__, obj_id)
        raise StoreError("Failed to load record") from exc


async def fetch_all(session: AsyncSession, statement: Any) -> list[Any]:
    try:
        return list(await session.exec(statement))
    except SQLAlchemyError as exc:
        logger.exception("store.query_failed error_type=%s", exc.__class__.__name__)
        raise StoreError("Failed to load records") from exc


async def fetch_first(session: AsyncSession, statement: Any) -> Any | None:
    rows = await fetch_all(session, statement.limit(1))
    return rows[0] if rows else None


async def execute(session: AsyncSession, statement: Any) -> None:
    """Run a bulk statement inside the current unit of work (no commit)."""
    try:
        await session.execute(statement)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("store.execute_failed error_type=%s", exc.__class__.__name__)
        raise StoreError() from exc


async def commit(session: AsyncSession, *, conflict_message: str | None = None) -> None:
    """Commit the unit of work.

    With `conflict_message`, integrity violations surface as `ConflictError`.
    """
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if conflict_message is None:
            logger.exception("store.commit_failed error_type=IntegrityError")
            raise StoreError() from exc
        logger.info("store.commit_conflict detail=%s", conflict_message)
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("store.commit_failed error_type=%s", exc.__class__.__name__)
        raise StoreError() from exc


async def create(
    session: AsyncSession,
    model: type[ModelT],
    *,
    conflict_message: str | None = None,
    **data: Any,
) -> ModelT:
    obj = model(**data)
    session.add(obj)
    await commit(session, conflict_message=conflict_message)
    await session.refresh(obj)
    return obj


async def save(session: AsyncSession, obj: ModelT) -> ModelT:
    session.add(obj)
    await commit(session)
    await session.refresh(obj)
    return obj


async def delete(session: AsyncSession, obj: SQLModel) -> None:
    await session.delete(obj)
    await commit(session)
