"""Task create/edit/delete/status operations gated by `task_policy`.

Every operation receives the caller's `AuthContext` explicitly, validates and
authorizes before touching the store, and commits once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import delete, or_
from sqlmodel import col, select

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.db import crud
from app.models.projects import Project
from app.models.reviews import Review
from app.models.tasks import (
    TASK_STATUS_APPROVED,
    TASK_STATUS_PENDING,
    TASK_STATUS_REJECTED,
    TASK_STATUSES,
    Task,
)
from app.models.users import User
from app.schemas.tasks import TaskRead
from app.services import task_policy
from app.services.validation import coerce_hours, optional_text, require_text

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession
    from sqlmodel.sql.expression import Select

    from app.core.auth import AuthContext

logger = get_logger(__name__)

TASK_NAME_REQUIRED = "Task name is required"
_EDITABLE_FIELDS = frozenset(
    {"name", "description", "expected_hours", "actual_hours", "status", "rejection_reason"}
)


@dataclass(frozen=True, slots=True)
class TaskFilters:
    project_id: UUID | None = None
    status: str | None = None
    employee_id: UUID | None = None
    search: str | None = None


def _validate_status(value: Any) -> str:
    if value not in TASK_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(TASK_STATUSES)}")
    return str(value)


async def _require_task(session: AsyncSession, task_id: UUID) -> Task:
    task = await crud.get_by_id(session, Task, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task


def _joined_statement() -> Select[Any]:
    return (
        select(Task, Project.name, User.name, User.email)
        .outerjoin(Project, col(Task.project_id) == col(Project.id))
        .outerjoin(User, col(Task.employee_id) == col(User.id))
    )


def to_task_read(
    task: Task,
    project_name: str | None = None,
    employee_name: str | None = None,
    employee_email: str | None = None,
) -> TaskRead:
    model = TaskRead.model_validate(task, from_attributes=True)
    return model.model_copy(
        update={
            "project_name": project_name,
            "employee_name": employee_name,
            "employee_email": employee_email,
        }
    )


def _contains_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _apply_status(task: Task, target: str, *, actor_id: UUID, reason: str | None) -> None:
    task.status = target
    if target == TASK_STATUS_APPROVED:
        task.approved_by = actor_id
        task.approved_at = utcnow()
        task.rejection_reason = None
    elif target == TASK_STATUS_REJECTED:
        task.approved_by = None
        task.approved_at = None
        task.rejection_reason = reason
    else:
        task.approved_by = None
        task.approved_at = None
        task.rejection_reason = None


async def create_task(
    session: AsyncSession,
    auth: AuthContext,
    *,
    project_id: UUID,
    name: Any,
    description: Any = None,
    expected_hours: Any,
    actual_hours: Any,
) -> Task:
    cleaned_name = require_text(name, TASK_NAME_REQUIRED)
    expected = coerce_hours(expected_hours, "Expected hours")
    actual = coerce_hours(actual_hours, "Actual hours")
    cleaned_description = optional_text(description, label="Description")

    project = await crud.get_by_id(session, Project, project_id)
    if project is None:
        raise ValidationError("Project not found")

    task = await crud.create(
        session,
        Task,
        project_id=project.id,
        employee_id=auth.user_id,
        name=cleaned_name,
        description=cleaned_description,
        expected_hours=expected,
        actual_hours=actual,
        status=TASK_STATUS_PENDING,
    )
    logger.info(
        "task.created task_id=%s project_id=%s employee_id=%s",
        task.id,
        task.project_id,
        task.employee_id,
    )
    return task


async def update_task(
    session: AsyncSession,
    auth: AuthContext,
    task_id: UUID,
    updates: dict[str, Any],
) -> Task:
    """Apply a partial update. Only keys present in `updates` are touched."""
    task = await _require_task(session, task_id)
    task_policy.can_edit_task(
        role=auth.role,
        caller_id=auth.user_id,
        owner_id=task.employee_id,
        status=task.status,
    ).enforce()

    unknown = set(updates) - _EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")

    target_status: str | None = None
    if updates.get("status") is not None or "rejection_reason" in updates:
        task_policy.can_change_task_status(role=auth.role).enforce()
    if updates.get("status") is not None:
        target_status = _validate_status(updates["status"])

    changes: dict[str, Any] = {}
    if "name" in updates:
        changes["name"] = require_text(updates["name"], TASK_NAME_REQUIRED)
    if "description" in updates:
        changes["description"] = optional_text(updates["description"], label="Description")
    if "expected_hours" in updates:
        changes["expected_hours"] = coerce_hours(updates["expected_hours"], "Expected hours")
    if "actual_hours" in updates:
        changes["actual_hours"] = coerce_hours(updates["actual_hours"], "Actual hours")
    reason = optional_text(updates.get("rejection_reason"), label="Rejection reason")

    for key, value in changes.items():
        setattr(task, key, value)
    if target_status is not None and target_status != task.status:
        # Administrator override: any state is reachable from the edit form.
        _apply_status(task, target_status, actor_id=auth.user_id, reason=reason)
    elif "rejection_reason" in updates and task.status == TASK_STATUS_REJECTED:
        task.rejection_reason = reason
    task.updated_at = utcnow()

    task = await crud.save(session, task)
    logger.info(
        "task.updated task_id=%s actor_id=%s fields=%s",
        task.id,
        auth.user_id,
        ",".join(sorted(updates)),
    )
    return task


async def transition_task(
    session: AsyncSession,
    auth: AuthContext,
    task_id: UUID,
    target: str,
    *,
    reason: Any = None,
    override: bool = False,
) -> Task:
    task = await _require_task(session, task_id)
    task_policy.can_change_task_status(role=auth.role).enforce()
    _validate_status(target)
    if not task_policy.is_transition_allowed(task.status, target, override=override):
        raise ConflictError(f"Task is already {task.status}")

    cleaned_reason = optional_text(reason, label="Rejection reason")
    _apply_status(task, target, actor_id=auth.user_id, reason=cleaned_reason)
    task.updated_at = utcnow()
    task = await crud.save(session, task)
    logger.info("task.status_changed task_id=%s status=%s actor_id=%s", task.id, target, auth.user_id)
    return task


async def approve_task(
    session: AsyncSession,
    auth: AuthContext,
    task_id: UUID,
    *,
    override: bool = False,
) -> Task:
    return await transition_task(session, auth, task_id, TASK_STATUS_APPROVED, override=override)


async def reject_task(
    session: AsyncSession,
    auth: AuthContext,
    task_id: UUID,
    *,
    reason: Any = None,
    override: bool = False,
) -> Task:
    return await transition_task(
        session,
        auth,
        task_id,
        TASK_STATUS_REJECTED,
        reason=reason,
        override=override,
    )


async def delete_task(session: AsyncSession, auth: AuthContext, task_id: UUID) -> None:
    task = await _require_task(session, task_id)
    task_policy.can_delete_task(
        role=auth.role,
        caller_id=auth.user_id,
        owner_id=task.employee_id,
        status=task.status,
    ).enforce()

    # Reviews belong to the task; both go in one commit.
    await crud.execute(session, delete(Review).where(col(Review.task_id) == task.id))
    await session.delete(task)
    await crud.commit(session)
    logger.info("task.deleted task_id=%s actor_id=%s", task_id, auth.user_id)


async def get_task(session: AsyncSession, auth: AuthContext, task_id: UUID) -> TaskRead:
    row = await crud.fetch_first(session, _joined_statement().where(col(Task.id) == task_id))
    if row is None:
        raise NotFoundError("Task not found")
    task, project_name, employee_name, employee_email = row
    return to_task_read(task, project_name, employee_name, employee_email)


async def list_tasks(
    session: AsyncSession,
    auth: AuthContext,
    filters: TaskFilters | None = None,
) -> list[TaskRead]:
    """Return tasks newest first.

    Any authenticated caller may list every task; filters are conjunctive.
    """
    filters = filters or TaskFilters()
    statement = _joined_statement()
    if filters.project_id is not None:
        statement = statement.where(col(Task.project_id) == filters.project_id)
    if filters.status:
        statement = statement.where(col(Task.status) == _validate_status(filters.status))
    if filters.employee_id is not None:
        statement = statement.where(col(Task.employee_id) == filters.employee_id)
    if filters.search and filters.search.strip():
        pattern = _contains_pattern(filters.search.strip())
        statement = statement.where(
            or_(
                col(Task.name).ilike(pattern, escape="\\"),
                col(Task.description).ilike(pattern, escape="\\"),
                col(Task.status).ilike(pattern, escape="\\"),
                col(User.name).ilike(pattern, escape="\\"),
                col(User.email).ilike(pattern, escape="\\"),
            )
        )
    statement = statement.order_by(col(Task.created_at).desc())

    rows = await crud.fetch_all(session, statement)
    logger.debug("task.listed actor_id=%s count=%s", auth.user_id, len(rows))
    return [to_task_read(*row) for row in rows]
