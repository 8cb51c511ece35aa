"""Project catalogue and the project detail read model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlmodel import col, select

from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.db import crud
from app.models.projects import Project
from app.services import review_ledger, task_lifecycle, task_policy
from app.services.hour_aggregator import (
    EmployeeSummary,
    ProjectSummary,
    summarize_employees,
    summarize_project,
)
from app.services.validation import optional_text

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

    from app.core.auth import AuthContext
    from app.schemas.tasks import TaskRead

logger = get_logger(__name__)

PROJECT_NAME_MIN = 3
PROJECT_NAME_MAX = 255
PROJECT_DESCRIPTION_MAX = 1000
_UPDATABLE_FIELDS = frozenset({"name", "description", "is_active"})


@dataclass(frozen=True, slots=True)
class ProjectDetailData:
    project: Project
    tasks: list[TaskRead]
    summary: ProjectSummary
    employees: list[EmployeeSummary]
    ratings: review_ledger.RatingSummary


def _clean_project_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Project name is required")
    cleaned = value.strip()
    if len(cleaned) < PROJECT_NAME_MIN:
        raise ValidationError(f"Project name must be at least {PROJECT_NAME_MIN} characters")
    if len(cleaned) > PROJECT_NAME_MAX:
        raise ValidationError(f"Project name must be at most {PROJECT_NAME_MAX} characters")
    return cleaned


async def _require_project(session: AsyncSession, project_id: UUID) -> Project:
    project = await crud.get_by_id(session, Project, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


async def create_project(
    session: AsyncSession,
    auth: AuthContext,
    *,
    name: Any,
    description: Any = None,
) -> Project:
    task_policy.can_manage_projects(role=auth.role).enforce()
    project = await crud.create(
        session,
        Project,
        name=_clean_project_name(name),
        description=optional_text(
            description,
            max_length=PROJECT_DESCRIPTION_MAX,
            label="Description",
        ),
        created_by=auth.user_id,
        is_active=True,
    )
    logger.info("project.created project_id=%s actor_id=%s", project.id, auth.user_id)
    return project


async def update_project(
    session: AsyncSession,
    auth: AuthContext,
    project_id: UUID,
    updates: dict[str, Any],
) -> Project:
    task_policy.can_manage_projects(role=auth.role).enforce()
    project = await _require_project(session, project_id)

    unknown = set(updates) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown project fields: {', '.join(sorted(unknown))}")
    if "name" in updates:
        project.name = _clean_project_name(updates["name"])
    if "description" in updates:
        project.description = optional_text(
            updates["description"],
            max_length=PROJECT_DESCRIPTION_MAX,
            label="Description",
        )
    if "is_active" in updates:
        if not isinstance(updates["is_active"], bool):
            raise ValidationError("is_active must be true or false")
        project.is_active = updates["is_active"]
    project.updated_at = utcnow()

    project = await crud.save(session, project)
    logger.info(
        "project.updated project_id=%s actor_id=%s fields=%s",
        project.id,
        auth.user_id,
        ",".join(sorted(updates)),
    )
    return project


async def list_projects(
    session: AsyncSession,
    auth: AuthContext,
    *,
    include_inactive: bool = False,
) -> list[Project]:
    statement = select(Project)
    # Disabled projects stay visible to administrators only.
    if not (include_inactive and auth.is_admin):
        statement = statement.where(col(Project.is_active).is_(True))
    statement = statement.order_by(col(Project.created_at).desc())
    return await crud.fetch_all(session, statement)


async def get_project(session: AsyncSession, auth: AuthContext, project_id: UUID) -> Project:
    return await _require_project(session, project_id)


async def get_project_detail(
    session: AsyncSession,
    auth: AuthContext,
    project_id: UUID,
) -> ProjectDetailData:
    """Load a project with its tasks and recompute every summary from scratch."""
    project = await _require_project(session, project_id)
    tasks = await task_lifecycle.list_tasks(
        session,
        auth,
        task_lifecycle.TaskFilters(project_id=project.id),
    )
    reviews = await review_ledger.list_reviews_for_tasks(session, (task.id for task in tasks))
    employees = sorted(
        summarize_employees(tasks).values(),
        key=lambda summary: ((summary.employee_name or "").lower(), str(summary.employee_id)),
    )
    return ProjectDetailData(
        project=project,
        tasks=tasks,
        summary=summarize_project(tasks),
        employees=employees,
        ratings=review_ledger.summarize_ratings(reviews),
    )
