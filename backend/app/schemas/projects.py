from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel

from app.schemas.reviews import RatingSummaryRead
from app.schemas.summaries import EmployeeSummaryRead, ProjectSummaryRead
from app.schemas.tasks import TaskRead


class ProjectCreate(SQLModel):
    name: str
    description: str | None = None


class ProjectUpdate(SQLModel):
    name: str | None = None
    description: str | None = None
    is_active: bool | None = None


class ProjectRead(SQLModel):
    id: UUID
    name: str
    description: str | None = None
    created_by: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProjectEnvelope(SQLModel):
    project: ProjectRead


class ProjectListResponse(SQLModel):
    projects: list[ProjectRead]


class ProjectDetail(SQLModel):
    project: ProjectRead
    tasks: list[TaskRead]
    summary: ProjectSummaryRead
    employees: list[EmployeeSummaryRead]
    ratings: RatingSummaryRead
