from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import AUTH_DEP, SESSION_DEP
from app.core.auth import AuthContext
from app.schemas.projects import (
    ProjectCreate,
    ProjectDetail,
    ProjectEnvelope,
    ProjectListResponse,
    ProjectRead,
    ProjectUpdate,
)
from app.schemas.reviews import RatingSummaryRead
from app.schemas.summaries import EmployeeSummaryRead, ProjectSummaryRead
from app.services import projects as project_service

router = APIRouter(prefix="/projects", tags=["projects"])


def _envelope(project: object) -> ProjectEnvelope:
    return ProjectEnvelope(project=ProjectRead.model_validate(project, from_attributes=True))


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    include_inactive: bool = Query(default=False),
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ProjectListResponse:
    projects = await project_service.list_projects(
        session,
        auth,
        include_inactive=include_inactive,
    )
    return ProjectListResponse(
        projects=[ProjectRead.model_validate(project, from_attributes=True) for project in projects]
    )


@router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ProjectEnvelope:
    project = await project_service.create_project(
        session,
        auth,
        name=payload.name,
        description=payload.description,
    )
    return _envelope(project)


@router.get("/{project_id}", response_model=ProjectEnvelope)
async def get_project(
    project_id: UUID,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ProjectEnvelope:
    return _envelope(await project_service.get_project(session, auth, project_id))


@router.patch("/{project_id}", response_model=ProjectEnvelope)
async def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ProjectEnvelope:
    project = await project_service.update_project(
        session,
        auth,
        project_id,
        payload.model_dump(exclude_unset=True),
    )
    return _envelope(project)


@router.get("/{project_id}/tasks", response_model=ProjectDetail)
async def get_project_detail(
    project_id: UUID,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ProjectDetail:
    detail = await project_service.get_project_detail(session, auth, project_id)
    return ProjectDetail(
        project=ProjectRead.model_validate(detail.project, from_attributes=True),
        tasks=detail.tasks,
        summary=ProjectSummaryRead.model_validate(detail.summary, from_attributes=True),
        employees=[
            EmployeeSummaryRead.model_validate(employee, from_attributes=True)
            for employee in detail.employees
        ],
        ratings=RatingSummaryRead.model_validate(detail.ratings, from_attributes=True),
    )
