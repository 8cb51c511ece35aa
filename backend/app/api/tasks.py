from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import AUTH_DEP, SESSION_DEP
from app.core.auth import AuthContext
from app.schemas.common import OkResponse
from app.schemas.tasks import (
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskTransition,
    TaskUpdate,
)
from app.services import task_lifecycle
from app.services.task_lifecycle import TaskFilters, to_task_read

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    project_id: UUID | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    employee_id: UUID | None = Query(default=None),
    search: str | None = Query(default=None, alias="q"),
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> TaskListResponse:
    filters = TaskFilters(
        project_id=project_id,
        status=status_filter,
        employee_id=employee_id,
        search=search,
    )
    return TaskListResponse(tasks=await task_lifecycle.list_tasks(session, auth, filters))


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> TaskEnvelope:
    task = await task_lifecycle.create_task(
        session,
        auth,
        project_id=payload.project_id,
        name=payload.name,
        description=payload.description,
        expected_hours=payload.expected_hours,
        actual_hours=payload.actual_hours,
    )
    return TaskEnvelope(task=to_task_read(task))


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(
    task_id: UUID,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> TaskEnvelope:
    return TaskEnvelope(task=await task_lifecycle.get_task(session, auth, task_id))


@router.put("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> TaskEnvelope:
    task = await task_lifecycle.update_task(
        session,
        auth,
        task_id,
        payload.model_dump(exclude_unset=True),
    )
    return TaskEnvelope(task=to_task_read(task))


@router.delete("/{task_id}", response_model=OkResponse)
async def delete_task(
    task_id: UUID,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> OkResponse:
    await task_lifecycle.delete_task(session, auth, task_id)
    return OkResponse()


@router.post("/{task_id}/approve", response_model=TaskEnvelope)
async def approve_task(
    task_id: UUID,
    override: bool = Query(default=False),
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> TaskEnvelope:
    task = await task_lifecycle.approve_task(session, auth, task_id, override=override)
    return TaskEnvelope(task=to_task_read(task))


@router.post("/{task_id}/reject", response_model=TaskEnvelope)
async def reject_task(
    task_id: UUID,
    payload: TaskTransition | None = None,
    override: bool = Query(default=False),
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> TaskEnvelope:
    task = await task_lifecycle.reject_task(
        session,
        auth,
        task_id,
        reason=payload.reason if payload else None,
        override=override,
    )
    return TaskEnvelope(task=to_task_read(task))
