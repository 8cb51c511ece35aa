from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlmodel import SQLModel


class TaskCreate(SQLModel):
    project_id: UUID
    name: str
    description: str | None = None
    expected_hours: Decimal
    actual_hours: Decimal


class TaskUpdate(SQLModel):
    name: str | None = None
    description: str | None = None
    expected_hours: Decimal | None = None
    actual_hours: Decimal | None = None
    # Administrators only.
    status: str | None = None
    rejection_reason: str | None = None


class TaskTransition(SQLModel):
    reason: str | None = None


class TaskRead(SQLModel):
    id: UUID
    project_id: UUID
    employee_id: UUID
    name: str
    description: str | None = None
    expected_hours: Decimal
    actual_hours: Decimal
    status: str
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    # Display-only joins; None when the related row is missing.
    project_name: str | None = None
    employee_name: str | None = None
    employee_email: str | None = None


class TaskEnvelope(SQLModel):
    task: TaskRead


class TaskListResponse(SQLModel):
    tasks: list[TaskRead]
