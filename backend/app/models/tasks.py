from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime
from sqlmodel import Field, SQLModel

from app.core.time import utcnow

TASK_STATUS_PENDING = "pending"
TASK_STATUS_APPROVED = "approved"
TASK_STATUS_REJECTED = "rejected"
TASK_STATUSES = (TASK_STATUS_PENDING, TASK_STATUS_APPROVED, TASK_STATUS_REJECTED)


class Task(SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_tasks_status"),
        CheckConstraint(
            "expected_hours >= 0 AND actual_hours >= 0",
            name="ck_tasks_hours_non_negative",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    employee_id: UUID = Field(foreign_key="users.id", index=True)

    name: str
    description: str | None = None
    expected_hours: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    actual_hours: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)

    status: str = Field(default=TASK_STATUS_PENDING, index=True)
    approved_by: UUID | None = Field(default=None, foreign_key="users.id")
    approved_at: datetime | None = Field(default=None, sa_type=DateTime())
    rejection_reason: str | None = None

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
