from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlmodel import SQLModel


class ProjectSummaryRead(SQLModel):
    total_tasks: int
    total_expected_hours: Decimal
    total_actual_hours: Decimal
    variance: Decimal
    variance_percentage: Decimal


class EmployeeSummaryRead(SQLModel):
    employee_id: UUID
    employee_name: str | None = None
    employee_email: str | None = None
    total_tasks: int
    total_expected_hours: Decimal
    total_actual_hours: Decimal
    pending_tasks: int
    approved_tasks: int
    rejected_tasks: int
