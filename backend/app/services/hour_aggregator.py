"""Pure reductions of task hours into project and per-employee summaries.

Values are exact `Decimal` sums. Rounding for display belongs to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from app.models.tasks import TASK_STATUS_APPROVED, TASK_STATUS_PENDING, TASK_STATUS_REJECTED

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True, slots=True)
class ProjectSummary:
    total_tasks: int
    total_expected_hours: Decimal
    total_actual_hours: Decimal
    variance: Decimal
    variance_percentage: Decimal


@dataclass(frozen=True, slots=True)
class EmployeeSummary:
    employee_id: UUID
    employee_name: str | None
    employee_email: str | None
    total_tasks: int
    total_expected_hours: Decimal
    total_actual_hours: Decimal
    pending_tasks: int
    approved_tasks: int
    rejected_tasks: int


def _hours(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def variance_percentage(expected: Decimal, actual: Decimal) -> Decimal:
    """Return (actual - expected) / expected * 100, or zero when nothing was expected."""
    if expected <= ZERO:
        return ZERO
    return (actual - expected) / expected * HUNDRED


def summarize_project(tasks: Iterable[Any]) -> ProjectSummary:
    count = 0
    expected = ZERO
    actual = ZERO
    for task in tasks:
        count += 1
        expected += _hours(task.expected_hours)
        actual += _hours(task.actual_hours)
    return ProjectSummary(
        total_tasks=count,
        total_expected_hours=expected,
        total_actual_hours=actual,
        variance=actual - expected,
        variance_percentage=variance_percentage(expected, actual),
    )


def summarize_employees(tasks: Iterable[Any]) -> dict[UUID, EmployeeSummary]:
    buckets: dict[UUID, dict[str, Any]] = {}
    for task in tasks:
        bucket = buckets.setdefault(
            task.employee_id,
            {
                "employee_name": None,
                "employee_email": None,
                "total_tasks": 0,
                "total_expected_hours": ZERO,
                "total_actual_hours": ZERO,
                TASK_STATUS_PENDING: 0,
                TASK_STATUS_APPROVED: 0,
                TASK_STATUS_REJECTED: 0,
            },
        )
        # Display fields are optional; the first non-empty value wins.
        bucket["employee_name"] = bucket["employee_name"] or getattr(task, "employee_name", None)
        bucket["employee_email"] = bucket["employee_email"] or getattr(task, "employee_email", None)
        bucket["total_tasks"] += 1
        bucket["total_expected_hours"] += _hours(task.expected_hours)
        bucket["total_actual_hours"] += _hours(task.actual_hours)
        if task.status in (TASK_STATUS_PENDING, TASK_STATUS_APPROVED, TASK_STATUS_REJECTED):
            bucket[task.status] += 1

    return {
        employee_id: EmployeeSummary(
            employee_id=employee_id,
            employee_name=bucket["employee_name"],
            employee_email=bucket["employee_email"],
            total_tasks=bucket["total_tasks"],
            total_expected_hours=bucket["total_expected_hours"],
            total_actual_hours=bucket["total_actual_hours"],
            pending_tasks=bucket[TASK_STATUS_PENDING],
            approved_tasks=bucket[TASK_STATUS_APPROVED],
            rejected_tasks=bucket[TASK_STATUS_REJECTED],
        )
        for employee_id, bucket in buckets.items()
    }
