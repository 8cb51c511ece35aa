# ruff: noqa

from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.services import review_ledger, task_lifecycle
from app.services.task_lifecycle import TaskFilters
from conftest import add_task, add_user, auth_for


@pytest.mark.asyncio
async def test_create_task_is_pending_and_owned_by_caller(session, project, employee):
    task = await task_lifecycle.create_task(
        session,
        auth_for(employee),
        project_id=project.id,
        name="  Landing page  ",
        description="   ",
        expected_hours="10",
        actual_hours=Decimal("12"),
    )
    assert task.status == "pending"
    assert task.employee_id == employee.id
    assert task.name == "Landing page"
    assert task.description is None
    assert task.expected_hours == Decimal("10")
    assert task.actual_hours == Decimal("12")


@pytest.mark.asyncio
async def test_create_task_rejects_blank_name(session, project, employee):
    with pytest.raises(ValidationError, match="Task name is required"):
        await task_lifecycle.create_task(
            session,
            auth_for(employee),
            project_id=project.id,
            name="   ",
            expected_hours=1,
            actual_hours=1,
        )


@pytest.mark.asyncio
async def test_create_task_rejects_unknown_project(session, employee):
    with pytest.raises(ValidationError, match="Project not found"):
        await task_lifecycle.create_task(
            session,
            auth_for(employee),
            project_id=uuid4(),
            name="Orphan",
            expected_hours=1,
            actual_hours=1,
        )


@pytest.mark.asyncio
@pytest.mark.parametrize(("expected", "actual"), [(-1, 1), (1, -0.5), ("many", 1)])
async def test_create_task_rejects_bad_hours(session, project, employee, expected, actual):
    with pytest.raises(ValidationError):
        await task_lifecycle.create_task(
            session,
            auth_for(employee),
            project_id=project.id,
            name="Hours",
            expected_hours=expected,
            actual_hours=actual,
        )


@pytest.mark.asyncio
async def test_hours_round_trip_exactly_or_are_rejected(session, project, employee):
    with pytest.raises(ValidationError, match="decimal places"):
        await task_lifecycle.create_task(
            session,
            auth_for(employee),
            project_id=project.id,
            name="Precise",
            expected_hours="1.234",
            actual_hours="0.005",
        )

    task = await task_lifecycle.create_task(
        session,
        auth_for(employee),
        project_id=project.id,
        name="Precise",
        expected_hours="1.25",
        actual_hours="0.5",
    )
    stored = await task_lifecycle.get_task(session, auth_for(employee), task.id)
    assert stored.expected_hours == Decimal("1.25")
    assert stored.actual_hours == Decimal("0.5")


@pytest.mark.asyncio
async def test_owner_updates_pending_task(session, project, employee):
    task = await add_task(session, project, employee, expected="2", actual="1")
    updated = await task_lifecycle.update_task(
        session,
        auth_for(employee),
        task.id,
        {"name": "Renamed", "actual_hours": "3.5"},
    )
    assert updated.name == "Renamed"
    assert updated.actual_hours == Decimal("3.5")
    assert updated.expected_hours == Decimal("2")


@pytest.mark.asyncio
async def test_update_missing_task_is_not_found(session, employee):
    with pytest.raises(NotFoundError):
        await task_lifecycle.update_task(session, auth_for(employee), uuid4(), {"name": "x"})


@pytest.mark.asyncio
async def test_non_admin_cannot_update_approved_task(session, project, employee):
    task = await add_task(session, project, employee, status="approved")
    with pytest.raises(ForbiddenError, match="Cannot edit approved/rejected tasks"):
        await task_lifecycle.update_task(session, auth_for(employee), task.id, {"name": "Late edit"})


@pytest.mark.asyncio
async def test_admin_can_update_approved_task(session, project, employee, admin):
    task = await add_task(session, project, employee, status="approved")
    updated = await task_lifecycle.update_task(session, auth_for(admin), task.id, {"expected_hours": 6})
    assert updated.expected_hours == Decimal("6")
    assert updated.status == "approved"


@pytest.mark.asyncio
async def test_other_employee_cannot_update(session, project, employee, other_employee):
    task = await add_task(session, project, employee)
    with pytest.raises(ForbiddenError):
        await task_lifecycle.update_task(session, auth_for(other_employee), task.id, {"name": "Mine now"})


@pytest.mark.asyncio
async def test_owner_cannot_change_status(session, project, employee):
    task = await add_task(session, project, employee)
    with pytest.raises(ForbiddenError):
        await task_lifecycle.update_task(session, auth_for(employee), task.id, {"status": "approved"})


@pytest.mark.asyncio
async def test_update_rejects_blank_name_and_negative_hours(session, project, employee):
    task = await add_task(session, project, employee)
    with pytest.raises(ValidationError):
        await task_lifecycle.update_task(session, auth_for(employee), task.id, {"name": " "})
    with pytest.raises(ValidationError):
        await task_lifecycle.update_task(session, auth_for(employee), task.id, {"expected_hours": -2})


@pytest.mark.asyncio
async def test_admin_status_override_sets_approval_metadata(session, project, employee, admin):
    task = await add_task(session, project, employee, status="rejected")
    updated = await task_lifecycle.update_task(session, auth_for(admin), task.id, {"status": "approved"})
    assert updated.status == "approved"
    assert updated.approved_by == admin.id
    assert updated.approved_at is not None
    assert updated.rejection_reason is None

    reopened = await task_lifecycle.update_task(session, auth_for(admin), task.id, {"status": "pending"})
    assert reopened.status == "pending"
    assert reopened.approved_by is None
    assert reopened.approved_at is None


@pytest.mark.asyncio
async def test_approve_and_reject_follow_regular_flow(session, project, employee, admin):
    first = await add_task(session, project, employee)
    second = await add_task(session, project, employee)

    approved = await task_lifecycle.approve_task(session, auth_for(admin), first.id)
    assert approved.status == "approved"
    assert approved.approved_by == admin.id

    rejected = await task_lifecycle.reject_task(session, auth_for(admin), second.id, reason=" Out of scope ")
    assert rejected.status == "rejected"
    assert rejected.rejection_reason == "Out of scope"
    assert rejected.approved_at is None

    with pytest.raises(ConflictError):
        await task_lifecycle.reject_task(session, auth_for(admin), first.id)

    overridden = await task_lifecycle.reject_task(session, auth_for(admin), first.id, override=True)
    assert overridden.status == "rejected"
    assert overridden.approved_by is None


@pytest.mark.asyncio
async def test_employee_cannot_approve(session, project, employee):
    task = await add_task(session, project, employee)
    with pytest.raises(ForbiddenError):
        await task_lifecycle.approve_task(session, auth_for(employee), task.id)


@pytest.mark.asyncio
async def test_owner_can_delete_decided_task(session, project, employee):
    task = await add_task(session, project, employee, status="approved")
    await task_lifecycle.delete_task(session, auth_for(employee), task.id)
    assert await task_lifecycle.list_tasks(session, auth_for(employee)) == []


@pytest.mark.asyncio
async def test_other_employee_cannot_delete(session, project, employee, other_employee):
    task = await add_task(session, project, employee)
    with pytest.raises(ForbiddenError):
        await task_lifecycle.delete_task(session, auth_for(other_employee), task.id)


@pytest.mark.asyncio
async def test_delete_task_removes_reviews(session, project, employee, admin):
    task = await add_task(session, project, employee)
    await review_ledger.submit_review(session, auth_for(admin), task_id=task.id, rating=4)

    await task_lifecycle.delete_task(session, auth_for(admin), task.id)

    assert await task_lifecycle.list_tasks(session, auth_for(admin)) == []
    assert await review_ledger.list_reviews(session, auth_for(admin), task.id) == []
    with pytest.raises(NotFoundError):
        await task_lifecycle.get_task(session, auth_for(admin), task.id)


@pytest.mark.asyncio
async def test_list_tasks_filters_and_orders_newest_first(session, project, employee, other_employee):
    base = datetime(2026, 1, 1, 9, 0)
    old = await add_task(session, project, employee, name="Old")
    new = await add_task(session, project, employee, name="New", status="approved")
    mine_other = await add_task(session, project, other_employee, name="Other")
    old.created_at = base
    new.created_at = base + timedelta(hours=2)
    mine_other.created_at = base + timedelta(hours=1)
    session.add_all([old, new, mine_other])
    await session.commit()

    everything = await task_lifecycle.list_tasks(session, auth_for(other_employee))
    assert [task.name for task in everything] == ["New", "Other", "Old"]
    assert everything[0].project_name == "Website Redesign"
    assert everything[0].employee_email == employee.email

    erin_pending = await task_lifecycle.list_tasks(
        session,
        auth_for(employee),
        TaskFilters(employee_id=employee.id, status="pending"),
    )
    assert [task.name for task in erin_pending] == ["Old"]

    searched = await task_lifecycle.list_tasks(session, auth_for(employee), TaskFilters(search="omar"))
    assert [task.name for task in searched] == ["Other"]


@pytest.mark.asyncio
async def test_list_tasks_rejects_unknown_status(session, employee):
    with pytest.raises(ValidationError):
        await task_lifecycle.list_tasks(session, auth_for(employee), TaskFilters(status="done"))


@pytest.mark.asyncio
async def test_get_task_tolerates_missing_employee_row(session, project):
    ghost = await add_user(session, "Ghost")
    task = await add_task(session, project, ghost)
    await session.delete(ghost)
    await session.commit()

    read = await task_lifecycle.get_task(session, auth_for(ghost), task.id)
    assert read.employee_name is None
    assert read.project_name == "Website Redesign"


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(session, project, employee):
    await add_task(session, project, employee, name="100% done")
    await add_task(session, project, employee, name="Half done")
    await add_task(session, project, employee, name="snake_case cleanup")
    await add_task(session, project, employee, name="snakescase notes")

    percent = await task_lifecycle.list_tasks(session, auth_for(employee), TaskFilters(search="%"))
    assert [task.name for task in percent] == ["100% done"]

    underscore = await task_lifecycle.list_tasks(session, auth_for(employee), TaskFilters(search="e_c"))
    assert [task.name for task in underscore] == ["snake_case cleanup"]
