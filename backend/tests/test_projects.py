# ruff: noqa

from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.services import projects as project_service
from app.services import review_ledger
from conftest import add_task, auth_for


@pytest.mark.asyncio
async def test_admin_creates_project(session, admin):
    project = await project_service.create_project(
        session,
        auth_for(admin),
        name="  Mobile App  ",
        description="",
    )
    assert project.name == "Mobile App"
    assert project.description is None
    assert project.created_by == admin.id
    assert project.is_active is True


@pytest.mark.asyncio
async def test_employee_cannot_create_project(session, employee):
    with pytest.raises(ForbiddenError):
        await project_service.create_project(session, auth_for(employee), name="Side quest")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "description"),
    [("ab", None), ("   ", None), ("x" * 256, None), ("Valid name", "d" * 1001)],
)
async def test_project_validation(session, admin, name, description):
    with pytest.raises(ValidationError):
        await project_service.create_project(session, auth_for(admin), name=name, description=description)


@pytest.mark.asyncio
async def test_disabled_projects_hidden_from_employees(session, admin, employee, project):
    await project_service.update_project(session, auth_for(admin), project.id, {"is_active": False})

    assert await project_service.list_projects(session, auth_for(employee), include_inactive=True) == []
    visible = await project_service.list_projects(session, auth_for(admin), include_inactive=True)
    assert [p.id for p in visible] == [project.id]


@pytest.mark.asyncio
async def test_update_project_keeps_creator(session, admin, project):
    updated = await project_service.update_project(
        session,
        auth_for(admin),
        project.id,
        {"name": "Website Relaunch", "description": "Phase two"},
    )
    assert updated.name == "Website Relaunch"
    assert updated.description == "Phase two"
    assert updated.created_by == admin.id

    with pytest.raises(ValidationError):
        await project_service.update_project(session, auth_for(admin), project.id, {"created_by": uuid4()})


@pytest.mark.asyncio
async def test_update_missing_project(session, admin):
    with pytest.raises(NotFoundError):
        await project_service.update_project(session, auth_for(admin), uuid4(), {"name": "Nope"})


@pytest.mark.asyncio
async def test_project_detail_recomputes_summaries(session, admin, employee, other_employee, project):
    first = await add_task(session, project, employee, expected="10", actual="12", status="approved")
    await add_task(session, project, other_employee, expected="5", actual="3")
    await review_ledger.submit_review(session, auth_for(admin), task_id=first.id, rating=4)

    detail = await project_service.get_project_detail(session, auth_for(employee), project.id)

    assert detail.summary.total_tasks == 2
    assert detail.summary.total_expected_hours == Decimal("15")
    assert detail.summary.total_actual_hours == Decimal("15")
    assert detail.summary.variance == Decimal("0")
    assert detail.summary.variance_percentage == Decimal("0")
    assert [e.employee_name for e in detail.employees] == ["Erin Employee", "Omar Other"]
    assert detail.employees[0].approved_tasks == 1
    assert detail.ratings.total_stars == 4
    assert detail.ratings.review_count == 1


@pytest.mark.asyncio
async def test_project_detail_missing_project(session, employee):
    with pytest.raises(NotFoundError):
        await project_service.get_project_detail(session, auth_for(employee), uuid4())
