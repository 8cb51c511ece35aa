# ruff: noqa

from __future__ import annotations

from collections.abc import AsyncIterator
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app import models  # registers tables
from app.core.auth import AuthContext, create_access_token
from app.db.session import get_session
from app.main import app
from app.models.projects import Project
from app.models.tasks import Task
from app.models.users import ROLE_EMPLOYEE, ROLE_PLATFORM_ADMIN, User


def auth_for(user: User) -> AuthContext:
    return AuthContext(user_id=user.id, role=user.role, user=user)


def headers_for(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


async def add_user(session: AsyncSession, name: str, *, role: str = ROLE_EMPLOYEE) -> User:
    user = User(name=name, email=f"{name.lower().replace(' ', '.')}@example.com", role=role)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def add_task(
    session: AsyncSession,
    project: Project,
    owner: User,
    *,
    name: str = "Task",
    expected: str = "1",
    actual: str = "1",
    status: str = "pending",
) -> Task:
    task = Task(
        project_id=project.id,
        employee_id=owner.id,
        name=name,
        expected_hours=Decimal(expected),
        actual_hours=Decimal(actual),
        status=status,
    )
    session.add(task)
    await session.commit()
    await session.refresh(task)
    return task


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def admin(session: AsyncSession) -> User:
    return await add_user(session, "Ada Admin", role=ROLE_PLATFORM_ADMIN)


@pytest_asyncio.fixture
async def employee(session: AsyncSession) -> User:
    return await add_user(session, "Erin Employee")


@pytest_asyncio.fixture
async def other_employee(session: AsyncSession) -> User:
    return await add_user(session, "Omar Other")


@pytest_asyncio.fixture
async def project(session: AsyncSession, admin: User) -> Project:
    project = Project(name="Website Redesign", created_by=admin.id)
    session.add(project)
    await session.commit()
    await session.refresh(project)
    return project


@pytest_asyncio.fixture
async def client(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    async def _get_session() -> AsyncIterator[AsyncSession]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
