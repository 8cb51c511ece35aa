from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime
from sqlmodel import Field, SQLModel

from app.core.time import utcnow

ROLE_EMPLOYEE = "employee"
ROLE_PLATFORM_ADMIN = "platform_admin"
USER_ROLES = frozenset({ROLE_EMPLOYEE, ROLE_PLATFORM_ADMIN})


class User(SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('employee', 'platform_admin')", name="ck_users_role"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    role: str = Field(default=ROLE_EMPLOYEE)  # employee | platform_admin
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
