from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.time import utcnow


class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(index=True, max_length=255)
    description: str | None = Field(default=None, max_length=1000)

    # Creator is fixed at creation; projects are disabled, never hard-deleted.
    created_by: UUID = Field(foreign_key="users.id", index=True)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
