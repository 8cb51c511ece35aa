from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel


class UserRead(SQLModel):
    id: UUID
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime


class SessionRead(SQLModel):
    user: UserRead
