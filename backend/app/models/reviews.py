from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.time import utcnow

REVIEWER_TYPE_ADMIN = "admin"
REVIEWER_TYPE_EMPLOYEE = "employee"
RATING_MIN = 1
RATING_MAX = 5


class Review(SQLModel, table=True):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("task_id", "reviewer_id", name="uq_reviews_task_id_reviewer_id"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        CheckConstraint("(reply IS NULL) = (replied_at IS NULL)", name="ck_reviews_reply_pair"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    task_id: UUID = Field(foreign_key="tasks.id", index=True)
    reviewer_id: UUID = Field(foreign_key="users.id", index=True)
    reviewer_type: str  # admin | employee, captured at creation

    rating: int
    feedback: str | None = None

    # Written only by the task owner; always set and cleared together.
    reply: str | None = None
    replied_at: datetime | None = Field(default=None, sa_type=DateTime())

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
