from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlmodel import SQLModel


class ReviewCreate(SQLModel):
    task_id: UUID
    rating: int
    feedback: str | None = None


class ReviewUpdate(SQLModel):
    rating: int
    feedback: str | None = None


class ReviewReply(SQLModel):
    reply: str


class ReviewRead(SQLModel):
    id: UUID
    task_id: UUID
    reviewer_id: UUID
    reviewer_type: str
    rating: int
    feedback: str | None = None
    reply: str | None = None
    replied_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    reviewer_name: str | None = None
    reviewer_email: str | None = None


class RatingSummaryRead(SQLModel):
    total_stars: int
    review_count: int
    average_rating: Decimal | None = None


class ReviewEnvelope(SQLModel):
    review: ReviewRead


class ReviewListResponse(SQLModel):
    reviews: list[ReviewRead]
    ratings: RatingSummaryRead
