"""Task reviews and the task owner's replies.

One review per (task, reviewer); only the reviewer may amend or delete it, and
only the task owner may write or clear the reply.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlmodel import col, select

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.db import crud
from app.models.reviews import (
    RATING_MAX,
    RATING_MIN,
    REVIEWER_TYPE_ADMIN,
    REVIEWER_TYPE_EMPLOYEE,
    Review,
)
from app.models.tasks import Task
from app.models.users import User
from app.schemas.reviews import ReviewRead
from app.services import task_policy
from app.services.validation import optional_text, require_text

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession

    from app.core.auth import AuthContext

logger = get_logger(__name__)

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this task; update your existing review instead"
_UNSET: Any = object()


@dataclass(frozen=True, slots=True)
class RatingSummary:
    total_stars: int
    review_count: int
    average_rating: Decimal | None


def validate_rating(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Rating must be a whole number between {RATING_MIN} and {RATING_MAX}")
    if not RATING_MIN <= value <= RATING_MAX:
        raise ValidationError(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
    return value


def summarize_ratings(reviews: Iterable[Any]) -> RatingSummary:
    total = 0
    count = 0
    for review in reviews:
        total += int(review.rating or 0)
        count += 1
    average = (Decimal(total) / Decimal(count)) if count else None
    return RatingSummary(total_stars=total, review_count=count, average_rating=average)


def to_review_read(
    review: Review,
    reviewer_name: str | None = None,
    reviewer_email: str | None = None,
) -> ReviewRead:
    model = ReviewRead.model_validate(review, from_attributes=True)
    return model.model_copy(update={"reviewer_name": reviewer_name, "reviewer_email": reviewer_email})


async def _require_review(session: AsyncSession, review_id: UUID) -> Review:
    review = await crud.get_by_id(session, Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    return review


async def _require_task_owner(session: AsyncSession, review: Review) -> UUID:
    task = await crud.get_by_id(session, Task, review.task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task.employee_id


async def submit_review(
    session: AsyncSession,
    auth: AuthContext,
    *,
    task_id: UUID,
    rating: Any,
    feedback: Any = None,
) -> Review:
    checked_rating = validate_rating(rating)
    cleaned_feedback = optional_text(feedback, label="Feedback")

    task = await crud.get_by_id(session, Task, task_id)
    if task is None:
        raise NotFoundError("Task not found")

    existing = await crud.fetch_first(
        session,
        select(Review.id)
        .where(col(Review.task_id) == task.id)
        .where(col(Review.reviewer_id) == auth.user_id),
    )
    if existing is not None:
        raise ConflictError(DUPLICATE_REVIEW_MESSAGE)

    # The unique constraint on (task_id, reviewer_id) catches concurrent duplicates.
    review = await crud.create(
        session,
        Review,
        conflict_message=DUPLICATE_REVIEW_MESSAGE,
        task_id=task.id,
        reviewer_id=auth.user_id,
        reviewer_type=REVIEWER_TYPE_ADMIN if auth.is_admin else REVIEWER_TYPE_EMPLOYEE,
        rating=checked_rating,
        feedback=cleaned_feedback,
    )
    logger.info(
        "review.created review_id=%s task_id=%s reviewer_id=%s rating=%s",
        review.id,
        review.task_id,
        review.reviewer_id,
        review.rating,
    )
    return review


async def amend_review(
    session: AsyncSession,
    auth: AuthContext,
    review_id: UUID,
    *,
    rating: Any,
    feedback: Any = _UNSET,
) -> Review:
    """Replace the rating; feedback changes only when passed."""
    review = await _require_review(session, review_id)
    task_policy.can_modify_review(caller_id=auth.user_id, reviewer_id=review.reviewer_id).enforce()
    review.rating = validate_rating(rating)
    if feedback is not _UNSET:
        review.feedback = optional_text(feedback, label="Feedback")
    review.updated_at = utcnow()
    review = await crud.save(session, review)
    logger.info("review.updated review_id=%s rating=%s", review.id, review.rating)
    return review


async def delete_review(session: AsyncSession, auth: AuthContext, review_id: UUID) -> None:
    review = await _require_review(session, review_id)
    task_policy.can_modify_review(caller_id=auth.user_id, reviewer_id=review.reviewer_id).enforce()
    await crud.delete(session, review)
    logger.info("review.deleted review_id=%s actor_id=%s", review_id, auth.user_id)


async def reply_to_review(
    session: AsyncSession,
    auth: AuthContext,
    review_id: UUID,
    *,
    text: Any,
) -> Review:
    review = await _require_review(session, review_id)
    owner_id = await _require_task_owner(session, review)
    task_policy.can_reply_to_review(caller_id=auth.user_id, task_owner_id=owner_id).enforce()
    cleaned = require_text(text, "Reply text is required")

    now = utcnow()
    review.reply = cleaned
    review.replied_at = now
    review.updated_at = now
    review = await crud.save(session, review)
    logger.info("review.replied review_id=%s actor_id=%s", review.id, auth.user_id)
    return review


async def delete_reply(session: AsyncSession, auth: AuthContext, review_id: UUID) -> Review:
    review = await _require_review(session, review_id)
    owner_id = await _require_task_owner(session, review)
    task_policy.can_reply_to_review(caller_id=auth.user_id, task_owner_id=owner_id).enforce()

    review.reply = None
    review.replied_at = None
    review.updated_at = utcnow()
    review = await crud.save(session, review)
    logger.info("review.reply_deleted review_id=%s actor_id=%s", review.id, auth.user_id)
    return review


async def list_reviews(
    session: AsyncSession,
    auth: AuthContext,
    task_id: UUID,
) -> list[ReviewRead]:
    statement = (
        select(Review, User.name, User.email)
        .outerjoin(User, col(Review.reviewer_id) == col(User.id))
        .where(col(Review.task_id) == task_id)
        .order_by(col(Review.created_at).asc())
    )
    rows = await crud.fetch_all(session, statement)
    logger.debug("review.listed task_id=%s actor_id=%s count=%s", task_id, auth.user_id, len(rows))
    return [to_review_read(*row) for row in rows]


async def list_reviews_for_tasks(
    session: AsyncSession,
    task_ids: Iterable[UUID],
) -> list[Review]:
    ids = list(task_ids)
    if not ids:
        return []
    return await crud.fetch_all(session, select(Review).where(col(Review.task_id).in_(ids)))
