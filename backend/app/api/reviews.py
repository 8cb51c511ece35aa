from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.api.deps import AUTH_DEP, SESSION_DEP
from app.core.auth import AuthContext
from app.schemas.common import OkResponse
from app.schemas.reviews import (
    RatingSummaryRead,
    ReviewCreate,
    ReviewEnvelope,
    ReviewListResponse,
    ReviewReply,
    ReviewUpdate,
)
from app.services import review_ledger
from app.services.review_ledger import to_review_read

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    task_id: UUID = Query(),
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ReviewListResponse:
    reviews = await review_ledger.list_reviews(session, auth, task_id)
    ratings = review_ledger.summarize_ratings(reviews)
    return ReviewListResponse(
        reviews=reviews,
        ratings=RatingSummaryRead.model_validate(ratings, from_attributes=True),
    )


@router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
async def submit_review(
    payload: ReviewCreate,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ReviewEnvelope:
    review = await review_ledger.submit_review(
        session,
        auth,
        task_id=payload.task_id,
        rating=payload.rating,
        feedback=payload.feedback,
    )
    return ReviewEnvelope(review=to_review_read(review))


@router.put("/{review_id}", response_model=ReviewEnvelope)
async def amend_review(
    review_id: UUID,
    payload: ReviewUpdate,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ReviewEnvelope:
    review = await review_ledger.amend_review(
        session,
        auth,
        review_id,
        **payload.model_dump(exclude_unset=True),
    )
    return ReviewEnvelope(review=to_review_read(review))


@router.delete("/{review_id}", response_model=OkResponse)
async def delete_review(
    review_id: UUID,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> OkResponse:
    await review_ledger.delete_review(session, auth, review_id)
    return OkResponse()


@router.post("/{review_id}/reply", response_model=ReviewEnvelope)
async def reply_to_review(
    review_id: UUID,
    payload: ReviewReply,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ReviewEnvelope:
    review = await review_ledger.reply_to_review(session, auth, review_id, text=payload.reply)
    return ReviewEnvelope(review=to_review_read(review))


@router.delete("/{review_id}/reply", response_model=ReviewEnvelope)
async def delete_reply(
    review_id: UUID,
    session: AsyncSession = SESSION_DEP,
    auth: AuthContext = AUTH_DEP,
) -> ReviewEnvelope:
    review = await review_ledger.delete_reply(session, auth, review_id)
    return ReviewEnvelope(review=to_review_read(review))
