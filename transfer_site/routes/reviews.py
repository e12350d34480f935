"""
Customer review routes.
Anyone can submit a review; it stays hidden until an admin approves it.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_site.database import get_db
from transfer_site.models import Review, apply_changes
from transfer_site.routes.common import get_or_404, server_error
from transfer_site.schemas import (
    MessageResponse,
    ReviewApproveRequest,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from transfer_site.utils.jwt_auth import optional_admin, require_admin
from transfer_site.utils.rate_limit import RATE_LIMITS, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews")


@router.get("", response_model=List[ReviewResponse])
async def list_reviews(
    show_all: bool = Query(False, alias="showAll"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    """
    List reviews, newest first.
    Public readers get approved and published reviews; showAll (admin) adds pending ones.
    """
    try:
        query = select(Review).order_by(Review.created_at.desc(), Review.id.desc())
        if not (show_all and admin):
            query = query.where(Review.is_approved.is_(True), Review.is_published.is_(True))
        if limit:
            query = query.limit(limit)

        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Failed to list reviews: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve reviews", e)


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["lead"])
async def create_review(
    request: Request,
    payload: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    """
    Submit a review. Visitors always create a pending review; an admin may
    create one already approved and published.
    """
    values = payload.model_dump()
    if not admin:
        values["is_approved"] = False
        values["is_published"] = False

    review = Review(**values)
    db.add(review)
    await db.commit()
    await db.refresh(review)

    logger.info(f"Created review {review.id} (approved={review.is_approved})")
    return review


@router.put("", response_model=ReviewResponse)
async def update_review(
    payload: ReviewUpdate,
    review_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Partially update a review.

    The approval flags are written as supplied and are not coupled here;
    use PATCH /reviews/approve to change visibility.
    """
    review = await get_or_404(db, Review, review_id, "Review")
    changes = payload.model_dump(exclude_unset=True)
    apply_changes(review, changes)
    await db.commit()
    await db.refresh(review)

    if review.is_published and not review.is_approved:
        logger.warning(f"Review {review_id} is published without approval")
    logger.info(f"Updated review {review_id}: {sorted(changes)}")
    return review


@router.patch("/approve", response_model=ReviewResponse)
async def approve_review(
    review_id: int = Query(..., alias="id"),
    payload: Optional[ReviewApproveRequest] = None,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Approve (publish) or reject (hide) a review.
    Both flags are set together; the body defaults to {"approved": true}.
    """
    approved = payload.approved if payload is not None else True

    review = await get_or_404(db, Review, review_id, "Review")
    review.is_approved = approved
    review.is_published = approved
    await db.commit()
    await db.refresh(review)

    logger.info(f"Review {review_id} {'approved' if approved else 'rejected'}")
    return review


@router.delete("", response_model=MessageResponse)
async def delete_review(
    review_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    review = await get_or_404(db, Review, review_id, "Review")
    await db.delete(review)
    await db.commit()

    logger.info(f"Deleted review {review_id}")
    return MessageResponse(message="Review deleted")
