"""Admin fraud-review decisions on stored orders."""

import uuid
from datetime import UTC, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import FraudReviewDB, OrderDB

from .models import FraudReview, FraudReviewRequest

logger = structlog.get_logger()


async def record_review(
    session: AsyncSession,
    order_id: str,
    request: FraudReviewRequest,
) -> FraudReview:
    """Persist a reviewer's decision for an order.

    Raises LookupError if the order does not exist.
    """
    order = await session.get(OrderDB, order_id)
    if order is None:
        raise LookupError(f"Order not found: {order_id}")

    review = FraudReview(
        review_id=str(uuid.uuid4()),
        order_id=order_id,
        decision=request.decision,
        reviewer_id=request.reviewer_id,
        notes=request.notes,
        reviewed_at=datetime.now(UTC),
    )
    session.add(
        FraudReviewDB(
            id=review.review_id,
            order_id=review.order_id,
            decision=review.decision.value,
            reviewer_id=review.reviewer_id,
            notes=review.notes,
            reviewed_at=review.reviewed_at,
        )
    )
    await session.commit()

    logger.info(
        "fraud_review_recorded",
        review_id=review.review_id,
        order_id=order_id,
        decision=review.decision.value,
        reviewer_id=review.reviewer_id,
    )
    return review
