"""Unit tests for recording fraud-review decisions."""

from unittest.mock import AsyncMock

import pytest

from src.db.models import FraudReviewDB, OrderDB
from src.domains.fraud.models import FraudReviewRequest, ReviewDecision
from src.domains.fraud.review import record_review


class TestRecordReview:
    @pytest.mark.asyncio
    async def test_review_persisted(self, mock_db_session):
        mock_db_session.get = AsyncMock(return_value=OrderDB(id="order-1", user_id="cust-1"))
        request = FraudReviewRequest(
            decision=ReviewDecision.REJECT, reviewer_id="admin-7", notes="stolen card"
        )

        review = await record_review(mock_db_session, "order-1", request)

        assert review.order_id == "order-1"
        assert review.decision == ReviewDecision.REJECT
        assert review.reviewer_id == "admin-7"
        assert review.notes == "stolen card"
        mock_db_session.add.assert_called_once()
        stored = mock_db_session.add.call_args.args[0]
        assert isinstance(stored, FraudReviewDB)
        assert stored.id == review.review_id
        assert stored.decision == "reject"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_order(self, mock_db_session):
        mock_db_session.get = AsyncMock(return_value=None)
        request = FraudReviewRequest(decision=ReviewDecision.APPROVE, reviewer_id="admin-7")

        with pytest.raises(LookupError):
            await record_review(mock_db_session, "ghost", request)

        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()
