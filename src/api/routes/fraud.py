"""Order fraud-risk endpoints."""

from dataclasses import asdict

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.db.database import async_session_factory, get_session
from src.domains.fraud.config import default_config
from src.domains.fraud.engine import OrderRiskEngine
from src.domains.fraud.models import (
    FraudReview,
    FraudReviewRequest,
    FraudStatistics,
    OrderCandidate,
    RiskAssessment,
)
from src.domains.fraud.review import record_review
from src.domains.fraud.stores import OrderStore, SqlOrderStore, SqlProductStore, SqlUserStore

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/fraud", tags=["fraud"])


def get_order_store() -> OrderStore:
    return SqlOrderStore(async_session_factory)


def get_engine(orders: OrderStore = Depends(get_order_store)) -> OrderRiskEngine:  # noqa: B008
    return OrderRiskEngine(
        orders=orders,
        users=SqlUserStore(async_session_factory),
        products=SqlProductStore(async_session_factory),
        config=default_config,
    )


@router.post("/assess")
async def assess_order(
    order: OrderCandidate,
    engine: OrderRiskEngine = Depends(get_engine),  # noqa: B008
) -> RiskAssessment:
    return await engine.assess(order)


@router.post("/orders/{order_id}/assess")
async def assess_stored_order(
    order_id: str,
    orders: OrderStore = Depends(get_order_store),  # noqa: B008
    engine: OrderRiskEngine = Depends(get_engine),  # noqa: B008
) -> RiskAssessment:
    order = await orders.find_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order not found: {order_id}")
    return await engine.assess(order)


@router.get("/stats")
async def fraud_statistics(
    window_days: int = Query(default=settings.stats_default_window_days, ge=1, le=365),
    engine: OrderRiskEngine = Depends(get_engine),  # noqa: B008
) -> FraudStatistics:
    return await engine.get_statistics(window_days)


@router.get("/stats-safe")
async def fraud_statistics_safe(
    window_days: int = Query(default=settings.stats_default_window_days, ge=1, le=365),
    engine: OrderRiskEngine = Depends(get_engine),  # noqa: B008
) -> FraudStatistics:
    return await engine.get_statistics_safe(
        window_days, timeout=settings.stats_timeout_seconds
    )


@router.put("/orders/{order_id}/review")
async def review_order(
    order_id: str,
    request: FraudReviewRequest,
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> FraudReview:
    try:
        return await record_review(session, order_id, request)
    except LookupError as exc:
        logger.warning("fraud_review_order_missing", order_id=order_id)
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/rules")
async def list_rules(
    engine: OrderRiskEngine = Depends(get_engine),  # noqa: B008
) -> dict:
    """Active evaluators, thresholds and point values."""
    cfg = asdict(engine.config)
    return {
        "evaluators": [
            {"name": e.name, "description": (e.__doc__ or "").strip().partition("\n")[0]}
            for e in engine.evaluators
        ],
        "evaluator_count": len(engine.evaluators),
        "risk_levels": cfg.pop("levels"),
        "thresholds": cfg,
    }
