"""Fleet-wide fraud statistics over a trailing window of orders.

Every order in the window goes through the same ``assess`` call used for live
gating. Assessments run concurrently, bounded by a semaphore sized to the
store's I/O capacity, inside a TaskGroup so cancelling the run cancels all
in-flight assessments.
"""

import asyncio
from collections import Counter
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, timedelta

import structlog

from .models import FraudStatistics, OrderCandidate, RiskAssessment, RiskLevel
from .stores import OrderStore

logger = structlog.get_logger()

Assess = Callable[[OrderCandidate], Awaitable[RiskAssessment]]


def fraud_rate(high: int, medium: int, analyzed: int) -> float:
    """Share of high+medium orders as a percentage, rounded to two decimals."""
    if analyzed == 0:
        return 0.0
    return round((high + medium) / analyzed * 100, 2)


def tally_statistics(
    levels: Iterable[RiskLevel],
    total_orders: int,
    window_days: int,
) -> FraudStatistics:
    counts = Counter(levels)
    analyzed = sum(counts.values())
    high = counts[RiskLevel.HIGH]
    medium = counts[RiskLevel.MEDIUM]
    return FraudStatistics(
        window_days=window_days,
        total_orders=total_orders,
        analyzed_orders=analyzed,
        high_risk_orders=high,
        medium_risk_orders=medium,
        low_risk_orders=counts[RiskLevel.LOW],
        fraud_rate=fraud_rate(high, medium, analyzed),
    )


async def assess_concurrently(
    assess: Assess,
    orders: list[OrderCandidate],
    max_concurrency: int,
) -> list[RiskLevel]:
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def _bounded(order: OrderCandidate) -> RiskLevel:
        async with semaphore:
            assessment = await assess(order)
            return assessment.level

    async with asyncio.TaskGroup() as tg:
        tasks = [tg.create_task(_bounded(order)) for order in orders]
    return [task.result() for task in tasks]


async def compute_fraud_statistics(
    assess: Assess,
    orders: OrderStore,
    window_days: int,
    now: datetime,
    max_concurrency: int = 10,
) -> FraudStatistics:
    """Assess every order created in the last ``window_days`` and tabulate risk levels.

    Any failure yields zero-filled statistics instead of an error.
    Cancellation is propagated.
    """
    since = now - timedelta(days=window_days)
    try:
        recent = await orders.find_recent_global(since)
        levels = await assess_concurrently(assess, recent, max_concurrency)
    except Exception:
        logger.exception("fraud_statistics_failed", window_days=window_days)
        return FraudStatistics(window_days=window_days)

    stats = tally_statistics(levels, total_orders=len(recent), window_days=window_days)
    logger.info(
        "fraud_statistics_computed",
        window_days=window_days,
        total_orders=stats.total_orders,
        high=stats.high_risk_orders,
        medium=stats.medium_risk_orders,
        low=stats.low_risk_orders,
        fraud_rate=stats.fraud_rate,
    )
    return stats
