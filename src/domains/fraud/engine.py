"""Order fraud-risk engine: evaluators -> aggregate -> classify -> recommend."""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from .config import FraudConfig, default_config
from .evaluators import ALL_EVALUATORS, EvaluationContext, RiskEvaluator
from .models import (
    FraudStatistics,
    OrderCandidate,
    RiskAssessment,
    RiskFlag,
    RiskLevel,
)
from .recommendations import ANALYSIS_ERROR_RECOMMENDATION, generate_recommendations
from .scoring import aggregate_score, classify_risk_level, collect_flags
from .snapshot import OrderSnapshotReader
from .statistics import compute_fraud_statistics
from .stores import OrderStore, ProductStore, UserStore

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def analysis_error_assessment() -> RiskAssessment:
    """Degraded result returned when the pipeline itself fails."""
    return RiskAssessment(
        score=0,
        level=RiskLevel.UNKNOWN,
        flags=[RiskFlag.ANALYSIS_ERROR],
        recommendations=[ANALYSIS_ERROR_RECOMMENDATION],
    )


class OrderRiskEngine:
    """Scores orders against the risk evaluators and aggregates fleet statistics.

    The engine holds no mutable state: it can be built per request or shared,
    and ``assess`` is the single scoring path used by both live gating and
    ``get_statistics``.

    Pipeline per order:
    1. Run every evaluator -> list[FactorResult] (each fails open on its own)
    2. Composite score = sum of partial scores (may be negative)
    3. Classify into a RiskLevel via fixed thresholds
    4. Generate recommendations from the score and flags
    """

    def __init__(
        self,
        orders: OrderStore,
        users: UserStore,
        products: ProductStore,
        config: FraudConfig | None = None,
        evaluators: list[RiskEvaluator] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config or default_config
        self._orders = orders
        self._reader = OrderSnapshotReader(orders, users, products, self._config)
        self._evaluators = list(evaluators if evaluators is not None else ALL_EVALUATORS)
        self._clock = clock

    @property
    def config(self) -> FraudConfig:
        return self._config

    @property
    def evaluators(self) -> list[RiskEvaluator]:
        return list(self._evaluators)

    async def assess(self, order: OrderCandidate) -> RiskAssessment:
        """Assess one order. Always returns; failures yield an ``unknown`` assessment."""
        try:
            return await self._run_pipeline(order)
        except Exception:
            logger.exception(
                "order_assessment_failed",
                order_id=order.order_id,
                customer_id=order.customer_id,
            )
            return analysis_error_assessment()

    async def _run_pipeline(self, order: OrderCandidate) -> RiskAssessment:
        now = self._clock()
        if order.created_at is None:
            order = order.model_copy(update={"created_at": now})

        context = EvaluationContext(order=order, reader=self._reader, config=self._config, now=now)
        results = [await evaluator.evaluate(context) for evaluator in self._evaluators]

        score = aggregate_score(results)
        flags = collect_flags(results)
        level = classify_risk_level(score, self._config)
        recommendations = generate_recommendations(score, flags, self._config)

        logger.info(
            "order_assessed",
            order_id=order.order_id,
            customer_id=order.customer_id,
            score=score,
            risk_level=level.value,
            flags=[f.value for f in flags],
            failed_evaluators=[r.evaluator for r in results if r.failed],
        )

        return RiskAssessment(
            score=score,
            level=level,
            flags=flags,
            recommendations=recommendations,
            factor_scores={r.evaluator: r.score for r in results},
            assessed_at=now,
        )

    async def get_statistics(self, window_days: int | None = None) -> FraudStatistics:
        """Re-assess every order in the trailing window and tabulate risk levels."""
        if window_days is None:
            window_days = self._config.statistics.default_window_days
        return await compute_fraud_statistics(
            self.assess,
            self._orders,
            window_days=window_days,
            now=self._clock(),
            max_concurrency=self._config.statistics.max_concurrency,
        )

    async def get_statistics_safe(
        self, window_days: int | None = None, timeout: float | None = None
    ) -> FraudStatistics:
        """Like ``get_statistics`` but time-boxed; a timeout yields zero-filled statistics."""
        if window_days is None:
            window_days = self._config.statistics.default_window_days
        if timeout is None:
            timeout = self._config.statistics.timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                return await self.get_statistics(window_days)
        except TimeoutError:
            logger.warning("fraud_statistics_timed_out", window_days=window_days, timeout=timeout)
            return FraudStatistics(window_days=window_days)
