"""Unit tests for windowed fraud statistics."""

import asyncio
from datetime import timedelta

import pytest

from src.domains.fraud.config import FraudConfig
from src.domains.fraud.engine import OrderRiskEngine
from src.domains.fraud.models import FraudStatistics, RiskAssessment, RiskLevel
from src.domains.fraud.statistics import (
    compute_fraud_statistics,
    fraud_rate,
    tally_statistics,
)
from tests.fakes import (
    NOW,
    FailingStore,
    InMemoryOrderStore,
    InMemoryProductStore,
    InMemoryUserStore,
    fixed_clock,
    make_record,
)

ZERO_STATS = {
    "total_orders": 0,
    "analyzed_orders": 0,
    "high_risk_orders": 0,
    "medium_risk_orders": 0,
    "low_risk_orders": 0,
    "fraud_rate": 0,
}


def _counts(stats: FraudStatistics) -> dict:
    return stats.model_dump(exclude={"window_days"})


def _records(count: int, days_ago: int = 1):
    return [
        make_record(f"o-{i}", created_at=NOW - timedelta(days=days_ago, minutes=i))
        for i in range(count)
    ]


def _fixed_levels(levels: dict[str, RiskLevel]):
    async def _assess(order):
        return RiskAssessment(score=0, level=levels[order.order_id])

    return _assess


class TestFraudRate:
    def test_zero_analyzed(self):
        assert fraud_rate(0, 0, 0) == 0

    def test_rounded_to_two_decimals(self):
        assert fraud_rate(1, 0, 3) == 33.33
        assert fraud_rate(1, 1, 3) == 66.67

    def test_all_flagged(self):
        assert fraud_rate(2, 3, 5) == 100.0


class TestTally:
    def test_very_low_and_unknown_only_count_as_analyzed(self):
        stats = tally_statistics(
            [
                RiskLevel.HIGH,
                RiskLevel.MEDIUM,
                RiskLevel.LOW,
                RiskLevel.VERY_LOW,
                RiskLevel.UNKNOWN,
            ],
            total_orders=5,
            window_days=30,
        )
        assert stats.analyzed_orders == 5
        assert stats.high_risk_orders == 1
        assert stats.medium_risk_orders == 1
        assert stats.low_risk_orders == 1
        assert stats.fraud_rate == 40.0


class TestComputeFraudStatistics:
    @pytest.mark.asyncio
    async def test_empty_window(self):
        stats = await compute_fraud_statistics(
            _fixed_levels({}), InMemoryOrderStore(), window_days=30, now=NOW
        )
        assert _counts(stats) == ZERO_STATS
        assert stats.window_days == 30

    @pytest.mark.asyncio
    async def test_tallies_levels(self):
        records = _records(4)
        levels = dict(
            zip(
                [r.order_id for r in records],
                [RiskLevel.HIGH, RiskLevel.HIGH, RiskLevel.LOW, RiskLevel.VERY_LOW],
                strict=True,
            )
        )
        stats = await compute_fraud_statistics(
            _fixed_levels(levels), InMemoryOrderStore(records), window_days=30, now=NOW
        )
        assert stats.total_orders == 4
        assert stats.analyzed_orders == 4
        assert stats.high_risk_orders == 2
        assert stats.low_risk_orders == 1
        assert stats.fraud_rate == 50.0

    @pytest.mark.asyncio
    async def test_orders_outside_window_excluded(self):
        records = _records(2, days_ago=5) + [make_record("o-old", created_at=NOW - timedelta(days=40))]
        levels = {r.order_id: RiskLevel.HIGH for r in records}
        stats = await compute_fraud_statistics(
            _fixed_levels(levels), InMemoryOrderStore(records), window_days=30, now=NOW
        )
        assert stats.total_orders == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_zeros(self):
        stats = await compute_fraud_statistics(
            _fixed_levels({}), FailingStore(), window_days=7, now=NOW
        )
        assert _counts(stats) == ZERO_STATS
        assert stats.window_days == 7

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        in_flight = 0
        peak = 0

        async def _assess(order):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.001)
            in_flight -= 1
            return RiskAssessment(score=0, level=RiskLevel.VERY_LOW)

        stats = await compute_fraud_statistics(
            _assess, InMemoryOrderStore(_records(12)), window_days=30, now=NOW, max_concurrency=3
        )
        assert stats.analyzed_orders == 12
        assert 1 <= peak <= 3

    @pytest.mark.asyncio
    async def test_cancellation_cancels_in_flight_assessments(self):
        started: list[str] = []
        cancelled: list[str] = []

        async def _hanging_assess(order):
            started.append(order.order_id)
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(order.order_id)
                raise

        task = asyncio.create_task(
            compute_fraud_statistics(
                _hanging_assess,
                InMemoryOrderStore(_records(5)),
                window_days=30,
                now=NOW,
                max_concurrency=2,
            )
        )
        for _ in range(100):
            if len(started) == 2:
                break
            await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(started) == 2
        assert sorted(cancelled) == sorted(started)


class _SlowOrderStore(InMemoryOrderStore):
    async def find_recent_global(self, since):
        await asyncio.sleep(5)
        return await super().find_recent_global(since)


class TestEngineStatistics:
    @pytest.mark.asyncio
    async def test_reuses_assessment_pipeline(self):
        regular = [
            make_record("o-a", items=[("prod-1", 1500.0, 1)], created_at=NOW - timedelta(days=1)),
            make_record("o-b", items=[("prod-1", 1500.0, 1)], created_at=NOW - timedelta(days=2)),
        ]
        # 45 amount + 20 international + 10 off-hours + 20 high-value item
        risky = make_record(
            "o-c",
            customer_id="cust-new",
            items=[("prod-tv", 60_000.0, 1)],
            payment_method="card",
            country="Uganda",
            created_at=NOW - timedelta(days=3, hours=10),
        )
        engine = OrderRiskEngine(
            orders=InMemoryOrderStore(regular + [risky]),
            users=InMemoryUserStore({"cust-1": NOW - timedelta(days=1000)}),
            products=InMemoryProductStore({"prod-tv": 60_000.0}),
            clock=fixed_clock,
        )

        assert (await engine.assess(risky)).level == RiskLevel.HIGH
        stats = await engine.get_statistics(30)

        assert stats.total_orders == 3
        assert stats.analyzed_orders == 3
        assert stats.high_risk_orders == 1
        assert stats.medium_risk_orders == 0
        assert stats.low_risk_orders == 0
        assert stats.fraud_rate == 33.33

    @pytest.mark.asyncio
    async def test_default_window_is_thirty_days(self, engine):
        stats = await engine.get_statistics()
        assert stats.window_days == 30

    @pytest.mark.asyncio
    async def test_safe_statistics_time_out_to_zeros(self):
        engine = OrderRiskEngine(
            orders=_SlowOrderStore(_records(3)),
            users=InMemoryUserStore(),
            products=InMemoryProductStore(),
            clock=fixed_clock,
        )
        stats = await engine.get_statistics_safe(30, timeout=0.01)
        assert _counts(stats) == ZERO_STATS

    @pytest.mark.asyncio
    async def test_safe_statistics_timeout_defaults_to_config(self):
        config = FraudConfig()
        config.statistics.timeout_seconds = 0.01
        engine = OrderRiskEngine(
            orders=_SlowOrderStore(_records(3)),
            users=InMemoryUserStore(),
            products=InMemoryProductStore(),
            config=config,
            clock=fixed_clock,
        )
        stats = await engine.get_statistics_safe(14)
        assert _counts(stats) == ZERO_STATS
        assert stats.window_days == 14
