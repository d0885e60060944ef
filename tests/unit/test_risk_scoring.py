"""Unit tests for score aggregation, risk classification and recommendations."""

import pytest

from src.domains.fraud.config import FraudConfig
from src.domains.fraud.models import FactorResult, RiskFlag, RiskLevel
from src.domains.fraud.recommendations import generate_recommendations
from src.domains.fraud.scoring import aggregate_score, classify_risk_level, collect_flags


class TestAggregation:
    def test_sum_of_partial_scores(self):
        results = [
            FactorResult(evaluator="amount", score=30),
            FactorResult(evaluator="behavior", score=25),
            FactorResult(evaluator="payment_method", score=-10),
        ]
        assert aggregate_score(results) == 45

    def test_negative_total_not_clamped(self):
        assert aggregate_score([FactorResult(evaluator="payment_method", score=-10)]) == -10

    def test_no_results(self):
        assert aggregate_score([]) == 0

    def test_flags_unique_in_first_seen_order(self):
        results = [
            FactorResult(evaluator="a", flags=[RiskFlag.ROUND_NUMBER_AMOUNT]),
            FactorResult(
                evaluator="b",
                flags=[RiskFlag.BULK_QUANTITY_ORDER, RiskFlag.ROUND_NUMBER_AMOUNT],
            ),
        ]
        assert collect_flags(results) == [
            RiskFlag.ROUND_NUMBER_AMOUNT,
            RiskFlag.BULK_QUANTITY_ORDER,
        ]


class TestClassifyRiskLevel:
    @pytest.mark.parametrize(
        "score,level",
        [
            (120, RiskLevel.HIGH),
            (70, RiskLevel.HIGH),
            (69, RiskLevel.MEDIUM),
            (40, RiskLevel.MEDIUM),
            (39, RiskLevel.LOW),
            (20, RiskLevel.LOW),
            (19, RiskLevel.VERY_LOW),
            (0, RiskLevel.VERY_LOW),
            (-10, RiskLevel.VERY_LOW),
        ],
    )
    def test_thresholds(self, score, level):
        assert classify_risk_level(score) == level

    def test_configurable_thresholds(self):
        config = FraudConfig()
        config.levels.high = 50
        assert classify_risk_level(55, config) == RiskLevel.HIGH
        assert classify_risk_level(55) == RiskLevel.MEDIUM


class TestRecommendations:
    def test_high_tier(self):
        assert generate_recommendations(70, []) == [
            "Require additional verification (ID, phone confirmation)",
            "Consider manual review before fulfillment",
            "Monitor this order closely",
        ]

    def test_medium_tier(self):
        assert generate_recommendations(45, []) == [
            "Send additional verification email",
            "Consider calling customer for confirmation",
        ]

    def test_low_tier(self):
        assert generate_recommendations(20, []) == [
            "Monitor order progress",
            "Flag for potential review if issues arise",
        ]

    def test_very_low_tier_has_none(self):
        assert generate_recommendations(19, []) == []
        assert generate_recommendations(-10, []) == []

    def test_flag_entries_follow_tier_entries(self):
        flags = [
            RiskFlag.INTERNATIONAL_SHIPPING_NEW_USER,
            RiskFlag.NEW_ACCOUNT_HIGH_VALUE_ORDER,
            RiskFlag.MULTIPLE_ORDERS_SHORT_TIME,
        ]
        assert generate_recommendations(45, flags) == [
            "Send additional verification email",
            "Consider calling customer for confirmation",
            "Verify account legitimacy",
            "Check for account compromise",
            "Verify shipping address and identity",
        ]

    def test_flag_entries_without_tier(self):
        recs = generate_recommendations(5, [RiskFlag.NEW_ACCOUNT_HIGH_VALUE_ORDER])
        assert recs == ["Verify account legitimacy"]

    def test_flags_without_recommendation_ignored(self):
        assert generate_recommendations(0, [RiskFlag.BULK_QUANTITY_ORDER]) == []
