"""Composite score aggregation and risk-level classification."""

from collections.abc import Iterable

from .config import FraudConfig, default_config
from .models import FactorResult, RiskFlag, RiskLevel


def aggregate_score(results: Iterable[FactorResult]) -> int:
    """Sum of partial scores. No floor or ceiling: the total may be negative."""
    return sum(r.score for r in results)


def collect_flags(results: Iterable[FactorResult]) -> list[RiskFlag]:
    """Unique flags across all results, first occurrence wins."""
    return list(dict.fromkeys(flag for r in results for flag in r.flags))


def classify_risk_level(score: int, config: FraudConfig = default_config) -> RiskLevel:
    thresholds = config.levels
    if score >= thresholds.high:
        return RiskLevel.HIGH
    if score >= thresholds.medium:
        return RiskLevel.MEDIUM
    if score >= thresholds.low:
        return RiskLevel.LOW
    return RiskLevel.VERY_LOW
