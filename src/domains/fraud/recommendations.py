"""Maps a composite score and its flags to reviewer-facing recommendations."""

from collections.abc import Collection

from .config import FraudConfig, default_config
from .models import RiskFlag

HIGH_RISK_RECOMMENDATIONS = (
    "Require additional verification (ID, phone confirmation)",
    "Consider manual review before fulfillment",
    "Monitor this order closely",
)
MEDIUM_RISK_RECOMMENDATIONS = (
    "Send additional verification email",
    "Consider calling customer for confirmation",
)
LOW_RISK_RECOMMENDATIONS = (
    "Monitor order progress",
    "Flag for potential review if issues arise",
)

# Checked in this order, after the tier-based entries
FLAG_RECOMMENDATIONS: dict[RiskFlag, str] = {
    RiskFlag.NEW_ACCOUNT_HIGH_VALUE_ORDER: "Verify account legitimacy",
    RiskFlag.MULTIPLE_ORDERS_SHORT_TIME: "Check for account compromise",
    RiskFlag.INTERNATIONAL_SHIPPING_NEW_USER: "Verify shipping address and identity",
}

ANALYSIS_ERROR_RECOMMENDATION = "Manual review required due to analysis error"


def generate_recommendations(
    score: int,
    flags: Collection[RiskFlag],
    config: FraudConfig = default_config,
) -> list[str]:
    """Tier-based entries first, then one entry per matching flag.

    Entries are never de-duplicated.
    """
    thresholds = config.levels
    recommendations: list[str] = []

    if score >= thresholds.high:
        recommendations.extend(HIGH_RISK_RECOMMENDATIONS)
    elif score >= thresholds.medium:
        recommendations.extend(MEDIUM_RISK_RECOMMENDATIONS)
    elif score >= thresholds.low:
        recommendations.extend(LOW_RISK_RECOMMENDATIONS)

    for flag, recommendation in FLAG_RECOMMENDATIONS.items():
        if flag in flags:
            recommendations.append(recommendation)

    return recommendations
