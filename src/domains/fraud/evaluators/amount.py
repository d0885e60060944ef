"""Amount-based order risk evaluator."""

from ..models import FactorResult, RiskFlag
from .base import EvaluationContext, RiskEvaluator


class AmountEvaluator(RiskEvaluator):
    """Flags totals that are very large, suspiciously round, or far above the customer's norm.

    The three checks are independent and additive.
    """

    name = "amount"

    async def check(self, context: EvaluationContext) -> FactorResult:
        cfg = context.config.amount
        total = context.order.total_amount
        score = 0
        flags: list[RiskFlag] = []
        details: list[str] = [f"total={total:,.2f}"]

        if total > cfg.high_amount:
            score += cfg.high_amount_points
            flags.append(RiskFlag.UNUSUALLY_HIGH_AMOUNT)

        if total % cfg.round_unit == 0 and total > cfg.round_min:
            score += cfg.round_points
            flags.append(RiskFlag.ROUND_NUMBER_AMOUNT)

        recent = await context.reader.recent_orders(context.order, cfg.history_sample_size)
        if recent:
            avg_order_value = sum(o.total_amount for o in recent) / len(recent)
            details.append(f"avg_recent={avg_order_value:,.2f} over {len(recent)} order(s)")
            if total > avg_order_value * cfg.increase_multiplier:
                score += cfg.increase_points
                flags.append(RiskFlag.SIGNIFICANT_AMOUNT_INCREASE)

        return self._result(score, flags, details=", ".join(details))
