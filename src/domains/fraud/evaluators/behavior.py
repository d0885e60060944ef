"""Customer behavior risk evaluator."""

from ..models import FactorResult, RiskFlag
from .base import EvaluationContext, RiskEvaluator, as_utc

_SECONDS_PER_DAY = 86_400


class BehaviorEvaluator(RiskEvaluator):
    """Account age, short-window order velocity and recent cancellations.

    The new-account check fires for any order from a young account, whatever
    its value; the flag name is historical.
    """

    name = "behavior"

    async def check(self, context: EvaluationContext) -> FactorResult:
        cfg = context.config.behavior
        history = await context.reader.customer_history(context.order, context.now)
        if history is None:
            return self._result(0, [], details="customer not found")

        score = 0
        flags: list[RiskFlag] = []

        account_age = as_utc(context.now) - as_utc(history.account_created_at)
        account_age_days = account_age.total_seconds() / _SECONDS_PER_DAY
        if account_age_days < cfg.new_account_days:
            score += cfg.new_account_points
            flags.append(RiskFlag.NEW_ACCOUNT_HIGH_VALUE_ORDER)

        if len(history.orders_last_24h) > cfg.short_window_max_orders:
            score += cfg.short_window_points
            flags.append(RiskFlag.MULTIPLE_ORDERS_SHORT_TIME)

        if len(history.cancelled_last_7d) > cfg.cancelled_max_orders:
            score += cfg.cancelled_points
            flags.append(RiskFlag.RECENT_FAILED_PAYMENTS)

        return self._result(
            score,
            flags,
            details=(
                f"account_age_days={account_age_days:.1f}, "
                f"orders_{cfg.short_window_hours}h={len(history.orders_last_24h)}, "
                f"cancelled_{cfg.cancelled_window_days}d={len(history.cancelled_last_7d)}"
            ),
        )
