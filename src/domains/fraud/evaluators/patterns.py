"""Ordering-pattern risk evaluator."""

from collections import Counter
from zoneinfo import ZoneInfo

from ..models import FactorResult, RiskFlag
from .base import EvaluationContext, RiskEvaluator, as_utc


class PatternEvaluator(RiskEvaluator):
    """Off-hours orders, bulk quantities and high-value items from low-activity customers."""

    name = "patterns"

    async def check(self, context: EvaluationContext) -> FactorResult:
        cfg = context.config.patterns
        order = context.order
        score = 0
        flags: list[RiskFlag] = []

        placed_at = as_utc(order.created_at or context.now)
        local_hour = placed_at.astimezone(ZoneInfo(cfg.business_timezone)).hour
        opens, closes = cfg.business_hours
        if not opens <= local_hour < closes:
            score += cfg.unusual_time_points
            flags.append(RiskFlag.UNUSUAL_ORDER_TIME)

        quantities: Counter[str] = Counter()
        for line in order.lines:
            quantities[line.product_id] += line.quantity
        if any(qty > cfg.bulk_quantity_max for qty in quantities.values()):
            score += cfg.bulk_quantity_points
            flags.append(RiskFlag.BULK_QUANTITY_ORDER)

        products = await context.reader.product_facts(order)
        high_value = [p for p in products if p.price > cfg.high_value_price]
        history_count = None
        if high_value:
            history_count = len(await context.reader.order_history(order))
            if history_count < cfg.high_value_min_orders:
                score += cfg.high_value_points
                flags.append(RiskFlag.HIGH_VALUE_ITEMS_NEW_USER)

        return self._result(
            score,
            flags,
            details=(
                f"local_hour={local_hour}, max_qty={max(quantities.values(), default=0)}, "
                f"high_value_items={len(high_value)}, history_count={history_count}"
            ),
        )
