"""Shipping address risk evaluator."""

from ..models import FactorResult, RiskFlag
from .base import EvaluationContext, RiskEvaluator


class AddressEvaluator(RiskEvaluator):
    """Address churn across recent orders and international shipping for new customers."""

    name = "address"

    async def check(self, context: EvaluationContext) -> FactorResult:
        cfg = context.config.address
        address = context.order.shipping_address
        if address is None:
            return self._result(0, [], details="no shipping address")

        score = 0
        flags: list[RiskFlag] = []

        prior = await context.reader.recent_orders(context.order, cfg.history_sample_size)
        streets = {
            o.shipping_address.street
            for o in prior
            if o.shipping_address and o.shipping_address.street
        }
        if len(streets) > cfg.max_distinct_streets:
            score += cfg.multiple_addresses_points
            flags.append(RiskFlag.MULTIPLE_SHIPPING_ADDRESSES)

        if (
            address.country != cfg.home_country
            and len(prior) < cfg.international_min_prior_orders
        ):
            score += cfg.international_points
            flags.append(RiskFlag.INTERNATIONAL_SHIPPING_NEW_USER)

        return self._result(
            score,
            flags,
            details=f"distinct_streets={len(streets)}, prior_orders={len(prior)}",
        )
