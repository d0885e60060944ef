"""Payment method risk evaluator."""

from ..models import FactorResult, RiskFlag
from .base import EvaluationContext, RiskEvaluator


class PaymentMethodEvaluator(RiskEvaluator):
    """M-Pesa lowers risk; a never-seen method after heavy method churn raises it.

    The M-Pesa reduction is not clamped, so the composite score can go
    negative.
    """

    name = "payment_method"

    async def check(self, context: EvaluationContext) -> FactorResult:
        cfg = context.config.payment
        method = context.order.payment_method
        score = 0
        flags: list[RiskFlag] = []

        if method == cfg.trusted_method:
            score += cfg.trusted_method_points

        prior = await context.reader.recent_orders(context.order, cfg.history_sample_size)
        used_methods = {o.payment_method for o in prior}
        if len(used_methods) > cfg.max_distinct_methods and method not in used_methods:
            score += cfg.unusual_method_points
            flags.append(RiskFlag.UNUSUAL_PAYMENT_METHOD)

        return self._result(
            score,
            flags,
            details=f"method={method.value}, distinct_prior_methods={len(used_methods)}",
        )
