"""Order risk evaluators package.

Exports ALL_EVALUATORS (one instance of each evaluator, in evaluation order)
and the individual evaluator classes for direct use.
"""

from .address import AddressEvaluator
from .amount import AmountEvaluator
from .base import EvaluationContext, RiskEvaluator, as_utc
from .behavior import BehaviorEvaluator
from .patterns import PatternEvaluator
from .payment import PaymentMethodEvaluator

# All evaluator instances in evaluation order
ALL_EVALUATORS: list[RiskEvaluator] = [
    AmountEvaluator(),
    BehaviorEvaluator(),
    AddressEvaluator(),
    PaymentMethodEvaluator(),
    PatternEvaluator(),
]

__all__ = [
    "ALL_EVALUATORS",
    "AddressEvaluator",
    "AmountEvaluator",
    "BehaviorEvaluator",
    "EvaluationContext",
    "PatternEvaluator",
    "PaymentMethodEvaluator",
    "RiskEvaluator",
    "as_utc",
]
