"""Abstract base class for order risk evaluators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from ..config import FraudConfig
from ..models import FactorResult, OrderCandidate, RiskFlag
from ..snapshot import OrderSnapshotReader

logger = structlog.get_logger()


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass(frozen=True)
class EvaluationContext:
    order: OrderCandidate
    reader: OrderSnapshotReader
    config: FraudConfig
    now: datetime


class RiskEvaluator(ABC):
    """Base class for the independent risk evaluators.

    ``evaluate`` never raises: any failure inside ``check`` (store lookup,
    bad data) is logged and turned into a neutral result, so one broken
    evaluator cannot abort the whole assessment.
    """

    name: str

    async def evaluate(self, context: EvaluationContext) -> FactorResult:
        try:
            return await self.check(context)
        except Exception as exc:
            logger.exception(
                "evaluator_failed",
                evaluator=self.name,
                order_id=context.order.order_id,
                customer_id=context.order.customer_id,
            )
            return FactorResult(
                evaluator=self.name,
                failed=True,
                details=f"Evaluation failed: {type(exc).__name__}",
            )

    @abstractmethod
    async def check(self, context: EvaluationContext) -> FactorResult:
        """Score one facet of the order. May raise; ``evaluate`` fails open."""
        ...

    def _result(self, score: int, flags: list[RiskFlag], details: str = "") -> FactorResult:
        return FactorResult(evaluator=self.name, score=score, flags=flags, details=details)
