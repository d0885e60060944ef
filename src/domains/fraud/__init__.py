"""Order fraud-risk domain."""

from .engine import OrderRiskEngine, analysis_error_assessment
from .evaluators import ALL_EVALUATORS, RiskEvaluator
from .models import (
    FactorResult,
    FraudStatistics,
    OrderCandidate,
    OrderLine,
    OrderRecord,
    PaymentMethod,
    RiskAssessment,
    RiskFlag,
    RiskLevel,
    ShippingAddress,
)
from .snapshot import OrderSnapshotReader
from .stores import OrderStore, ProductStore, UserStore

__all__ = [
    "ALL_EVALUATORS",
    "FactorResult",
    "FraudStatistics",
    "OrderCandidate",
    "OrderLine",
    "OrderRecord",
    "OrderRiskEngine",
    "OrderSnapshotReader",
    "OrderStore",
    "PaymentMethod",
    "ProductStore",
    "RiskAssessment",
    "RiskEvaluator",
    "RiskFlag",
    "RiskLevel",
    "ShippingAddress",
    "UserStore",
    "analysis_error_assessment",
]
