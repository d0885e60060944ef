"""Pydantic models for the order fraud-risk domain."""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentMethod(StrEnum):
    MPESA = "mpesa"
    CARD = "card"
    CASH_ON_DELIVERY = "cash_on_delivery"
    OTHER = "other"


class OrderStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class RiskLevel(StrEnum):
    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"


class RiskFlag(StrEnum):
    UNUSUALLY_HIGH_AMOUNT = "unusually_high_amount"
    ROUND_NUMBER_AMOUNT = "round_number_amount"
    SIGNIFICANT_AMOUNT_INCREASE = "significant_amount_increase"
    NEW_ACCOUNT_HIGH_VALUE_ORDER = "new_account_high_value_order"
    MULTIPLE_ORDERS_SHORT_TIME = "multiple_orders_short_time"
    RECENT_FAILED_PAYMENTS = "recent_failed_payments"
    MULTIPLE_SHIPPING_ADDRESSES = "multiple_shipping_addresses"
    INTERNATIONAL_SHIPPING_NEW_USER = "international_shipping_new_user"
    UNUSUAL_PAYMENT_METHOD = "unusual_payment_method"
    UNUSUAL_ORDER_TIME = "unusual_order_time"
    BULK_QUANTITY_ORDER = "bulk_quantity_order"
    HIGH_VALUE_ITEMS_NEW_USER = "high_value_items_new_user"
    ANALYSIS_ERROR = "analysis_error"


class ReviewDecision(StrEnum):
    APPROVE = "approve"
    REJECT = "reject"
    ESCALATE = "escalate"


_PAYMENT_ALIASES = {
    "mpesa": PaymentMethod.MPESA,
    "m-pesa": PaymentMethod.MPESA,
    "m_pesa": PaymentMethod.MPESA,
    "card": PaymentMethod.CARD,
    "credit_card": PaymentMethod.CARD,
    "cash_on_delivery": PaymentMethod.CASH_ON_DELIVERY,
    "cash on delivery": PaymentMethod.CASH_ON_DELIVERY,
    "cod": PaymentMethod.CASH_ON_DELIVERY,
}


def normalize_payment_method(value: str | None) -> PaymentMethod:
    """Map a free-form payment label onto a PaymentMethod."""
    if not value:
        return PaymentMethod.OTHER
    return _PAYMENT_ALIASES.get(value.strip().lower(), PaymentMethod.OTHER)


class OrderLine(BaseModel):
    product_id: str
    unit_price: float = Field(ge=0)
    quantity: int = Field(gt=0)

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity


class ShippingAddress(BaseModel):
    street: str = ""
    city: str = ""
    country: str = ""
    postal_code: str | None = None


class OrderCandidate(BaseModel):
    order_id: str | None = None
    customer_id: str
    lines: list[OrderLine] = []
    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod = PaymentMethod.OTHER
    created_at: datetime | None = None

    @field_validator("payment_method", mode="before")
    @classmethod
    def _normalize_payment_method(cls, value):
        if isinstance(value, PaymentMethod):
            return value
        return normalize_payment_method(value)

    @property
    def total_amount(self) -> float:
        return sum(line.subtotal for line in self.lines)


class OrderRecord(OrderCandidate):
    """An order as read back from the order store."""

    order_id: str
    created_at: datetime
    status: OrderStatus = OrderStatus.PENDING


class CustomerAccount(BaseModel):
    customer_id: str
    account_created_at: datetime


class CustomerHistory(BaseModel):
    account_created_at: datetime
    orders_last_24h: list[OrderRecord] = []
    cancelled_last_7d: list[OrderRecord] = []


class ProductFacts(BaseModel):
    product_id: str
    price: float


class FactorResult(BaseModel):
    """Partial score and flags produced by one risk evaluator."""

    evaluator: str
    score: int = 0
    flags: list[RiskFlag] = []
    failed: bool = False
    details: str = ""


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    level: RiskLevel
    flags: tuple[RiskFlag, ...] = ()
    recommendations: tuple[str, ...] = ()
    factor_scores: dict[str, int] = Field(default_factory=dict)
    assessed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class FraudStatistics(BaseModel):
    window_days: int = 30
    total_orders: int = 0
    analyzed_orders: int = 0
    high_risk_orders: int = 0
    medium_risk_orders: int = 0
    low_risk_orders: int = 0
    fraud_rate: float = 0.0


class FraudReviewRequest(BaseModel):
    decision: ReviewDecision
    reviewer_id: str
    notes: str = ""


class FraudReview(BaseModel):
    review_id: str
    order_id: str
    decision: ReviewDecision
    reviewer_id: str
    notes: str = ""
    reviewed_at: datetime
