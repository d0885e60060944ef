"""Order fraud-risk configuration with sensible defaults."""

import os
from dataclasses import dataclass, field


@dataclass
class AmountThresholds:
    high_amount: float = 50_000.0
    high_amount_points: int = 30
    round_unit: float = 1_000.0
    round_min: float = 1_000.0
    round_points: int = 15
    history_sample_size: int = 10
    increase_multiplier: float = 3.0
    increase_points: int = 20


@dataclass
class BehaviorThresholds:
    new_account_days: float = 7.0
    new_account_points: int = 25
    short_window_hours: int = 24
    short_window_max_orders: int = 3
    short_window_points: int = 20
    cancelled_window_days: int = 7
    cancelled_max_orders: int = 2
    cancelled_points: int = 15


@dataclass
class AddressThresholds:
    history_sample_size: int = 5
    max_distinct_streets: int = 2
    multiple_addresses_points: int = 15
    home_country: str = "Kenya"
    international_min_prior_orders: int = 2
    international_points: int = 20


@dataclass
class PaymentThresholds:
    history_sample_size: int = 5
    trusted_method: str = "mpesa"
    trusted_method_points: int = -10
    max_distinct_methods: int = 2
    unusual_method_points: int = 10


@dataclass
class PatternThresholds:
    business_timezone: str = "Africa/Nairobi"
    business_hours: tuple[int, int] = (6, 22)
    unusual_time_points: int = 10
    bulk_quantity_max: int = 10
    bulk_quantity_points: int = 15
    high_value_price: float = 10_000.0
    high_value_min_orders: int = 3
    high_value_points: int = 20


@dataclass
class RiskLevelThresholds:
    high: int = 70
    medium: int = 40
    low: int = 20


@dataclass
class StatisticsSettings:
    default_window_days: int = 30
    max_concurrency: int = 10
    timeout_seconds: float = 10.0


@dataclass
class FraudConfig:
    amount: AmountThresholds = field(default_factory=AmountThresholds)
    behavior: BehaviorThresholds = field(default_factory=BehaviorThresholds)
    address: AddressThresholds = field(default_factory=AddressThresholds)
    payment: PaymentThresholds = field(default_factory=PaymentThresholds)
    patterns: PatternThresholds = field(default_factory=PatternThresholds)
    levels: RiskLevelThresholds = field(default_factory=RiskLevelThresholds)
    statistics: StatisticsSettings = field(default_factory=StatisticsSettings)

    @classmethod
    def from_env(cls) -> "FraudConfig":
        """Load config with env var overrides. Env vars use FRAUD_ prefix."""
        config = cls()

        # Amount overrides
        if v := os.getenv("FRAUD_HIGH_AMOUNT"):
            config.amount.high_amount = float(v)
        if v := os.getenv("FRAUD_AMOUNT_INCREASE_MULTIPLIER"):
            config.amount.increase_multiplier = float(v)

        # Behavior overrides
        if v := os.getenv("FRAUD_NEW_ACCOUNT_DAYS"):
            config.behavior.new_account_days = float(v)
        if v := os.getenv("FRAUD_SHORT_WINDOW_MAX_ORDERS"):
            config.behavior.short_window_max_orders = int(v)

        # Address / pattern overrides
        if v := os.getenv("FRAUD_HOME_COUNTRY"):
            config.address.home_country = v
        if v := os.getenv("FRAUD_BUSINESS_TIMEZONE"):
            config.patterns.business_timezone = v
        if v := os.getenv("FRAUD_HIGH_VALUE_PRICE"):
            config.patterns.high_value_price = float(v)

        # Level overrides
        if v := os.getenv("FRAUD_HIGH_THRESHOLD"):
            config.levels.high = int(v)
        if v := os.getenv("FRAUD_MEDIUM_THRESHOLD"):
            config.levels.medium = int(v)
        if v := os.getenv("FRAUD_LOW_THRESHOLD"):
            config.levels.low = int(v)

        # Statistics overrides
        if v := os.getenv("FRAUD_STATS_MAX_CONCURRENCY"):
            config.statistics.max_concurrency = int(v)
        if v := os.getenv("FRAUD_STATS_TIMEOUT_SECONDS"):
            config.statistics.timeout_seconds = float(v)

        return config


# Module-level default instance
default_config = FraudConfig()
