"""Pulls the historical facts the risk evaluators need from the external stores."""

from datetime import datetime, timedelta

from .config import FraudConfig
from .models import (
    CustomerHistory,
    OrderCandidate,
    OrderRecord,
    OrderStatus,
    ProductFacts,
)
from .stores import OrderStore, ProductStore, UserStore


def _exclude_self(orders: list[OrderRecord], order_id: str | None) -> list[OrderRecord]:
    if order_id is None:
        return orders
    return [o for o in orders if o.order_id != order_id]


class OrderSnapshotReader:
    """Read-only view over the order, user and product stores.

    Every history sample excludes the order being assessed (matched on
    ``order_id``), so a stored order is never counted as its own prior order.
    """

    def __init__(
        self,
        orders: OrderStore,
        users: UserStore,
        products: ProductStore,
        config: FraudConfig,
    ) -> None:
        self._orders = orders
        self._users = users
        self._products = products
        self._config = config

    async def recent_orders(self, order: OrderCandidate, limit: int) -> list[OrderRecord]:
        """Up to ``limit`` most recent prior orders of the customer."""
        fetch_limit = limit + 1 if order.order_id else limit
        fetched = await self._orders.find_by_customer(order.customer_id, limit=fetch_limit)
        return _exclude_self(fetched, order.order_id)[:limit]

    async def order_history(self, order: OrderCandidate) -> list[OrderRecord]:
        fetched = await self._orders.find_by_customer(order.customer_id)
        return _exclude_self(fetched, order.order_id)

    async def customer_history(
        self, order: OrderCandidate, now: datetime
    ) -> CustomerHistory | None:
        """Account age and windowed order samples, or None if the customer is unknown."""
        account = await self._users.find_by_id(order.customer_id)
        if account is None:
            return None

        cfg = self._config.behavior
        last_window = await self._orders.find_by_customer(
            order.customer_id,
            since=now - timedelta(hours=cfg.short_window_hours),
        )
        cancelled = await self._orders.find_by_customer(
            order.customer_id,
            since=now - timedelta(days=cfg.cancelled_window_days),
            status=OrderStatus.CANCELLED,
        )

        return CustomerHistory(
            account_created_at=account.account_created_at,
            orders_last_24h=_exclude_self(last_window, order.order_id),
            cancelled_last_7d=_exclude_self(cancelled, order.order_id),
        )

    async def product_facts(self, order: OrderCandidate) -> list[ProductFacts]:
        return await self._products.find_by_ids([line.product_id for line in order.lines])
