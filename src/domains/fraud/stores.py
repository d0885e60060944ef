"""Read-only store interfaces consumed by the risk engine, with SQLAlchemy implementations.

The engine only ever reads through the three protocols below. The Sql*
implementations open one short-lived session per lookup, so concurrent
assessments (see statistics.py) never share a session.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db.models import OrderDB, ProductDB, UserDB

from .models import (
    CustomerAccount,
    OrderLine,
    OrderRecord,
    OrderStatus,
    ProductFacts,
    ShippingAddress,
)

logger = structlog.get_logger()


class OrderStore(Protocol):
    async def find_by_customer(
        self,
        customer_id: str,
        limit: int | None = None,
        since: datetime | None = None,
        status: OrderStatus | None = None,
    ) -> list[OrderRecord]:
        """Orders for one customer, newest first."""
        ...

    async def find_recent_global(self, since: datetime) -> list[OrderRecord]:
        """All orders created at or after ``since``."""
        ...

    async def find_by_id(self, order_id: str) -> OrderRecord | None: ...


class UserStore(Protocol):
    async def find_by_id(self, customer_id: str) -> CustomerAccount | None: ...


class ProductStore(Protocol):
    async def find_by_ids(self, product_ids: Iterable[str]) -> list[ProductFacts]: ...


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------


def _parse_status(raw: str | None) -> OrderStatus:
    try:
        return OrderStatus((raw or "").strip().lower())
    except ValueError:
        return OrderStatus.PENDING


def _parse_address(raw: dict | None) -> ShippingAddress | None:
    if not raw:
        return None
    return ShippingAddress(
        # Older rows store the street line under "address"
        street=raw.get("street") or raw.get("address") or "",
        city=raw.get("city") or "",
        country=raw.get("country") or "",
        postal_code=raw.get("postal_code") or raw.get("postalCode"),
    )


def order_from_row(row: OrderDB) -> OrderRecord:
    lines = [
        OrderLine(
            product_id=str(item.get("product_id") or item.get("product")),
            unit_price=float(item.get("price", 0)),
            quantity=int(item.get("quantity", 1)),
        )
        for item in row.order_items or []
    ]
    return OrderRecord(
        order_id=row.id,
        customer_id=row.user_id,
        lines=lines,
        shipping_address=_parse_address(row.shipping_address),
        payment_method=row.payment_method,
        status=_parse_status(row.status),
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# SQLAlchemy stores
# ---------------------------------------------------------------------------


class SqlOrderStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_customer(
        self,
        customer_id: str,
        limit: int | None = None,
        since: datetime | None = None,
        status: OrderStatus | None = None,
    ) -> list[OrderRecord]:
        stmt = select(OrderDB).where(OrderDB.user_id == customer_id)
        if since is not None:
            stmt = stmt.where(OrderDB.created_at >= since)
        if status is not None:
            stmt = stmt.where(func.lower(OrderDB.status) == status.value)
        stmt = stmt.order_by(OrderDB.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [order_from_row(row) for row in result.scalars().all()]

    async def find_recent_global(self, since: datetime) -> list[OrderRecord]:
        stmt = (
            select(OrderDB)
            .where(OrderDB.created_at >= since)
            .order_by(OrderDB.created_at.asc())
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            orders = [order_from_row(row) for row in result.scalars().all()]
        logger.debug("recent_orders_loaded", since=since.isoformat(), count=len(orders))
        return orders

    async def find_by_id(self, order_id: str) -> OrderRecord | None:
        async with self._session_factory() as session:
            row = await session.get(OrderDB, order_id)
            return order_from_row(row) if row else None


class SqlUserStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_id(self, customer_id: str) -> CustomerAccount | None:
        async with self._session_factory() as session:
            row = await session.get(UserDB, customer_id)
            if row is None:
                return None
            return CustomerAccount(customer_id=row.id, account_created_at=row.created_at)


class SqlProductStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_ids(self, product_ids: Iterable[str]) -> list[ProductFacts]:
        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return []
        stmt = select(ProductDB).where(ProductDB.id.in_(ids))
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [
                ProductFacts(product_id=row.id, price=row.price)
                for row in result.scalars().all()
            ]
