"""
Adapter: Subscription repository over a relational database.

Implements SubscriptionRepository port.
Persists subscriptions to the ``subscriptions`` table using SQLAlchemy Core
textual SQL. Targets PostgreSQL in production; the statements also run on
SQLite, which the test suite uses.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator, Mapping, Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from app.domain.subscriptions.entities import (
    CreateInput,
    ListFilter,
    Subscription,
    UpdateInput,
)
from app.domain.subscriptions.errors import (
    PersistenceError,
    SubscriptionNotFoundError,
)
from app.domain.subscriptions.ports import SubscriptionRepository

logger = logging.getLogger(__name__)

COLUMNS = "id, service_name, price, user_id, start_month, end_month"
BASE_SELECT = f"SELECT {COLUMNS} FROM subscriptions"


class SqlSubscriptionRepository(SubscriptionRepository):
    """Relational implementation of the subscription repository.

    Each call runs in its own transaction. When a ``timeout`` is given and
    the backend is PostgreSQL, it is applied as a transaction-local
    ``statement_timeout`` so the server cancels statements that overrun.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(
        self, data: CreateInput, timeout: Optional[float] = None
    ) -> Subscription:
        """Insert a subscription with a freshly generated UUID."""
        query = text(
            f"""
            INSERT INTO subscriptions ({COLUMNS})
            VALUES (:id, :service_name, :price, :user_id, :start_month, :end_month)
            RETURNING {COLUMNS}
            """
        )
        params = {
            "id": str(uuid4()),
            "service_name": data.service_name,
            "price": data.price,
            "user_id": str(data.user_id),
            "start_month": _date_param(data.start_month),
            "end_month": _date_param(data.end_month),
        }

        with self._transaction("subscriptions.create", timeout) as conn:
            row = conn.execute(query, params).mappings().one()

        subscription = _row_to_subscription(row)
        logger.debug("Inserted subscription id=%s", subscription.id)
        return subscription

    def get(
        self, subscription_id: UUID, timeout: Optional[float] = None
    ) -> Subscription:
        """Fetch one subscription by id."""
        query = text(f"{BASE_SELECT} WHERE id = :id")

        with self._transaction("subscriptions.get", timeout) as conn:
            row = conn.execute(query, {"id": str(subscription_id)}).mappings().first()

        if row is None:
            raise SubscriptionNotFoundError(subscription_id)
        return _row_to_subscription(row)

    def update(
        self,
        subscription_id: UUID,
        data: UpdateInput,
        timeout: Optional[float] = None,
    ) -> Subscription:
        """Replace the mutable columns of one subscription."""
        query = text(
            f"""
            UPDATE subscriptions
            SET service_name = :service_name,
                price        = :price,
                start_month  = :start_month,
                end_month    = :end_month
            WHERE id = :id
            RETURNING {COLUMNS}
            """
        )
        params = {
            "id": str(subscription_id),
            "service_name": data.service_name,
            "price": data.price,
            "start_month": _date_param(data.start_month),
            "end_month": _date_param(data.end_month),
        }

        with self._transaction("subscriptions.update", timeout) as conn:
            row = conn.execute(query, params).mappings().first()

        if row is None:
            raise SubscriptionNotFoundError(subscription_id)
        return _row_to_subscription(row)

    def delete(
        self, subscription_id: UUID, timeout: Optional[float] = None
    ) -> None:
        """Delete one subscription, failing if no row was affected."""
        query = text("DELETE FROM subscriptions WHERE id = :id")

        with self._transaction("subscriptions.delete", timeout) as conn:
            deleted = conn.execute(query, {"id": str(subscription_id)}).rowcount

        if deleted == 0:
            raise SubscriptionNotFoundError(subscription_id)

    def list(
        self, filters: ListFilter, timeout: Optional[float] = None
    ) -> list[Subscription]:
        """Return filtered subscriptions ordered by start month."""
        conditions: list[str] = []
        params: dict[str, Any] = {}

        if filters.user_id is not None:
            conditions.append("user_id = :user_id")
            params["user_id"] = str(filters.user_id)

        if filters.service_name is not None:
            conditions.append("service_name = :service_name")
            params["service_name"] = filters.service_name

        if filters.start_month_from is not None:
            conditions.append("start_month >= :start_month_from")
            params["start_month_from"] = _date_param(filters.start_month_from)

        if filters.start_month_to is not None:
            conditions.append("start_month <= :start_month_to")
            params["start_month_to"] = _date_param(filters.start_month_to)

        if filters.has_active_period:
            conditions.append("start_month <= :active_to")
            conditions.append("(end_month IS NULL OR end_month >= :active_from)")
            params["active_to"] = _date_param(filters.active_period_to)
            params["active_from"] = _date_param(filters.active_period_from)

        query = BASE_SELECT
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY start_month, id"
        query += self._pagination_clause(filters, params)

        with self._transaction("subscriptions.list", timeout) as conn:
            rows = conn.execute(text(query), params).mappings().all()

        return [_row_to_subscription(row) for row in rows]

    def _pagination_clause(self, filters: ListFilter, params: dict[str, Any]) -> str:
        clause = ""
        if filters.limit > 0:
            clause += " LIMIT :limit"
            params["limit"] = filters.limit
        elif filters.offset > 0 and self._engine.dialect.name == "sqlite":
            # SQLite only accepts OFFSET after a LIMIT; -1 means unbounded.
            clause += " LIMIT -1"
        if filters.offset > 0:
            clause += " OFFSET :offset"
            params["offset"] = filters.offset
        return clause

    @contextmanager
    def _transaction(
        self, operation: str, timeout: Optional[float]
    ) -> Iterator[Connection]:
        """Open a transaction, apply the deadline, and wrap driver errors."""
        try:
            with self._engine.begin() as conn:
                if timeout is not None and self._engine.dialect.name == "postgresql":
                    millis = max(int(timeout * 1000), 1)
                    conn.execute(text(f"SET LOCAL statement_timeout = {millis}"))
                yield conn
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", operation, type(exc).__name__)
            raise PersistenceError(operation, str(getattr(exc, "orig", None) or exc)) from exc


def _date_param(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _as_date(value: Any) -> Optional[date]:
    """Convert a DATE column value to ``date``.

    PostgreSQL drivers return ``date`` objects; SQLite returns ISO strings.
    """
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _row_to_subscription(row: Mapping[str, Any]) -> Subscription:
    return Subscription(
        id=UUID(str(row["id"])),
        service_name=row["service_name"],
        price=int(row["price"]),
        user_id=UUID(str(row["user_id"])),
        start_month=_as_date(row["start_month"]),
        end_month=_as_date(row["end_month"]),
    )
