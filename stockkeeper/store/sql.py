from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from stockkeeper.core.constants import ACTIVITY_ACTIONS
from stockkeeper.core.dates import ensure_utc
from stockkeeper.database import Base, SessionLocal, build_engine, build_sessionmaker
from stockkeeper.exceptions import (
    NotFoundError,
    StockConflictError,
    StoreUnavailableError,
    ValidationError,
)
from stockkeeper.models import ActivityLog, InventoryItem, Transaction, import_all_models
from stockkeeper.store.base import InventoryStore
from stockkeeper.store.events import TOPIC_ACTIVITY, TOPIC_ITEMS, TOPIC_TRANSACTIONS

logger = logging.getLogger(__name__)

_ITEM_FIELDS = frozenset(
    column.name for column in InventoryItem.__table__.columns if column.name != "id"
)


def _check_item_fields(fields: dict) -> None:
    unknown = sorted(set(fields) - _ITEM_FIELDS)
    if unknown:
        raise ValidationError(
            "Unknown inventory item fields: {}".format(", ".join(unknown)),
            details={"fields": unknown},
        )


class SqlInventoryStore(InventoryStore):
    """SQLAlchemy implementation of the inventory store.

    Every call runs in its own session and commits on success, unless it is
    issued inside ``atomic()``, in which case it joins the block's session.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        super().__init__()
        self._session_factory = session_factory or SessionLocal
        self._local = threading.local()

    @classmethod
    def from_url(cls, database_url: str, *, create_schema: bool = True) -> "SqlInventoryStore":
        engine = build_engine(database_url)
        if create_schema:
            import_all_models()
            Base.metadata.create_all(bind=engine)
        return cls(build_sessionmaker(engine))

    # ---- session handling ----------------------------------------------------

    def _active_session(self) -> Optional[Session]:
        return getattr(self._local, "session", None)

    @contextmanager
    def _session_scope(self, *topics):
        active = self._active_session()
        if active is not None:
            self._local.topics.update(topics)
            yield active
            return

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise ValidationError(
                "Write rejected by a store constraint",
                details={"reason": str(exc.orig)},
            ) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Inventory store operation failed")
            raise StoreUnavailableError(details={"reason": str(exc)}) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
        self._publish(topics)

    @contextmanager
    def atomic(self):
        if self._active_session() is not None:
            yield
            return

        session = self._session_factory()
        self._local.session = session
        self._local.topics = set()
        try:
            yield
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise ValidationError(
                "Write rejected by a store constraint",
                details={"reason": str(exc.orig)},
            ) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Inventory store unit of work failed")
            raise StoreUnavailableError(details={"reason": str(exc)}) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            topics = self._local.topics
            self._local.session = None
            self._local.topics = set()
            session.close()
        self._publish(topics)

    # ---- inventory records ---------------------------------------------------

    def get_item(self, item_id):
        with self._session_scope() as session:
            item = session.get(InventoryItem, item_id)
        if item is None:
            raise NotFoundError(
                f"Inventory item {item_id} not found",
                details={"item_id": item_id},
            )
        return item

    def find_item_by_code(self, product_code: str):
        with self._session_scope() as session:
            return (
                session.execute(
                    select(InventoryItem).where(InventoryItem.product_code == product_code)
                )
                .scalars()
                .first()
            )

    def add_item(self, fields: dict):
        _check_item_fields(fields)
        with self._session_scope(TOPIC_ITEMS) as session:
            item = InventoryItem(**fields)
            session.add(item)
            session.flush()
        return item

    def update_item(self, item_id, fields: dict, *, expected_stock: Optional[int] = None) -> None:
        _check_item_fields(fields)
        if not fields:
            return
        with self._session_scope(TOPIC_ITEMS) as session:
            stmt = update(InventoryItem).where(InventoryItem.id == item_id)
            if expected_stock is not None:
                stmt = stmt.where(InventoryItem.current_stock == expected_stock)
            result = session.execute(
                stmt.values(**fields).execution_options(synchronize_session=False)
            )
            if result.rowcount:
                return
            if session.get(InventoryItem, item_id) is None:
                raise NotFoundError(
                    f"Inventory item {item_id} not found",
                    details={"item_id": item_id},
                )
            raise StockConflictError(
                details={"item_id": item_id, "expected_stock": expected_stock},
            )

    def delete_item(self, item_id) -> None:
        with self._session_scope(TOPIC_ITEMS) as session:
            item = session.get(InventoryItem, item_id)
            if item is None:
                raise NotFoundError(
                    f"Inventory item {item_id} not found",
                    details={"item_id": item_id},
                )
            session.delete(item)

    def query_items(self, predicate: Optional[Callable] = None) -> list:
        with self._session_scope() as session:
            items = list(
                session.execute(select(InventoryItem).order_by(InventoryItem.id)).scalars().all()
            )
        if predicate is None:
            return items
        return [item for item in items if predicate(item)]

    # ---- ledger --------------------------------------------------------------

    def append_transaction(self, record: dict):
        with self._session_scope(TOPIC_TRANSACTIONS) as session:
            transaction = Transaction(**record)
            session.add(transaction)
            session.flush()
        return transaction

    def delete_transaction(self, transaction_id) -> None:
        with self._session_scope(TOPIC_TRANSACTIONS) as session:
            transaction = session.get(Transaction, transaction_id)
            if transaction is None:
                raise NotFoundError(
                    f"Transaction {transaction_id} not found",
                    details={"transaction_id": transaction_id},
                )
            session.delete(transaction)

    def query_transactions(
        self,
        type_filter: Optional[str] = None,
        date_range: Optional[tuple[datetime, datetime]] = None,
        limit: Optional[int] = None,
    ) -> list:
        stmt = select(Transaction)
        if type_filter:
            stmt = stmt.where(Transaction.type == type_filter)
        if date_range is not None:
            start, end = date_range
            stmt = stmt.where(
                Transaction.date >= ensure_utc(start),
                Transaction.date <= ensure_utc(end),
            )
        stmt = stmt.order_by(Transaction.date.desc(), Transaction.id.desc())
        if limit:
            stmt = stmt.limit(limit)
        with self._session_scope() as session:
            return list(session.execute(stmt).scalars().all())

    def count_transactions_for_item(self, item_id) -> int:
        with self._session_scope() as session:
            return session.execute(
                select(func.count(Transaction.id)).where(Transaction.item_id == item_id)
            ).scalar_one()

    # ---- activity trail ------------------------------------------------------

    def append_activity_log(self, record: dict):
        action = record.get("action")
        if action not in ACTIVITY_ACTIONS:
            raise ValidationError(f"Unknown activity action: {action}", details={"action": action})
        with self._session_scope(TOPIC_ACTIVITY) as session:
            entry = ActivityLog(**record)
            session.add(entry)
            session.flush()
        return entry

    def query_activity_logs(self, limit: Optional[int] = None) -> list:
        stmt = select(ActivityLog).order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        if limit:
            stmt = stmt.limit(limit)
        with self._session_scope() as session:
            return list(session.execute(stmt).scalars().all())

    def count_activity_logs(self) -> int:
        with self._session_scope() as session:
            return session.execute(select(func.count(ActivityLog.id))).scalar_one()

    # ---- health --------------------------------------------------------------

    def ping(self) -> None:
        with self._session_scope() as session:
            session.execute(select(1))


__all__ = ["SqlInventoryStore"]
