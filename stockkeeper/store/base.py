"""Persistence contract used by the stock movement engine and the reports."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Callable, Optional

from stockkeeper.store.events import (
    TOPIC_ITEMS,
    TOPIC_TRANSACTIONS,
    SnapshotHub,
    Subscription,
)


class InventoryStore(ABC):
    """Inventory records, the transaction ledger and the activity trail.

    Implementations raise ``NotFoundError`` for missing records and wrap
    backend failures in ``StoreUnavailableError``.
    """

    def __init__(self):
        self._hub = SnapshotHub()

    # ---- inventory records -------------------------------------------------

    @abstractmethod
    def get_item(self, item_id):
        """Return the item or raise ``NotFoundError``."""

    @abstractmethod
    def find_item_by_code(self, product_code: str):
        """Return the item with this product code, or ``None``."""

    @abstractmethod
    def add_item(self, fields: dict):
        """Insert a new item and return it."""

    @abstractmethod
    def update_item(self, item_id, fields: dict, *, expected_stock: Optional[int] = None) -> None:
        """Apply a partial update.

        When ``expected_stock`` is given the write only happens if the stored
        ``current_stock`` still equals it; otherwise ``StockConflictError``.
        """

    @abstractmethod
    def delete_item(self, item_id) -> None:
        """Remove an item or raise ``NotFoundError``."""

    @abstractmethod
    def query_items(self, predicate: Optional[Callable] = None) -> list:
        """Return all items, optionally filtered by ``predicate(item)``."""

    # ---- ledger --------------------------------------------------------------

    @abstractmethod
    def append_transaction(self, record: dict):
        """Append a ledger entry and return it."""

    @abstractmethod
    def delete_transaction(self, transaction_id) -> None:
        """Remove a ledger entry or raise ``NotFoundError``."""

    @abstractmethod
    def query_transactions(
        self,
        type_filter: Optional[str] = None,
        date_range: Optional[tuple[datetime, datetime]] = None,
        limit: Optional[int] = None,
    ) -> list:
        """Ledger entries, newest first. ``date_range`` bounds are inclusive."""

    @abstractmethod
    def count_transactions_for_item(self, item_id) -> int:
        """Number of ledger entries referencing ``item_id``."""

    # ---- activity trail ------------------------------------------------------

    @abstractmethod
    def append_activity_log(self, record: dict):
        """Append an audit entry and return it."""

    @abstractmethod
    def query_activity_logs(self, limit: Optional[int] = None) -> list:
        """Audit entries, newest first."""

    @abstractmethod
    def count_activity_logs(self) -> int:
        """Total number of audit entries."""

    # ---- units of work -------------------------------------------------------

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Group the writes issued inside the block into one unit."""

    @abstractmethod
    def ping(self) -> None:
        """Round-trip to the backend. Raises StoreUnavailableError when unreachable."""

    # ---- live snapshots ------------------------------------------------------

    def subscribe_items(self, callback: Callable[[list], None]) -> Subscription:
        """Call ``callback`` with the full item list now and after every item write."""
        return self._hub.add(TOPIC_ITEMS, callback, self.query_items)

    def subscribe_transactions(
        self,
        callback: Callable[[list], None],
        *,
        type_filter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Subscription:
        def load():
            return self.query_transactions(type_filter=type_filter, limit=limit)

        return self._hub.add(TOPIC_TRANSACTIONS, callback, load)

    def _publish(self, topics) -> None:
        if topics:
            self._hub.publish(topics)


__all__ = ["InventoryStore"]
