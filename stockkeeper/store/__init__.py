from stockkeeper.store.base import InventoryStore
from stockkeeper.store.events import Subscription
from stockkeeper.store.sql import SqlInventoryStore

__all__ = ["InventoryStore", "SqlInventoryStore", "Subscription"]
