import importlib

from stockkeeper.models.activity_log import ActivityLog
from stockkeeper.models.inventory_item import InventoryItem
from stockkeeper.models.transaction import Transaction


def import_all_models() -> None:
    for module_name in (
        "stockkeeper.models.activity_log",
        "stockkeeper.models.inventory_item",
        "stockkeeper.models.transaction",
    ):
        importlib.import_module(module_name)


__all__ = [
    "ActivityLog",
    "InventoryItem",
    "Transaction",
    "import_all_models",
]
