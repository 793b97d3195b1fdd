import logging
from datetime import datetime, timezone
from typing import Optional

from stockkeeper.core.constants import ACTION_UPDATE, ITEM_CATEGORIES
from stockkeeper.exceptions import ItemInUseError, ValidationError
from stockkeeper.services.low_stock import read_field
from stockkeeper.services.parsing import (
    clean_text,
    to_non_negative_float,
    to_non_negative_int,
)
from stockkeeper.store.base import InventoryStore

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("product_code", "name", "description", "supplier", "location")
_INT_FIELDS = ("current_stock", "min_quantity")
_FLOAT_FIELDS = ("price", "cost_price")
_REQUIRED_FIELDS = ("product_code", "name")


def normalize_category(value) -> Optional[str]:
    text = clean_text(value)
    if text is None:
        return None
    for category in ITEM_CATEGORIES:
        if category.lower() == text.lower():
            return category
    raise ValidationError(
        "category must be one of: {}".format(", ".join(ITEM_CATEGORIES)),
        details={"category": text},
    )


def clean_item_fields(values: dict, *, partial: bool) -> dict:
    fields = {}
    for key, value in values.items():
        if key in _INT_FIELDS:
            fields[key] = to_non_negative_int(value, key)
        elif key in _FLOAT_FIELDS:
            fields[key] = to_non_negative_float(value, key)
        elif key == "category":
            fields[key] = normalize_category(value)
        elif key in _TEXT_FIELDS:
            fields[key] = "" if value is None else str(value).strip()
        else:
            raise ValidationError(f"Unknown item field: {key}", details={"field": key})

    for key in _REQUIRED_FIELDS:
        if partial and key not in fields:
            continue
        if not fields.get(key):
            raise ValidationError(f"{key} is required", details={"field": key})
    return fields


def create_item(store: InventoryStore, values: dict, *, user_id: Optional[str] = None):
    fields = clean_item_fields(values, partial=False)
    if store.find_item_by_code(fields["product_code"]) is not None:
        raise ValidationError(
            "product_code already exists",
            details={"product_code": fields["product_code"]},
        )
    now = datetime.now(timezone.utc)
    fields.setdefault("created_at", now)
    fields["last_updated"] = now
    item = store.add_item(fields)
    logger.info("Created inventory item %s (%s) by %s", item.id, item.product_code, user_id or "anonymous")
    return item


def update_item(store: InventoryStore, item_id, changes: dict, *, user_id: Optional[str] = None):
    """Direct edit of an item. Ledger snapshots of past movements are not touched."""
    fields = clean_item_fields(changes, partial=True)
    with store.atomic():
        item = store.get_item(item_id)
        new_code = fields.get("product_code")
        if new_code and new_code != item.product_code:
            existing = store.find_item_by_code(new_code)
            if existing is not None and existing.id != item.id:
                raise ValidationError("product_code already exists", details={"product_code": new_code})
        name = fields.get("name") or item.name
        fields["last_updated"] = datetime.now(timezone.utc)
        store.update_item(item.id, fields)
        store.append_activity_log(
            {
                "action": ACTION_UPDATE,
                "details": f"Updated {name}",
                "timestamp": fields["last_updated"],
                "user_id": user_id,
                "item_id": item.id,
            }
        )
    logger.info("Updated inventory item %s (%s)", item_id, ", ".join(sorted(fields)))
    return store.get_item(item_id)


def delete_item(store: InventoryStore, item_id) -> None:
    with store.atomic():
        store.get_item(item_id)
        references = store.count_transactions_for_item(item_id)
        if references:
            raise ItemInUseError(
                f"Item {item_id} is referenced by {references} ledger entries",
                details={"item_id": item_id, "transactions": references},
            )
        store.delete_item(item_id)
    logger.info("Deleted inventory item %s", item_id)


def search_items(items, term: Optional[str]) -> list:
    """Case-insensitive match on name, product code or category."""
    items = list(items)
    needle = (term or "").strip().lower()
    if not needle:
        return items
    matches = []
    for item in items:
        for key in ("name", "product_code", "category"):
            value = read_field(item, key)
            if value and needle in str(value).lower():
                matches.append(item)
                break
    return matches


__all__ = [
    "clean_item_fields",
    "create_item",
    "delete_item",
    "normalize_category",
    "search_items",
    "update_item",
]
