import logging
import math
from collections.abc import Mapping

logger = logging.getLogger(__name__)

_MISSING = object()

# Records may come from the ORM, from API payloads or from older documents
# that used camelCase or the legacy "quantity" field.
_FIELD_ALIASES = {
    "current_stock": ("current_stock", "currentStock", "quantity"),
    "min_quantity": ("min_quantity", "minQuantity"),
    "product_code": ("product_code", "productCode", "item_code", "itemCode"),
    "cost_price": ("cost_price", "costPrice"),
    "date": ("date", "timestamp"),
}


def read_field(record, name, default=None):
    keys = _FIELD_ALIASES.get(name, (name,))
    if isinstance(record, Mapping):
        for key in keys:
            if key in record:
                return record[key]
        return default
    for key in keys:
        value = getattr(record, key, _MISSING)
        if value is not _MISSING:
            return value
    return default


def coerce_number(value):
    """Best-effort numeric read. Anything unusable counts as 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip().replace(",", ""))
        except (TypeError, ValueError):
            return 0
    if isinstance(number, float) and not math.isfinite(number):
        return 0
    return number


def is_low_stock(item) -> bool:
    current = coerce_number(read_field(item, "current_stock"))
    minimum = coerce_number(read_field(item, "min_quantity"))
    return current <= minimum


def derive_low_stock(items) -> list:
    """Items whose stock is at or below their minimum quantity, in input order."""
    low_stock = [item for item in items if is_low_stock(item)]
    if logger.isEnabledFor(logging.DEBUG):
        for item in low_stock:
            logger.debug(
                "Low stock: item=%s stock=%s min=%s",
                read_field(item, "id"),
                coerce_number(read_field(item, "current_stock")),
                coerce_number(read_field(item, "min_quantity")),
            )
    return low_stock


__all__ = ["coerce_number", "derive_low_stock", "is_low_stock", "read_field"]
