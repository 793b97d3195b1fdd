"""Stock-in / stock-out movements.

A movement changes one item's ``current_stock``, appends one ledger entry with
the before/after snapshot and appends one activity log entry. With
``atomic=True`` the three writes are a single store unit of work; otherwise
they are committed one after another and a failure can leave a partial write.

The stock update is conditional on the stock level read at the start of the
movement, so two concurrent stock-outs cannot both drain the same units: the
loser gets ``StockConflictError`` and may retry.
"""

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from stockkeeper.core.constants import (
    ACTION_STOCK_IN,
    ACTION_STOCK_OUT,
    MOVEMENT_IN,
    MOVEMENT_OUT,
    MOVEMENT_TYPES,
)
from stockkeeper.core.dates import ensure_utc
from stockkeeper.exceptions import InsufficientStockError, ValidationError
from stockkeeper.services.parsing import to_int, to_non_negative_float
from stockkeeper.store.base import InventoryStore

logger = logging.getLogger(__name__)


@dataclass
class MovementMetadata:
    reference_number: str = ""
    notes: str = ""
    supplier: str = ""
    unit_cost: Optional[float] = None
    created_by: Optional[str] = None


def parse_direction(value) -> str:
    direction = str(value or "").strip().upper()
    if direction not in MOVEMENT_TYPES:
        raise ValidationError(
            "direction must be one of: {}".format(", ".join(MOVEMENT_TYPES)),
            details={"direction": value},
        )
    return direction


def parse_quantity(value) -> int:
    try:
        quantity = to_int(value, "quantity")
    except ValidationError as exc:
        raise ValidationError("quantity must be a positive integer", details=exc.details) from None
    if quantity <= 0:
        raise ValidationError("quantity must be a positive integer", details={"quantity": quantity})
    return quantity


class StockMovementEngine:
    def __init__(
        self,
        store: InventoryStore,
        *,
        atomic: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.atomic = atomic
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _now(self) -> datetime:
        return ensure_utc(self._clock())

    def apply_movement(self, item_id, direction, quantity, metadata: Optional[MovementMetadata] = None):
        """Apply one stock movement and return the ledger entry it produced.

        Raises:
            ValidationError: bad direction, quantity or unit cost
            NotFoundError: no such item
            InsufficientStockError: stock-out larger than the stock on hand
            StockConflictError: stock changed between read and write
            StoreUnavailableError: persistence failure
        """
        if item_id is None:
            raise ValidationError("item_id is required")
        direction = parse_direction(direction)
        quantity = parse_quantity(quantity)
        metadata = metadata or MovementMetadata()
        unit_cost = None
        if direction == MOVEMENT_IN and metadata.unit_cost is not None:
            unit_cost = to_non_negative_float(metadata.unit_cost, "unit_cost")

        scope = self.store.atomic() if self.atomic else nullcontext()
        with scope:
            item = self.store.get_item(item_id)
            item_name = item.name
            item_code = item.product_code
            previous_stock = int(item.current_stock or 0)

            if direction == MOVEMENT_OUT and quantity > previous_stock:
                logger.warning(
                    "Rejected stock OUT for item %s: requested %s, on hand %s",
                    item.id,
                    quantity,
                    previous_stock,
                )
                raise InsufficientStockError(
                    f"Cannot remove {quantity} units of {item_name}: only {previous_stock} in stock",
                    details={
                        "item_id": item.id,
                        "requested": quantity,
                        "available": previous_stock,
                    },
                )

            if direction == MOVEMENT_IN:
                new_stock = previous_stock + quantity
                unit_value = unit_cost if unit_cost is not None else float(item.cost_price or 0)
                action = ACTION_STOCK_IN
                details = f"Added {quantity} units of {item_name}"
            else:
                new_stock = previous_stock - quantity
                unit_value = float(item.price or 0)
                action = ACTION_STOCK_OUT
                details = f"Removed {quantity} units of {item_name}"

            now = self._now()
            self.store.update_item(
                item.id,
                {"current_stock": new_stock, "last_updated": now},
                expected_stock=previous_stock,
            )
            transaction = self.store.append_transaction(
                {
                    "type": direction,
                    "item_id": item.id,
                    "item_name": item_name,
                    "item_code": item_code,
                    "quantity": quantity,
                    "unit_value": unit_value,
                    "total": quantity * unit_value,
                    "previous_stock": previous_stock,
                    "new_stock": new_stock,
                    "supplier": (metadata.supplier or "") if direction == MOVEMENT_IN else "",
                    "reference_number": metadata.reference_number or "",
                    "notes": metadata.notes or "",
                    "date": now,
                    "created_by": metadata.created_by,
                }
            )
            self.store.append_activity_log(
                {
                    "action": action,
                    "details": details,
                    "timestamp": now,
                    "user_id": metadata.created_by,
                    "item_id": item.id,
                }
            )

        logger.info(
            "Stock %s applied: item=%s qty=%s stock %s -> %s",
            direction,
            item_id,
            quantity,
            previous_stock,
            new_stock,
            extra={
                "item_id": item_id,
                "transaction_id": transaction.id,
                "direction": direction,
                "quantity": quantity,
                "previous_stock": previous_stock,
                "new_stock": new_stock,
            },
        )
        return transaction

    def delete_movement(self, transaction_id) -> None:
        """Remove a ledger entry. The stock change it recorded is kept."""
        self.store.delete_transaction(transaction_id)
        logger.info(
            "Deleted ledger entry %s; inventory left unchanged",
            transaction_id,
            extra={"transaction_id": transaction_id},
        )


__all__ = [
    "MovementMetadata",
    "StockMovementEngine",
    "parse_direction",
    "parse_quantity",
]
