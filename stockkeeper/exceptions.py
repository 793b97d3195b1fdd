class StockError(Exception):
    """Base exception for stock keeping errors."""

    default_message = "Stock operation failed"
    default_code = "stock_error"

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.code}] {self.message}"

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            error_dict["details"] = self.details
        return error_dict


class ValidationError(StockError):
    """Malformed caller input. Nothing was written."""

    default_message = "Validation error"
    default_code = "validation_error"


class InsufficientStockError(StockError):
    """A stock-out asked for more units than are on hand. Nothing was written."""

    default_message = "Insufficient stock"
    default_code = "insufficient_stock"


class NotFoundError(StockError):
    default_message = "Record not found"
    default_code = "not_found"


class StockConflictError(StockError):
    """The item's stock changed between read and write."""

    default_message = "Stock level changed concurrently, retry the movement"
    default_code = "stock_conflict"


class ItemInUseError(StockError):
    default_message = "Item is referenced by ledger entries"
    default_code = "item_in_use"


class StoreUnavailableError(StockError):
    """Persistence failure. Not retried; a partial write may have happened."""

    default_message = "Inventory store unavailable"
    default_code = "store_unavailable"


__all__ = [
    "InsufficientStockError",
    "ItemInUseError",
    "NotFoundError",
    "StockConflictError",
    "StockError",
    "StoreUnavailableError",
    "ValidationError",
]
