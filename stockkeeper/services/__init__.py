from stockkeeper.services.item_import import import_items_workbook
from stockkeeper.services.low_stock import derive_low_stock
from stockkeeper.services.report_service import (
    ReportService,
    compute_inventory_summary,
    compute_sales_summary,
)
from stockkeeper.services.stock_service import MovementMetadata, StockMovementEngine

__all__ = [
    "MovementMetadata",
    "ReportService",
    "StockMovementEngine",
    "compute_inventory_summary",
    "compute_sales_summary",
    "derive_low_stock",
    "import_items_workbook",
]
